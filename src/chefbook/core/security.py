"""Password hashing for chef credentials."""

from __future__ import annotations

from typing import Optional

import bcrypt

from .config import get_settings


# bcrypt only considers the first 72 bytes of the secret.
_BCRYPT_MAX_BYTES = 72


def _secret(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    if rounds is None:
        rounds = get_settings().bcrypt_rounds
    return bcrypt.hashpw(_secret(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_secret(password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False
