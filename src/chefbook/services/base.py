from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from ..core.errors import ConflictError, ValidationError


class Unset(Enum):
    """Marks an optional field the caller did not provide (distinct from None)."""

    NOT_PROVIDED = "NOT_PROVIDED"

    def __repr__(self) -> str:
        return "NOT_PROVIDED"

    def __bool__(self) -> bool:
        return False


NOT_PROVIDED = Unset.NOT_PROVIDED


@contextmanager
def write_transaction(session: Session, conflict_message: str) -> Iterator[None]:
    """Commit the enclosed writes as one unit.

    Uniqueness violations detected by the database surface as ``ConflictError``;
    any failure rolls the whole unit back.
    """
    try:
        yield
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise ConflictError(conflict_message) from exc
    except Exception:
        session.rollback()
        raise


def contains_ci(column: Any, term: str):
    """Case-insensitive substring match with LIKE wildcards in ``term`` escaped."""
    escaped = term.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return func.lower(column).like(f"%{escaped}%", escape="\\")


def clean_search(search: Optional[str]) -> Optional[str]:
    if search is None:
        return None
    return search.strip() or None


def require_text(value: Any, label: str, max_length: int) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{label} is required")
    if len(value) > max_length:
        raise ValidationError(f"{label} is too long")
    return value
