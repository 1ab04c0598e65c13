"""Identity store: chef records and credential checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlmodel import Session, select

from ..core.config import get_settings
from ..core.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from ..core.security import hash_password, verify_password
from ..models.chefs import Chef
from ..utils.pagination import PageWindow
from ..utils.timestamps import utc_now
from .base import clean_search, contains_ci, require_text, write_transaction


logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 255
USERNAME_MAX_LENGTH = 255
PASSWORD_MAX_LENGTH = 255

INVALID_CREDENTIALS = "Invalid username or password"


@dataclass(frozen=True)
class ActingChef:
    """The chef on whose behalf an operation runs."""

    chef_id: int

    def owns(self, owner_chef_id: int) -> bool:
        return self.chef_id == owner_chef_id


class ChefStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, chef_id: int) -> Chef:
        chef = self.session.get(Chef, chef_id)
        if not chef:
            raise NotFoundError("Chef not found")
        return chef

    def exists(self, chef_id: int) -> bool:
        found = self.session.exec(select(Chef.id).where(Chef.id == chef_id)).first()
        return found is not None

    def register(self, name: str, username: str, password: str) -> Chef:
        require_text(name, "Chef name", NAME_MAX_LENGTH)
        require_text(username, "Username", USERNAME_MAX_LENGTH)
        self._check_password(password)

        taken = self.session.exec(select(Chef.id).where(Chef.username == username)).first()
        if taken is not None:
            raise ConflictError(f'A chef with the username "{username}" already exists')

        now = utc_now()
        chef = Chef(
            name=name,
            username=username,
            password_hash=hash_password(password),
            created_at=now,
            updated_at=now,
        )
        with write_transaction(self.session, f'A chef with the username "{username}" already exists'):
            self.session.add(chef)
        self.session.refresh(chef)
        logger.info("Registered chef %s (%s)", chef.id, chef.username)
        return chef

    def update_name(self, chef_id: int, name: str) -> Chef:
        require_text(name, "Chef name", NAME_MAX_LENGTH)
        chef = self.get(chef_id)
        chef.name = name
        chef.updated_at = utc_now()
        with write_transaction(self.session, "Chef update conflicted with existing data"):
            self.session.add(chef)
        self.session.refresh(chef)
        return chef

    def list(self, window: PageWindow, search: Optional[str] = None) -> Tuple[int, List[Chef]]:
        term = clean_search(search)
        condition = (
            or_(contains_ci(Chef.name, term), contains_ci(Chef.username, term)) if term else None
        )

        count_stmt = select(func.count()).select_from(Chef)
        page_stmt = select(Chef)
        if condition is not None:
            count_stmt = count_stmt.where(condition)
            page_stmt = page_stmt.where(condition)

        total = self.session.exec(count_stmt).one()
        chefs = self.session.exec(
            page_stmt.order_by(Chef.updated_at.desc(), Chef.id.desc())
            .offset(window.offset)
            .limit(window.limit)
        ).all()
        return int(total), list(chefs)

    def authenticate(self, username: str, password: str) -> Chef:
        """Return the chef for valid credentials.

        Unknown usernames and wrong passwords fail the same way so callers
        cannot tell which part was wrong.
        """
        if not username or not password:
            raise ValidationError("Username and password are required")
        chef = self.session.exec(select(Chef).where(Chef.username == username)).first()
        if not chef or not verify_password(password, chef.password_hash):
            logger.info("Rejected login attempt")
            raise UnauthorizedError(INVALID_CREDENTIALS)
        return chef

    def _check_password(self, password: str) -> None:
        min_length = get_settings().password_min_length
        if not isinstance(password, str) or len(password) < min_length:
            raise ValidationError(f"Password must be at least {min_length} characters")
        if len(password) > PASSWORD_MAX_LENGTH:
            raise ValidationError("Password is too long")
