from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from ..utils.timestamps import utc_now


class Chef(SQLModel, table=True):
    __tablename__ = "chefs"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    username: str = Field(index=True, unique=True, max_length=255)
    password_hash: str = Field(max_length=255)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, index=True)
