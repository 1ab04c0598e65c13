from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from ..utils.timestamps import utc_now


class Ingredient(SQLModel, table=True):
    __tablename__ = "ingredients"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True, max_length=255)
    unit: str = Field(max_length=50)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, index=True)
