from datetime import datetime
from typing import Optional

from sqlalchemy import Index, UniqueConstraint
from sqlmodel import Field, SQLModel

from ..utils.timestamps import utc_now


class Dish(SQLModel, table=True):
    """Dish identity plus a pointer to its current version.

    ``version_number`` is the authoritative current version: the active
    composition is the set of lines stamped with exactly this number.
    """

    __tablename__ = "dishes"
    __table_args__ = (
        # Names are unique per owning chef, not globally.
        UniqueConstraint("chef_id", "name", name="uq_dishes_chef_name"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    chef_id: int = Field(foreign_key="chefs.id", index=True)
    name: str = Field(index=True, max_length=255)
    version_number: int = Field(default=1, index=True)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, index=True)


class DishIngredientLine(SQLModel, table=True):
    """One (ingredient, amount) pair of one dish version. Rows are append-only."""

    __tablename__ = "dish_ingredient_lines"
    __table_args__ = (
        UniqueConstraint(
            "dish_id", "ingredient_id", "version_number", name="uq_dish_lines_dish_ingredient_version"
        ),
        Index("ix_dish_lines_dish_version", "dish_id", "version_number"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    dish_id: int = Field(foreign_key="dishes.id", index=True)
    ingredient_id: int = Field(foreign_key="ingredients.id", index=True)
    amount: float = 0.0
    version_number: int

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
