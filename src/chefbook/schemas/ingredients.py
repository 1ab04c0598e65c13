from __future__ import annotations

from typing import Optional

from pydantic import Field

from ..models.ingredients import Ingredient
from ..services.base import NOT_PROVIDED
from ..core.errors import ValidationError
from .common import CamelModel, UtcDateTime


class IngredientCreateIn(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    unit: str = Field(min_length=1, max_length=50)


class IngredientUpdateIn(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    unit: Optional[str] = Field(default=None, min_length=1, max_length=50)

    def changes(self) -> dict:
        """Provided fields only; omitted fields stay NOT_PROVIDED."""
        changes = {}
        for key in ("name", "unit"):
            if key not in self.model_fields_set:
                changes[key] = NOT_PROVIDED
                continue
            value = getattr(self, key)
            if value is None:
                raise ValidationError(f"Ingredient {key} cannot be null")
            changes[key] = value
        return changes


class IngredientOut(CamelModel):
    id: int
    name: str
    unit: str
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_model(cls, ingredient: Ingredient) -> "IngredientOut":
        return cls(
            id=ingredient.id,
            name=ingredient.name,
            unit=ingredient.unit,
            created_at=ingredient.created_at,
            updated_at=ingredient.updated_at,
        )
