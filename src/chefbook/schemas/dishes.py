from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from ..core.errors import ValidationError
from ..services.base import NOT_PROVIDED
from ..services.dishes import DishHistory, DishView, LineInput, LineView, RevisionRequest
from ..utils.validators import MAX_ID
from .common import CamelModel, UtcDateTime


class DishLineIn(CamelModel):
    ingredient_id: int = Field(gt=0, le=MAX_ID)
    ingredient_amount: float = Field(ge=0, allow_inf_nan=False)

    def to_input(self) -> LineInput:
        return LineInput(ingredient_id=self.ingredient_id, amount=self.ingredient_amount)


class DishCreateIn(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    ingredients: List[DishLineIn] = Field(min_length=1)

    def lines(self) -> List[LineInput]:
        return [line.to_input() for line in self.ingredients]


class DishRevisionIn(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    ingredients: List[DishLineIn] = Field(min_length=1)

    def to_revision(self) -> RevisionRequest:
        lines = [line.to_input() for line in self.ingredients]
        if "name" not in self.model_fields_set:
            return RevisionRequest(lines=lines, name=NOT_PROVIDED)
        if self.name is None:
            raise ValidationError("Dish name cannot be null")
        return RevisionRequest(lines=lines, name=self.name)


class DishLineOut(CamelModel):
    ingredient_id: int
    ingredient_name: str
    ingredient_unit: str
    ingredient_amount: float

    @classmethod
    def from_view(cls, line: LineView) -> "DishLineOut":
        return cls(
            ingredient_id=line.ingredient_id,
            ingredient_name=line.ingredient_name,
            ingredient_unit=line.ingredient_unit,
            ingredient_amount=line.amount,
        )


class DishCompositionOut(CamelModel):
    """Dish metadata with its current-version lines."""

    id: int
    name: str
    chef_id: int
    version_number: int
    ingredients: List[DishLineOut]
    updated_at: UtcDateTime

    @classmethod
    def from_view(cls, view: DishView) -> "DishCompositionOut":
        dish = view.dish
        return cls(
            id=dish.id,
            name=dish.name,
            chef_id=dish.chef_id,
            version_number=dish.version_number,
            ingredients=[DishLineOut.from_view(line) for line in view.lines],
            updated_at=dish.updated_at,
        )


class DishOut(DishCompositionOut):
    created_at: UtcDateTime

    @classmethod
    def from_view(cls, view: DishView) -> "DishOut":
        base = DishCompositionOut.from_view(view)
        return cls(**base.model_dump(), created_at=view.dish.created_at)


class DishListItemOut(DishOut):
    chef_name: Optional[str] = None

    @classmethod
    def from_view(cls, view: DishView) -> "DishListItemOut":
        base = DishOut.from_view(view)
        return cls(**base.model_dump(), chef_name=view.chef_name)


class DishSummaryOut(CamelModel):
    id: int
    name: str
    chef_id: int
    current_version_number: int
    created_at: UtcDateTime
    updated_at: UtcDateTime


class VersionSnapshotOut(CamelModel):
    version_number: int
    ingredients: List[DishLineOut]


class DishHistoryOut(CamelModel):
    dish: DishSummaryOut
    histories: List[VersionSnapshotOut]

    @classmethod
    def from_history(cls, history: DishHistory) -> "DishHistoryOut":
        dish = history.dish
        return cls(
            dish=DishSummaryOut(
                id=dish.id,
                name=dish.name,
                chef_id=dish.chef_id,
                current_version_number=dish.version_number,
                created_at=dish.created_at,
                updated_at=dish.updated_at,
            ),
            histories=[
                VersionSnapshotOut(
                    version_number=snapshot.version_number,
                    ingredients=[DishLineOut.from_view(line) for line in snapshot.lines],
                )
                for snapshot in history.versions
            ],
        )
