"""Ingredient catalog: a flat, unversioned set of ingredients."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple, Union

from sqlalchemy import func, or_
from sqlmodel import Session, select

from ..core.errors import ConflictError, NotFoundError, ValidationError
from ..models.ingredients import Ingredient
from ..utils.pagination import PageWindow
from ..utils.timestamps import utc_now
from .base import NOT_PROVIDED, Unset, clean_search, contains_ci, require_text, write_transaction


logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 255
UNIT_MAX_LENGTH = 50


def _name_taken(name: str) -> str:
    return f'An ingredient with the name "{name}" already exists'


class IngredientCatalog:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, ingredient_id: int) -> Ingredient:
        ingredient = self.session.get(Ingredient, ingredient_id)
        if not ingredient:
            raise NotFoundError("Ingredient not found")
        return ingredient

    def create(self, name: str, unit: str) -> Ingredient:
        require_text(name, "Ingredient name", NAME_MAX_LENGTH)
        require_text(unit, "Ingredient unit", UNIT_MAX_LENGTH)
        if self._find_by_name(name) is not None:
            raise ConflictError(_name_taken(name))

        now = utc_now()
        ingredient = Ingredient(name=name, unit=unit, created_at=now, updated_at=now)
        with write_transaction(self.session, _name_taken(name)):
            self.session.add(ingredient)
        self.session.refresh(ingredient)
        logger.info("Created ingredient %s (%s)", ingredient.id, ingredient.name)
        return ingredient

    def update(
        self,
        ingredient_id: int,
        name: Union[str, Unset] = NOT_PROVIDED,
        unit: Union[str, Unset] = NOT_PROVIDED,
    ) -> Ingredient:
        if name is NOT_PROVIDED and unit is NOT_PROVIDED:
            raise ValidationError("At least one field (name or unit) must be provided")
        if name is not NOT_PROVIDED:
            require_text(name, "Ingredient name", NAME_MAX_LENGTH)
        if unit is not NOT_PROVIDED:
            require_text(unit, "Ingredient unit", UNIT_MAX_LENGTH)

        ingredient = self.get(ingredient_id)
        if name is not NOT_PROVIDED:
            duplicate = self._find_by_name(name)
            if duplicate is not None and duplicate.id != ingredient_id:
                raise ConflictError(_name_taken(name))
            ingredient.name = name
        if unit is not NOT_PROVIDED:
            ingredient.unit = unit
        ingredient.updated_at = utc_now()

        with write_transaction(self.session, _name_taken(ingredient.name)):
            self.session.add(ingredient)
        self.session.refresh(ingredient)
        logger.info("Updated ingredient %s", ingredient.id)
        return ingredient

    def list(self, window: PageWindow, search: Optional[str] = None) -> Tuple[int, List[Ingredient]]:
        term = clean_search(search)
        condition = (
            or_(contains_ci(Ingredient.name, term), contains_ci(Ingredient.unit, term))
            if term
            else None
        )

        count_stmt = select(func.count()).select_from(Ingredient)
        page_stmt = select(Ingredient)
        if condition is not None:
            count_stmt = count_stmt.where(condition)
            page_stmt = page_stmt.where(condition)

        total = self.session.exec(count_stmt).one()
        ingredients = self.session.exec(
            page_stmt.order_by(Ingredient.updated_at.desc(), Ingredient.id.desc())
            .offset(window.offset)
            .limit(window.limit)
        ).all()
        return int(total), list(ingredients)

    def missing_ids(self, ingredient_ids: Iterable[int]) -> List[int]:
        """Ids not present in the catalog, in request order."""
        requested = list(ingredient_ids)
        if not requested:
            return []
        found = set(
            self.session.exec(
                select(Ingredient.id).where(Ingredient.id.in_(set(requested)))
            ).all()
        )
        return [i for i in requested if i not in found]

    def _find_by_name(self, name: str) -> Optional[Ingredient]:
        return self.session.exec(select(Ingredient).where(Ingredient.name == name)).first()
