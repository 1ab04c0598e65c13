"""Dish version engine.

A dish row holds the authoritative current ``version_number``. Its ingredient
lines are append-only: every revision inserts a complete new batch stamped with
the next version number and leaves earlier batches untouched, so the full
history of compositions stays queryable.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from sqlalchemy import and_, distinct, func, or_, update
from sqlmodel import Session, select

from ..core.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from ..models.chefs import Chef
from ..models.dishes import Dish, DishIngredientLine
from ..models.ingredients import Ingredient
from ..utils.pagination import PageWindow
from ..utils.timestamps import utc_now
from ..utils.validators import MAX_ID, int_or_none, is_valid_amount
from .base import NOT_PROVIDED, Unset, clean_search, contains_ci, require_text, write_transaction
from .catalog import IngredientCatalog
from .identity import ActingChef, ChefStore


logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 255


@dataclass(frozen=True)
class LineInput:
    ingredient_id: int
    amount: float


@dataclass(frozen=True)
class RevisionRequest:
    """A request to produce the next version of a dish.

    ``name`` left as ``NOT_PROVIDED`` keeps the current name.
    """

    lines: Sequence[LineInput]
    name: Union[str, Unset] = NOT_PROVIDED


@dataclass(frozen=True)
class LineView:
    ingredient_id: int
    ingredient_name: str
    ingredient_unit: str
    amount: float


@dataclass
class DishView:
    dish: Dish
    lines: List[LineView] = field(default_factory=list)
    chef_name: Optional[str] = None


@dataclass(frozen=True)
class VersionSnapshot:
    version_number: int
    lines: List[LineView]


@dataclass
class DishHistory:
    dish: Dish
    total: int
    versions: List[VersionSnapshot]


VersionKey = Tuple[int, int]  # (dish_id, version_number)


def _name_taken(name: str) -> str:
    return f'A dish with the name "{name}" already exists for this chef'


def _check_name(name: object) -> str:
    return require_text(name, "Dish name", NAME_MAX_LENGTH)


def _check_lines(lines: Iterable[LineInput]) -> List[LineInput]:
    checked = list(lines or [])
    if not checked:
        raise ValidationError("At least one ingredient is required")
    for line in checked:
        ingredient_id = line.ingredient_id
        is_id = isinstance(ingredient_id, int) and not isinstance(ingredient_id, bool)
        if not is_id or not 0 < ingredient_id <= MAX_ID:
            raise ValidationError("Ingredient ID must be a positive integer")
        if not is_valid_amount(line.amount):
            raise ValidationError("Ingredient amount must be non-negative")
    return checked


class DishVersionEngine:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.chefs = ChefStore(session)
        self.catalog = IngredientCatalog(session)

    # -- mutations ---------------------------------------------------------

    def create_dish(self, acting: ActingChef, name: str, lines: Sequence[LineInput]) -> DishView:
        """Create a dish at version 1 with its first batch of lines."""
        _check_name(name)
        checked = _check_lines(lines)

        if not self.chefs.exists(acting.chef_id):
            raise NotFoundError("Chef not found")
        if self._name_in_use(acting.chef_id, name):
            raise ConflictError(_name_taken(name))
        self._check_ingredients(checked)

        now = utc_now()
        dish = Dish(chef_id=acting.chef_id, name=name, version_number=1, created_at=now, updated_at=now)
        with write_transaction(self.session, _name_taken(name)):
            self.session.add(dish)
            self.session.flush()
            self._append_lines(dish.id, 1, checked, now)
        self.session.refresh(dish)

        logger.info("Created dish %s (%r) for chef %s", dish.id, dish.name, dish.chef_id)
        return DishView(dish=dish, lines=self._lines_for_versions([(dish.id, 1)]).get((dish.id, 1), []))

    def revise_dish(self, dish_id: int, acting: ActingChef, revision: RevisionRequest) -> DishView:
        """Move a dish from version v to v+1 with a fresh batch of lines.

        The increment, optional rename and line insert commit together or not
        at all. The new version number is read back inside that transaction.
        """
        new_name = revision.name
        if new_name is not NOT_PROVIDED:
            _check_name(new_name)
        checked = _check_lines(revision.lines)

        dish = self._get_dish(dish_id)
        if not acting.owns(dish.chef_id):
            raise UnauthorizedError("You do not have permission to modify this dish")
        if (
            new_name is not NOT_PROVIDED
            and new_name != dish.name
            and self._name_in_use(dish.chef_id, new_name, exclude_dish_id=dish_id)
        ):
            raise ConflictError(_name_taken(new_name))
        self._check_ingredients(checked)

        now = utc_now()
        values = {"version_number": Dish.version_number + 1, "updated_at": now}
        if new_name is not NOT_PROVIDED:
            values["name"] = new_name

        conflict_name = new_name if new_name is not NOT_PROVIDED else dish.name
        with write_transaction(self.session, _name_taken(conflict_name)):
            self.session.exec(
                update(Dish)
                .where(Dish.id == dish_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            version = self.session.exec(
                select(Dish.version_number).where(Dish.id == dish_id)
            ).one()
            self._append_lines(dish_id, version, checked, now)
        self.session.refresh(dish)

        logger.info("Revised dish %s to version %s", dish.id, dish.version_number)
        key = (dish.id, dish.version_number)
        return DishView(dish=dish, lines=self._lines_for_versions([key]).get(key, []))

    # -- reads -------------------------------------------------------------

    def get_current_composition(self, dish_id: int, acting: Optional[ActingChef]) -> DishView:
        """Dish metadata plus exactly the lines of its current version.

        Ownership is only enforced when an acting chef is given.
        """
        dish = self._get_dish(dish_id)
        if acting is not None and not acting.owns(dish.chef_id):
            raise UnauthorizedError("You do not have permission to view this dish")
        key = (dish.id, dish.version_number)
        return DishView(dish=dish, lines=self._lines_for_versions([key]).get(key, []))

    def get_version_history(self, dish_id: int, window: PageWindow) -> DishHistory:
        """Every recorded version of a dish, newest first, paginated by version."""
        dish = self._get_dish(dish_id)
        recorded = and_(
            DishIngredientLine.dish_id == dish_id,
            DishIngredientLine.version_number <= dish.version_number,
        )

        total = self.session.exec(
            select(func.count(distinct(DishIngredientLine.version_number))).where(recorded)
        ).one()
        versions = self.session.exec(
            select(DishIngredientLine.version_number)
            .where(recorded)
            .distinct()
            .order_by(DishIngredientLine.version_number.desc())
            .offset(window.offset)
            .limit(window.limit)
        ).all()

        grouped = self._lines_for_versions([(dish_id, v) for v in versions])
        snapshots = [
            VersionSnapshot(version_number=v, lines=grouped.get((dish_id, v), []))
            for v in versions
        ]
        return DishHistory(dish=dish, total=int(total), versions=snapshots)

    def list_dishes(self, window: PageWindow, search: Optional[str] = None) -> Tuple[int, List[DishView]]:
        """Dishes with owner name and current lines, most recently updated first.

        A search term matches dish names, or the current version number when
        the term is an integer.
        """
        term = clean_search(search)
        condition = None
        if term:
            matches = [contains_ci(Dish.name, term)]
            version = int_or_none(term)
            if version is not None:
                matches.append(Dish.version_number == version)
            condition = or_(*matches)

        count_stmt = select(func.count()).select_from(Dish)
        page_stmt = select(Dish, Chef.name).join(Chef, Chef.id == Dish.chef_id)
        if condition is not None:
            count_stmt = count_stmt.where(condition)
            page_stmt = page_stmt.where(condition)

        total = self.session.exec(count_stmt).one()
        rows = self.session.exec(
            page_stmt.order_by(Dish.updated_at.desc(), Dish.id.desc())
            .offset(window.offset)
            .limit(window.limit)
        ).all()

        lines = self._lines_for_versions([(dish.id, dish.version_number) for dish, _ in rows])
        views = [
            DishView(
                dish=dish,
                lines=lines.get((dish.id, dish.version_number), []),
                chef_name=chef_name,
            )
            for dish, chef_name in rows
        ]
        return int(total), views

    # -- helpers -----------------------------------------------------------

    def _get_dish(self, dish_id: int) -> Dish:
        dish = self.session.get(Dish, dish_id)
        if not dish:
            raise NotFoundError("Dish not found")
        return dish

    def _name_in_use(self, chef_id: int, name: str, exclude_dish_id: Optional[int] = None) -> bool:
        stmt = select(Dish.id).where(Dish.chef_id == chef_id, Dish.name == name)
        if exclude_dish_id is not None:
            stmt = stmt.where(Dish.id != exclude_dish_id)
        return self.session.exec(stmt).first() is not None

    def _check_ingredients(self, lines: List[LineInput]) -> None:
        ids = [line.ingredient_id for line in lines]
        missing = self.catalog.missing_ids(ids)
        if missing:
            raise NotFoundError(
                "The following ingredients do not exist: " + ", ".join(str(i) for i in missing),
                details={"missingIngredientIds": missing},
            )
        duplicates = sorted(i for i, n in Counter(ids).items() if n > 1)
        if duplicates:
            raise ValidationError(
                "Duplicate ingredient IDs found in the ingredients list",
                details={"duplicateIngredientIds": duplicates},
            )

    def _append_lines(self, dish_id: int, version: int, lines: List[LineInput], now: datetime) -> None:
        self.session.add_all(
            [
                DishIngredientLine(
                    dish_id=dish_id,
                    ingredient_id=line.ingredient_id,
                    amount=float(line.amount),
                    version_number=version,
                    created_at=now,
                    updated_at=now,
                )
                for line in lines
            ]
        )
        self.session.flush()

    def _lines_for_versions(self, keys: Sequence[VersionKey]) -> Dict[VersionKey, List[LineView]]:
        """Lines of the given (dish, version) pairs, each group ordered by ingredient id."""
        if not keys:
            return {}
        wanted = or_(
            *(
                and_(
                    DishIngredientLine.dish_id == dish_id,
                    DishIngredientLine.version_number == version,
                )
                for dish_id, version in keys
            )
        )
        rows = self.session.exec(
            select(
                DishIngredientLine.dish_id,          # 0
                DishIngredientLine.version_number,   # 1
                DishIngredientLine.ingredient_id,    # 2
                Ingredient.name,                     # 3
                Ingredient.unit,                     # 4
                DishIngredientLine.amount,           # 5
            )
            .join(Ingredient, Ingredient.id == DishIngredientLine.ingredient_id)
            .where(wanted)
            .order_by(
                DishIngredientLine.dish_id.asc(),
                DishIngredientLine.version_number.desc(),
                DishIngredientLine.ingredient_id.asc(),
            )
        ).all()

        grouped: Dict[VersionKey, List[LineView]] = {}
        for dish_id, version, ingredient_id, name, unit, amount in rows:
            grouped.setdefault((dish_id, version), []).append(
                LineView(
                    ingredient_id=int(ingredient_id),
                    ingredient_name=name,
                    ingredient_unit=unit,
                    amount=float(amount),
                )
            )
        return grouped
