from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence

from sqlmodel import Session, select

from chefbook.core.database import engine, init_db
from chefbook.models import Chef, Ingredient
from chefbook.services.base import NOT_PROVIDED
from chefbook.services.catalog import IngredientCatalog
from chefbook.services.dishes import DishVersionEngine, LineInput, RevisionRequest
from chefbook.services.identity import ActingChef, ChefStore
from chefbook.utils.pagination import page_window


@dataclass(frozen=True)
class IngredientSeed:
    name: str
    unit: str


@dataclass(frozen=True)
class LineSeed:
    ingredient: str
    amount: float


INGREDIENTS: list[IngredientSeed] = [
    IngredientSeed("Rice", "g"),
    IngredientSeed("Egg", "pcs"),
    IngredientSeed("Scallion", "g"),
    IngredientSeed("Soy Sauce", "ml"),
    IngredientSeed("Sesame Oil", "ml"),
]

FRIED_RICE_V1: Sequence[LineSeed] = (LineSeed("Rice", 300), LineSeed("Egg", 2))
FRIED_RICE_V2: Sequence[LineSeed] = (
    LineSeed("Rice", 320),
    LineSeed("Egg", 2),
    LineSeed("Scallion", 10),
)


def _ensure_chef(session: Session) -> Chef:
    chef = session.exec(select(Chef).where(Chef.username == "chef_john")).first()
    if chef:
        return chef
    return ChefStore(session).register("Chef John", "chef_john", "password123")


def _ensure_ingredients(session: Session) -> Dict[str, int]:
    catalog = IngredientCatalog(session)
    ids: Dict[str, int] = {}
    for seed in INGREDIENTS:
        existing = session.exec(select(Ingredient).where(Ingredient.name == seed.name)).first()
        ingredient = existing or catalog.create(seed.name, seed.unit)
        ids[seed.name] = ingredient.id
    return ids


def _lines(seeds: Sequence[LineSeed], ids: Dict[str, int]) -> list[LineInput]:
    return [LineInput(ingredient_id=ids[s.ingredient], amount=s.amount) for s in seeds]


def main() -> None:
    init_db()
    with Session(engine) as session:
        chef = _ensure_chef(session)
        ids = _ensure_ingredients(session)
        dishes = DishVersionEngine(session)
        acting = ActingChef(chef_id=chef.id)

        total, existing = dishes.list_dishes(page_window(1, 10), search="Fried Rice")
        if total:
            print(f"Fried Rice already seeded (version {existing[0].dish.version_number}).")
            return

        created = dishes.create_dish(acting, "Fried Rice", _lines(FRIED_RICE_V1, ids))
        revised = dishes.revise_dish(
            created.dish.id,
            acting,
            RevisionRequest(lines=_lines(FRIED_RICE_V2, ids), name=NOT_PROVIDED),
        )
        print(f"Seeded dish {revised.dish.id} '{revised.dish.name}' at version {revised.dish.version_number}.")


if __name__ == "__main__":
    main()
