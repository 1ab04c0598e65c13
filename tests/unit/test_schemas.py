from datetime import datetime, timedelta, timezone

import pytest

from chefbook.core.errors import ValidationError
from chefbook.schemas.chefs import ChefOut
from chefbook.schemas.dishes import DishCreateIn, DishRevisionIn
from chefbook.schemas.ingredients import IngredientUpdateIn
from chefbook.services.base import NOT_PROVIDED


LINES = [{"ingredientId": 1, "ingredientAmount": 300}, {"ingredientId": 2, "ingredientAmount": 2}]


def test_create_payload_reads_camel_case_keys():
    payload = DishCreateIn.model_validate({"name": "Fried Rice", "ingredients": LINES})
    lines = payload.lines()
    assert [(line.ingredient_id, line.amount) for line in lines] == [(1, 300.0), (2, 2.0)]


def test_revision_without_name_keeps_name_unset():
    revision = DishRevisionIn.model_validate({"ingredients": LINES}).to_revision()
    assert revision.name is NOT_PROVIDED
    assert len(revision.lines) == 2


def test_revision_with_name_carries_it():
    revision = DishRevisionIn.model_validate({"name": "Egg Fried Rice", "ingredients": LINES}).to_revision()
    assert revision.name == "Egg Fried Rice"


def test_revision_with_explicit_null_name_is_rejected():
    payload = DishRevisionIn.model_validate({"name": None, "ingredients": LINES})
    with pytest.raises(ValidationError):
        payload.to_revision()


def test_ingredient_update_changes_only_include_provided_fields():
    changes = IngredientUpdateIn.model_validate({"unit": "kg"}).changes()
    assert changes == {"name": NOT_PROVIDED, "unit": "kg"}


def test_not_provided_is_falsy_and_distinct_from_none():
    assert not NOT_PROVIDED
    assert NOT_PROVIDED is not None
    assert repr(NOT_PROVIDED) == "NOT_PROVIDED"


def test_timestamps_serialize_as_utc():
    naive = datetime(2026, 10, 18, 9, 11, 46)
    shifted = datetime(2026, 10, 18, 11, 11, 46, tzinfo=timezone(timedelta(hours=2)))
    out = ChefOut(id=1, name="Chef John", username="chef_john", created_at=naive, updated_at=shifted)
    dumped = out.model_dump(mode="json", by_alias=True)
    assert dumped["createdAt"] == "2026-10-18T09:11:46Z"
    assert dumped["updatedAt"] == "2026-10-18T09:11:46Z"
