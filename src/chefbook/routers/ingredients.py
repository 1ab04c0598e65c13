from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlmodel import Session

from ..core.database import get_session
from ..schemas.common import success
from ..schemas.ingredients import IngredientCreateIn, IngredientOut, IngredientUpdateIn
from ..services.catalog import IngredientCatalog
from ..utils.pagination import PageWindow
from ..utils.validators import MAX_ID
from .deps import pagination

router = APIRouter(prefix="/ingredients", tags=["ingredients"])


@router.post("", status_code=201, summary="Add an ingredient to the catalog")
def create_ingredient(payload: IngredientCreateIn, session: Session = Depends(get_session)):
    ingredient = IngredientCatalog(session).create(payload.name, payload.unit)
    return success(IngredientOut.from_model(ingredient), message="Ingredient created successfully")


@router.get("", summary="List ingredients (search over name and unit)")
def list_ingredients(
    window: PageWindow = Depends(pagination),
    search: Optional[str] = Query(default=None),
    session: Session = Depends(get_session),
):
    total, ingredients = IngredientCatalog(session).list(window, search)
    return success([IngredientOut.from_model(i) for i in ingredients], total=total, window=window)


@router.get("/{ingredient_id}", summary="Get one ingredient")
def get_ingredient(ingredient_id: int = Path(gt=0, le=MAX_ID), session: Session = Depends(get_session)):
    return success(IngredientOut.from_model(IngredientCatalog(session).get(ingredient_id)))


@router.put("/{ingredient_id}", summary="Rename an ingredient or change its unit")
def update_ingredient(
    payload: IngredientUpdateIn,
    ingredient_id: int = Path(gt=0, le=MAX_ID),
    session: Session = Depends(get_session),
):
    ingredient = IngredientCatalog(session).update(ingredient_id, **payload.changes())
    return success(IngredientOut.from_model(ingredient), message="Ingredient updated successfully")
