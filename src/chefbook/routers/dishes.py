from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlmodel import Session

from ..core.database import get_session
from ..schemas.common import success
from ..schemas.dishes import (
    DishCompositionOut,
    DishCreateIn,
    DishHistoryOut,
    DishListItemOut,
    DishOut,
    DishRevisionIn,
)
from ..services.dishes import DishVersionEngine
from ..services.identity import ActingChef
from ..utils.pagination import PageWindow
from ..utils.validators import MAX_ID
from .deps import optional_acting_chef, pagination, require_acting_chef

router = APIRouter(prefix="/dishes", tags=["dishes"])


@router.post("", status_code=201, summary="Create a dish at version 1")
def create_dish(
    payload: DishCreateIn,
    acting: ActingChef = Depends(require_acting_chef),
    session: Session = Depends(get_session),
):
    view = DishVersionEngine(session).create_dish(acting, payload.name, payload.lines())
    return success(DishOut.from_view(view), message="Dish created successfully")


@router.get("", summary="List dishes with their current ingredients")
def list_dishes(
    window: PageWindow = Depends(pagination),
    search: Optional[str] = Query(default=None),
    session: Session = Depends(get_session),
):
    total, views = DishVersionEngine(session).list_dishes(window, search)
    return success([DishListItemOut.from_view(v) for v in views], total=total, window=window)


@router.put("/{dish_id}/ingredients", summary="Revise a dish (creates a new version)")
def revise_dish(
    payload: DishRevisionIn,
    dish_id: int = Path(gt=0, le=MAX_ID),
    acting: ActingChef = Depends(require_acting_chef),
    session: Session = Depends(get_session),
):
    view = DishVersionEngine(session).revise_dish(dish_id, acting, payload.to_revision())
    return success(DishCompositionOut.from_view(view), message="Dish ingredients updated successfully")


@router.get("/{dish_id}/ingredients", summary="Current version of a dish")
def current_ingredients(
    dish_id: int = Path(gt=0, le=MAX_ID),
    acting: Optional[ActingChef] = Depends(optional_acting_chef),
    session: Session = Depends(get_session),
):
    view = DishVersionEngine(session).get_current_composition(dish_id, acting)
    return success(DishCompositionOut.from_view(view))


@router.get("/{dish_id}/ingredients/history", summary="All versions of a dish, newest first")
def ingredient_history(
    dish_id: int = Path(gt=0, le=MAX_ID),
    window: PageWindow = Depends(pagination),
    acting: Optional[ActingChef] = Depends(optional_acting_chef),  # noqa: ARG001  (header still validated)
    session: Session = Depends(get_session),
):
    history = DishVersionEngine(session).get_version_history(dish_id, window)
    return success(DishHistoryOut.from_history(history), total=history.total, window=window)
