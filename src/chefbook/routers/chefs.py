from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlmodel import Session

from ..core.database import get_session
from ..schemas.chefs import ChefCreateIn, ChefLoginIn, ChefOut, ChefSessionOut, ChefUpdateIn
from ..schemas.common import success
from ..services.identity import ChefStore
from ..utils.pagination import PageWindow
from ..utils.validators import MAX_ID
from .deps import pagination

router = APIRouter(prefix="/chefs", tags=["chefs"])


@router.post("", status_code=201, summary="Register a chef")
def create_chef(payload: ChefCreateIn, session: Session = Depends(get_session)):
    chef = ChefStore(session).register(payload.name, payload.username, payload.password)
    return success(ChefOut.from_model(chef), message="Chef created successfully")


@router.get("", summary="List chefs (search over name and username)")
def list_chefs(
    window: PageWindow = Depends(pagination),
    search: Optional[str] = Query(default=None),
    session: Session = Depends(get_session),
):
    total, chefs = ChefStore(session).list(window, search)
    return success([ChefOut.from_model(c) for c in chefs], total=total, window=window)


@router.post("/login", summary="Check a chef's username and password")
def login(payload: ChefLoginIn, session: Session = Depends(get_session)):
    chef = ChefStore(session).authenticate(payload.username, payload.password)
    return success(
        ChefSessionOut(id=chef.id, name=chef.name, username=chef.username),
        message="Login successful",
    )


@router.get("/{chef_id}", summary="Get one chef")
def get_chef(chef_id: int = Path(gt=0, le=MAX_ID), session: Session = Depends(get_session)):
    return success(ChefOut.from_model(ChefStore(session).get(chef_id)))


@router.put("/{chef_id}", summary="Rename a chef")
def update_chef(
    payload: ChefUpdateIn,
    chef_id: int = Path(gt=0, le=MAX_ID),
    session: Session = Depends(get_session),
):
    chef = ChefStore(session).update_name(chef_id, payload.name)
    return success(ChefOut.from_model(chef), message="Chef updated successfully")
