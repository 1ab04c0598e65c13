from __future__ import annotations

from typing import Optional

from fastapi import Header, Query

from ..core.errors import ValidationError
from ..services.identity import ActingChef
from ..utils.pagination import PageWindow, page_window
from ..utils.validators import parse_positive_int


def require_acting_chef(x_chef_id: Optional[str] = Header(default=None)) -> ActingChef:
    if x_chef_id is None or not x_chef_id.strip():
        raise ValidationError("Missing required header: X-Chef-Id")
    chef_id = parse_positive_int(x_chef_id)
    if chef_id is None:
        raise ValidationError("Invalid chef ID")
    return ActingChef(chef_id=chef_id)


def optional_acting_chef(x_chef_id: Optional[str] = Header(default=None)) -> Optional[ActingChef]:
    if x_chef_id is None or not x_chef_id.strip():
        return None
    chef_id = parse_positive_int(x_chef_id)
    if chef_id is None:
        raise ValidationError("Invalid chef ID")
    return ActingChef(chef_id=chef_id)


def pagination(
    current: int = Query(default=1, ge=1),
    page_size: Optional[int] = Query(default=None, ge=1, alias="pageSize"),
) -> PageWindow:
    return page_window(current, page_size)
