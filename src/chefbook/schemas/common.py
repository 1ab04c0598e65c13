from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..utils.pagination import PageWindow
from ..utils.timestamps import as_utc


# Timestamps are stored as UTC and always leave the API with an offset.
UtcDateTime = Annotated[datetime, AfterValidator(as_utc)]


class CamelModel(BaseModel):
    """Snake-case fields in Python, camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def success(
    data: Any = None,
    *,
    message: Optional[str] = None,
    total: Optional[int] = None,
    window: Optional[PageWindow] = None,
) -> Dict[str, Any]:
    """Standard response envelope for successful calls."""
    body: Dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = jsonable_encoder(data, by_alias=True)
    if total is not None:
        body["total"] = total
    if window is not None:
        body["current"] = window.current
        body["pageSize"] = window.page_size
    if message:
        body["message"] = message
    return body
