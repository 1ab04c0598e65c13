from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ..core.database import get_session


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", summary="Liveness plus a trivial database round-trip")
def health(session: Session = Depends(get_session)):
    try:
        session.exec(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check failed")
        return JSONResponse(status_code=500, content={"status": "degraded"})
    return {"status": "ok"}
