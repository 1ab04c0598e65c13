from __future__ import annotations

from typing import Iterator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from .config import get_settings


def _sqlite_connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        # Required for SQLite when used with FastAPI in threaded servers.
        return {"check_same_thread": False}
    return {}


def build_engine(url: str, echo: bool = False) -> Engine:
    built = create_engine(url, echo=echo, connect_args=_sqlite_connect_args(url))
    if url.startswith("sqlite"):
        event.listen(built, "connect", _enable_sqlite_foreign_keys)
    return built


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # noqa: ARG001
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


settings = get_settings()

engine = build_engine(settings.database_url, echo=settings.database_echo)


def init_db() -> None:
    # Import models so SQLModel sees the metadata.
    from chefbook import models  # noqa: F401  (import for side effect)

    SQLModel.metadata.create_all(engine)


def get_session() -> Iterator[Session]:
    with Session(engine) as session:
        yield session
