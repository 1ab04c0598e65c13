import tempfile
from contextlib import suppress
from pathlib import Path
from typing import AsyncIterator, Iterator

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel

from chefbook.core import database as core_database
from chefbook.core.database import build_engine, get_session
from chefbook.main import create_app


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture(scope="function")
def engine() -> Iterator[Engine]:
    # Use a fresh SQLite DB file in a temp dir per test for isolation
    tmp = tempfile.TemporaryDirectory()
    db_path = Path(tmp.name) / "test.db"
    test_engine = build_engine(f"sqlite:///{db_path}")

    from chefbook import models  # noqa: F401
    SQLModel.metadata.create_all(test_engine)

    try:
        yield test_engine
    finally:
        with suppress(Exception):
            test_engine.dispose()
        tmp.cleanup()


@pytest.fixture(scope="function")
def test_app(monkeypatch, engine: Engine) -> Iterator[FastAPI]:
    def _override_get_session():
        with Session(engine) as session:
            yield session

    # patch global engine/init_db so startup hooks operate on the test database
    monkeypatch.setattr(core_database, "engine", engine, raising=False)

    def _init_db():
        SQLModel.metadata.create_all(engine)

    monkeypatch.setattr(core_database, "init_db", _init_db, raising=False)

    app = create_app()
    app.dependency_overrides[get_session] = _override_get_session

    try:
        yield app
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def db_session(engine: Engine) -> Iterator[Session]:
    with Session(engine) as session:
        yield session
