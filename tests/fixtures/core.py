from __future__ import annotations

from collections.abc import Callable, Generator
from datetime import UTC, datetime
from typing import Any

import pytest
from fastapi import Response
from sqlalchemy import Engine, StaticPool
from sqlmodel import Session, SQLModel, create_engine
from starlette.requests import Request

from src.splicer.core.services import DbSessionService
from tests.utils import FrozenClock

_NOW = datetime(2026, 3, 2, 12, 0, tzinfo=UTC)


@pytest.fixture
def engine() -> Generator[Engine]:
    """A private in-memory database with every table created."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Import models to register them with the metadata
    import src.splicer.entities  # noqa: F401

    SQLModel.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def db(engine: Engine) -> DbSessionService:
    return DbSessionService(engine=engine)


@pytest.fixture
def session(db: DbSessionService) -> Generator[Session]:
    """Create a fresh database session for testing."""
    session = db.get_session()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(_NOW)


@pytest.fixture
def request_factory() -> Callable[..., Request]:
    def _make_request(
        headers: dict[str, str] | None = None,
        *,
        method: str = "GET",
        path: str = "/",
        client: tuple[str, int] = ("127.0.0.1", 50000),
    ) -> Request:
        scope = {
            "type": "http",
            "headers": [
                (name.lower().encode("ascii"), value.encode("latin-1"))
                for name, value in (headers or {}).items()
            ],
            "method": method,
            "path": path,
            "query_string": b"",
            "client": client,
        }
        return Request(scope)

    return _make_request


@pytest.fixture
def response_factory() -> Callable[[], Any]:
    def _make_response() -> Response:
        return Response(content="", status_code=200)

    return _make_response
