# tests/conftest.py
from __future__ import annotations

import os
import random
from collections.abc import Callable, Generator, Iterator, Sequence

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Keep the application's own engine in memory; tests bind their own below.
os.environ["DATABASE_URL"] = "sqlite://"

from unique_numbers.db.session import Base
from unique_numbers.db.session import get_db as app_get_session
from unique_numbers.main import app as fastapi_app
from unique_numbers.repositories.number_repo import NumberRepository
from unique_numbers.services.allocator import NumberAllocator

TEST_DB_URL = "sqlite://"


class ScriptedRandom(random.Random):
    """Random source replaying a fixed sequence of draws."""

    def __init__(self, values: Sequence[int]) -> None:
        super().__init__()
        self._values = iter(values)
        self.draws = 0

    def randint(self, a: int, b: int) -> int:
        self.draws += 1
        return next(self._values)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> Iterator[sessionmaker[Session]]:
    factory = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    try:
        yield factory
    finally:
        # Every repository call commits, so clean up explicitly between tests.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def db_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def repo(db_session: Session) -> NumberRepository:
    """Repository bound to the test session."""
    return NumberRepository(db_session)


@pytest.fixture()
def make_allocator(repo: NumberRepository) -> Callable[..., NumberAllocator]:
    """Return a factory building allocators on the test repository."""

    def _make(**kwargs: object) -> NumberAllocator:
        return NumberAllocator(repo, **kwargs)  # type: ignore[arg-type]

    return _make


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(
    app: FastAPI, session_factory: sessionmaker[Session]
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client
