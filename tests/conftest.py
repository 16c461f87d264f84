# File: tests/conftest.py

"""
Shared fixtures.

Every test gets its own in-memory SQLite database (StaticPool keeps the one
connection alive across sessions and threads) with foreign keys enforced.
Fixture data is committed through a separate unit of work, so the session
a test reads with starts with an empty identity map and every lazy or
batched load really reaches the database.
"""

from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.inspection import QueryCounter
from app.db.session import build_engine, get_db
from app.main import app
from app.models import Base
from app.repositories.base import UnitOfWork
from app.services.seed_service import SeedResult, seed_blog


@pytest.fixture
def db_engine() -> Generator[Engine, Any, None]:
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory) -> Generator[Session, Any, None]:
    """A clean session per test, rolled back afterwards."""
    session = session_factory()

    yield session

    session.rollback()
    session.close()


@pytest.fixture
def seed(session_factory) -> Callable[..., SeedResult]:
    """Commit fixture data; takes the same keyword arguments as seed_blog."""

    def _seed(**kwargs) -> SeedResult:
        with UnitOfWork(session_factory) as uow:
            result = seed_blog(uow, **kwargs)
            uow.commit()
        return result

    return _seed


@pytest.fixture
def query_counter(db_engine) -> QueryCounter:
    """Not yet listening; use as ``with query_counter:``."""
    return QueryCounter(db_engine)


@pytest.fixture
def client(session_factory) -> Generator[TestClient, Any, None]:
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()
