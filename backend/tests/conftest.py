"""Pytest configuration and fixtures."""

import os
from datetime import date
from typing import Generator

# Keep the test run away from the on-disk database and the reminder poll
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from foodtrace.db.base import Base
from foodtrace.db.session import get_db
from foodtrace.main import app
# Import all models to ensure they're registered with Base.metadata
from foodtrace.models import *
from foodtrace.services.app_state import AppState
from foodtrace.services.record_store import RecordStore

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override.

    The client is not entered as a context manager, so the lifespan (table
    creation on the real engine, reminder poll) does not run.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    # Disable rate limiting during tests to avoid flaky failures
    from foodtrace.core.rate_limit import limiter
    limiter.enabled = False
    # Don't raise server exceptions so we can test error status codes
    test_client = TestClient(app, raise_server_exceptions=False)
    yield test_client
    test_client.close()
    app.dependency_overrides.clear()
    limiter.enabled = True


@pytest.fixture
def store(db_session: Session) -> RecordStore:
    """Record store over the test session."""
    return RecordStore(db_session)


@pytest.fixture
def state(store: RecordStore) -> AppState:
    """Application state seeded with the default collections."""
    return AppState.load(store)


@pytest.fixture
def today() -> date:
    return date(2024, 1, 10)
