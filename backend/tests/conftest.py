"""
Shared pytest fixtures.

- bcrypt runs at its minimum cost so hashing stays fast
- db_session: fresh in-memory SQLite database per test
- client: FastAPI TestClient bound to an in-memory database
"""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings
from app.database import Base, get_db
from app import models  # noqa: F401  (registers all tables)
from app.services import user_service

get_settings().security.USE_MIN_COST = True


@pytest.fixture(scope="function")
def engine():
    """In-memory database shared by every connection of one test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine):
    """Create database session for tests."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def make_user(db_session):
    """Factory creating valid users with unique emails."""
    counter = {"n": 0}

    def _make_user(name=None, email=None, password="foobar"):
        counter["n"] += 1
        n = counter["n"]
        return user_service.create_user(
            db_session,
            name or f"User {n}",
            email or f"user{n}@example.com",
            password,
        )

    return _make_user


@pytest.fixture
def client(engine):
    """Create FastAPI test client with the database dependency overridden."""
    from main import app

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    # Not entered as a context manager: startup would initialise the real database
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for feed tests."""
    return datetime(2026, 10, 19, 12, 0, 0)
