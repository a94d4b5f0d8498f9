"""
Pytest configuration and fixtures

Tests run against an in-memory SQLite database. The schema is created
before and dropped after every test, so nothing leaks between tests.
"""
import pytest
import sys
import os
from datetime import date

# Configuration is read at import time; set it before anything imports core.config
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-at-least-32-characters-long")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("DEBUG", "false")

# Add the parent directory to the path so we can import from services
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.database import Base, SessionLocal, engine, get_db  # noqa: E402
from core.security import create_access_token  # noqa: E402
import models  # noqa: E402,F401


def birthdate_for_age(age: int) -> date:
    """A date of birth that makes the holder exactly `age` years old today."""
    return date(date.today().year - age, 1, 1)


@pytest.fixture(scope="function")
def db_session():
    """
    Database session on a freshly created schema.

    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """TestClient whose requests share the test's database session."""
    from fastapi.testclient import TestClient
    from main import app

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def user_id():
    return "user-123"


@pytest.fixture
def auth_headers(user_id):
    token = create_access_token({"sub": user_id})
    return {"Authorization": f"Bearer {token}"}
