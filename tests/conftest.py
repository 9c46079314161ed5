"""Shared pytest fixtures: an isolated in-memory database and API clients."""

from __future__ import annotations

import os
import sys
from pathlib import Path

# Configure before any jobtrack module reads its settings.
os.environ.setdefault("JOBTRACK_DATABASE_URL", "sqlite://")
os.environ.setdefault("JOBTRACK_SECRET_KEY", "test-secret-key")
os.environ.setdefault("JOBTRACK_BCRYPT_ROUNDS", "4")
os.environ.setdefault("JOBTRACK_RATE_LIMIT_ENABLED", "false")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from jobtrack.database import Base, create_app_engine, get_db, init_db  # noqa: E402
from jobtrack.main import app  # noqa: E402
from jobtrack.rate_limit import limiter  # noqa: E402

API = "/api/v1"


@pytest.fixture(autouse=True)
def disable_rate_limits(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(limiter, "enabled", False)


@pytest.fixture
def engine():
    """A fresh in-memory SQLite database shared across threads."""
    test_engine = create_app_engine("sqlite://")
    init_db(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def override_db(session_factory):
    """Route the app's get_db dependency to the test database."""

    def _get_test_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client(override_db):
    return TestClient(app)


@pytest.fixture
def register(client):
    """Register a user over HTTP and return its bearer headers."""

    def _register(name: str = "Alice", email: str = "alice@example.com", password: str = "password123"):
        response = client.post(f"{API}/auth/register", json={
            "name": name, "email": email, "password": password,
        })
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _register
