"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import os

# ---------------------------------------------------------------------------
# Ensure a valid JWT_SECRET is always set for test runs.
# This must happen before any import of sync_reputation.api.deps which
# validates the secret at module-load time.
# ---------------------------------------------------------------------------
_TEST_JWT_SECRET = "test-secret-for-pytest-only-" + "x" * 40  # > 32 chars
os.environ.setdefault("JWT_SECRET", _TEST_JWT_SECRET)

import pytest  # noqa: E402
from sqlalchemy import Engine, create_engine  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from sync_reputation.config import ReputationConfig  # noqa: E402
from sync_reputation.database.models import Base, Business  # noqa: E402


@pytest.fixture
def db_engine() -> Engine:
    """Create an in-memory SQLite engine with all reputation tables.

    Uses StaticPool so all threads share the same in-memory database
    (required by ``asyncio.to_thread`` used in ``run_db``).
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def db_session(db_engine: Engine):
    """Provide a session that rolls back after each test."""
    with Session(db_engine) as session:
        yield session
        session.rollback()


@pytest.fixture
def cfg() -> ReputationConfig:
    """Moderated config with the default word limits."""
    return ReputationConfig(app_name="SynC Test", api_port=8000)


def make_business(engine: Engine, name: str = "Corner Cafe", **fields) -> int:
    """Insert a business and return its ID."""
    with Session(engine) as session:
        business = Business(name=name, **fields)
        session.add(business)
        session.commit()
        return business.id


def make_token(sub: str = "user-1", *, is_admin: bool = False, username: str = "Tester") -> str:
    """Create a JWT signed with the test secret."""
    import jwt

    from sync_reputation.api.deps import JWT_ALGORITHM, JWT_SECRET

    return jwt.encode(
        {"sub": sub, "username": username, "is_admin": is_admin},
        JWT_SECRET,
        algorithm=JWT_ALGORITHM,
    )


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(db_engine, cfg):
    """FastAPI TestClient wired to the in-memory engine and test config."""
    from fastapi.testclient import TestClient

    from sync_reputation.api import main as main_mod
    from sync_reputation.api.routes import reviews as reviews_mod

    app = main_mod.app
    app.dependency_overrides[main_mod.get_engine] = lambda: db_engine
    app.dependency_overrides[reviews_mod.get_config] = lambda: cfg
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
