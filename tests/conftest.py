from __future__ import annotations

import os
import tempfile

# Set test environment BEFORE importing app modules.
# main.py builds an app (and engine) at import time from core.config.settings,
# and core.logger opens its log file at import.
_test_tmp = tempfile.mkdtemp(prefix="tagvault-test-")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("TAGVAULT_LOG_DIR", os.path.join(_test_tmp, "log"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from core.config import Settings
from database import Base, build_session_factory, create_tables, get_db
from main import create_app


# ── Database fixtures ─────────────────────────────────────────────────


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite shared by every connection (StaticPool).

    Tables are recreated per test for full isolation.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


# ── HTTP client fixtures ──────────────────────────────────────────────


@pytest.fixture(name="make_client")
def make_client_fixture(session):
    """Factory: TestClient for an app built with the given settings overrides.

    The app's own engine is bypassed; every request uses the test session.
    """
    clients = []

    def _make(**overrides) -> TestClient:
        settings = Settings(database_url="sqlite://", **overrides)
        app = create_app(settings)

        def _get_db_override():
            yield session

        app.dependency_overrides[get_db] = _get_db_override
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture(name="client")
def client_fixture(make_client):
    """Client with the default settings (AES-GCM, HKDF key derivation)."""
    return make_client()


@pytest.fixture(name="key")
def key_fixture() -> str:
    return "abc123"


@pytest.fixture(name="auth")
def auth_fixture(key) -> dict:
    return {"Authorization": key}
