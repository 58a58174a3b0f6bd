"""Shared test fixtures: in-memory database, test settings, API client."""

import os

# The engine is created at import time; never let tests reach a real database
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from vidtube.config import Settings, get_settings
from vidtube.database import Base, get_db
from vidtube.main import app
from vidtube.rate_limiter import limiter


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings with test secrets and a throwaway media root."""
    return Settings(
        database_url="sqlite://",
        access_token_secret="test-access-secret",
        refresh_token_secret="test-refresh-secret",
        action_token_key="11" * 32,
        cookie_secure=False,
        sendgrid_api_key="",
        public_base_url="http://testserver",
        media_root=str(tmp_path / "media"),
        max_upload_size_mb=1,
    )


@pytest.fixture
def engine():
    """In-memory SQLite shared across threads through a single connection."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_maker(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@pytest.fixture
def db(session_maker):
    """A database session for unit tests."""
    session = session_maker()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def client(session_maker, settings):
    """Create test client with in-memory database.

    Yields a tuple of (TestClient, SessionMaker) for use in tests. Rate
    limiting is off here; tests that exercise it turn it back on.
    """
    limiter.reset()
    limiter.enabled = False

    def override_get_db():
        db = session_maker()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings

    with TestClient(app) as test_client:
        yield test_client, session_maker

    app.dependency_overrides.clear()
    limiter.enabled = True
