"""Root conftest: test env and in-memory cache fixtures for ALL test paths (tests/, apps/api/tests/)."""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# In-memory DB and no request-path sweeps before any apps.api import
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CLEANUP_PROBABILITY", "0")
os.environ.setdefault("CRON_LOG_DIR", str(Path(tempfile.gettempdir()) / "book_cache_cron_logs"))

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from apps.api.config import Config, get_config
from apps.api.db import ensure_tables
from apps.api.main import app
from apps.api.models.book_description import BookDescription
from apps.api.services.google_books import get_book_provider
from apps.api.services.repo import DescriptionCache, get_description_cache
from tests.fakes import FakeProvider


@pytest.fixture
def session_factory():
    """Fresh in-memory SQLite per test. StaticPool: one connection shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    ensure_tables(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def cache(session_factory) -> DescriptionCache:
    return DescriptionCache(session_factory)


@pytest.fixture
def insert_row(session_factory):
    """Insert a row with an explicit age (days before now). Returns the created_at used."""

    def _insert(
        book_title: str,
        author_name: str,
        description: str = "A description.",
        age_days: float = 0.0,
        now: datetime | None = None,
    ) -> datetime:
        created_at = (now or datetime.now(timezone.utc)) - timedelta(days=age_days)
        with session_factory() as session, session.begin():
            session.add(
                BookDescription(
                    book_title=book_title,
                    author_name=author_name,
                    description=description,
                    created_at=created_at,
                )
            )
        return created_at

    return _insert


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def test_config() -> Config:
    """Config with the request-path sweep disabled; tests opt in by raising CLEANUP_PROBABILITY."""
    cfg = Config()
    cfg.DESCRIPTION_RETENTION_DAYS = 30
    cfg.CLEANUP_PROBABILITY = 0
    cfg.CLEANUP_TRIGGER = "request"
    return cfg


@pytest.fixture
def client(cache, provider, test_config):
    """TestClient with cache, provider and config injected. Server exceptions become 500s."""
    app.dependency_overrides[get_description_cache] = lambda: cache
    app.dependency_overrides[get_book_provider] = lambda: provider
    app.dependency_overrides[get_config] = lambda: test_config
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
