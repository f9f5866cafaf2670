"""Database session factory and bootstrap."""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import Session, sessionmaker

from apps.api.config import config
from apps.api.models import Base

DATABASE_URL = config.DATABASE_URL


def _ensure_sqlite_dir(url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return
    database = parsed.database or ""
    if database and database != ":memory:" and not database.startswith("file:"):
        Path(database).parent.mkdir(parents=True, exist_ok=True)


def make_engine(url: str) -> Engine:
    """Create an engine. SQLite connections may be shared with the threadpool (background sweep)."""
    connect_args = {}
    if make_url(url).get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
        _ensure_sqlite_dir(url)
    return create_engine(
        url,
        pool_pre_ping=True,
        connect_args=connect_args,
        echo=os.getenv("SQL_ECHO", "").lower() in ("1", "true", "yes"),
    )


engine = make_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@contextmanager
def get_db(session_factory: sessionmaker | None = None) -> Generator[Session, None, None]:
    """Provide a transactional scope for DB operations. Commit on success, rollback on error."""
    session = (session_factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def ensure_tables(bind=None) -> None:
    """Create all tables if they do not exist. Idempotent (checkfirst=True).
    bind: optional engine/connection; if None, uses global engine.
    Postgres deployments are expected to run Alembic instead (no-op there)."""
    target = bind if bind is not None else engine
    url = str(target.url) if isinstance(target, Engine) else DATABASE_URL
    if url.strip().lower().startswith("postgresql"):
        return
    Base.metadata.create_all(bind=target, checkfirst=True)
