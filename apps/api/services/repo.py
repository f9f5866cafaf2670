"""Repository layer for the book description cache.

RULE: Repo is the ONLY place allowed to run DB reads/writes (session.execute, get_db).
Matching on (book_title, author_name) is always case-insensitive: lower(col) = lower(:value).
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy import ColumnElement, case, delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from apps.api.db import SessionLocal, get_db
from apps.api.models.book_description import NO_DESCRIPTION, BookDescription, utcnow

logger = logging.getLogger(__name__)

AGE_BUCKETS = ("last_24h", "last_7d", "last_30d", "older")


@dataclass(frozen=True)
class StorageUsage:
    """Summed text lengths across all rows."""

    total_entries: int
    description_bytes: int
    title_bytes: int
    author_bytes: int
    total_bytes: int


def _as_utc(value: datetime | None) -> datetime | None:
    """SQLite returns naive datetimes; everything is written as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _is_unique_violation(exc: IntegrityError) -> bool:
    """True for unique-index violations (SQLite 'UNIQUE constraint failed', Postgres 23505)."""
    orig = exc.orig
    if orig is not None and getattr(orig, "pgcode", None) == "23505":
        return True
    if orig is not None and "UniqueViolation" in orig.__class__.__name__:
        return True
    return orig is not None and "unique" in str(orig).lower()


def _key_match(book_title: str, author_name: str) -> ColumnElement[bool]:
    return (func.lower(BookDescription.book_title) == func.lower(book_title)) & (
        func.lower(BookDescription.author_name) == func.lower(author_name)
    )


class DescriptionCache:
    """Durable description cache. One row per case-insensitive (book_title, author_name).

    Holds only a session factory; every call opens its own short transactional scope.
    """

    def __init__(self, session_factory: sessionmaker | None = None) -> None:
        self._session_factory = session_factory or SessionLocal

    def lookup(self, book_title: str, author_name: str) -> str | None:
        """Return the cached description (sentinel included) or None on miss. No side effects."""
        stmt = select(BookDescription.description).where(_key_match(book_title, author_name)).limit(1)
        with get_db(self._session_factory) as session:
            return session.execute(stmt).scalars().first()

    def upsert(self, book_title: str, author_name: str, description: str) -> None:
        """
        Insert a new row; on unique violation update description and created_at of the existing row.
        Not atomic: a concurrent writer may land between the failed insert and the update.
        Last writer wins. Any other DB error propagates.
        """
        now = utcnow()
        try:
            with get_db(self._session_factory) as session:
                session.add(
                    BookDescription(
                        book_title=book_title,
                        author_name=author_name,
                        description=description,
                        created_at=now,
                    )
                )
            return
        except IntegrityError as e:
            if not _is_unique_violation(e):
                raise
            logger.info("Cache row exists for %r by %r, updating", book_title, author_name)

        stmt = (
            update(BookDescription)
            .where(_key_match(book_title, author_name))
            .values(description=description, created_at=now)
            .execution_options(synchronize_session=False)
        )
        with get_db(self._session_factory) as session:
            result = session.execute(stmt)
            if result.rowcount == 0:
                logger.warning("Cache row for %r by %r vanished before update", book_title, author_name)

    def delete_older_than(self, cutoff: datetime) -> int:
        """Delete rows with created_at strictly before cutoff. Returns deleted count."""
        stmt = (
            delete(BookDescription)
            .where(BookDescription.created_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        with get_db(self._session_factory) as session:
            result = session.execute(stmt)
            return int(result.rowcount or 0)

    def ping(self) -> bool:
        """True if the database answers a trivial query."""
        with get_db(self._session_factory) as session:
            return session.execute(select(1)).scalar_one() == 1

    # Aggregates for /status. Each runs as its own query.

    def count_total(self) -> int:
        with get_db(self._session_factory) as session:
            return int(session.execute(select(func.count(BookDescription.id))).scalar_one())

    def storage_usage(self) -> StorageUsage:
        """Summed LENGTH() of description, title and author, plus the per-row total."""
        desc_len = func.length(BookDescription.description)
        title_len = func.length(BookDescription.book_title)
        author_len = func.length(BookDescription.author_name)
        stmt = select(
            func.count(BookDescription.id),
            func.coalesce(func.sum(desc_len), 0),
            func.coalesce(func.sum(title_len), 0),
            func.coalesce(func.sum(author_len), 0),
            func.coalesce(func.sum(desc_len + title_len + author_len), 0),
        )
        with get_db(self._session_factory) as session:
            row = session.execute(stmt).one()
        return StorageUsage(
            total_entries=int(row[0]),
            description_bytes=int(row[1]),
            title_bytes=int(row[2]),
            author_bytes=int(row[3]),
            total_bytes=int(row[4]),
        )

    def timestamp_range(self) -> tuple[datetime | None, datetime | None]:
        """Return (oldest created_at, newest created_at); (None, None) on an empty table."""
        stmt = select(func.min(BookDescription.created_at), func.max(BookDescription.created_at))
        with get_db(self._session_factory) as session:
            oldest, newest = session.execute(stmt).one()
        return _as_utc(oldest), _as_utc(newest)

    def age_distribution(self, now: datetime | None = None) -> dict[str, int]:
        """
        Count rows per age bucket using fractional-day age relative to now:
        < 1 day, < 7 days, < 30 days, else older. All four keys always present.
        """
        now = now or utcnow()
        age = case(
            (BookDescription.created_at > now - timedelta(days=1), "last_24h"),
            (BookDescription.created_at > now - timedelta(days=7), "last_7d"),
            (BookDescription.created_at > now - timedelta(days=30), "last_30d"),
            else_="older",
        ).label("age")
        sub = select(age).subquery()
        stmt = select(sub.c.age, func.count()).group_by(sub.c.age)
        counts = dict.fromkeys(AGE_BUCKETS, 0)
        with get_db(self._session_factory) as session:
            for bucket, count in session.execute(stmt).all():
                counts[bucket] = int(count)
        return counts

    def count_no_description(self) -> int:
        stmt = select(func.count(BookDescription.id)).where(BookDescription.description == NO_DESCRIPTION)
        with get_db(self._session_factory) as session:
            return int(session.execute(stmt).scalar_one())

    def average_description_length(self) -> float | None:
        """AVG(LENGTH(description)) over non-sentinel rows. None when there are none."""
        stmt = select(func.avg(func.length(BookDescription.description))).where(
            BookDescription.description != NO_DESCRIPTION
        )
        with get_db(self._session_factory) as session:
            value = session.execute(stmt).scalar_one()
        return float(value) if value is not None else None


_cache: DescriptionCache | None = None


def get_description_cache() -> DescriptionCache:
    """FastAPI dependency: process-wide cache bound to SessionLocal. Lazy-initialized."""
    global _cache
    if _cache is None:
        _cache = DescriptionCache()
    return _cache
