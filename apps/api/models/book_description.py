"""book_descriptions model. Global description cache keyed by case-insensitive (title, author)."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from apps.api.models.base import Base

NO_DESCRIPTION = "No description available"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BookDescription(Base):
    """Cached description per (book_title, author_name). Case of stored text is preserved."""

    __tablename__ = "book_descriptions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    book_title: Mapped[str] = mapped_column(Text, nullable=False)
    author_name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        index=True,
    )


# Uniqueness is on the lower-cased pair; inserts that collide fall back to update (see repo.upsert).
Index(
    "ux_book_descriptions_title_author",
    func.lower(BookDescription.book_title),
    func.lower(BookDescription.author_name),
    unique=True,
)
