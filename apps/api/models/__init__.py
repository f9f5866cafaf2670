"""SQLAlchemy models for the description cache."""

from apps.api.models.base import Base
from apps.api.models.book_description import NO_DESCRIPTION, BookDescription

__all__ = [
    "Base",
    "BookDescription",
    "NO_DESCRIPTION",
]
