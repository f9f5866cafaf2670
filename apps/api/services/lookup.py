"""Lookup flow: normalize -> cache -> provider on miss -> write back -> return."""

import logging
from dataclasses import dataclass

from apps.api.models.book_description import NO_DESCRIPTION
from apps.api.services.google_books import BookProvider
from apps.api.services.normalize import require_lookup_key
from apps.api.services.repo import DescriptionCache

logger = logging.getLogger(__name__)

SOURCE_CACHE = "cache"


@dataclass(frozen=True)
class LookupResult:
    description: str
    source: str

    @property
    def found(self) -> bool:
        """False for the cached negative result."""
        return self.description != NO_DESCRIPTION


def resolve_description(
    book_title: str | None,
    author_name: str | None,
    cache: DescriptionCache,
    provider: BookProvider,
) -> LookupResult:
    """
    Resolve a description for (book_title, author_name).
    Raises MissingLookupKeyError if either is blank. Cache hits are served as-is, with no
    freshness check. On a miss the provider result (or NO_DESCRIPTION) is upserted and returned.
    Provider errors propagate; nothing is retried.
    """
    title, author = require_lookup_key(book_title, author_name)
    logger.info("Fetching description for %r by %s", title, author)

    cached = cache.lookup(title, author)
    if cached is not None:
        logger.info("Description found in cache")
        return LookupResult(description=cached, source=SOURCE_CACHE)

    logger.info("Description not in cache, fetching from %s", provider.source_name)
    description = provider.find_description(title, author)
    if not description:
        description = NO_DESCRIPTION
    cache.upsert(title, author, description)
    return LookupResult(description=description, source=provider.source_name)
