"""
Google Books client: the external source of descriptions on a cache miss.

search() returns candidate descriptions; find_description() picks the first one that
looks like English. 429 raises RateLimitError, any other non-2xx raises ProviderError.
No retries; the request timeout is GOOGLE_BOOKS_TIMEOUT.
"""

import logging
from typing import Any, Protocol, runtime_checkable

import requests

from apps.api.config import config

logger = logging.getLogger(__name__)

SOURCE_GOOGLE = "google"

# Common function words; a description is English-like when more than 3 appear as whole words.
ENGLISH_MARKER_WORDS = ("the", "and", "in", "of", "to", "a", "is", "that", "for", "with")
ENGLISH_MIN_MATCHES = 3


class ProviderError(RuntimeError):
    """Raised when the provider returns a non-success response."""

    pass


class RateLimitError(ProviderError):
    """Raised on HTTP 429 from the provider."""

    pass


@runtime_checkable
class BookProvider(Protocol):
    """Protocol for description lookup on a cache miss. Can be swapped for testing."""

    source_name: str

    def find_description(self, book_title: str, author_name: str) -> str | None:
        """Return a usable description, or None when the provider has none."""
        ...


def is_likely_english(text: str) -> bool:
    """Count marker words found as ' w ', leading 'w ' or trailing ' w'. True when count > 3."""
    lower = text.lower()
    matches = [
        w
        for w in ENGLISH_MARKER_WORDS
        if f" {w} " in lower or lower.startswith(f"{w} ") or lower.endswith(f" {w}")
    ]
    return len(matches) > ENGLISH_MIN_MATCHES


def pick_description(candidates: list[str]) -> str | None:
    """First candidate that passes is_likely_english, else None."""
    for desc in candidates:
        if desc and is_likely_english(desc):
            return desc
    return None


def _extract_descriptions(data: dict[str, Any]) -> list[str]:
    out: list[str] = []
    for item in data.get("items") or []:
        desc = ((item or {}).get("volumeInfo") or {}).get("description")
        if isinstance(desc, str) and desc:
            out.append(desc)
    return out


class GoogleBooksProvider:
    """Google Books volumes search. One GET per lookup."""

    source_name = SOURCE_GOOGLE

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = config.GOOGLE_BOOKS_API_URL,
        timeout: float = config.GOOGLE_BOOKS_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._session = session or requests.Session()

    def search(self, book_title: str, author_name: str) -> list[str]:
        """Return candidate descriptions for title + author, in API order."""
        params = {
            "q": f"{book_title} inauthor:{author_name}",
            "langRestrict": "en",
            "key": self._api_key,
        }
        logger.info("Fetching from Google Books q=%r", params["q"])
        resp = self._session.get(self._base_url, params=params, timeout=self._timeout)
        logger.info("Google Books API response status: %s", resp.status_code)

        if resp.status_code == 429:
            raise RateLimitError("Rate limit exceeded. Please try again later.")
        if not resp.ok:
            logger.error("Google Books API error response: %s", resp.text[:500])
            raise ProviderError(f"Failed to fetch from Google Books API: {resp.status_code}")

        data = resp.json()
        logger.info("Found %d results", len(data.get("items") or []))
        return _extract_descriptions(data)

    def find_description(self, book_title: str, author_name: str) -> str | None:
        return pick_description(self.search(book_title, author_name))


_provider: BookProvider | None = None


def reset_book_provider() -> None:
    """Drop the cached provider; the next get_book_provider() rebuilds it."""
    global _provider
    _provider = None


def get_book_provider() -> BookProvider:
    """FastAPI dependency: the active provider. Lazy-initialized from GOOGLE_BOOKS_API_KEY."""
    global _provider
    if _provider is None:
        if not config.GOOGLE_BOOKS_API_KEY:
            logger.warning("GOOGLE_BOOKS_API_KEY is not set; Google Books requests may be throttled")
        _provider = GoogleBooksProvider(config.GOOGLE_BOOKS_API_KEY)
    return _provider
