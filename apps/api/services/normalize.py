"""Lookup key normalization. Trim only; case-insensitivity lives in the store's comparison."""


class MissingLookupKeyError(ValueError):
    """Raised when book_title or author_name is missing or blank."""

    pass


def normalize_key(value: str | None) -> str:
    """Strip surrounding whitespace. None becomes ''. Case is preserved."""
    if value is None:
        return ""
    return str(value).strip()


def require_lookup_key(book_title: str | None, author_name: str | None) -> tuple[str, str]:
    """
    Normalize both parts of the cache key; return (book_title, author_name).
    Raises MissingLookupKeyError if either is empty after trimming.
    """
    title = normalize_key(book_title)
    author = normalize_key(author_name)
    if not title or not author:
        raise MissingLookupKeyError("Missing book_title or author_name parameters")
    return title, author
