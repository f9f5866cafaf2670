"""Tests for lookup key normalization."""

import pytest

from apps.api.services.normalize import MissingLookupKeyError, normalize_key, require_lookup_key


def test_normalize_key_trims_and_preserves_case() -> None:
    """Surrounding whitespace removed; case untouched."""
    assert normalize_key("  Dune \t") == "Dune"
    assert normalize_key("FRANK Herbert") == "FRANK Herbert"


def test_normalize_key_none_is_empty() -> None:
    assert normalize_key(None) == ""


def test_require_lookup_key_returns_trimmed_pair() -> None:
    assert require_lookup_key(" Dune ", " Frank Herbert") == ("Dune", "Frank Herbert")


@pytest.mark.parametrize(
    "title,author",
    [(None, "Frank Herbert"), ("Dune", None), ("", "Frank Herbert"), ("Dune", "   "), (None, None)],
)
def test_require_lookup_key_rejects_missing_or_blank(title, author) -> None:
    """Either part missing or blank after trimming -> MissingLookupKeyError (a ValueError)."""
    with pytest.raises(MissingLookupKeyError, match="Missing book_title or author_name"):
        require_lookup_key(title, author)
    assert issubclass(MissingLookupKeyError, ValueError)
