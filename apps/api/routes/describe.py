"""Description lookup endpoint: GET /?book_title=...&author_name=...

Missing or blank parameters -> 400 plain text (handled in main).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response

from apps.api.schemas.describe import DescriptionResponse
from apps.api.services.google_books import BookProvider, get_book_provider
from apps.api.services.lookup import resolve_description
from apps.api.services.repo import DescriptionCache, get_description_cache

router = APIRouter()

IMMUTABLE_CACHE_CONTROL = "public, max-age=31536000, immutable"


@router.get("/", response_model=DescriptionResponse)
def describe(
    response: Response,
    cache: Annotated[DescriptionCache, Depends(get_description_cache)],
    provider: Annotated[BookProvider, Depends(get_book_provider)],
    book_title: str | None = Query(None, description="Book title"),
    author_name: str | None = Query(None, description="Author name"),
) -> DescriptionResponse:
    """Return a description from cache, or from the provider (then cached).
    A provider miss is cached as 'No description available' and returned with 200."""
    result = resolve_description(book_title, author_name, cache, provider)
    if result.found:
        response.headers["Cache-Control"] = IMMUTABLE_CACHE_CONTROL
    return DescriptionResponse(description=result.description, source=result.source)
