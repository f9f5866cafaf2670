"""Manual cleanup endpoint: GET /cleanup. Runs the retention sweep synchronously."""

from typing import Annotated

from fastapi import APIRouter, Depends

from apps.api.config import Config, get_config
from apps.api.schemas.describe import CleanupResponse
from apps.api.services.repo import DescriptionCache, get_description_cache
from apps.api.services.retention import sweep

router = APIRouter()


@router.get("/cleanup", response_model=CleanupResponse)
def cleanup(
    cache: Annotated[DescriptionCache, Depends(get_description_cache)],
    cfg: Annotated[Config, Depends(get_config)],
) -> CleanupResponse:
    """Delete records older than DESCRIPTION_RETENTION_DAYS; report how many."""
    deleted = sweep(cache, cfg.DESCRIPTION_RETENTION_DAYS)
    return CleanupResponse(message="Cleanup completed", deleted_count=deleted)
