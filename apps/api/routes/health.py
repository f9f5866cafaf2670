"""Health check endpoint. Reports liveness and whether the cache DB answers."""

import logging
import os
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from apps.api.schemas.health import HealthResponse
from apps.api.services.repo import DescriptionCache, get_description_cache

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health(cache: Annotated[DescriptionCache, Depends(get_description_cache)]) -> HealthResponse:
    """Returns ok, database reachability, version (GIT_SHA or dev), and current time (ISO)."""
    version = os.getenv("GIT_SHA", "dev").strip() or "dev"
    try:
        database = cache.ping()
    except SQLAlchemyError as e:
        logger.warning("Health check: database unreachable: %s", e)
        database = False
    return HealthResponse(
        ok=database,
        database=database,
        version=version,
        time=datetime.now(timezone.utc).isoformat(),
    )
