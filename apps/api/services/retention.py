"""
Retention sweep for the description cache.

Records whose created_at is older than now - retention_days are deleted. There is no
scheduler in the request path: cleanup_middleware draws once per request, before routing,
and with CLEANUP_PROBABILITY percent chance runs a sweep after the response is sent,
whatever the status code. With CLEANUP_TRIGGER=external, requests never sweep and
cron/cleanup_descriptions.py is expected to run on a timer instead.
"""

import logging
import random
from datetime import datetime, timedelta
from typing import Any, Callable, Protocol, runtime_checkable

from fastapi import Request
from starlette.background import BackgroundTask

from apps.api.config import CLEANUP_TRIGGER_EXTERNAL, Config, get_config
from apps.api.models.book_description import utcnow
from apps.api.services.repo import DescriptionCache, get_description_cache

logger = logging.getLogger(__name__)


def sweep(cache: DescriptionCache, retention_days: int, now: datetime | None = None) -> int:
    """Delete records strictly older than now - retention_days. Returns deleted count."""
    cutoff = (now or utcnow()) - timedelta(days=retention_days)
    deleted = cache.delete_older_than(cutoff)
    logger.info("Cleaned up %d old descriptions (cutoff=%s)", deleted, cutoff.isoformat())
    return deleted


def should_run_cleanup(probability: float, rand: Callable[[], float] = random.random) -> bool:
    """Draw uniformly in [0, 100); True if below probability (percent)."""
    return rand() * 100 < probability


def run_sweep_in_background(cache: DescriptionCache, retention_days: int) -> None:
    """Background entry point. Errors are logged and dropped; never retried."""
    try:
        sweep(cache, retention_days)
    except Exception:
        logger.exception("Cleanup error")


@runtime_checkable
class CleanupTrigger(Protocol):
    """Decides, per request, whether a sweep is due."""

    def draw(self, cache: DescriptionCache) -> BackgroundTask | None:
        """Return the sweep to run after the response, or None."""
        ...


class ProbabilisticCleanupTrigger:
    """Per-request random trigger. Sweep frequency follows request volume."""

    def __init__(
        self,
        probability: float,
        retention_days: int,
        rand: Callable[[], float] = random.random,
    ) -> None:
        self._probability = probability
        self._retention_days = retention_days
        self._rand = rand

    def draw(self, cache: DescriptionCache) -> BackgroundTask | None:
        if not should_run_cleanup(self._probability, self._rand):
            return None
        logger.info("Triggering cleanup of old descriptions")
        return BackgroundTask(run_sweep_in_background, cache, self._retention_days)


class ExternalCleanupTrigger:
    """Requests never sweep; an external scheduler runs the cron job."""

    def draw(self, cache: DescriptionCache) -> BackgroundTask | None:
        return None


def get_cleanup_trigger(cfg: Config) -> CleanupTrigger:
    """Trigger policy from CLEANUP_TRIGGER."""
    if cfg.CLEANUP_TRIGGER == CLEANUP_TRIGGER_EXTERNAL:
        return ExternalCleanupTrigger()
    return ProbabilisticCleanupTrigger(cfg.CLEANUP_PROBABILITY, cfg.DESCRIPTION_RETENTION_DAYS)


def _provide(request: Request, dependency: Callable[[], Any]) -> Any:
    """Call a no-argument dependency, honoring app.dependency_overrides."""
    return request.app.dependency_overrides.get(dependency, dependency)()


async def cleanup_middleware(request: Request, call_next):
    """Draw before routing; attach a drawn sweep to whatever response comes back.
    Errors that escape to the server error handler run the sweep before re-raising."""
    trigger = get_cleanup_trigger(_provide(request, get_config))
    task = trigger.draw(_provide(request, get_description_cache))
    if task is None:
        return await call_next(request)

    try:
        response = await call_next(request)
    except Exception:
        await task()
        raise
    response.background = task
    return response
