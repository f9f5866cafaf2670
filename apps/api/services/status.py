"""
Cache status aggregation for GET /status.

Six independent aggregate queries (count, storage, timestamp range, age buckets,
negative-result count, average length) assembled into one StatusReport.
Any failing query fails the whole report; there is no partial result.
"""

import math
from datetime import datetime

from apps.api.config import Config
from apps.api.models.book_description import utcnow
from apps.api.schemas.status import (
    AgeDistribution,
    CleanupEstimation,
    ConfigurationStatus,
    DatabaseStatus,
    EntriesStatus,
    StatusReport,
    StorageMB,
    Timestamps,
)
from apps.api.services.repo import DescriptionCache

BYTES_PER_MB = 1024 * 1024


def bytes_to_mb(n: int) -> float:
    """Bytes to MB, rounded to two decimals."""
    return round(n / BYTES_PER_MB, 2)


def round_half_up(value: float | None) -> int:
    """Round to nearest integer, .5 away from zero for positives. None -> 0."""
    if value is None:
        return 0
    return int(math.floor(value + 0.5))


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def compute_status(cache: DescriptionCache, cfg: Config, now: datetime | None = None) -> StatusReport:
    """Build the status report. Read-only."""
    now = now or utcnow()

    total = cache.count_total()
    usage = cache.storage_usage()
    oldest, newest = cache.timestamp_range()
    ages = cache.age_distribution(now)
    no_description = cache.count_no_description()
    avg_length = cache.average_description_length()

    return StatusReport(
        database=DatabaseStatus(
            total_entries=usage.total_entries,
            storage=StorageMB(
                descriptions_mb=bytes_to_mb(usage.description_bytes),
                titles_mb=bytes_to_mb(usage.title_bytes),
                authors_mb=bytes_to_mb(usage.author_bytes),
                total_mb=bytes_to_mb(usage.total_bytes),
            ),
            timestamps=Timestamps(oldest_entry=_iso(oldest), newest_entry=_iso(newest)),
        ),
        entries=EntriesStatus(
            total=total,
            no_description_count=no_description,
            average_description_length=round_half_up(avg_length),
        ),
        age_distribution=AgeDistribution(**ages),
        configuration=ConfigurationStatus(
            retention_days=cfg.DESCRIPTION_RETENTION_DAYS,
            cleanup_probability=cfg.CLEANUP_PROBABILITY,
        ),
        # Fixed 30-day "older" bucket, independent of the configured retention.
        cleanup_estimation=CleanupEstimation(entries_older_than_retention=ages["older"]),
    )
