"""Tests for cache status aggregation."""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from apps.api.config import Config
from apps.api.models.book_description import NO_DESCRIPTION
from apps.api.services.status import bytes_to_mb, compute_status, round_half_up

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def _cfg(retention_days: int = 30, probability: int = 5) -> Config:
    cfg = Config()
    cfg.DESCRIPTION_RETENTION_DAYS = retention_days
    cfg.CLEANUP_PROBABILITY = probability
    return cfg


def test_status_on_empty_store(cache) -> None:
    """Zeros everywhere, null timestamps, all four age buckets present."""
    report = compute_status(cache, _cfg(), now=NOW)
    assert report.database.total_entries == 0
    assert report.database.storage.total_mb == 0.0
    assert report.database.timestamps.oldest_entry is None
    assert report.database.timestamps.newest_entry is None
    assert report.entries.total == 0
    assert report.entries.no_description_count == 0
    assert report.entries.average_description_length == 0
    assert report.age_distribution.model_dump() == {"last_24h": 0, "last_7d": 0, "last_30d": 0, "older": 0}
    assert report.cleanup_estimation.entries_older_than_retention == 0


def test_age_buckets_use_fractional_days_and_sum_to_total(cache, insert_row) -> None:
    """Buckets are disjoint and exhaustive; 0.9 days is < 1 day, exactly 1 day is not."""
    ages = [0.0, 0.9, 1.0, 1.5, 6.9, 7.0, 29.9, 30.0, 45.0]
    for i, age in enumerate(ages):
        insert_row(f"Book {i}", "Author", age_days=age, now=NOW)

    report = compute_status(cache, _cfg(), now=NOW)
    buckets = report.age_distribution
    assert buckets.last_24h == 2
    assert buckets.last_7d == 3
    assert buckets.last_30d == 2
    assert buckets.older == 2
    assert buckets.last_24h + buckets.last_7d + buckets.last_30d + buckets.older == report.entries.total
    assert report.cleanup_estimation.entries_older_than_retention == 2


def test_timestamps_report_oldest_and_newest(cache, insert_row) -> None:
    oldest = insert_row("Old", "A", age_days=12, now=NOW)
    insert_row("Mid", "B", age_days=3, now=NOW)
    newest = insert_row("New", "C", age_days=0.25, now=NOW)

    report = compute_status(cache, _cfg(), now=NOW)
    assert report.database.timestamps.oldest_entry == oldest.isoformat()
    assert report.database.timestamps.newest_entry == newest.isoformat()


def test_negative_results_and_average_length(cache, insert_row) -> None:
    """Sentinel rows are counted separately and excluded from the average (5.5 rounds to 6)."""
    insert_row("A", "X", description="abcd")
    insert_row("B", "X", description="abcdefg")
    insert_row("C", "X", description=NO_DESCRIPTION)

    report = compute_status(cache, _cfg(), now=NOW)
    assert report.entries.total == 3
    assert report.entries.no_description_count == 1
    assert report.entries.average_description_length == 6


def test_storage_usage_sums_lengths(cache, insert_row) -> None:
    insert_row("Dune", "Frank Herbert", description="x" * 100)
    insert_row("Emma", "Jane Austen", description="y" * 50)

    usage = cache.storage_usage()
    assert usage.total_entries == 2
    assert usage.description_bytes == 150
    assert usage.title_bytes == 8
    assert usage.author_bytes == 24
    assert usage.total_bytes == 182


def test_configuration_is_echoed(cache) -> None:
    report = compute_status(cache, _cfg(retention_days=14, probability=20), now=NOW)
    assert report.configuration.retention_days == 14
    assert report.configuration.cleanup_probability == 20


def test_any_failing_aggregate_fails_the_whole_report(cache) -> None:
    """Fail-fast: no partial report."""
    err = OperationalError("SELECT", {}, Exception("disk I/O error"))
    with patch.object(cache, "count_no_description", side_effect=err):
        with pytest.raises(OperationalError):
            compute_status(cache, _cfg(), now=NOW)


def test_bytes_to_mb_two_decimals() -> None:
    assert bytes_to_mb(0) == 0.0
    assert bytes_to_mb(1024 * 1024) == 1.0
    assert bytes_to_mb(1024 * 1024 * 3 // 2) == 1.5
    assert bytes_to_mb(12345) == 0.01


def test_round_half_up() -> None:
    assert round_half_up(None) == 0
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(4.49) == 4
