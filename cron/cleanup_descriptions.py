#!/usr/bin/env python3
"""Retention sweep on a timer.

Deletes cached descriptions older than DESCRIPTION_RETENTION_DAYS. Meant for deployments
that run an external scheduler (set CLEANUP_TRIGGER=external so requests do not sweep).

Usage: python cron/cleanup_descriptions.py [--retention-days N]
"""

import argparse
import sys
from pathlib import Path

# Project root on path for apps.api imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from apps.api.config import config
from cron.logging import get_logger

logger = get_logger("cleanup_descriptions")


def main(argv: list[str] | None = None) -> int:
    from apps.api.db import ensure_tables
    from apps.api.services.repo import get_description_cache
    from apps.api.services.retention import sweep

    parser = argparse.ArgumentParser(description="Delete cached descriptions past the retention horizon.")
    parser.add_argument(
        "--retention-days",
        type=int,
        default=config.DESCRIPTION_RETENTION_DAYS,
        help="Retention horizon in days (default: DESCRIPTION_RETENTION_DAYS)",
    )
    args = parser.parse_args(argv)

    if args.retention_days < 0:
        logger.error("retention_days must be >= 0, got %s", args.retention_days)
        return 2

    logger.info("cleanup_descriptions start retention_days=%s", args.retention_days)
    ensure_tables()
    try:
        deleted = sweep(get_description_cache(), args.retention_days)
    except Exception:
        logger.exception("cleanup_descriptions failed")
        return 1
    logger.info("cleanup_descriptions done deleted=%s", deleted)
    return 0


if __name__ == "__main__":
    sys.exit(main())
