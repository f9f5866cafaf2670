"""Cron package: scheduled maintenance for the description cache."""

from apps.api.config import config
from cron.logging import get_logger

__all__ = ["config", "get_logger"]
