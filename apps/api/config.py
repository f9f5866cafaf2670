"""Service config from environment."""

import os

DEFAULT_DATABASE_URL = "sqlite:///./data/book_descriptions.db"
DEFAULT_GOOGLE_BOOKS_API_URL = "https://www.googleapis.com/books/v1/volumes"

CLEANUP_TRIGGER_REQUEST = "request"
CLEANUP_TRIGGER_EXTERNAL = "external"


def _int(val: str | None, default: int) -> int:
    if val is None or val.strip() == "":
        return default
    try:
        return int(val.strip())
    except ValueError:
        return default


def _float(val: str | None, default: float) -> float:
    if val is None or val.strip() == "":
        return default
    try:
        return float(val.strip())
    except ValueError:
        return default


def _choice(val: str | None, choices: tuple[str, ...], default: str) -> str:
    if val is None:
        return default
    v = val.strip().lower()
    return v if v in choices else default


class Config:
    """Service configuration from env vars. Read once per instance, not at import."""

    def __init__(self) -> None:
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
        self.DESCRIPTION_RETENTION_DAYS: int = _int(os.getenv("DESCRIPTION_RETENTION_DAYS"), 30)
        self.CLEANUP_PROBABILITY: int = _int(os.getenv("CLEANUP_PROBABILITY"), 5)
        self.CLEANUP_TRIGGER: str = _choice(
            os.getenv("CLEANUP_TRIGGER"),
            (CLEANUP_TRIGGER_REQUEST, CLEANUP_TRIGGER_EXTERNAL),
            CLEANUP_TRIGGER_REQUEST,
        )
        self.GOOGLE_BOOKS_API_KEY: str = os.getenv("GOOGLE_BOOKS_API_KEY", "")
        self.GOOGLE_BOOKS_API_URL: str = os.getenv("GOOGLE_BOOKS_API_URL", DEFAULT_GOOGLE_BOOKS_API_URL)
        self.GOOGLE_BOOKS_TIMEOUT: float = _float(os.getenv("GOOGLE_BOOKS_TIMEOUT"), 10.0)


config = Config()


def get_config() -> Config:
    """FastAPI dependency: return the process config. Tests override via dependency_overrides."""
    return config
