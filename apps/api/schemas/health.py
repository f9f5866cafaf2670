"""Health check response schemas."""

from pydantic import BaseModel, ConfigDict


class HealthResponse(BaseModel):
    """Health check response. database is False when the cache DB cannot be reached."""

    model_config = ConfigDict(extra="forbid")

    ok: bool
    database: bool
    version: str
    time: str
