"""Response schemas for the description and cleanup endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class DescriptionResponse(BaseModel):
    """GET / response. source is 'cache' or the provider name ('google')."""

    model_config = ConfigDict(extra="forbid")

    description: str
    source: str


class CleanupResponse(BaseModel):
    """GET /cleanup response. Serialized as {message, deletedCount}."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    message: str
    deleted_count: int = Field(..., alias="deletedCount")


class ErrorResponse(BaseModel):
    """500 envelope for unhandled failures."""

    model_config = ConfigDict(extra="forbid")

    error: str
    details: str
