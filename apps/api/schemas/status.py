"""Cache status report schemas (GET /status)."""

from pydantic import BaseModel, ConfigDict


class StorageMB(BaseModel):
    """Summed text lengths converted to MB, two decimals."""

    model_config = ConfigDict(extra="forbid")

    descriptions_mb: float
    titles_mb: float
    authors_mb: float
    total_mb: float


class Timestamps(BaseModel):
    model_config = ConfigDict(extra="forbid")

    oldest_entry: str | None = None
    newest_entry: str | None = None


class DatabaseStatus(BaseModel):
    model_config = ConfigDict(extra="forbid")

    total_entries: int
    storage: StorageMB
    timestamps: Timestamps


class EntriesStatus(BaseModel):
    model_config = ConfigDict(extra="forbid")

    total: int
    no_description_count: int
    average_description_length: int


class AgeDistribution(BaseModel):
    """Disjoint buckets by fractional-day age; counts sum to the total."""

    model_config = ConfigDict(extra="forbid")

    last_24h: int = 0
    last_7d: int = 0
    last_30d: int = 0
    older: int = 0


class ConfigurationStatus(BaseModel):
    model_config = ConfigDict(extra="forbid")

    retention_days: int
    cleanup_probability: int


class CleanupEstimation(BaseModel):
    model_config = ConfigDict(extra="forbid")

    entries_older_than_retention: int


class StatusReport(BaseModel):
    """Read-only snapshot of cache health."""

    model_config = ConfigDict(extra="forbid")

    database: DatabaseStatus
    entries: EntriesStatus
    age_distribution: AgeDistribution
    configuration: ConfigurationStatus
    cleanup_estimation: CleanupEstimation
