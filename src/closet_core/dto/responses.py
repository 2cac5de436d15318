"""Response DTOs for API endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .requests import OutfitItemModel


class CacheEntryItem(BaseModel):
    """Single cached suggestion result."""

    timestamp: datetime = Field(..., description="When the entry was cached")
    context_key: Any = Field(None, description="Inputs that produced the result")
    payload: list[Any] = Field(default_factory=list, description="The cached suggestions")


class CacheLatestResponse(BaseModel):
    """Response DTO for reading the newest cache entry."""

    namespace: str = Field(..., description="Cache namespace")
    has_cache: bool = Field(..., description="Whether any entry survived")
    is_fresh: bool = Field(..., description="Whether the newest entry is under the freshness threshold")
    age_minutes: int | None = Field(None, description="Age of the newest entry in whole minutes")
    entry: CacheEntryItem | None = Field(None, description="The newest entry")


class CacheSaveResponse(BaseModel):
    """Response DTO for cache save operation."""

    namespace: str = Field(..., description="Cache namespace")
    outcome: str = Field(..., description="saved, cleared_on_quota or failed")
    total_entries: int = Field(..., description="Entries held after the save", ge=0)
    message: str = Field(..., description="Human-readable status message")


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    namespace: str
    storage_key: str
    total_entries: int = Field(..., ge=0)
    max_entries: int = Field(..., ge=1)
    max_age_seconds: int = Field(..., ge=0)
    age_minutes: int | None = None


class HistoryRecordItem(BaseModel):
    """Single outfit history record."""

    date: datetime
    items: list[OutfitItemModel]
    event_id: str | None = None
    event_type: str | None = None
    location: str | None = None
    rating: int | None = None


class HistoryWindowResponse(BaseModel):
    """Response DTO for reading the outfit history window."""

    days: int = Field(..., description="Window length in days", ge=1)
    records: list[HistoryRecordItem] = Field(default_factory=list)


class RepeatWarningItem(BaseModel):
    """Single repeat warning."""

    outfit: list[OutfitItemModel] = Field(..., description="Items of the matched past outfit")
    last_worn: datetime = Field(..., description="Date of the matched record")
    event_similarity: str = Field(..., description="How the contexts relate")
    level: str = Field(..., description="Severity: high, medium or low")
    similarity: float = Field(..., description="Jaccard similarity", ge=0.0, le=1.0)
    suggestion: str = Field(..., description="Which category to swap")


class RepeatCheckResponse(BaseModel):
    """Response DTO for a repeat check."""

    is_repeat: bool = Field(..., description="Whether any warning was raised")
    threshold: float = Field(..., description="Threshold used", ge=0.0, le=1.0)
    warnings: list[RepeatWarningItem] = Field(default_factory=list)


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    storage_healthy: bool = Field(..., description="Whether the storage backend is reachable")
