"""Request DTOs for API endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class SaveCacheRequest(BaseModel):
    """Request DTO for saving a suggestion result to a cache namespace."""

    context_key: Any = Field(
        None,
        description="Inputs that produced the result (weather snapshot, occasion, ...)",
    )
    payload: list[Any] = Field(..., description="The suggestion list to cache")


class OutfitItemModel(BaseModel):
    """A wardrobe item referenced by an outfit."""

    id: str = Field(..., description="Unique item identifier", min_length=1)
    category: str = Field(..., description="Garment class (top, bottom, shoes, ...)", min_length=1)
    name: str | None = Field(None, description="Optional display name")


class EventContextModel(BaseModel):
    """Occasion a proposed outfit is planned for."""

    event_id: str | None = Field(None, description="Calendar event id")
    event_type: str | None = Field(None, description="Event category (work, formal, ...)")
    location: str | None = Field(None, description="Event location")


class HistoryRecordModel(BaseModel):
    """A past outfit supplied inline with a repeat check."""

    date: datetime = Field(..., description="When the outfit was worn or planned")
    items: list[OutfitItemModel] = Field(default_factory=list)
    event_id: str | None = None
    event_type: str | None = None
    location: str | None = None
    rating: int | None = Field(None, ge=1, le=5)


class RecordOutfitRequest(BaseModel):
    """Request DTO for recording a worn or planned outfit."""

    items: list[OutfitItemModel] = Field(..., description="Items that made up the outfit", min_length=1)
    event_id: str | None = None
    event_type: str | None = None
    location: str | None = None
    rating: int | None = Field(None, description="User satisfaction 1-5", ge=1, le=5)


class RepeatCheckRequest(BaseModel):
    """Request DTO for checking a proposed outfit for repeats.

    When ``history`` is omitted the stored rolling window is used.
    """

    items: list[OutfitItemModel] = Field(..., description="Items of the proposed outfit")
    context: EventContextModel | None = Field(None, description="Occasion of the proposed outfit")
    history: list[HistoryRecordModel] | None = Field(
        None,
        description="Records to compare against (already windowed by the caller)",
    )
    threshold: float | None = Field(
        None,
        description="Override the repeat threshold (0-1, higher = more lenient)",
        ge=0.0,
        le=1.0,
    )
