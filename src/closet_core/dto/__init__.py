"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import (
    EventContextModel,
    HistoryRecordModel,
    OutfitItemModel,
    RecordOutfitRequest,
    RepeatCheckRequest,
    SaveCacheRequest,
)
from .responses import (
    CacheEntryItem,
    CacheLatestResponse,
    CacheSaveResponse,
    CacheStatsResponse,
    HealthCheckResponse,
    HistoryRecordItem,
    HistoryWindowResponse,
    RepeatCheckResponse,
    RepeatWarningItem,
)

__all__ = [
    "SaveCacheRequest",
    "OutfitItemModel",
    "EventContextModel",
    "HistoryRecordModel",
    "RecordOutfitRequest",
    "RepeatCheckRequest",
    "CacheEntryItem",
    "CacheLatestResponse",
    "CacheSaveResponse",
    "CacheStatsResponse",
    "HistoryRecordItem",
    "HistoryWindowResponse",
    "RepeatWarningItem",
    "RepeatCheckResponse",
    "HealthCheckResponse",
]
