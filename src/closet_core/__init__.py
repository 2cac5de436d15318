"""Closet Core - suggestion response cache and outfit repeat detection.

This package provides a layered architecture for the data core of an
outfit-planning app:

Layers:
    - protocols: Interface contracts (KeyValueStore)
    - repositories: Storage implementations (Redis, JSON files, memory)
    - services: Business logic (ResponseCache, OutfitHistoryService, similarity)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from closet_core.repositories import FileKeyValueRepository
    from closet_core.services import ResponseCache

    cache = ResponseCache.create(store=FileKeyValueRepository.create(), namespace="weatherPicksCache")
    cache.load()
    if not cache.is_fresh(60):
        cache.save({"weather": weather}, suggestions)
    ```

For HTTP API:
    ```python
    from closet_core.api.app import app
    ```
"""

from closet_core.config import get_redis_client, settings
from closet_core.entities import (
    CacheEntryEntity,
    EventContext,
    HistoryRecord,
    OutfitItem,
    RepeatWarning,
    WarningLevel,
)
from closet_core.protocols import KeyValueStore, StorageError, StorageQuotaExceededError
from closet_core.repositories import (
    FileKeyValueRepository,
    InMemoryKeyValueRepository,
    RedisKeyValueRepository,
    create_key_value_store,
)
from closet_core.services import (
    OutfitHistoryService,
    OutfitSimilarityChecker,
    ResponseCache,
    SaveOutcome,
    check_repeat_warnings,
    jaccard_similarity,
)

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "KeyValueStore",
    "StorageError",
    "StorageQuotaExceededError",
    # Services (business logic)
    "ResponseCache",
    "SaveOutcome",
    "OutfitHistoryService",
    "OutfitSimilarityChecker",
    "check_repeat_warnings",
    "jaccard_similarity",
    # Repositories (data access)
    "RedisKeyValueRepository",
    "FileKeyValueRepository",
    "InMemoryKeyValueRepository",
    "create_key_value_store",
    # Entities (domain models)
    "CacheEntryEntity",
    "OutfitItem",
    "HistoryRecord",
    "EventContext",
    "RepeatWarning",
    "WarningLevel",
]
