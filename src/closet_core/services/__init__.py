"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from closet_core.repositories import InMemoryKeyValueRepository
    from closet_core.services import OutfitHistoryService, ResponseCache

    store = InMemoryKeyValueRepository()
    cache = ResponseCache.create(store=store, namespace="weatherPicksCache")
    history = OutfitHistoryService.create(store=store)
    ```
"""

from .history_service import OutfitHistoryService
from .response_cache import ResponseCache, SaveOutcome
from .similarity import (
    HIGH_SEVERITY_DAYS,
    MEDIUM_SEVERITY_DAYS,
    REPEAT_SIMILARITY_THRESHOLD,
    SWAP_PRIORITY,
    OutfitSimilarityChecker,
    check_repeat_warnings,
    jaccard_similarity,
)

__all__ = [
    "OutfitHistoryService",
    "ResponseCache",
    "SaveOutcome",
    "OutfitSimilarityChecker",
    "check_repeat_warnings",
    "jaccard_similarity",
    "REPEAT_SIMILARITY_THRESHOLD",
    "HIGH_SEVERITY_DAYS",
    "MEDIUM_SEVERITY_DAYS",
    "SWAP_PRIORITY",
]
