"""HTTP handlers for response cache operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

from collections.abc import Callable

from fastapi import HTTPException, status

from closet_core.dto import (
    CacheEntryItem,
    CacheLatestResponse,
    CacheSaveResponse,
    CacheStatsResponse,
    SaveCacheRequest,
)
from closet_core.entities import CacheEntryEntity
from closet_core.services import ResponseCache, SaveOutcome

_SAVE_MESSAGES = {
    SaveOutcome.SAVED: "Entry stored successfully",
    SaveOutcome.CLEARED_ON_QUOTA: "Storage quota exceeded, cache cleared",
    SaveOutcome.FAILED: "Storage rejected the write, cache unchanged",
}


def _entry_item(entry: CacheEntryEntity) -> CacheEntryItem:
    return CacheEntryItem(
        timestamp=entry.timestamp,
        context_key=entry.context_key,
        payload=list(entry.payload),
    )


class CacheHandler:
    """HTTP handlers for response cache operations.

    Every call builds and loads a fresh ResponseCache for the namespace, so
    expired entries are purged and writes from other workers are seen.

    Example:
        ```python
        store = InMemoryKeyValueRepository()
        handler = CacheHandler(cache_factory=lambda ns: ResponseCache.create(store, namespace=ns))

        @app.get("/cache/{namespace}", response_model=CacheLatestResponse)
        async def latest(namespace: str):
            return await handler.get_latest(namespace)
        ```
    """

    def __init__(self, cache_factory: Callable[[str], ResponseCache]) -> None:
        """Initialize the cache handler.

        Args:
            cache_factory: Builds the ResponseCache for a namespace (required).
        """
        self._factory = cache_factory

    def cache_for(self, namespace: str) -> ResponseCache:
        """Build and load the cache for a namespace."""
        cache = self._factory(namespace)
        cache.load()
        return cache

    async def get_latest(self, namespace: str, fresh_minutes: float | None = None) -> CacheLatestResponse:
        """Handle GET /cache/{namespace} requests.

        Args:
            namespace: Cache namespace
            fresh_minutes: Override the freshness threshold

        Returns:
            CacheLatestResponse with the newest entry and its freshness
        """
        cache = self.cache_for(namespace)
        latest = cache.latest()

        return CacheLatestResponse(
            namespace=namespace,
            has_cache=latest is not None,
            is_fresh=cache.is_fresh(fresh_minutes),
            age_minutes=cache.age_minutes(),
            entry=_entry_item(latest) if latest else None,
        )

    async def save(self, namespace: str, request: SaveCacheRequest) -> CacheSaveResponse:
        """Handle POST /cache/{namespace} requests.

        Raises:
            HTTPException: 400 if the payload cannot be serialized
        """
        cache = self.cache_for(namespace)

        try:
            outcome = cache.save(request.context_key, request.payload)
        except TypeError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Payload cannot be cached: {e}",
            ) from e

        return CacheSaveResponse(
            namespace=namespace,
            outcome=outcome.value,
            total_entries=len(cache),
            message=_SAVE_MESSAGES[outcome],
        )

    async def clear(self, namespace: str) -> dict:
        """Handle DELETE /cache/{namespace} requests."""
        self.cache_for(namespace).clear()

        return {
            "success": True,
            "namespace": namespace,
            "message": "Cache cleared successfully",
        }

    async def get_stats(self, namespace: str) -> CacheStatsResponse:
        """Handle GET /cache/{namespace}/stats requests."""
        return CacheStatsResponse(**self.cache_for(namespace).get_stats())
