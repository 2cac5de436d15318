from typing import Annotated, Any

from fastapi import FastAPI, HTTPException, Path, Query, status
from fastapi.middleware.cors import CORSMiddleware

from closet_core.api.dependencies import CacheHandlerDep, HistoryHandlerDep, StoreDep, lifespan
from closet_core.config import settings
from closet_core.dto import (
    CacheLatestResponse,
    CacheSaveResponse,
    CacheStatsResponse,
    HealthCheckResponse,
    HistoryRecordItem,
    HistoryWindowResponse,
    RecordOutfitRequest,
    RepeatCheckRequest,
    RepeatCheckResponse,
    SaveCacheRequest,
)
from closet_core.protocols import KeyValueStore

NAMESPACE_PATTERN = r"^[A-Za-z0-9_.:-]{1,64}$"

NamespacePath = Annotated[str, Path(description="Cache namespace", pattern=NAMESPACE_PATTERN)]


def create_app(store: KeyValueStore | None = None) -> FastAPI:
    """Build the API application.

    Args:
        store: Storage backend to use. If None, built from settings at startup.

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Closet Core API",
        description="Suggestion response cache and outfit repeat detection",
        version="0.1.0",
        lifespan=lifespan,
    )
    if store is not None:
        app.state.store = store

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Closet Core API",
            "version": "0.1.0",
            "description": "Suggestion response cache and outfit repeat detection",
            "endpoints": {
                "cache": "/cache/{namespace}",
                "history": "/history",
                "repeat_check": "/outfits/repeat-check",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(store: StoreDep) -> HealthCheckResponse:
        """Health check endpoint."""
        if not store.health_check():
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Storage backend is not reachable",
            )
        return HealthCheckResponse(status="healthy", storage_healthy=True)

    @app.get("/cache/{namespace}", response_model=CacheLatestResponse)
    async def get_latest(
        handler: CacheHandlerDep,
        namespace: NamespacePath,
        fresh_minutes: float | None = Query(None, gt=0, description="Freshness threshold override"),
    ) -> CacheLatestResponse:
        """Get the newest cached suggestions for a namespace."""
        return await handler.get_latest(namespace, fresh_minutes)

    @app.post("/cache/{namespace}", response_model=CacheSaveResponse)
    async def save_cache(
        request: SaveCacheRequest,
        handler: CacheHandlerDep,
        namespace: NamespacePath,
    ) -> CacheSaveResponse:
        """Save a suggestion result as the newest cache entry."""
        return await handler.save(namespace, request)

    @app.delete("/cache/{namespace}", response_model=dict[str, Any])
    async def clear_cache(handler: CacheHandlerDep, namespace: NamespacePath) -> dict[str, Any]:
        """Clear all entries of a namespace."""
        return await handler.clear(namespace)

    @app.get("/cache/{namespace}/stats", response_model=CacheStatsResponse)
    async def cache_stats(handler: CacheHandlerDep, namespace: NamespacePath) -> CacheStatsResponse:
        """Get cache statistics for a namespace."""
        return await handler.get_stats(namespace)

    @app.post("/history", response_model=HistoryRecordItem, status_code=status.HTTP_201_CREATED)
    async def record_outfit(request: RecordOutfitRequest, handler: HistoryHandlerDep) -> HistoryRecordItem:
        """Record an outfit the user wore or planned."""
        return await handler.record_outfit(request)

    @app.get("/history", response_model=HistoryWindowResponse)
    async def get_history(
        handler: HistoryHandlerDep,
        days: int | None = Query(None, ge=1, le=365, description="Window length in days"),
    ) -> HistoryWindowResponse:
        """Get the outfit history within the rolling window."""
        return await handler.get_window(days)

    @app.post("/outfits/repeat-check", response_model=RepeatCheckResponse)
    async def repeat_check(request: RepeatCheckRequest, handler: HistoryHandlerDep) -> RepeatCheckResponse:
        """Check a proposed outfit against past outfits."""
        return await handler.check_repeats(request)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    from closet_core.logging_config import configure_logging

    configure_logging()
    uvicorn.run(
        "closet_core.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
