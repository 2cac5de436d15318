"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from closet_core.handlers import CacheHandler, HistoryHandler
from closet_core.protocols import KeyValueStore
from closet_core.repositories import create_key_value_store
from closet_core.services import OutfitHistoryService, ResponseCache

logger = logging.getLogger(__name__)


def get_store(request: Request) -> KeyValueStore:
    """Dependency injection for the KeyValueStore from app.state.

    Raises:
        RuntimeError: If the store is not initialized
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("KeyValueStore not initialized. Check lifespan setup.")
    return store


def get_cache_handler(request: Request) -> CacheHandler:
    """Dependency injection for CacheHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "cache_handler", None)
    if handler is None:
        raise RuntimeError("CacheHandler not initialized. Check lifespan setup.")
    return handler


def get_history_handler(request: Request) -> HistoryHandler:
    """Dependency injection for HistoryHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "history_handler", None)
    if handler is None:
        raise RuntimeError("HistoryHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Store (data access) - taken from app.state.store if preset, else from settings
    2. Services (business logic) - one ResponseCache per namespace, one history service
    3. Handlers (HTTP endpoints) - app.state.cache_handler, app.state.history_handler

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Cleanup:
        Removes all services from app.state on shutdown
    """
    store: KeyValueStore = getattr(app.state, "store", None) or create_key_value_store()

    history_service = OutfitHistoryService.create(store=store)
    history_service.load()

    app.state.store = store
    app.state.history_service = history_service
    app.state.cache_handler = CacheHandler(
        cache_factory=lambda namespace: ResponseCache.create(store=store, namespace=namespace),
    )
    app.state.history_handler = HistoryHandler(history_service=history_service)

    logger.info("Closet core initialized (storage healthy: %s)", store.health_check())

    yield

    # Cleanup - remove from app.state
    del app.state.cache_handler
    del app.state.history_handler
    del app.state.history_service
    del app.state.store
    logger.info("Closet core shut down")


# Type aliases for cleaner dependency injection
StoreDep = Annotated[KeyValueStore, Depends(get_store)]
CacheHandlerDep = Annotated[CacheHandler, Depends(get_cache_handler)]
HistoryHandlerDep = Annotated[HistoryHandler, Depends(get_history_handler)]
