"""
Tests for the HTTP handlers against a shared store.
"""

import asyncio

from closet_core.dto import SaveCacheRequest
from closet_core.handlers import CacheHandler, HistoryHandler
from closet_core.services import OutfitHistoryService, ResponseCache

from .conftest import outfit

NAMESPACE = "weatherPicksCache"


def make_cache_handler(store, clock) -> CacheHandler:
    return CacheHandler(cache_factory=lambda ns: ResponseCache.create(store=store, namespace=ns, clock=clock))


def test_expired_entries_are_not_served(store, clock):
    """Test that a long-lived handler purges entries once they pass 24 hours."""
    handler = make_cache_handler(store, clock)
    asyncio.run(handler.save(NAMESPACE, SaveCacheRequest(payload=["look"])))

    assert asyncio.run(handler.get_latest(NAMESPACE)).has_cache is True

    clock.advance(hours=30)
    response = asyncio.run(handler.get_latest(NAMESPACE))

    assert response.has_cache is False
    assert response.entry is None
    assert store.get(ResponseCache.create(store=store, namespace=NAMESPACE).storage_key) is None


def test_cache_sees_other_writers(store, clock):
    """Test that a handler reads saves made by another handler on the same store."""
    reader = make_cache_handler(store, clock)
    writer = make_cache_handler(store, clock)

    assert asyncio.run(reader.get_latest(NAMESPACE)).has_cache is False

    asyncio.run(writer.save(NAMESPACE, SaveCacheRequest(payload=["look"])))

    response = asyncio.run(reader.get_latest(NAMESPACE))
    assert response.has_cache is True
    assert response.entry.payload == ["look"]


def test_history_window_sees_other_writers(store, clock):
    """Test that the history handler re-reads records written by another service."""
    handler = HistoryHandler(history_service=make_loaded_history(store, clock))
    other = make_loaded_history(store, clock)

    other.record(outfit("top1", "bottom1"))

    response = asyncio.run(handler.get_window())
    assert len(response.records) == 1


def make_loaded_history(store, clock) -> OutfitHistoryService:
    history = OutfitHistoryService.create(store=store, clock=clock)
    history.load()
    return history
