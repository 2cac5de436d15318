"""
Tests for the suggestion response cache.
"""

import dataclasses
import json
from datetime import timedelta

import pytest

from closet_core.protocols import StorageError
from closet_core.repositories import InMemoryKeyValueRepository
from closet_core.services import ResponseCache, SaveOutcome

KEY = "weatherPicksCache"


def make_cache(store, clock, **kwargs) -> ResponseCache:
    cache = ResponseCache.create(store=store, namespace=KEY, clock=clock, **kwargs)
    cache.load()
    return cache


class FailingWriteStore(InMemoryKeyValueRepository):
    """Store whose writes always fail with a non-quota error."""

    def set(self, key: str, value: str) -> None:
        raise StorageError("disk unavailable")


class FailingReadStore(InMemoryKeyValueRepository):
    """Store whose reads always fail."""

    def get(self, key: str) -> str | None:
        raise StorageError("connection refused")


def test_empty_store_loads_empty(store, clock):
    """Test that a missing key means an empty cache."""
    cache = make_cache(store, clock)

    assert cache.entries == ()
    assert cache.latest() is None
    assert cache.age_minutes() is None
    assert cache.is_fresh(60) is False


def test_save_then_latest(store, clock):
    """Test that the newest save is returned by latest()."""
    cache = make_cache(store, clock)

    outcome = cache.save({"weather": "sunny", "occasion": "work"}, [{"name": "Look A"}])

    assert outcome is SaveOutcome.SAVED
    latest = cache.latest()
    assert latest is not None
    assert latest.payload == ({"name": "Look A"},)
    assert latest.context_key == {"weather": "sunny", "occasion": "work"}
    assert latest.timestamp == clock.now


def test_eviction_keeps_newest_in_insertion_order(store, clock):
    """Test that saving 7 payloads with a limit of 5 keeps P7..P3."""
    cache = make_cache(store, clock, max_entries=5)

    for i in range(1, 8):
        cache.save({"n": i}, [f"P{i}"])
        clock.advance(minutes=1)

    assert [entry.payload[0] for entry in cache.entries] == ["P7", "P6", "P5", "P4", "P3"]

    reloaded = make_cache(store, clock, max_entries=5)
    assert [entry.payload[0] for entry in reloaded.entries] == ["P7", "P6", "P5", "P4", "P3"]


def test_load_purges_entries_older_than_max_age(store, clock):
    """Test that a 25h old entry is dropped while a 23h old one survives."""
    cache = make_cache(store, clock, max_age=timedelta(hours=24))
    cache.save(None, ["old"])
    clock.advance(hours=2)
    cache.save(None, ["recent"])
    clock.advance(hours=23)

    reloaded = make_cache(store, clock, max_age=timedelta(hours=24))

    assert [entry.payload[0] for entry in reloaded.entries] == ["recent"]


def test_load_does_not_rewrite_after_partial_purge(store, clock):
    """Test that load() leaves the stored value untouched when some entries survive."""
    cache = make_cache(store, clock)
    cache.save(None, ["old"])
    clock.advance(hours=2)
    cache.save(None, ["recent"])
    before = store.get(KEY)
    clock.advance(hours=23)

    make_cache(store, clock)

    assert store.get(KEY) == before


def test_entry_exactly_max_age_is_expired(store, clock):
    """Test that an entry whose age equals max_age is purged."""
    cache = make_cache(store, clock, max_age=timedelta(hours=24))
    cache.save(None, ["edge"])
    clock.advance(hours=24)

    assert make_cache(store, clock, max_age=timedelta(hours=24)).entries == ()


def test_full_purge_deletes_key(store, clock):
    """Test that the key is deleted, not left as an empty list, when everything expires."""
    cache = make_cache(store, clock)
    cache.save(None, ["a"])
    cache.save(None, ["b"])
    clock.advance(hours=30)

    reloaded = make_cache(store, clock)

    assert reloaded.entries == ()
    assert store.get(KEY) is None


def test_is_fresh_threshold(store, clock):
    """Test freshness for an entry 45 minutes old."""
    cache = make_cache(store, clock)
    cache.save(None, ["look"])
    clock.advance(minutes=45)

    assert cache.is_fresh(60) is True
    assert cache.is_fresh(30) is False
    assert cache.age_minutes() == 45


def test_age_minutes_rounds_down(store, clock):
    """Test that age is reported in whole minutes."""
    cache = make_cache(store, clock)
    cache.save(None, ["look"])
    clock.advance(minutes=12, seconds=59)

    assert cache.age_minutes() == 12


def test_corrupt_json_is_discarded(store, clock):
    """Test that unparsable data yields an empty cache and deletes the key."""
    store.set(KEY, "{not json")

    cache = make_cache(store, clock)

    assert cache.entries == ()
    assert store.get(KEY) is None


@pytest.mark.parametrize(
    "raw",
    [
        json.dumps([1, 2, 3]),
        json.dumps({"entries": "nope"}),
        json.dumps({"entries": [{"payload": []}]}),
        json.dumps({"entries": [{"timestamp": "yesterday", "payload": []}]}),
        json.dumps({"entries": [{"timestamp": "2026-10-19T07:00:00Z", "payload": "x"}]}),
        json.dumps({"entries": ["just a string"]}),
    ],
)
def test_wrong_shape_is_discarded(store, clock, raw):
    """Test that structurally invalid data is treated as no cache."""
    store.set(KEY, raw)

    cache = make_cache(store, clock)

    assert cache.entries == ()
    assert store.get(KEY) is None


def test_reads_javascript_iso_timestamps(store, clock):
    """Test that timestamps written by toISOString() (trailing Z) are accepted."""
    store.set(
        KEY,
        json.dumps(
            {
                "entries": [
                    {
                        "timestamp": "2026-10-19T07:30:00.000Z",
                        "contextKey": {"occasion": "brunch"},
                        "payload": [{"name": "Linen set"}],
                    }
                ]
            }
        ),
    )

    cache = make_cache(store, clock)

    assert cache.age_minutes() == 30
    assert cache.latest().context_key == {"occasion": "brunch"}


def test_read_failure_is_treated_as_empty(clock):
    """Test that a storage read error never escapes load()."""
    cache = make_cache(FailingReadStore(), clock)

    assert cache.entries == ()


def test_quota_exceeded_clears_cache(clock):
    """Test the quota recovery path: the cache wipes itself and reports it."""
    store = InMemoryKeyValueRepository(max_bytes=400)
    cache = make_cache(store, clock)
    assert cache.save(None, ["small"]) is SaveOutcome.SAVED

    outcome = cache.save(None, ["x" * 1000])

    assert outcome is SaveOutcome.CLEARED_ON_QUOTA
    assert cache.entries == ()
    assert store.get(KEY) is None


def test_write_failure_keeps_state(clock):
    """Test that a non-quota write error leaves the cache unchanged."""
    cache = make_cache(FailingWriteStore(), clock)

    outcome = cache.save(None, ["look"])

    assert outcome is SaveOutcome.FAILED
    assert cache.entries == ()


def test_clear_removes_key(store, clock):
    """Test that clear() deletes the key and empties memory."""
    cache = make_cache(store, clock)
    cache.save(None, ["look"])

    cache.clear()

    assert cache.entries == ()
    assert store.get(KEY) is None


def test_namespaces_are_independent(store, clock):
    """Test that two namespaces on one store never see each other's entries."""
    weather = ResponseCache.create(store=store, namespace="weatherPicksCache", clock=clock)
    trips = ResponseCache.create(store=store, namespace="packingListCache", clock=clock)
    weather.load()
    trips.load()

    weather.save(None, ["rain jacket"])
    trips.clear()

    assert len(weather) == 1
    assert len(trips) == 0
    assert store.get("weatherPicksCache") is not None


def test_entries_are_immutable(store, clock):
    """Test that mutating the caller's list after save does not change the cache."""
    cache = make_cache(store, clock)
    payload = [{"name": "Look A"}]
    cache.save(None, payload)

    payload.append({"name": "Look B"})
    payload[0]["name"] = "changed"

    entry = cache.latest()
    assert entry.payload == ({"name": "Look A"},)
    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.payload = ()


def test_save_without_explicit_load_keeps_persisted_entries(store, clock):
    """Test that save() loads first so earlier entries are not overwritten."""
    make_cache(store, clock).save(None, ["first"])

    cache = ResponseCache.create(store=store, namespace=KEY, clock=clock)
    cache.save(None, ["second"])

    assert [entry.payload[0] for entry in cache.entries] == ["second", "first"]


def test_load_truncates_to_max_entries(store, clock):
    """Test that an oversized stored list is trimmed in memory."""
    big = make_cache(store, clock, max_entries=10)
    for i in range(8):
        big.save(None, [i])

    small = make_cache(store, clock, max_entries=3)

    assert [entry.payload[0] for entry in small.entries] == [7, 6, 5]


def test_rejects_non_sequence_payload(store, clock):
    """Test that a mapping payload is rejected."""
    cache = make_cache(store, clock)

    with pytest.raises(TypeError):
        cache.save(None, {"name": "Look A"})


def test_rejects_invalid_limits(store):
    """Test constructor validation."""
    with pytest.raises(ValueError):
        ResponseCache(store=store, max_entries=0)
    with pytest.raises(ValueError):
        ResponseCache(store=store, max_age=timedelta(0))


def test_get_stats(store, clock):
    """Test cache statistics."""
    cache = make_cache(store, clock, max_entries=5)
    cache.save(None, ["look"])
    clock.advance(minutes=5)

    stats = cache.get_stats()

    assert stats["namespace"] == KEY
    assert stats["total_entries"] == 1
    assert stats["max_entries"] == 5
    assert stats["age_minutes"] == 5
