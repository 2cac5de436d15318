"""
Tests for the key-value store implementations.
"""

from unittest.mock import MagicMock

import pytest
import redis

from closet_core.protocols import KeyValueStore, StorageError, StorageQuotaExceededError
from closet_core.repositories import (
    FileKeyValueRepository,
    InMemoryKeyValueRepository,
    RedisKeyValueRepository,
    create_key_value_store,
)


@pytest.fixture(params=["memory", "file"])
def local_store(request, tmp_path):
    """Create each local store implementation."""
    if request.param == "memory":
        return InMemoryKeyValueRepository()
    return FileKeyValueRepository(root=tmp_path / "store")


def test_satisfies_protocol(local_store):
    """Test structural typing against KeyValueStore."""
    assert isinstance(local_store, KeyValueStore)
    assert isinstance(RedisKeyValueRepository(redis_client=MagicMock()), KeyValueStore)


def test_get_set_delete(local_store):
    """Test the basic key-value contract."""
    assert local_store.get("weatherPicksCache") is None

    local_store.set("weatherPicksCache", '{"entries": []}')
    assert local_store.get("weatherPicksCache") == '{"entries": []}'

    local_store.set("weatherPicksCache", '{"entries": [1]}')
    assert local_store.get("weatherPicksCache") == '{"entries": [1]}'

    assert local_store.delete("weatherPicksCache") is True
    assert local_store.delete("weatherPicksCache") is False
    assert local_store.get("weatherPicksCache") is None


def test_health_check(local_store):
    """Test that local stores report healthy."""
    assert local_store.health_check() is True


def test_memory_quota():
    """Test the in-memory size quota."""
    store = InMemoryKeyValueRepository(max_bytes=10)
    store.set("a", "12345")

    with pytest.raises(StorageQuotaExceededError):
        store.set("b", "123456")

    # Replacing a value only counts the new size
    store.set("a", "1234567890")
    assert store.get("a") == "1234567890"


def test_file_quota(tmp_path):
    """Test the file store size quota."""
    store = FileKeyValueRepository(root=tmp_path, max_bytes=10)
    store.set("a", "12345")

    with pytest.raises(StorageQuotaExceededError):
        store.set("b", "123456")
    assert store.get("b") is None


def test_file_store_handles_arbitrary_keys(tmp_path):
    """Test that keys with path separators are stored safely."""
    store = FileKeyValueRepository(root=tmp_path)

    store.set("../user/42:weatherPicksCache", "value")

    assert store.get("../user/42:weatherPicksCache") == "value"
    assert all(path.parent == tmp_path for path in tmp_path.iterdir())


def test_file_store_persists_across_instances(tmp_path):
    """Test that a new instance sees earlier writes."""
    FileKeyValueRepository(root=tmp_path).set("outfitHistory", "[]")

    assert FileKeyValueRepository(root=tmp_path).get("outfitHistory") == "[]"


def test_redis_get_and_set():
    """Test Redis reads and writes through the client."""
    client = MagicMock()
    client.get.return_value = b'{"entries": []}'
    store = RedisKeyValueRepository(redis_client=client)

    assert store.get("weatherPicksCache") == '{"entries": []}'
    store.set("weatherPicksCache", "value")
    client.set.assert_called_once_with("weatherPicksCache", "value")


def test_redis_delete():
    """Test Redis delete result mapping."""
    client = MagicMock()
    client.delete.side_effect = [1, 0]
    store = RedisKeyValueRepository(redis_client=client)

    assert store.delete("k") is True
    assert store.delete("k") is False


def test_redis_out_of_memory_maps_to_quota():
    """Test that a Redis OOM rejection surfaces as a quota error."""
    client = MagicMock()
    client.set.side_effect = redis.exceptions.ResponseError(
        "OOM command not allowed when used memory > 'maxmemory'."
    )
    store = RedisKeyValueRepository(redis_client=client)

    with pytest.raises(StorageQuotaExceededError):
        store.set("weatherPicksCache", "value")


def test_redis_errors_map_to_storage_error():
    """Test that other Redis failures surface as StorageError."""
    client = MagicMock()
    client.get.side_effect = redis.exceptions.ConnectionError("refused")
    client.set.side_effect = redis.exceptions.ResponseError("WRONGTYPE Operation against a key")
    store = RedisKeyValueRepository(redis_client=client)

    with pytest.raises(StorageError) as read_error:
        store.get("k")
    assert not isinstance(read_error.value, StorageQuotaExceededError)

    with pytest.raises(StorageError) as write_error:
        store.set("k", "v")
    assert not isinstance(write_error.value, StorageQuotaExceededError)


def test_redis_health_check():
    """Test Redis health check."""
    client = MagicMock()
    client.ping.return_value = True
    assert RedisKeyValueRepository(redis_client=client).health_check() is True

    client.ping.side_effect = redis.exceptions.ConnectionError("refused")
    assert RedisKeyValueRepository(redis_client=client).health_check() is False


def test_create_key_value_store():
    """Test backend selection."""
    assert isinstance(create_key_value_store("memory"), InMemoryKeyValueRepository)

    with pytest.raises(ValueError):
        create_key_value_store("sqlite")
