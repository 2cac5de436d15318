"""Redis implementation of KeyValueStore.

Each key holds one JSON document as a plain Redis string. This is the
shared backend used when several API workers serve the same user.
"""

import logging

import redis

from closet_core.config import get_redis_client
from closet_core.protocols import StorageError, StorageQuotaExceededError

logger = logging.getLogger(__name__)


def _is_out_of_memory(error: redis.exceptions.ResponseError) -> bool:
    """Check whether Redis rejected a write because maxmemory was reached."""
    message = str(error)
    return message.startswith("OOM") or "maxmemory" in message


class RedisKeyValueRepository:
    """Redis implementation using plain string keys.

    This class satisfies the KeyValueStore protocol through structural
    typing - no explicit inheritance needed.

    Redis rejects writes with an ``OOM`` error once ``maxmemory`` is reached
    and the eviction policy is ``noeviction``; that error surfaces as
    StorageQuotaExceededError so callers can run their quota recovery.
    """

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """Initialize the Redis repository.

        Args:
            redis_client: Redis client instance. If None, creates default.
                Must be created with ``decode_responses=True``.
        """
        self._client = redis_client or get_redis_client()

    @classmethod
    def create(cls, redis_client: redis.Redis | None = None) -> "RedisKeyValueRepository":
        """Factory method to create RedisKeyValueRepository with defaults.

        Args:
            redis_client: Redis client. If None, built from settings.

        Returns:
            Configured RedisKeyValueRepository
        """
        return cls(redis_client=redis_client)

    def get(self, key: str) -> str | None:
        """Read the value stored under a key.

        Args:
            key: The storage key

        Returns:
            The stored text, or None if the key does not exist
        """
        try:
            value = self._client.get(key)
        except redis.exceptions.RedisError as e:
            raise StorageError(f"Failed to read {key!r} from Redis: {e}") from e

        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        """Write a value, replacing any previous one.

        Args:
            key: The storage key
            value: The text to store
        """
        try:
            self._client.set(key, value)
        except redis.exceptions.ResponseError as e:
            if _is_out_of_memory(e):
                raise StorageQuotaExceededError(f"Redis is out of memory writing {key!r}: {e}") from e
            raise StorageError(f"Failed to write {key!r} to Redis: {e}") from e
        except redis.exceptions.RedisError as e:
            raise StorageError(f"Failed to write {key!r} to Redis: {e}") from e

    def delete(self, key: str) -> bool:
        """Delete a key.

        Args:
            key: The storage key

        Returns:
            True if deleted, False otherwise
        """
        try:
            result: int = self._client.delete(key)  # type: ignore[assignment]
        except redis.exceptions.RedisError as e:
            raise StorageError(f"Failed to delete {key!r} from Redis: {e}") from e
        return result > 0

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.exceptions.RedisError as e:
            logger.warning("Redis health check failed: %s", e)
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
