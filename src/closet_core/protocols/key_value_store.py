"""Key-value storage protocol.

Defines the interface for any persistent store that can hold one text
value per key. Caches and outfit history are serialized to JSON text and
kept under a single key each.

Implementations can include:
- Redis (shared, server-side)
- JSON files on local disk
- In-memory dict (tests, demos)
- Browser local storage behind a bridge
"""

from typing import Protocol, runtime_checkable


class StorageError(Exception):
    """Raised when the underlying store fails to read or write a value."""


class StorageQuotaExceededError(StorageError):
    """Raised when a write is rejected because the store is full."""


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for key-value storage backends.

    Similar to Go's interface pattern - any type that implements these
    methods satisfies the protocol, no explicit inheritance needed.

    Example:
        ```python
        from closet_core.protocols import KeyValueStore

        store: KeyValueStore = InMemoryKeyValueRepository()
        store: KeyValueStore = RedisKeyValueRepository.create()
        ```
    """

    def get(self, key: str) -> str | None:
        """Read the value stored under a key.

        Args:
            key: The storage key

        Returns:
            The stored text, or None if the key does not exist

        Raises:
            StorageError: If the backend cannot be read
        """
        ...

    def set(self, key: str, value: str) -> None:
        """Write a value, replacing any previous one.

        Args:
            key: The storage key
            value: The text to store

        Raises:
            StorageQuotaExceededError: If the store has no room for the value
            StorageError: For any other write failure
        """
        ...

    def delete(self, key: str) -> bool:
        """Delete a key.

        Args:
            key: The storage key

        Returns:
            True if the key existed, False otherwise
        """
        ...

    def health_check(self) -> bool:
        """Check if the store is accessible.

        Returns:
            True if healthy, False otherwise
        """
        ...
