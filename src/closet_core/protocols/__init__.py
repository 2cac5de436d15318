"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis → local files, in-memory, etc.)
- Unit testing with in-memory implementations
- Clear separation of concerns

Usage:
    ```python
    from closet_core.protocols import KeyValueStore

    # Type hints work with any implementation
    store: KeyValueStore = RedisKeyValueRepository.create()  # works
    store: KeyValueStore = FileKeyValueRepository(root)      # also works
    ```
"""

from .key_value_store import KeyValueStore, StorageError, StorageQuotaExceededError

__all__ = [
    "KeyValueStore",
    "StorageError",
    "StorageQuotaExceededError",
]
