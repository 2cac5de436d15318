"""Repository layer for data access.

This layer abstracts the persistent key-value store behind the
KeyValueStore protocol. This enables:
- Easy swapping of implementations (Redis → local files → memory)
- Unit testing with in-memory implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from closet_core.config import settings
from closet_core.protocols import KeyValueStore

from .file_repository import FileKeyValueRepository
from .memory_repository import InMemoryKeyValueRepository
from .redis_repository import RedisKeyValueRepository


def create_key_value_store(backend: str | None = None) -> KeyValueStore:
    """Build the store selected by ``backend`` (defaults to settings.storage_backend).

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = backend or settings.storage_backend
    if backend == "memory":
        return InMemoryKeyValueRepository.create()
    if backend == "file":
        return FileKeyValueRepository.create()
    if backend == "redis":
        return RedisKeyValueRepository.create()
    raise ValueError(f"Unknown storage backend: {backend!r}")


__all__ = [
    "KeyValueStore",
    "FileKeyValueRepository",
    "InMemoryKeyValueRepository",
    "RedisKeyValueRepository",
    "create_key_value_store",
]
