"""In-memory implementation of KeyValueStore."""

from closet_core.protocols import StorageQuotaExceededError


class InMemoryKeyValueRepository:
    """Dict-backed store for tests, demos and single-process use.

    Data does not survive the process. ``max_bytes`` bounds the total
    UTF-8 size of all stored values, like browser local storage does.
    """

    def __init__(self, max_bytes: int | None = None) -> None:
        self._data: dict[str, str] = {}
        self._max_bytes = max_bytes

    @classmethod
    def create(cls, max_bytes: int | None = None) -> "InMemoryKeyValueRepository":
        """Factory method to create InMemoryKeyValueRepository."""
        return cls(max_bytes=max_bytes)

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self._max_bytes is not None:
            used = sum(len(v.encode("utf-8")) for k, v in self._data.items() if k != key)
            if used + len(value.encode("utf-8")) > self._max_bytes:
                raise StorageQuotaExceededError(
                    f"Writing {key!r} exceeds the {self._max_bytes} byte quota"
                )
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def health_check(self) -> bool:
        return True

    def keys(self) -> list[str]:
        """List stored keys (for testing)."""
        return list(self._data)
