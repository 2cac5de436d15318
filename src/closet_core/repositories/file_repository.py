"""JSON file implementation of KeyValueStore.

Stores each key as its own file under a root directory, the local-disk
counterpart of browser local storage.
"""

import errno
import hashlib
import logging
import os
from pathlib import Path

from closet_core.config import settings
from closet_core.protocols import StorageError, StorageQuotaExceededError

logger = logging.getLogger(__name__)

_QUOTA_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}


class FileKeyValueRepository:
    """File-backed implementation of KeyValueStore.

    File names are derived from a hash of the key so that arbitrary key
    strings are safe on every filesystem. Writes go through a temporary
    file and ``os.replace`` so a crash never leaves a half-written value.

    An optional ``max_bytes`` quota emulates the size limit of browser
    local storage: a write that would push the total stored size past it
    raises StorageQuotaExceededError.
    """

    SUFFIX = ".json"

    def __init__(self, root: Path | str | None = None, max_bytes: int | None = None) -> None:
        """Initialize the file repository.

        Args:
            root: Directory holding the files. Defaults to settings.storage_dir.
            max_bytes: Optional total size quota in bytes.
        """
        self._root = Path(root or settings.storage_dir)
        self._max_bytes = max_bytes
        self._root.mkdir(parents=True, exist_ok=True)

    @classmethod
    def create(cls, root: Path | str | None = None, max_bytes: int | None = None) -> "FileKeyValueRepository":
        """Factory method to create FileKeyValueRepository with defaults."""
        return cls(root=root, max_bytes=max_bytes)

    def _path(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self._root / f"{digest}{self.SUFFIX}"

    def _used_bytes(self, excluding: Path) -> int:
        total = 0
        for path in self._root.glob(f"*{self.SUFFIX}"):
            if path != excluding:
                total += path.stat().st_size
        return total

    def get(self, key: str) -> str | None:
        """Read the value stored under a key."""
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {key!r} from {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        """Write a value, replacing any previous one."""
        path = self._path(key)
        data = value.encode("utf-8")

        if self._max_bytes is not None and self._used_bytes(path) + len(data) > self._max_bytes:
            raise StorageQuotaExceededError(
                f"Writing {len(data)} bytes for {key!r} exceeds the {self._max_bytes} byte quota"
            )

        tmp_path = path.with_suffix(".tmp")
        try:
            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            if e.errno in _QUOTA_ERRNOS:
                raise StorageQuotaExceededError(f"Disk full writing {key!r}: {e}") from e
            raise StorageError(f"Failed to write {key!r} to {path}: {e}") from e

    def delete(self, key: str) -> bool:
        """Delete a key."""
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete {key!r} at {path}: {e}") from e
        return True

    def health_check(self) -> bool:
        """Check if the root directory is writable."""
        healthy = self._root.is_dir() and os.access(self._root, os.W_OK)
        if not healthy:
            logger.warning("Storage directory %s is not writable", self._root)
        return healthy

    @property
    def root(self) -> Path:
        """Get the storage directory."""
        return self._root
