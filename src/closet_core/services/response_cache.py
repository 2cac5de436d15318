"""Response cache for recent outfit-suggestion results.

Keeps the last few successful suggestion responses of one feature
("weather picks" by default) in a key-value store so a client can render
instantly on reload and skip a paid LLM call while the newest entry is fresh.
"""

import copy
import json
import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from closet_core.config import settings
from closet_core.entities import CacheEntryEntity
from closet_core.protocols import KeyValueStore, StorageError, StorageQuotaExceededError
from closet_core.utils import format_timestamp, parse_timestamp, utc_now

logger = logging.getLogger(__name__)


class SaveOutcome(str, Enum):
    """Result of ResponseCache.save.

    SAVED: the entry was persisted.
    CLEARED_ON_QUOTA: the store was full; the whole cache was wiped instead.
    FAILED: the store rejected the write; in-memory state is unchanged.
    """

    SAVED = "saved"
    CLEARED_ON_QUOTA = "cleared_on_quota"
    FAILED = "failed"


class ResponseCache:
    """Bounded, time-boxed cache of suggestion responses for one namespace.

    The whole cache lives under a single storage key as
    ``{"entries": [...]}``, newest first. At most ``max_entries`` entries are
    kept and an entry older than ``max_age`` is dropped on the next load.

    The cache is advisory: reads never raise, and write failures are
    reported through SaveOutcome instead of exceptions.

    Single-writer contract: ``save`` is not synchronized. When two writers
    race, the last ``save`` wins and the other entry is lost. Callers must
    not assume atomicity across a ``load()``/``save()`` pair.

    Example:
        ```python
        from closet_core.repositories import InMemoryKeyValueRepository
        from closet_core.services import ResponseCache

        cache = ResponseCache.create(store=InMemoryKeyValueRepository())
        cache.load()

        if not cache.is_fresh(60):
            suggestions = provider.suggest(weather)
            cache.save({"weather": weather}, suggestions)
        ```
    """

    def __init__(
        self,
        store: KeyValueStore,
        namespace: str | None = None,
        max_entries: int | None = None,
        max_age: timedelta | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the response cache.

        Args:
            store: Key-value storage backend (required).
            namespace: Cache name; one storage key per namespace. Defaults to settings.
            max_entries: Maximum number of entries kept. Defaults to settings.
            max_age: Maximum entry age. Defaults to settings.
            clock: Returns the current time. Defaults to UTC wall clock.
        """
        self._store = store
        self._namespace = namespace or settings.cache_namespace
        self._max_entries = max_entries if max_entries is not None else settings.cache_max_entries
        self._max_age = max_age if max_age is not None else timedelta(hours=settings.cache_max_age_hours)
        self._clock = clock or utc_now
        self._entries: tuple[CacheEntryEntity, ...] = ()
        self._loaded = False

        if self._max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        if self._max_age <= timedelta(0):
            raise ValueError("max_age must be positive")

    @classmethod
    def create(
        cls,
        store: KeyValueStore,
        namespace: str | None = None,
        max_entries: int | None = None,
        max_age: timedelta | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> "ResponseCache":
        """Factory method to create ResponseCache with sensible defaults.

        Args:
            store: Key-value storage backend (required).
            namespace: Cache name. If None, uses settings.
            max_entries: Entry limit. If None, uses settings.
            max_age: Entry lifetime. If None, uses settings.
            clock: Time source. If None, uses the UTC wall clock.

        Returns:
            Configured ResponseCache (not yet loaded)
        """
        return cls(
            store=store,
            namespace=namespace,
            max_entries=max_entries,
            max_age=max_age,
            clock=clock,
        )

    @property
    def storage_key(self) -> str:
        """Key under which this namespace is persisted."""
        return f"{settings.cache_key_prefix}{self._namespace}"

    @property
    def namespace(self) -> str:
        """Get the cache namespace."""
        return self._namespace

    @property
    def entries(self) -> tuple[CacheEntryEntity, ...]:
        """Surviving entries, newest first."""
        self._ensure_loaded()
        return self._entries

    @property
    def is_loaded(self) -> bool:
        """Whether load() has run."""
        return self._loaded

    def __len__(self) -> int:
        return len(self.entries)

    def load(self) -> list[CacheEntryEntity]:
        """Read the persisted cache and drop expired entries.

        Business logic:
        1. Read the storage key (missing key means empty cache)
        2. Parse the entries; a corrupt value is deleted and treated as empty
        3. Drop entries whose age is at least max_age
        4. Delete the key if nothing survives

        Expired entries are dropped from memory only; the stored value is
        left as is until the next save rewrites it.

        Returns:
            Surviving entries, newest first
        """
        self._loaded = True
        self._entries = ()

        try:
            raw = self._store.get(self.storage_key)
        except StorageError as e:
            logger.warning("Failed to read cache %s, treating as empty: %s", self.storage_key, e)
            return []

        if raw is None:
            return []

        try:
            entries = self._decode(raw)
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            logger.warning("Discarding corrupt cache %s: %s", self.storage_key, e)
            self._discard_key()
            return []

        now = self._now()
        valid = tuple(entry for entry in entries if now - entry.timestamp < self._max_age)

        if not valid:
            logger.info("All entries in cache %s expired, cache cleared", self.storage_key)
            self._discard_key()
            return []

        self._entries = valid[: self._max_entries]
        logger.debug("Loaded %d cached entries from %s", len(self._entries), self.storage_key)
        return list(self._entries)

    def latest(self) -> CacheEntryEntity | None:
        """Return the most recent surviving entry, or None."""
        entries = self.entries
        return entries[0] if entries else None

    def save(self, context_key: Any, payload: Iterable[Any]) -> SaveOutcome:
        """Store a new suggestion result as the most recent entry.

        The entry is prepended, the list is truncated to max_entries and the
        whole list is persisted. If the store is full, the cache clears
        itself and the write is not retried.

        Args:
            context_key: JSON-serializable inputs that produced the result
            payload: The suggestions to cache (JSON-serializable items)

        Returns:
            SaveOutcome describing what happened

        Raises:
            TypeError: If payload is not a sequence or is not JSON-serializable
        """
        if isinstance(payload, (str, bytes, Mapping)):
            raise TypeError("payload must be a sequence of suggestions")

        self._ensure_loaded()

        entry = CacheEntryEntity(
            timestamp=self._now(),
            context_key=copy.deepcopy(context_key),
            payload=tuple(copy.deepcopy(list(payload))),
        )
        updated = (entry, *self._entries)[: self._max_entries]
        value = self._encode(updated)

        try:
            self._store.set(self.storage_key, value)
        except StorageQuotaExceededError as e:
            logger.warning("Storage quota exceeded saving %s, clearing cache: %s", self.storage_key, e)
            self.clear()
            return SaveOutcome.CLEARED_ON_QUOTA
        except StorageError as e:
            logger.error("Failed to save cache %s: %s", self.storage_key, e)
            return SaveOutcome.FAILED

        self._entries = updated
        logger.info("Saved new entry to %s (%d total cached)", self.storage_key, len(updated))
        return SaveOutcome.SAVED

    def clear(self) -> None:
        """Delete the persisted key and empty the in-memory state."""
        self._entries = ()
        self._loaded = True
        self._discard_key()
        logger.info("Cache %s cleared", self.storage_key)

    def is_fresh(self, max_age_minutes: float | None = None) -> bool:
        """Check whether the newest entry is younger than the given age.

        Args:
            max_age_minutes: Freshness threshold. Defaults to settings.cache_fresh_minutes.

        Returns:
            True if an entry exists and is strictly younger than the threshold
        """
        if max_age_minutes is None:
            max_age_minutes = settings.cache_fresh_minutes

        latest = self.latest()
        if latest is None:
            return False
        return self._now() - latest.timestamp < timedelta(minutes=max_age_minutes)

    def age_minutes(self) -> int | None:
        """Age of the newest entry in whole minutes, or None if empty."""
        latest = self.latest()
        if latest is None:
            return None
        return int((self._now() - latest.timestamp).total_seconds() // 60)

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with cache statistics
        """
        return {
            "namespace": self._namespace,
            "storage_key": self.storage_key,
            "total_entries": len(self.entries),
            "max_entries": self._max_entries,
            "max_age_seconds": int(self._max_age.total_seconds()),
            "age_minutes": self.age_minutes(),
        }

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def _now(self) -> datetime:
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now

    def _discard_key(self) -> None:
        try:
            self._store.delete(self.storage_key)
        except StorageError as e:
            logger.error("Failed to delete cache key %s: %s", self.storage_key, e)

    @staticmethod
    def _encode(entries: tuple[CacheEntryEntity, ...]) -> str:
        return json.dumps(
            {
                "entries": [
                    {
                        "timestamp": format_timestamp(entry.timestamp),
                        "contextKey": entry.context_key,
                        "payload": list(entry.payload),
                    }
                    for entry in entries
                ]
            }
        )

    @staticmethod
    def _decode(raw: str) -> list[CacheEntryEntity]:
        data = json.loads(raw)
        if not isinstance(data, dict) or not isinstance(data.get("entries"), list):
            raise ValueError("expected an object with an 'entries' list")

        entries = []
        for item in data["entries"]:
            if not isinstance(item, dict):
                raise ValueError("cache entry must be an object")
            payload = item["payload"]
            if not isinstance(payload, list):
                raise ValueError("cache entry payload must be a list")
            entries.append(
                CacheEntryEntity(
                    timestamp=parse_timestamp(item["timestamp"]),
                    context_key=item.get("contextKey"),
                    payload=tuple(payload),
                )
            )
        return entries
