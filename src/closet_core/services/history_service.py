"""Outfit history service.

Records the outfits a user wore or planned and serves the rolling window
that repeat detection runs over.
"""

import json
import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone

from closet_core.config import settings
from closet_core.entities import EventContext, HistoryRecord, OutfitItem, RepeatWarning
from closet_core.protocols import KeyValueStore
from closet_core.utils import format_timestamp, parse_timestamp, utc_now

from .similarity import OutfitSimilarityChecker

logger = logging.getLogger(__name__)


def _checked_rating(value):
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
        raise ValueError(f"stored rating must be an integer from 1 to 5, got {value!r}")
    return value


class OutfitHistoryService:
    """Append-only outfit history kept under one storage key.

    Unlike the response cache, history is a source of truth: write
    failures propagate to the caller as StorageError.

    Example:
        ```python
        history = OutfitHistoryService.create(store=store)
        history.load()
        history.record(items, event_type="work", location="Office")

        warnings = history.check_repeats(proposed, EventContext(event_type="work"))
        ```
    """

    def __init__(
        self,
        store: KeyValueStore,
        storage_key: str | None = None,
        window_days: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the history service.

        Args:
            store: Key-value storage backend (required).
            storage_key: Key holding the history. Defaults to settings.
            window_days: Default rolling window length. Defaults to settings.
            clock: Returns the current time. Defaults to UTC wall clock.
        """
        self._store = store
        self._key = storage_key or settings.history_key
        self._window_days = window_days if window_days is not None else settings.history_window_days
        self._clock = clock or utc_now
        self._records: list[HistoryRecord] = []
        self._loaded = False

        if self._window_days < 1:
            raise ValueError("window_days must be at least 1")

    @classmethod
    def create(
        cls,
        store: KeyValueStore,
        storage_key: str | None = None,
        window_days: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> "OutfitHistoryService":
        """Factory method to create OutfitHistoryService with defaults."""
        return cls(store=store, storage_key=storage_key, window_days=window_days, clock=clock)

    @property
    def storage_key(self) -> str:
        """Key under which the history is persisted."""
        return self._key

    @property
    def window_days(self) -> int:
        """Get the default window length in days."""
        return self._window_days

    @property
    def clock(self) -> Callable[[], datetime]:
        """Get the time source."""
        return self._clock

    @property
    def records(self) -> tuple[HistoryRecord, ...]:
        """All records, oldest first."""
        self._ensure_loaded()
        return tuple(self._records)

    def load(self) -> list[HistoryRecord]:
        """Read the persisted history.

        A corrupt value is deleted and the history starts empty.

        Returns:
            All records, oldest first
        """
        self._loaded = True
        self._records = []

        raw = self._store.get(self._key)
        if raw is None:
            return []

        try:
            self._records = self._decode(raw)
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            logger.warning("Discarding corrupt outfit history %s: %s", self._key, e)
            self._store.delete(self._key)
            return []

        logger.debug("Loaded %d history records from %s", len(self._records), self._key)
        return list(self._records)

    def record(
        self,
        items: Iterable[OutfitItem],
        event_id: str | None = None,
        event_type: str | None = None,
        location: str | None = None,
        rating: int | None = None,
    ) -> HistoryRecord:
        """Append an outfit to the history and persist it.

        Args:
            items: Items that made up the outfit
            event_id: Calendar event id, if any
            event_type: Event category, if any
            location: Event location, if any
            rating: User satisfaction from 1 to 5

        Returns:
            The stored record

        Raises:
            ValueError: If rating is outside 1-5
            StorageError: If the history cannot be written
        """
        if rating is not None and not 1 <= rating <= 5:
            raise ValueError("Rating must be between 1 and 5")

        # Re-read so appends from other writers on a shared store are kept
        self.load()

        record = HistoryRecord(
            date=self._now(),
            items=tuple(items),
            event_id=event_id,
            event_type=event_type,
            location=location,
            rating=rating,
        )
        updated = [*self._records, record]
        self._store.set(self._key, self._encode(updated))
        self._records = updated

        logger.info("Outfit recorded in history (%d items)", len(record.items))
        return record

    def window(self, days: int | None = None) -> list[HistoryRecord]:
        """Records no older than ``days`` (defaults to the configured window)."""
        days = days if days is not None else self._window_days
        cutoff = self._now() - timedelta(days=days)
        return [record for record in self.records if record.date >= cutoff]

    def check_repeats(
        self,
        proposed: Iterable[OutfitItem],
        context: EventContext | None = None,
        checker: OutfitSimilarityChecker | None = None,
    ) -> list[RepeatWarning]:
        """Check a proposed outfit against the rolling window."""
        checker = checker or OutfitSimilarityChecker(clock=self._clock)
        return checker.check(proposed, self.window(), context)

    def clear(self) -> None:
        """Delete the whole history."""
        self._records = []
        self._loaded = True
        self._store.delete(self._key)
        logger.info("Outfit history %s cleared", self._key)

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def _now(self) -> datetime:
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now

    @staticmethod
    def _encode(records: list[HistoryRecord]) -> str:
        return json.dumps(
            {
                "records": [
                    {
                        "date": format_timestamp(record.date),
                        "items": [
                            {"id": item.id, "category": item.category, "name": item.name}
                            for item in record.items
                        ],
                        "eventId": record.event_id,
                        "eventType": record.event_type,
                        "location": record.location,
                        "rating": record.rating,
                    }
                    for record in records
                ]
            }
        )

    @staticmethod
    def _decode(raw: str) -> list[HistoryRecord]:
        data = json.loads(raw)
        if not isinstance(data, dict) or not isinstance(data.get("records"), list):
            raise ValueError("expected an object with a 'records' list")

        return [
            HistoryRecord(
                date=parse_timestamp(item["date"]),
                items=tuple(
                    OutfitItem(id=str(raw_item["id"]), category=raw_item["category"], name=raw_item.get("name"))
                    for raw_item in item["items"]
                ),
                event_id=item.get("eventId"),
                event_type=item.get("eventType"),
                location=item.get("location"),
                rating=_checked_rating(item.get("rating")),
            )
            for item in data["records"]
        ]
