"""Outfit similarity and repeat detection.

Compares a proposed outfit with past outfits using the Jaccard index over
item identifiers and flags near-repeats, tiered by how recently the past
outfit was worn. Everything here is pure computation with no I/O.
"""

from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from closet_core.config import settings
from closet_core.entities import EventContext, HistoryRecord, OutfitItem, RepeatWarning, WarningLevel
from closet_core.utils import utc_now

REPEAT_SIMILARITY_THRESHOLD = 0.8
HIGH_SEVERITY_DAYS = 7
MEDIUM_SEVERITY_DAYS = 14
SWAP_PRIORITY = ("top", "bottom", "shoes")
SWAP_FALLBACK = "accessory"

SECONDS_PER_DAY = 24 * 60 * 60


def jaccard_similarity(a: Iterable[str], b: Iterable[str]) -> float:
    """Jaccard index of two collections of item ids.

    Duplicates collapse and order is ignored. Two empty outfits have a
    similarity of 0.0.

    Example:
        >>> jaccard_similarity({"top1", "bottom1", "shoes1"}, {"top1", "bottom1", "shoes2"})
        0.5
    """
    set_a = set(a)
    set_b = set(b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def _item_ids(items: Iterable[OutfitItem]) -> set[str]:
    return {item.id for item in items}


class OutfitSimilarityChecker:
    """Flags proposed outfits that repeat a recent one.

    The checker does not filter history by date: callers pass the window
    they care about (see OutfitHistoryService.window).

    Example:
        ```python
        checker = OutfitSimilarityChecker()
        warnings = checker.check(proposed_items, history.window(), EventContext(event_type="work"))
        for warning in warnings:
            print(warning.level, warning.suggestion)
        ```
    """

    def __init__(
        self,
        threshold: float | None = None,
        high_days: float = HIGH_SEVERITY_DAYS,
        medium_days: float = MEDIUM_SEVERITY_DAYS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the checker.

        Args:
            threshold: Similarity above which a warning is emitted. Defaults to settings.
            high_days: Records younger than this many days are "high".
            medium_days: Records younger than this many days (and not high) are "medium".
            clock: Returns the current time. Defaults to UTC wall clock.
        """
        self._threshold = threshold if threshold is not None else settings.repeat_threshold
        self._high_days = high_days
        self._medium_days = medium_days
        self._clock = clock or utc_now

        if not 0 <= self._threshold <= 1:
            raise ValueError("Threshold must be between 0 and 1")
        if high_days > medium_days:
            raise ValueError("high_days must not exceed medium_days")

    @property
    def threshold(self) -> float:
        """Get the repeat threshold."""
        return self._threshold

    def check(
        self,
        proposed: Iterable[OutfitItem],
        history: Iterable[HistoryRecord],
        context: EventContext | None = None,
    ) -> list[RepeatWarning]:
        """Find every history record the proposed outfit repeats.

        Args:
            proposed: Items of the outfit being planned
            history: Records to compare against (already windowed by the caller)
            context: The occasion the outfit is planned for

        Returns:
            One warning per record whose similarity is above the threshold,
            in history order
        """
        proposed = tuple(proposed)
        proposed_ids = _item_ids(proposed)
        context = context or EventContext()
        now = self._now()

        warnings = []
        for record in history:
            similarity = jaccard_similarity(proposed_ids, record.item_ids)
            if similarity <= self._threshold:
                continue

            days_since = (now - _as_utc(record.date)).total_seconds() / SECONDS_PER_DAY
            warnings.append(
                RepeatWarning(
                    outfit=record.items,
                    last_worn=record.date,
                    event_similarity=self.context_similarity(context, record),
                    level=self.severity_for(days_since),
                    similarity=similarity,
                    suggestion=f"Try swapping the {self.suggest_swap(proposed)}",
                )
            )

        return warnings

    def severity_for(self, days_since: float) -> WarningLevel:
        """Map days elapsed since a record to a severity tier."""
        if days_since < self._high_days:
            return WarningLevel.HIGH
        if days_since < self._medium_days:
            return WarningLevel.MEDIUM
        return WarningLevel.LOW

    @staticmethod
    def context_similarity(context: EventContext, record: HistoryRecord) -> str:
        """Explain how the planned occasion relates to a past one.

        Checked in priority order: same event, same event type, same
        location. A tag missing on either side never matches.
        """
        if context.event_id is not None and context.event_id == record.event_id:
            return "Same event"
        if context.event_type is not None and context.event_type == record.event_type:
            return "Similar event type"
        if context.location is not None and context.location == record.location:
            return "Same location"
        return "Different context"

    @staticmethod
    def suggest_swap(items: Iterable[OutfitItem]) -> str:
        """Pick the category to swap: top, then bottom, then shoes, else accessory."""
        categories = {item.category for item in items}
        for category in SWAP_PRIORITY:
            if category in categories:
                return category
        return SWAP_FALLBACK

    def _now(self) -> datetime:
        return _as_utc(self._clock())


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def check_repeat_warnings(
    proposed: Iterable[OutfitItem],
    history: Iterable[HistoryRecord],
    context: EventContext | None = None,
) -> list[RepeatWarning]:
    """Run a default OutfitSimilarityChecker over the given history."""
    return OutfitSimilarityChecker().check(proposed, history, context)
