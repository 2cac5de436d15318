"""Outfit and history domain entities."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class OutfitItem:
    """A wardrobe item as seen by the planner.

    Items are owned by the wardrobe provider; this core only reads
    the identifier and the category.

    Attributes:
        id: Unique item identifier
        category: Garment class ("top", "bottom", "shoes", ...)
        name: Optional display name
    """

    id: str
    category: str
    name: str | None = None


@dataclass(frozen=True)
class HistoryRecord:
    """One outfit the user wore or planned on a given date.

    Attributes:
        date: When the outfit was worn/planned (timezone-aware, UTC)
        items: Items that made up the outfit
        event_id: Calendar event the outfit was worn to, if any
        event_type: Event category ("work", "formal", ...)
        location: Where the event took place
        rating: User satisfaction from 1 to 5
    """

    date: datetime
    items: tuple[OutfitItem, ...] = field(default_factory=tuple)
    event_id: str | None = None
    event_type: str | None = None
    location: str | None = None
    rating: int | None = None

    @property
    def item_ids(self) -> frozenset[str]:
        """Identifiers of the items in this outfit."""
        return frozenset(item.id for item in self.items)


@dataclass(frozen=True)
class EventContext:
    """Context of the occasion a proposed outfit is meant for."""

    event_id: str | None = None
    event_type: str | None = None
    location: str | None = None
