"""Repeat warning domain entity."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .outfit import OutfitItem


class WarningLevel(str, Enum):
    """Severity of a repeat warning, based on how recently the outfit was worn."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class RepeatWarning:
    """A proposed outfit that is too close to one worn recently.

    Attributes:
        outfit: Items of the matched historical outfit
        last_worn: Date of the matched history record
        event_similarity: Short explanation of how the contexts relate
        level: Severity tier
        similarity: Jaccard similarity between the two outfits
        suggestion: Which category to swap to break the repeat
    """

    outfit: tuple[OutfitItem, ...]
    last_worn: datetime
    event_similarity: str
    level: WarningLevel
    similarity: float
    suggestion: str
