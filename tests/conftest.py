"""
Shared fixtures for the closet core tests.
"""

import re
from datetime import datetime, timedelta, timezone

import pytest

from closet_core.entities import OutfitItem
from closet_core.repositories import InMemoryKeyValueRepository

T0 = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)


class FakeClock:
    """Controllable time source."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def outfit(*item_ids: str) -> tuple[OutfitItem, ...]:
    """Build items whose category is the id without trailing digits ("top1" -> "top")."""
    return tuple(OutfitItem(id=item_id, category=re.sub(r"\d+$", "", item_id)) for item_id in item_ids)


@pytest.fixture
def clock():
    """Create a fake clock starting at T0."""
    return FakeClock()


@pytest.fixture
def store():
    """Create an empty in-memory store."""
    return InMemoryKeyValueRepository()
