"""Cache entry domain entity."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for one cached suggestion result.

    This is an internal representation used by services and repositories.
    For API contracts, use the DTO classes from the dto package.

    Attributes:
        timestamp: When this entry was created (timezone-aware, UTC)
        context_key: Inputs that produced the result (weather, occasion, ...).
            Kept for display and debugging, never used for lookup.
        payload: The cached suggestions, newest response as returned by the provider
    """

    timestamp: datetime
    context_key: Any
    payload: tuple[Any, ...]
