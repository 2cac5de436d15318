#!/usr/bin/env python3
"""
Demo script for closet core.

This script walks through the weather-picks response cache and the
outfit repeat checker using a local file store.
"""

import tempfile
from datetime import datetime, timedelta, timezone

from closet_core import (
    EventContext,
    FileKeyValueRepository,
    OutfitHistoryService,
    OutfitItem,
    ResponseCache,
)
from closet_core.logging_config import configure_logging


class DemoClock:
    """Clock the demo can move forward."""

    def __init__(self) -> None:
        self.now = datetime.now(timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def demo_response_cache(store: FileKeyValueRepository, clock: DemoClock) -> None:
    """Demonstrate cache saves, eviction and freshness."""
    print_section("Weather Picks Cache")

    cache = ResponseCache.create(store=store, namespace="weatherPicksCache", clock=clock)
    cache.load()

    forecasts = [
        ("sunny", 24, ["Linen shirt + chinos", "Sundress + sandals"]),
        ("rain", 12, ["Trench + jeans + boots"]),
        ("windy", 15, ["Knit + wide-leg trousers"]),
        ("cloudy", 18, ["Oxford shirt + cardigan"]),
        ("snow", -2, ["Puffer + thermal leggings"]),
        ("fog", 9, ["Wool coat + loafers"]),
        ("clear", 20, ["Tee + denim jacket"]),
    ]

    print("\n📝 Saving one suggestion set per forecast...")
    for weather, temperature, looks in forecasts:
        outcome = cache.save({"weather": weather, "temperature": temperature}, [{"name": n} for n in looks])
        print(f"  ✓ {weather:<7} -> {outcome.value} ({len(cache)} cached)")
        clock.advance(minutes=20)

    print("\n📦 Entries kept (newest first):")
    for entry in cache.entries:
        print(f"  - {entry.context_key['weather']:<7} {[look['name'] for look in entry.payload]}")

    print(f"\n⏱  Newest entry age: {cache.age_minutes()} min")
    print(f"   Fresh within 60 min? {cache.is_fresh(60)}")
    print(f"   Fresh within 10 min? {cache.is_fresh(10)}")

    print("\n🔄 Reloading 25 hours later...")
    clock.advance(hours=25)
    reloaded = ResponseCache.create(store=store, namespace="weatherPicksCache", clock=clock)
    print(f"  Entries after load: {len(reloaded.load())}")
    print(f"  Key still stored:   {store.get(reloaded.storage_key) is not None}")


def demo_repeat_detection(store: FileKeyValueRepository, clock: DemoClock) -> None:
    """Demonstrate recording outfits and checking for repeats."""
    print_section("Outfit Repeat Detection")

    history = OutfitHistoryService.create(store=store, clock=clock)
    history.load()

    blazer = OutfitItem(id="top-blazer", category="top", name="Navy blazer")
    trousers = OutfitItem(id="bottom-trousers", category="bottom", name="Grey trousers")
    loafers = OutfitItem(id="shoes-loafers", category="shoes", name="Brown loafers")
    scarf = OutfitItem(id="acc-scarf", category="scarf", name="Silk scarf")

    print("\n👔 Recording past outfits...")
    history.record([blazer, trousers, loafers], event_id="evt-board", event_type="work", location="HQ")
    clock.advance(days=10)
    history.record([blazer, trousers, loafers, scarf], event_type="formal", location="Gala")
    clock.advance(days=3)
    print(f"  ✓ {len(history.records)} outfits in history")

    proposals = [
        ("Same look for work", [loafers, trousers, blazer], EventContext(event_type="work")),
        ("Swapped shoes", [blazer, trousers, scarf], EventContext(location="HQ")),
    ]

    for label, proposed, context in proposals:
        warnings = history.check_repeats(proposed, context)
        print(f"\n🔍 {label}: {len(warnings)} warning(s)")
        for warning in warnings:
            print(
                f"  [{warning.level.value:<6}] similarity={warning.similarity:.2f} "
                f"worn {warning.last_worn:%Y-%m-%d} ({warning.event_similarity}) - {warning.suggestion}"
            )


def main() -> None:
    """Run all demos."""
    configure_logging()

    with tempfile.TemporaryDirectory() as tmp_dir:
        store = FileKeyValueRepository.create(root=tmp_dir)
        clock = DemoClock()

        demo_response_cache(store, clock)
        demo_repeat_detection(store, clock)

    print_section("Done")


if __name__ == "__main__":
    main()
