# ecowander/api/composer.py
"""Per-day POI selection with itinerary-wide duplicate avoidance."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Set

from ecowander.api.fallback import DEFAULT_FALLBACK_TABLES, FallbackTables
from ecowander.api.models import Category, Coordinate, DayPlan, PointOfInterest

logger = logging.getLogger(__name__)


class DedupState:
    """Names already used in one itinerary, one set per category.

    Owned by a single pipeline run and dropped when it finishes.
    """

    def __init__(self):
        self._used: Dict[Category, Set[str]] = {category: set() for category in Category}

    def is_used(self, category: Category, name: str) -> bool:
        return name in self._used[category]

    def mark(self, category: Category, name: str) -> None:
        self._used[category].add(name)

    def used(self, category: Category) -> frozenset:
        return frozenset(self._used[category])


class ItineraryComposer:
    """Pick one activity, lunch and lodging for each day."""

    def __init__(self, fallback_tables: FallbackTables = DEFAULT_FALLBACK_TABLES):
        self.fallback_tables = fallback_tables

    @staticmethod
    def _rank(category: Category, candidates: List[PointOfInterest]) -> List[PointOfInterest]:
        if category is Category.LODGING:
            # sorted() is stable, so equal ratings keep service order.
            return sorted(candidates, key=lambda poi: -(poi.eco_rating or 0))
        return candidates

    def _pick_live(
        self,
        category: Category,
        candidates: Sequence[PointOfInterest],
        dedup: DedupState,
    ) -> Optional[PointOfInterest]:
        eligible = [
            poi for poi in candidates
            if poi.category is category and not dedup.is_used(category, poi.name)
        ]
        if not eligible:
            return None
        return self._rank(category, eligible)[0]

    def fallback_for(
        self,
        category: Category,
        day_number: int,
        waypoint: Coordinate,
        dedup: DedupState,
    ) -> PointOfInterest:
        """Build the synthetic POI for ``day_number`` at ``waypoint``."""
        entry = self.fallback_tables.entry_for_day(category, day_number)
        name = entry.name
        attempt = 1
        while dedup.is_used(category, name):
            name = f"{entry.name} (Day {day_number})"
            if attempt > 1:
                name = f"{entry.name} (Day {day_number}, {attempt})"
            attempt += 1
        return PointOfInterest(
            name=name,
            category=category,
            coordinate=waypoint,
            eco_rating=entry.eco_rating,
            kind=entry.kind,
        )

    def select_day(
        self,
        day_number: int,
        waypoint: Coordinate,
        candidates: Sequence[PointOfInterest],
        dedup: DedupState,
    ) -> DayPlan:
        """Return a fully populated :class:`DayPlan`; never fails for lack of data."""
        chosen = {}
        fallbacks = []
        for category in Category:
            poi = self._pick_live(category, candidates, dedup)
            if poi is None:
                poi = self.fallback_for(category, day_number, waypoint, dedup)
                fallbacks.append(category.value)
            dedup.mark(category, poi.name)
            chosen[category] = poi

        if fallbacks:
            logger.info(f"Day {day_number}: using fallback content for {', '.join(fallbacks)}")

        return DayPlan(
            day_number=day_number,
            waypoint=waypoint,
            activity=chosen[Category.ACTIVITY],
            lunch=chosen[Category.LUNCH],
            lodging=chosen[Category.LODGING],
        )


__all__ = ["DedupState", "ItineraryComposer"]
