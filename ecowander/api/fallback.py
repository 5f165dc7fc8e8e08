# ecowander/api/fallback.py
"""Deterministic stand-in content for days without live POI data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ecowander.api.models import Category


@dataclass(frozen=True)
class FallbackEntry:
    name: str
    kind: str
    eco_rating: Optional[int] = None


@dataclass(frozen=True)
class FallbackTables:
    """Ordered per-category fallback names.

    Day N uses entry ``(N - 1) % len(table)``.  Tables longer than the
    maximum trip length never repeat a name; shorter ones are disambiguated
    by the composer.
    """

    activity: Tuple[FallbackEntry, ...]
    lunch: Tuple[FallbackEntry, ...]
    lodging: Tuple[FallbackEntry, ...]

    def __post_init__(self):
        for category in Category:
            if not self.table(category):
                raise ValueError(f"Fallback table for {category.value} must not be empty")

    def table(self, category: Category) -> Tuple[FallbackEntry, ...]:
        return getattr(self, category.value)

    def entry_for_day(self, category: Category, day_number: int) -> FallbackEntry:
        table = self.table(category)
        return table[(day_number - 1) % len(table)]

    @property
    def min_length(self) -> int:
        return min(len(self.table(category)) for category in Category)


DEFAULT_FALLBACK_TABLES = FallbackTables(
    activity=(
        FallbackEntry("Nature Reserve Exploration", "nature_reserve"),
        FallbackEntry("Mountain Hiking Adventure", "peak"),
        FallbackEntry("Waterfall Discovery Tour", "waterfall"),
        FallbackEntry("Volcanic Landscape Tour", "volcano"),
        FallbackEntry("Glacier Viewing Experience", "glacier"),
        FallbackEntry("Cave Exploration", "cave_entrance"),
        FallbackEntry("Beach Day", "beach"),
        FallbackEntry("Historic Castle Visit", "castle"),
        FallbackEntry("Ancient Monument Tour", "monument"),
        FallbackEntry("Archaeological Site Visit", "ruins"),
        FallbackEntry("Botanical Garden Walk", "park"),
        FallbackEntry("Scenic Viewpoint Picnic", "viewpoint"),
        FallbackEntry("Wetland Birdwatching", "nature_reserve"),
        FallbackEntry("Forest Bathing Trail", "nature_reserve"),
        FallbackEntry("Guided Cycling Tour", "attraction"),
    ),
    lunch=(
        FallbackEntry("Organic Farm-to-Table Restaurant", "restaurant"),
        FallbackEntry("Local Vegan Cafe", "cafe"),
        FallbackEntry("Sustainable Seafood Restaurant", "restaurant"),
        FallbackEntry("Zero-Waste Bistro", "restaurant"),
        FallbackEntry("Farmers Market Food Court", "food_court"),
        FallbackEntry("Eco-Friendly Pub", "pub"),
        FallbackEntry("Green Kitchen", "restaurant"),
        FallbackEntry("Sustainable Sushi Bar", "bar"),
        FallbackEntry("Plant-Based Deli", "restaurant"),
        FallbackEntry("Local Food Experience", "restaurant"),
        FallbackEntry("Community Garden Cafe", "cafe"),
        FallbackEntry("Seasonal Harvest Kitchen", "restaurant"),
        FallbackEntry("Fair Trade Coffee House", "cafe"),
        FallbackEntry("Foraged Flavours Bistro", "restaurant"),
        FallbackEntry("Rooftop Greenhouse Eatery", "restaurant"),
    ),
    lodging=(
        FallbackEntry("Eco-Lodge Retreat", "hotel", 4),
        FallbackEntry("Sustainable Mountain Resort", "hotel", 5),
        FallbackEntry("Green Valley Hotel", "hotel", 3),
        FallbackEntry("Eco-Friendly Beach Resort", "hotel", 4),
        FallbackEntry("Sustainable Forest Lodge", "hotel", 5),
        FallbackEntry("Green City Hotel", "hotel", 3),
        FallbackEntry("Eco-Camping Resort", "camp_site", 4),
        FallbackEntry("Sustainable Chalet", "chalet", 4),
        FallbackEntry("Green Apartment Hotel", "apartment", 3),
        FallbackEntry("Eco-Friendly Hostel", "hostel", 3),
        FallbackEntry("Solar-Powered Guesthouse", "guest_house", 5),
        FallbackEntry("Treehouse Eco Retreat", "chalet", 5),
        FallbackEntry("Riverside Eco Cabins", "chalet", 4),
        FallbackEntry("Carbon-Neutral Boutique Hotel", "hotel", 5),
        FallbackEntry("Farmstay Guesthouse", "guest_house", 4),
    ),
)
