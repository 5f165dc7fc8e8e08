# ecowander/api/classifier.py
"""Map raw OpenStreetMap tags onto the three day-plan categories."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from ecowander.api.models import Category, Coordinate, PointOfInterest, RawPOIRecord

logger = logging.getLogger(__name__)

DEFAULT_ECO_RATING = 3

LODGING_TOURISM = frozenset({"hotel", "guest_house", "hostel", "chalet", "apartment", "camp_site"})

ACTIVITY_TAGS = {
    "leisure": frozenset({"nature_reserve", "park"}),
    "tourism": frozenset({"attraction", "viewpoint"}),
    "natural": frozenset({"peak", "waterfall", "volcano", "glacier", "cave_entrance", "beach"}),
    "historic": frozenset({"castle", "monument", "ruins", "archaeological_site"}),
}

FOOD_AMENITY = frozenset({"restaurant", "cafe", "fast_food", "bar", "pub", "food_court"})

DEFAULT_NAMES = {
    Category.ACTIVITY: "Nature Reserve",
    Category.LUNCH: "Vegan Restaurant",
    Category.LODGING: "Eco Hotel",
}


def parse_eco_rating(value: Any) -> int:
    """Parse an ``eco_rating`` tag into an int in [1, 5].

    Anything missing, unparsable or out of range becomes the default (3).
    """
    if value is None:
        return DEFAULT_ECO_RATING
    try:
        rating = int(round(float(str(value).strip())))
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_ECO_RATING
    if not 1 <= rating <= 5:
        return DEFAULT_ECO_RATING
    return rating


def _coordinate_of(raw: RawPOIRecord) -> Optional[Coordinate]:
    # Nodes carry lat/lon; ways come back with a "center" from `out center`.
    source: Mapping[str, Any] = raw
    if "lat" not in raw or "lon" not in raw:
        source = raw.get("center") or {}
    try:
        return Coordinate(float(source["lat"]), float(source["lon"]))
    except (KeyError, TypeError, ValueError):
        return None


def _tag(tags: Mapping[str, Any], key: str) -> Optional[str]:
    value = tags.get(key)
    return value if isinstance(value, str) else None


class POIClassifier:
    """Classify Overpass elements into :class:`PointOfInterest` records.

    Precedence is lodging > activity > food, so a hotel with a restaurant
    tag is still lodging.
    """

    def match(self, tags: Mapping[str, Any]) -> Optional[Tuple[Category, str]]:
        """Return ``(category, kind)`` for a tag mapping, or None.

        Only string tag values can match.
        """
        tourism = _tag(tags, "tourism")
        if tourism in LODGING_TOURISM:
            return Category.LODGING, tourism

        for key, values in ACTIVITY_TAGS.items():
            value = _tag(tags, key)
            if value in values:
                return Category.ACTIVITY, value

        amenity = _tag(tags, "amenity")
        if amenity in FOOD_AMENITY:
            return Category.LUNCH, amenity
        return None

    def classify(self, raw: RawPOIRecord) -> Optional[PointOfInterest]:
        """Return a normalized POI, or None if the record is not usable."""
        tags = raw.get("tags") or {}
        if not isinstance(tags, Mapping):
            return None

        matched = self.match(tags)
        if matched is None:
            return None
        category, kind = matched

        coordinate = _coordinate_of(raw)
        if coordinate is None:
            logger.debug(f"Dropping {kind} element {raw.get('id')} without coordinates")
            return None

        name = str(tags.get("name") or "").strip() or DEFAULT_NAMES[category]
        eco_rating = None
        if category is Category.LODGING:
            eco_rating = parse_eco_rating(tags.get("eco_rating"))

        return PointOfInterest(
            name=name,
            category=category,
            coordinate=coordinate,
            eco_rating=eco_rating,
            kind=kind,
        )

    def classify_all(self, records: Iterable[RawPOIRecord]) -> List[PointOfInterest]:
        """Classify many records, keeping service order and dropping misses."""
        pois = []
        for raw in records:
            poi = self.classify(raw)
            if poi is not None:
                pois.append(poi)
        return pois


__all__ = ["POIClassifier", "parse_eco_rating", "DEFAULT_ECO_RATING"]
