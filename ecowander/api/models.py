"""Shared data structures for itinerary planning.

All itinerary objects are frozen dataclasses: once the pipeline has built a
day plan or an itinerary nothing downstream may change it.  ``to_dict`` gives
the JSON shape used by the HTTP layer and the storage backends.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple


# Raw element as returned by the Overpass API (type, id, lat/lon or center, tags).
RawPOIRecord = Mapping[str, Any]


class Category(str, enum.Enum):
    """The three slots filled for every day of a trip."""

    ACTIVITY = "activity"
    LUNCH = "lunch"
    LODGING = "lodging"


@dataclass(frozen=True)
class Coordinate:
    """WGS84 position in degrees."""

    latitude: float
    longitude: float

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Coordinate":
        return cls(float(data["latitude"]), float(data["longitude"]))


ORIGIN = Coordinate(0.0, 0.0)


@dataclass(frozen=True)
class GeocodeResult:
    """A resolved trip endpoint.

    ``resolved`` is False when the coordinate is the ``(0, 0)`` substitute
    used after a failed or empty lookup.
    """

    city: str
    coordinate: Coordinate
    resolved: bool = True

    def to_dict(self) -> dict:
        return {
            "city": self.city,
            "latitude": self.coordinate.latitude,
            "longitude": self.coordinate.longitude,
            "resolved": self.resolved,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GeocodeResult":
        return cls(
            city=data["city"],
            coordinate=Coordinate.from_dict(data),
            resolved=data.get("resolved", True),
        )


@dataclass(frozen=True)
class PointOfInterest:
    """A named, located place eligible for a day plan."""

    name: str
    category: Category
    coordinate: Coordinate
    eco_rating: Optional[int] = None
    kind: str = ""  # source tag value, e.g. "nature_reserve" or "cafe"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "category": self.category.value,
            "type": self.kind,
            "latitude": self.coordinate.latitude,
            "longitude": self.coordinate.longitude,
            "ecoRating": self.eco_rating,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PointOfInterest":
        return cls(
            name=data["name"],
            category=Category(data["category"]),
            coordinate=Coordinate.from_dict(data),
            eco_rating=data.get("ecoRating"),
            kind=data.get("type", ""),
        )


@dataclass(frozen=True)
class DayPlan:
    """One day of a trip: a waypoint plus one POI per category."""

    day_number: int  # 1-based
    waypoint: Coordinate
    activity: PointOfInterest
    lunch: PointOfInterest
    lodging: PointOfInterest

    def to_dict(self) -> dict:
        return {
            "dayNumber": self.day_number,
            "waypoint": self.waypoint.to_dict(),
            "activity": self.activity.to_dict(),
            "lunch": self.lunch.to_dict(),
            "lodging": self.lodging.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DayPlan":
        return cls(
            day_number=int(data["dayNumber"]),
            waypoint=Coordinate.from_dict(data["waypoint"]),
            activity=PointOfInterest.from_dict(data["activity"]),
            lunch=PointOfInterest.from_dict(data["lunch"]),
            lodging=PointOfInterest.from_dict(data["lodging"]),
        )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Itinerary:
    """A complete multi-day trip between two cities."""

    source: GeocodeResult
    destination: GeocodeResult
    total_distance_km: float
    days: Tuple[DayPlan, ...]
    created_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source.to_dict(),
            "destination": self.destination.to_dict(),
            "totalDistanceKm": self.total_distance_km,
            "days": [day.to_dict() for day in self.days],
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Itinerary":
        created_at = data.get("createdAt")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        elif created_at is None:
            created_at = _utcnow()
        return cls(
            source=GeocodeResult.from_dict(data["source"]),
            destination=GeocodeResult.from_dict(data["destination"]),
            total_distance_km=float(data["totalDistanceKm"]),
            days=tuple(DayPlan.from_dict(day) for day in data["days"]),
            created_at=created_at,
        )


@dataclass(frozen=True)
class SavedItinerary:
    """An itinerary together with the id the store assigned to it."""

    id: str
    itinerary: Itinerary

    def to_dict(self) -> dict:
        return {"id": self.id, **self.itinerary.to_dict()}
