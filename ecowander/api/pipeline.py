# ecowander/api/pipeline.py
"""End-to-end itinerary generation.

Geocode both endpoints (concurrently), measure and split the route, then
compose one day at a time.  The pipeline owns every degrade-or-fail
decision: clients only report what went wrong.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence

from ecowander.api.classifier import POIClassifier
from ecowander.api.composer import DedupState, ItineraryComposer
from ecowander.api.config import get_itinerary_config, get_overpass_config
from ecowander.api.errors import (
    GeocodingError,
    InvalidInput,
    PersistenceFailure,
    POIServiceUnavailable,
    UnresolvableCity,
)
from ecowander.api.geocoding import GeocodingClient
from ecowander.api.geometry import haversine_distance_km, interpolate
from ecowander.api.models import (
    ORIGIN,
    Coordinate,
    DayPlan,
    GeocodeResult,
    Itinerary,
    RawPOIRecord,
    SavedItinerary,
)
from ecowander.api.poi import DEFAULT_RADIUS_METERS, POIClient
from ecowander.api.storage import ItineraryStore

logger = logging.getLogger(__name__)

DayCallback = Callable[[DayPlan], None]


def validate_request(source_city, destination_city, number_of_days, max_days: int = 14) -> None:
    """Raise :class:`InvalidInput` unless the request can be planned."""
    for label, city in (("sourceCity", source_city), ("destinationCity", destination_city)):
        if not isinstance(city, str) or not city.strip():
            raise InvalidInput(f"{label} must be a non-empty string")
    if isinstance(number_of_days, bool) or not isinstance(number_of_days, int):
        raise InvalidInput("numberOfDays must be an integer")
    if number_of_days < 1 or number_of_days > max_days:
        raise InvalidInput(f"numberOfDays must be between 1 and {max_days}")


class ItineraryPipeline:
    """Build a complete :class:`Itinerary` for one request."""

    def __init__(
        self,
        geocoder: GeocodingClient,
        poi_client: POIClient,
        composer: Optional[ItineraryComposer] = None,
        classifier: Optional[POIClassifier] = None,
        store: Optional[ItineraryStore] = None,
        radius_meters: int = DEFAULT_RADIUS_METERS,
        degrade_unresolved: bool = True,
        prefetch_workers: int = 1,
        max_days: int = 14,
    ):
        self.geocoder = geocoder
        self.poi_client = poi_client
        self.composer = composer or ItineraryComposer()
        self.classifier = classifier or POIClassifier()
        self.store = store
        self.radius_meters = radius_meters
        self.degrade_unresolved = degrade_unresolved
        self.prefetch_workers = max(1, prefetch_workers)
        self.max_days = max_days
        if self.composer.fallback_tables.min_length < max_days:
            logger.warning(
                f"Fallback tables are shorter than {max_days} days; "
                f"long trips will reuse names with a day suffix"
            )

    # ------------------------------------------------------------------ #
    # Geocoding
    # ------------------------------------------------------------------ #
    def _resolve(self, city: str) -> GeocodeResult:
        try:
            return self.geocoder.resolve(city)
        except GeocodingError as exc:
            if not self.degrade_unresolved:
                raise UnresolvableCity(city, str(exc)) from exc
            logger.warning(f"Using (0, 0) for '{city}': {exc}")
            return GeocodeResult(city=city, coordinate=ORIGIN, resolved=False)

    def resolve_endpoints(self, source_city: str, destination_city: str):
        """Geocode both cities concurrently and return ``(source, destination)``."""
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="geocode") as pool:
            source_future = pool.submit(self._resolve, source_city.strip())
            destination_future = pool.submit(self._resolve, destination_city.strip())
            return source_future.result(), destination_future.result()

    # ------------------------------------------------------------------ #
    # POI fetching
    # ------------------------------------------------------------------ #
    def _fetch(self, day_number: int, waypoint: Coordinate) -> List[RawPOIRecord]:
        try:
            return self.poi_client.fetch_nearby(waypoint, self.radius_meters)
        except POIServiceUnavailable as exc:
            logger.warning(f"Day {day_number}: no POI candidates ({exc})")
            return []

    def _prefetch(self, waypoints: Sequence[Coordinate]) -> List[List[RawPOIRecord]]:
        workers = min(self.prefetch_workers, len(waypoints))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="poi") as pool:
            return list(pool.map(self._fetch, range(1, len(waypoints) + 1), waypoints))

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def generate(
        self,
        source_city: str,
        destination_city: str,
        number_of_days: int,
        on_day: Optional[DayCallback] = None,
    ) -> Itinerary:
        """Build an itinerary without touching storage.

        ``on_day`` is called with each day plan as soon as it is composed.

        Raises:
            InvalidInput: for bad parameters, before any external call.
            UnresolvableCity: when a city cannot be geocoded and
                degradation is disabled.
        """
        validate_request(source_city, destination_city, number_of_days, self.max_days)
        start_time = time.time()
        logger.info(
            f"Generating itinerary {source_city} -> {destination_city}, {number_of_days} days"
        )

        source, destination = self.resolve_endpoints(source_city, destination_city)

        distance_km = haversine_distance_km(source.coordinate, destination.coordinate)
        # Index 0 is the source itself; day i sits on index i.
        waypoints = interpolate(source.coordinate, destination.coordinate, number_of_days)[1:]

        prefetched = None
        if self.prefetch_workers > 1 and number_of_days > 1:
            prefetched = self._prefetch(waypoints)

        dedup = DedupState()
        days = []
        for index, waypoint in enumerate(waypoints):
            day_number = index + 1
            raw = prefetched[index] if prefetched is not None else self._fetch(day_number, waypoint)
            candidates = self.classifier.classify_all(raw)
            logger.debug(f"Day {day_number}: {len(candidates)}/{len(raw)} usable candidates")
            day = self.composer.select_day(day_number, waypoint, candidates, dedup)
            days.append(day)
            if on_day is not None:
                on_day(day)

        itinerary = Itinerary(
            source=source,
            destination=destination,
            total_distance_km=distance_km,
            days=tuple(days),
        )
        logger.info(
            f"Itinerary ready: {distance_km:.1f} km, {len(days)} days "
            f"in {time.time() - start_time:.2f}s"
        )
        return itinerary

    def plan(
        self,
        source_city: str,
        destination_city: str,
        number_of_days: int,
        on_day: Optional[DayCallback] = None,
    ) -> SavedItinerary:
        """Generate an itinerary and save it to the store exactly once.

        Raises:
            PersistenceFailure: when the store fails to save the result,
                whatever the backend error; the generated itinerary is
                attached to the exception.
        """
        if self.store is None:
            raise RuntimeError("ItineraryPipeline.plan requires a store")
        itinerary = self.generate(source_city, destination_city, number_of_days, on_day=on_day)
        try:
            itinerary_id = self.store.save(itinerary)
        except PersistenceFailure as exc:
            exc.itinerary = itinerary
            raise
        except Exception as exc:
            logger.error(f"Store failed to save itinerary: {exc}")
            raise PersistenceFailure(str(exc), itinerary=itinerary) from exc
        return SavedItinerary(itinerary_id, itinerary)


def create_pipeline(store: Optional[ItineraryStore] = None) -> ItineraryPipeline:
    """Build a pipeline wired from environment configuration."""
    itinerary_cfg = get_itinerary_config()
    overpass_cfg = get_overpass_config()
    return ItineraryPipeline(
        geocoder=GeocodingClient.from_config(),
        poi_client=POIClient.from_config(),
        store=store,
        radius_meters=overpass_cfg["radius_meters"],
        degrade_unresolved=itinerary_cfg["degrade_unresolved"],
        prefetch_workers=itinerary_cfg["prefetch_workers"],
        max_days=itinerary_cfg["max_days"],
    )


__all__ = ["ItineraryPipeline", "create_pipeline", "validate_request"]
