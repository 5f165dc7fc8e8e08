# ecowander/api/services/itinerary_service.py
"""Service layer for itinerary generation and retrieval."""

import logging
from typing import Any, Dict, List, Mapping, Optional

from flask import session

from ecowander.api.errors import InvalidInput
from ecowander.api.models import Itinerary, SavedItinerary
from ecowander.api.pipeline import DayCallback, ItineraryPipeline
from ecowander.api.storage import ItineraryStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("sourceCity", "destinationCity", "numberOfDays")


class ItineraryService:
    """Handles request parsing, generation and persistence of itineraries."""

    def __init__(self, pipeline: ItineraryPipeline, store: ItineraryStore):
        self.pipeline = pipeline
        self.store = store
        if pipeline.store is None:
            pipeline.store = store

    @staticmethod
    def parse_request(payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Validate the JSON body of an itinerary request.

        Args:
            payload: Decoded JSON body

        Returns:
            Dictionary with source_city, destination_city and number_of_days

        Raises:
            InvalidInput: If a field is missing or has the wrong type
        """
        if not isinstance(payload, Mapping):
            raise InvalidInput("Request body must be a JSON object")

        missing = [name for name in REQUIRED_FIELDS if payload.get(name) in (None, "")]
        if missing:
            raise InvalidInput(f"Missing required fields: {', '.join(missing)}")

        days = payload["numberOfDays"]
        # Accept "3" from form-style clients, but not 2.5 or True.
        if isinstance(days, str) and days.strip().lstrip("-").isdigit():
            days = int(days.strip())
        if isinstance(days, bool) or not isinstance(days, int):
            raise InvalidInput("numberOfDays must be an integer")

        return {
            "source_city": payload["sourceCity"],
            "destination_city": payload["destinationCity"],
            "number_of_days": days,
        }

    def create_itinerary(
        self,
        payload: Optional[Mapping[str, Any]],
        on_day: Optional[DayCallback] = None,
    ) -> SavedItinerary:
        """Generate and persist an itinerary from a request body.

        Raises:
            InvalidInput: If the request is invalid
            PersistenceFailure: If generation worked but saving did not
        """
        params = self.parse_request(payload)
        saved = self.pipeline.plan(
            params["source_city"],
            params["destination_city"],
            params["number_of_days"],
            on_day=on_day,
        )
        logger.info(f"Saved itinerary {saved.id}")
        return saved

    def list_itineraries(self) -> List[SavedItinerary]:
        return self.store.list_all()

    def get_itinerary(self, itinerary_id: str) -> Optional[SavedItinerary]:
        return self.store.get_by_id(itinerary_id)

    @staticmethod
    def store_in_session(itinerary_id: str) -> None:
        """Remember the latest itinerary for this browser session."""
        session["current_itinerary_id"] = itinerary_id
        session.modified = True
        logger.debug(f"Stored itinerary {itinerary_id} in session")

    def get_from_session(self) -> Optional[SavedItinerary]:
        itinerary_id = session.get("current_itinerary_id")
        if not itinerary_id:
            return None
        return self.get_itinerary(itinerary_id)

    @staticmethod
    def summarize(itinerary: Itinerary) -> str:
        """Format a short plain-text overview of a trip."""
        source = itinerary.source.city
        destination = itinerary.destination.city
        lines = [
            f"{len(itinerary.days)}-day eco trip from {source} to {destination} "
            f"({itinerary.total_distance_km:.1f} km)."
        ]
        for day in itinerary.days:
            lines.append(
                f"Day {day.day_number}: {day.activity.name}, lunch at {day.lunch.name}, "
                f"overnight at {day.lodging.name} (eco rating {day.lodging.eco_rating or '-'})."
            )
        return " ".join(lines)
