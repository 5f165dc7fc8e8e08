# ecowander/api/geocoding.py
from __future__ import annotations

import logging
import threading
from typing import Optional

import googlemaps
from googlemaps import exceptions as gmaps_exceptions

from ecowander.api.config import get_geocoding_config
from ecowander.api.errors import GeocodingUnavailable, InvalidInput, PlaceNotFound
from ecowander.api.models import Coordinate, GeocodeResult

logger = logging.getLogger(__name__)

_TRANSPORT_ERRORS = (
    gmaps_exceptions.ApiError,
    gmaps_exceptions.TransportError,
    gmaps_exceptions.Timeout,
)


class GeocodingClient:
    """Resolve free-text place names to coordinates with Google Geocoding.

    One lookup per call, first match only, no retries and no memo of past
    answers.  Failures are raised as ``GeocodingUnavailable`` and empty
    answers as ``PlaceNotFound``; what to do about either is the caller's
    decision.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        language: str = "en",
        client: Optional[googlemaps.Client] = None,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.language = language
        self._gmaps = client
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls) -> "GeocodingClient":
        cfg = get_geocoding_config()
        return cls(
            api_key=cfg["api_key"],
            timeout=cfg["timeout"],
            language=cfg["language"],
        )

    def _get_client(self, place: str) -> googlemaps.Client:
        """Return the googlemaps.Client, creating it on first use."""
        with self._lock:
            if self._gmaps is None:
                if not self.api_key:
                    logger.error("No Google Maps API key configured")
                    raise GeocodingUnavailable(place, "Geocoding is not configured")
                try:
                    # retry_timeout bounds the library's internal 5xx retries to a
                    # single attempt window.
                    self._gmaps = googlemaps.Client(
                        key=self.api_key,
                        timeout=self.timeout,
                        retry_timeout=self.timeout,
                        retry_over_query_limit=False,
                    )
                except ValueError as exc:
                    logger.error(f"Failed to initialize Google Maps client: {exc}")
                    raise GeocodingUnavailable(place, str(exc)) from exc
            return self._gmaps

    def resolve(self, place_name: str) -> GeocodeResult:
        """Resolve ``place_name`` to a :class:`GeocodeResult`.

        Raises:
            InvalidInput: if ``place_name`` is empty.
            PlaceNotFound: if the service has no match.
            GeocodingUnavailable: on network, quota or configuration errors.
        """
        if not isinstance(place_name, str) or not place_name.strip():
            raise InvalidInput("Place name must be a non-empty string")
        place = place_name.strip()

        client = self._get_client(place)
        logger.debug(f"Geocoding place: {place}")
        try:
            results = client.geocode(place, language=self.language)
        except _TRANSPORT_ERRORS as exc:
            logger.error(f"Geocoding error for '{place}': {exc}")
            raise GeocodingUnavailable(place, f"Geocoding failed for '{place}': {exc}") from exc

        if not results:
            logger.warning(f"No results found for place: {place}")
            raise PlaceNotFound(place, f"No geocoding match for '{place}'")

        try:
            first = results[0]
            loc = first["geometry"]["location"]
            result = GeocodeResult(
                city=first.get("formatted_address") or place,
                coordinate=Coordinate(float(loc["lat"]), float(loc["lng"])),
            )
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            logger.error(f"Malformed geocoding response for '{place}': {exc}")
            raise GeocodingUnavailable(place, f"Malformed geocoding response for '{place}'") from exc

        logger.debug(f"Geocoded {place} to {result.coordinate.latitude}, {result.coordinate.longitude}")
        return result


__all__ = ["GeocodingClient"]
