# ecowander/api/errors.py
"""Error types raised across the itinerary pipeline.

Clients raise these; the pipeline decides which ones degrade into fallback
content and which ones abort the request.
"""

from __future__ import annotations

from typing import Any, Optional


class EcoWanderError(Exception):
    """Base class for all itinerary errors."""


class InvalidInput(EcoWanderError, ValueError):
    """Malformed request parameters (empty city, bad day count)."""


class UnresolvableCity(InvalidInput):
    """A city could not be geocoded and degradation is disabled."""

    def __init__(self, city: str, reason: str = ""):
        self.city = city
        message = f"Could not resolve city '{city}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class GeocodingError(EcoWanderError):
    """Base class for geocoding failures."""

    def __init__(self, place: str, message: str):
        self.place = place
        super().__init__(message)


class GeocodingUnavailable(GeocodingError):
    """The geocoding service failed, timed out, or is not configured."""


class PlaceNotFound(GeocodingError):
    """The geocoding service answered with zero matches."""


class POIServiceUnavailable(EcoWanderError):
    """The POI service failed or returned a malformed response."""


class PersistenceFailure(EcoWanderError):
    """The storage backend rejected a generated itinerary.

    The itinerary is kept on the exception so callers can still return it.
    """

    def __init__(self, message: str, itinerary: Optional[Any] = None):
        self.itinerary = itinerary
        super().__init__(message)
