# ecowander/api/geometry.py
"""Great-circle distance and straight-line waypoint placement."""

from __future__ import annotations

import math
from typing import List

from ecowander.api.errors import InvalidInput
from ecowander.api.models import Coordinate

EARTH_RADIUS_KM = 6371.0


def haversine_distance_km(a: Coordinate, b: Coordinate) -> float:
    """Return the great-circle distance between two coordinates in km."""
    if a == b:
        return 0.0
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    # Clamp against rounding drift just above 1.0 for antipodal points.
    h = min(1.0, h)
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def interpolate(a: Coordinate, b: Coordinate, segments: int) -> List[Coordinate]:
    """Split the a->b line into ``segments`` equal lat/lon steps.

    Returns ``segments + 1`` points; index 0 is ``a`` and the last index is
    ``b`` exactly.  This is linear in degree space, not geodesic.
    """
    if isinstance(segments, bool) or not isinstance(segments, int) or segments < 1:
        raise InvalidInput(f"segments must be a positive integer, got {segments!r}")

    d_lat = b.latitude - a.latitude
    d_lon = b.longitude - a.longitude
    points = [a]
    for i in range(1, segments):
        fraction = i / segments
        points.append(
            Coordinate(a.latitude + d_lat * fraction, a.longitude + d_lon * fraction)
        )
    points.append(b)
    return points
