# ecowander/api/poi.py
"""OpenStreetMap Overpass client for points of interest near a waypoint."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import requests

from ecowander.api.config import DEFAULT_OVERPASS_URL, get_overpass_config
from ecowander.api.errors import POIServiceUnavailable
from ecowander.api.models import Coordinate, RawPOIRecord

logger = logging.getLogger(__name__)

DEFAULT_RADIUS_METERS = 20000

# (key, value regex) pairs; one Overpass statement per pair and element type.
ACTIVITY_FILTERS: Tuple[Tuple[str, str], ...] = (
    ("leisure", "^(nature_reserve|park)$"),
    ("tourism", "^(attraction|viewpoint)$"),
    ("natural", "^(peak|waterfall|volcano|glacier|cave_entrance|beach)$"),
    ("historic", "^(castle|monument|ruins|archaeological_site)$"),
)
LODGING_FILTERS: Tuple[Tuple[str, str], ...] = (
    ("tourism", "^(hotel|guest_house|hostel|chalet|apartment|camp_site)$"),
)
FOOD_FILTERS: Tuple[Tuple[str, str], ...] = (
    ("amenity", "^(restaurant|cafe|fast_food|bar|pub|food_court)$"),
)


def build_query(
    coordinate: Coordinate,
    radius_meters: int,
    timeout: int = 25,
    element_types: Sequence[str] = ("node", "way"),
) -> str:
    """Build the Overpass QL query for every tag class we classify.

    Eco-rated hotels and vegan-friendly restaurants are matched explicitly as
    well, so they still show up if the broad filters above are narrowed.
    """
    around = f"(around:{int(radius_meters)},{coordinate.latitude},{coordinate.longitude})"
    statements = []
    for element in element_types:
        for key, pattern in ACTIVITY_FILTERS + LODGING_FILTERS + FOOD_FILTERS:
            statements.append(f'  {element}["{key}"~"{pattern}"]{around};')
        statements.append(f'  {element}["tourism"="hotel"]["eco_rating"]{around};')
        statements.append(f'  {element}["amenity"="restaurant"]["diet:vegan"="yes"]{around};')
    body = "\n".join(statements)
    return f"[out:json][timeout:{int(timeout)}];\n(\n{body}\n);\nout center;"


class POIClient:
    """Fetch raw tagged POI records from an Overpass endpoint."""

    def __init__(
        self,
        url: str = DEFAULT_OVERPASS_URL,
        timeout: float = 25.0,
        user_agent: str = "EcoWander/1.0",
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = user_agent

    @classmethod
    def from_config(cls) -> "POIClient":
        cfg = get_overpass_config()
        return cls(url=cfg["url"], timeout=cfg["timeout"], user_agent=cfg["user_agent"])

    def fetch_nearby(
        self, coordinate: Coordinate, radius_meters: int = DEFAULT_RADIUS_METERS
    ) -> List[RawPOIRecord]:
        """Return raw Overpass elements within ``radius_meters`` of ``coordinate``.

        Raises:
            POIServiceUnavailable: on transport errors, timeouts, non-2xx
                responses or bodies that are not an Overpass JSON document.
        """
        query = build_query(coordinate, radius_meters, timeout=self.timeout)
        logger.debug(
            f"Querying Overpass around {coordinate.latitude:.5f},"
            f"{coordinate.longitude:.5f} radius={radius_meters}m"
        )
        try:
            response = self.session.post(
                self.url, data={"data": query}, timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            logger.error(f"Overpass request failed: {exc}")
            raise POIServiceUnavailable(f"POI service request failed: {exc}") from exc
        except ValueError as exc:
            logger.error(f"Overpass returned a non-JSON body: {exc}")
            raise POIServiceUnavailable("POI service returned a malformed response") from exc

        if not isinstance(payload, dict) or not isinstance(payload.get("elements"), list):
            logger.error("Overpass response has no element list")
            raise POIServiceUnavailable("POI service returned a malformed response")

        elements = [e for e in payload["elements"] if isinstance(e, dict)]
        logger.info(
            f"Overpass returned {len(elements)} elements near "
            f"{coordinate.latitude:.4f},{coordinate.longitude:.4f}"
        )
        return elements


__all__ = ["POIClient", "build_query", "DEFAULT_RADIUS_METERS"]
