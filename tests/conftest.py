import threading

import pytest

from ecowander.api.errors import GeocodingUnavailable, PlaceNotFound, POIServiceUnavailable
from ecowander.api.models import Coordinate, GeocodeResult
from ecowander.api.pipeline import ItineraryPipeline
from ecowander.api.storage import InMemoryItineraryStore

PARIS = Coordinate(48.8566, 2.3522)
LYON = Coordinate(45.7640, 4.8357)
BERLIN = Coordinate(52.5200, 13.4050)


class FakeGeocoder:
    """Resolves from a fixed table; unknown places raise PlaceNotFound."""

    def __init__(self, places=None, failing=()):
        self.places = dict(places or {})
        self.failing = set(failing)
        self.calls = []
        self._lock = threading.Lock()

    def resolve(self, place_name):
        with self._lock:
            self.calls.append(place_name)
        if place_name in self.failing:
            raise GeocodingUnavailable(place_name, "service down")
        if place_name not in self.places:
            raise PlaceNotFound(place_name, "no match")
        return GeocodeResult(city=f"{place_name}, Resolved", coordinate=self.places[place_name])


class FakePOIClient:
    """Returns records from ``responder(day_index, coordinate)``."""

    def __init__(self, responder=None):
        self.responder = responder or (lambda index, coordinate: [])
        self.calls = []
        self._lock = threading.Lock()

    def fetch_nearby(self, coordinate, radius_meters=20000):
        with self._lock:
            index = len(self.calls)
            self.calls.append((coordinate, radius_meters))
        return self.responder(index, coordinate)


def failing_poi(index, coordinate):
    raise POIServiceUnavailable("overpass down")


def pick(day, category):
    """Return the POI a day plan holds for ``category``."""
    return getattr(day, category.value)


def element(element_id, name, lat=48.85, lon=2.35, **tags):
    """Build an Overpass node element."""
    if name is not None:
        tags["name"] = name
    return {"type": "node", "id": element_id, "lat": lat, "lon": lon, "tags": tags}


@pytest.fixture
def geocoder():
    return FakeGeocoder({"Paris": PARIS, "Lyon": LYON, "Berlin": BERLIN})


@pytest.fixture
def poi_client():
    return FakePOIClient()


@pytest.fixture
def store():
    return InMemoryItineraryStore()


@pytest.fixture
def pipeline(geocoder, poi_client, store):
    return ItineraryPipeline(geocoder, poi_client, store=store)
