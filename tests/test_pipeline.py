import pytest

from ecowander.api.errors import InvalidInput, PersistenceFailure, UnresolvableCity
from ecowander.api.models import Category, Coordinate
from ecowander.api.composer import ItineraryComposer
from ecowander.api.fallback import FallbackEntry, FallbackTables
from ecowander.api.pipeline import ItineraryPipeline

from conftest import BERLIN, LYON, PARIS, FakeGeocoder, FakePOIClient, element, failing_poi, pick


def assert_no_repeats(itinerary):
    for category in Category:
        names = [pick(day, category).name for day in itinerary.days]
        assert len(names) == len(set(names)), category


def test_day_count_matches_request(pipeline):
    for days in (1, 2, 7, 14):
        itinerary = pipeline.generate("Paris", "Berlin", days)
        assert len(itinerary.days) == days
        assert [d.day_number for d in itinerary.days] == list(range(1, days + 1))


def test_endpoints_and_distance(pipeline):
    itinerary = pipeline.generate("Paris", "Berlin", 3)
    assert itinerary.source.city == "Paris, Resolved"
    assert itinerary.source.coordinate == PARIS
    assert itinerary.destination.coordinate == BERLIN
    assert itinerary.total_distance_km == pytest.approx(878, rel=0.01)


def test_waypoints_skip_source_and_end_at_destination(pipeline):
    itinerary = pipeline.generate("Paris", "Berlin", 2)
    assert itinerary.days[0].waypoint != PARIS
    assert itinerary.days[-1].waypoint == BERLIN


def test_fallback_completeness_when_no_pois(pipeline, poi_client):
    itinerary = pipeline.generate("Paris", "Lyon", 5)
    assert len(poi_client.calls) == 5
    for day in itinerary.days:
        for category in Category:
            assert pick(day, category) is not None
            assert pick(day, category).name
    assert_no_repeats(itinerary)


def test_same_city_trip_rotates_fallbacks(geocoder, store):
    pipeline = ItineraryPipeline(geocoder, FakePOIClient(), store=store)
    itinerary = pipeline.generate("Paris", "Paris", 3)
    assert itinerary.total_distance_km == pytest.approx(0)
    assert all(day.waypoint == PARIS for day in itinerary.days)
    assert len({day.activity.name for day in itinerary.days}) == 3
    assert_no_repeats(itinerary)


def test_unresolvable_city_degrades_to_origin(store):
    geocoder = FakeGeocoder(failing={"Nowhereville"})
    pipeline = ItineraryPipeline(geocoder, FakePOIClient(), store=store)
    itinerary = pipeline.generate("Nowhereville", "Nowhereville", 1)
    assert itinerary.source.coordinate == Coordinate(0.0, 0.0)
    assert itinerary.source.resolved is False
    assert itinerary.source.city == "Nowhereville"
    assert len(itinerary.days) == 1
    assert itinerary.days[0].activity.name == "Nature Reserve Exploration"


def test_zero_match_degrades_to_origin(geocoder):
    pipeline = ItineraryPipeline(geocoder, FakePOIClient())
    itinerary = pipeline.generate("Paris", "Atlantis", 2)
    assert itinerary.destination.coordinate == Coordinate(0.0, 0.0)
    assert itinerary.destination.resolved is False
    assert itinerary.source.resolved is True


def test_strict_mode_rejects_unresolvable_city(geocoder):
    poi_client = FakePOIClient()
    pipeline = ItineraryPipeline(geocoder, poi_client, degrade_unresolved=False)
    with pytest.raises(UnresolvableCity) as excinfo:
        pipeline.generate("Paris", "Atlantis", 2)
    assert isinstance(excinfo.value, InvalidInput)
    assert poi_client.calls == []


@pytest.mark.parametrize("source,destination,days", [
    ("Paris", "Berlin", 0),
    ("Paris", "Berlin", -1),
    ("Paris", "Berlin", 15),
    ("Paris", "Berlin", 2.5),
    ("Paris", "Berlin", True),
    ("", "Berlin", 2),
    ("Paris", "   ", 2),
    (None, "Berlin", 2),
])
def test_invalid_input_makes_no_external_calls(geocoder, poi_client, source, destination, days):
    pipeline = ItineraryPipeline(geocoder, poi_client)
    with pytest.raises(InvalidInput):
        pipeline.generate(source, destination, days)
    assert geocoder.calls == []
    assert poi_client.calls == []


def test_geocodes_both_endpoints_once(geocoder, pipeline):
    pipeline.generate(" Paris ", "Berlin", 1)
    assert sorted(geocoder.calls) == ["Berlin", "Paris"]


def test_poi_failure_degrades_single_day(geocoder):
    def responder(index, coordinate):
        if index == 1:
            return failing_poi(index, coordinate)
        return [element(100 + index, f"Park {index}", leisure="park")]

    pipeline = ItineraryPipeline(geocoder, FakePOIClient(responder))
    itinerary = pipeline.generate("Paris", "Berlin", 3)
    assert itinerary.days[0].activity.name == "Park 0"
    assert itinerary.days[1].activity.name == "Mountain Hiking Adventure"
    assert itinerary.days[2].activity.name == "Park 2"



def test_malformed_tags_do_not_abort_the_day(geocoder):
    records = [
        {"type": "node", "id": 1, "lat": 48.0, "lon": 2.0, "tags": {"tourism": ["hotel"]}},
        element(2, "Leaf Inn", tourism="hotel", eco_rating="4"),
    ]
    pipeline = ItineraryPipeline(geocoder, FakePOIClient(lambda i, c: records))
    itinerary = pipeline.generate("Paris", "Lyon", 1)
    assert itinerary.days[0].lodging.name == "Leaf Inn"

def test_live_pois_are_not_repeated(geocoder):
    shared = [
        element(1, "Forest Reserve", leisure="nature_reserve"),
        element(2, "Sprout", amenity="restaurant"),
        element(3, "Leaf Inn", tourism="hotel", eco_rating="5"),
        element(4, "Bamboo Hostel", tourism="hostel"),
    ]
    pipeline = ItineraryPipeline(geocoder, FakePOIClient(lambda i, c: shared))
    itinerary = pipeline.generate("Paris", "Lyon", 3)
    assert [d.lodging.name for d in itinerary.days][:2] == ["Leaf Inn", "Bamboo Hostel"]
    assert itinerary.days[0].activity.name == "Forest Reserve"
    assert itinerary.days[1].activity.name != "Forest Reserve"
    assert_no_repeats(itinerary)


def test_prefetch_matches_sequential(geocoder):
    def responder(index, coordinate):
        # Same records for every day, so the result depends only on selection order.
        return [element(n, f"Spot {n}", tourism="attraction") for n in range(3)]

    sequential = ItineraryPipeline(geocoder, FakePOIClient(responder)).generate("Paris", "Berlin", 6)
    poi_client = FakePOIClient(responder)
    parallel = ItineraryPipeline(geocoder, poi_client, prefetch_workers=4).generate("Paris", "Berlin", 6)
    assert len(poi_client.calls) == 6
    assert [d.to_dict() for d in parallel.days] == [d.to_dict() for d in sequential.days]


def test_on_day_called_in_order(pipeline):
    seen = []
    pipeline.generate("Paris", "Berlin", 4, on_day=lambda day: seen.append(day.day_number))
    assert seen == [1, 2, 3, 4]


def test_radius_is_passed_to_poi_client(geocoder, poi_client):
    ItineraryPipeline(geocoder, poi_client, radius_meters=5000).generate("Paris", "Lyon", 2)
    assert {radius for _, radius in poi_client.calls} == {5000}


def test_generate_does_not_touch_store(pipeline, store):
    pipeline.generate("Paris", "Lyon", 1)
    assert store.list_all() == []


def test_plan_saves_exactly_once(pipeline, store):
    saved = pipeline.plan("Paris", "Lyon", 2)
    assert [item.id for item in store.list_all()] == [saved.id]
    assert store.get_by_id(saved.id).itinerary == saved.itinerary


def test_plan_persistence_failure_keeps_itinerary(geocoder, poi_client):
    class BrokenStore:
        def save(self, itinerary):
            raise PersistenceFailure("disk full")

    pipeline = ItineraryPipeline(geocoder, poi_client, store=BrokenStore())
    with pytest.raises(PersistenceFailure) as excinfo:
        pipeline.plan("Paris", "Lyon", 2)
    assert excinfo.value.itinerary is not None
    assert len(excinfo.value.itinerary.days) == 2



def test_plan_wraps_unexpected_store_errors(geocoder, poi_client):
    class BrokenStore:
        def save(self, itinerary):
            raise OSError("disk full")

    pipeline = ItineraryPipeline(geocoder, poi_client, store=BrokenStore())
    with pytest.raises(PersistenceFailure) as excinfo:
        pipeline.plan("Paris", "Lyon", 1)
    assert "disk full" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, OSError)
    assert len(excinfo.value.itinerary.days) == 1

def test_plan_without_store_is_an_error(geocoder, poi_client):
    with pytest.raises(RuntimeError):
        ItineraryPipeline(geocoder, poi_client).plan("Paris", "Lyon", 1)


def test_short_fallback_tables_are_reported(geocoder, poi_client, caplog):
    tables = FallbackTables(
        activity=(FallbackEntry("Only Park", "park"),),
        lunch=(FallbackEntry("Only Cafe", "cafe"),),
        lodging=(FallbackEntry("Only Lodge", "guest_house", 4),),
    )
    with caplog.at_level("WARNING", logger="ecowander.api.pipeline"):
        ItineraryPipeline(geocoder, poi_client, composer=ItineraryComposer(tables), max_days=3)
    assert "shorter than 3 days" in caplog.text

    caplog.clear()
    with caplog.at_level("WARNING", logger="ecowander.api.pipeline"):
        ItineraryPipeline(geocoder, poi_client)
    assert caplog.text == ""
