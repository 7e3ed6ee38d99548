import pytest

from livebus_routing.arrivals import estimate_ride_time, find_next_boardable_vehicle
from livebus_routing.network import Prediction, Route, Vehicle
from livebus_routing.stop import Stop


def make_vehicle(vehicle_id, *predictions):
    return Vehicle(vehicle_id, predictions=[Prediction(stop_id, seconds) for stop_id, seconds in predictions])


def make_route(stop_ids, vehicles=(), is_circular=False):
    coords = {}
    stops = []
    for i, stop_id in enumerate(stop_ids):
        lat, lon = coords.setdefault(stop_id, (40.0 + i * 0.01, -83.0))
        stops.append(Stop(stop_id, stop_id, lat, lon))
    return Route("R", "Route", "#000", stops, vehicles, is_circular)


def test_wait_and_ride_from_live_predictions():
    vehicle = make_vehicle("V1", ("S1", 480), ("S2", 840), ("S3", 1200))
    route = make_route(["S0", "S1", "S2", "S3"], [vehicle])

    bus = find_next_boardable_vehicle(route, "S1", 5)
    assert bus.vehicle_id == "V1"
    assert bus.eta_minutes == pytest.approx(8)
    assert bus.wait_minutes == pytest.approx(3)

    ride = estimate_ride_time("S1", "S3", bus)
    assert ride.valid
    assert ride.minutes == pytest.approx(12)
    assert ride.stops_between == 2


def test_unusable_predictions_are_skipped():
    route = make_route(["S0", "S1"], [
        make_vehicle("negative", ("S1", -60)),
        make_vehicle("missing", ("S1", None)),
        make_vehicle("good", ("S1", 600)),
    ])
    bus = find_next_boardable_vehicle(route, "S1")
    assert bus.vehicle_id == "good"


def test_bus_arriving_before_rider_cannot_be_boarded():
    route = make_route(["S0", "S1"], [make_vehicle("V1", ("S1", 120))])
    assert find_next_boardable_vehicle(route, "S1", 5) is None


def test_soonest_qualifying_vehicle_wins():
    route = make_route(["S0", "S1"], [
        make_vehicle("early", ("S1", 60)),
        make_vehicle("later", ("S1", 900)),
        make_vehicle("next", ("S1", 420)),
    ])
    bus = find_next_boardable_vehicle(route, "S1", 3)
    assert bus.vehicle_id == "next"
    assert bus.wait_minutes == pytest.approx(4)


def test_wait_is_never_negative():
    route = make_route(["S0", "S1"], [
        make_vehicle(str(i), ("S1", seconds)) for i, seconds in enumerate([-120, 0, 30, 179, 180, 181, 600])
    ])
    for earliest in [0, 1, 2.99, 3, 3.01, 9, 10]:
        bus = find_next_boardable_vehicle(route, "S1", earliest)
        if bus is not None:
            assert bus.wait_minutes >= 0


def test_no_vehicles_means_no_service():
    assert find_next_boardable_vehicle(make_route(["S0", "S1"]), "S1") is None
    assert find_next_boardable_vehicle(None, "S1") is None


def test_ride_ignores_end_prediction_from_next_loop():
    # Previous lap's S0 at 30s, boarding S1 at 60s, S0 at 180s, then the next lap
    vehicle = make_vehicle("V1", ("S0", 30), ("S1", 60), ("S2", 120), ("S0", 180), ("S1", 300), ("S0", 420))
    route = make_route(["S0", "S1", "S2", "S0"], [vehicle])
    bus = find_next_boardable_vehicle(route, "S1")
    ride = estimate_ride_time("S1", "S0", bus)
    assert ride.minutes == pytest.approx(2)
    assert ride.stops_between == 2


def test_ride_invalid_when_end_only_predicted_after_loop_back():
    vehicle = make_vehicle("V1", ("S1", 60), ("S2", 120), ("S1", 300), ("S0", 420))
    route = make_route(["S0", "S1", "S2", "S0"], [vehicle])
    bus = find_next_boardable_vehicle(route, "S1")
    assert not estimate_ride_time("S1", "S0", bus).valid


def test_ride_invalid_without_end_prediction():
    route = make_route(["S0", "S1", "S2"], [make_vehicle("V1", ("S1", 60))])
    bus = find_next_boardable_vehicle(route, "S1")
    ride = estimate_ride_time("S1", "S2", bus)
    assert not ride.valid
    assert ride.minutes == 0


def test_ride_invalid_for_backward_pair_even_with_predictions():
    vehicle = make_vehicle("V1", ("S2", 60), ("S0", 120))
    route = make_route(["S0", "S1", "S2", "S3"], [vehicle])
    bus = find_next_boardable_vehicle(route, "S2")
    assert bus is not None
    assert not estimate_ride_time("S2", "S0", bus).valid


def test_ride_starts_from_boarded_prediction():
    # Rider misses the first pass at S1 and boards the second one
    vehicle = make_vehicle("V1", ("S1", 60), ("S2", 120), ("S1", 600), ("S2", 720))
    route = make_route(["S1", "S2"], [vehicle], is_circular=True)
    bus = find_next_boardable_vehicle(route, "S1", 5)
    assert bus.eta_minutes == pytest.approx(10)
    ride = estimate_ride_time("S1", "S2", bus)
    assert ride.minutes == pytest.approx(2)


def test_ride_without_match_is_invalid():
    assert not estimate_ride_time("S1", "S2", None).valid


def test_ride_anchors_on_boarded_prediction_when_listed_out_of_order():
    # The second pass at S1 is listed before the first one
    vehicle = make_vehicle("V1", ("S1", 600), ("S2", 720), ("S1", 60), ("S2", 120))
    route = make_route(["S1", "S2"], [vehicle], is_circular=True)
    bus = find_next_boardable_vehicle(route, "S1")
    assert bus.eta_minutes == pytest.approx(1)
    ride = estimate_ride_time("S1", "S2", bus)
    assert ride.minutes == pytest.approx(1)
    assert ride.stops_between == 1


def test_loop_bound_holds_when_next_pass_listed_first():
    vehicle = make_vehicle("V1", ("S1", 300), ("S0", 420), ("S1", 60), ("S2", 120))
    route = make_route(["S0", "S1", "S2", "S0"], [vehicle])
    bus = find_next_boardable_vehicle(route, "S1")
    assert bus.eta_minutes == pytest.approx(1)
    assert not estimate_ride_time("S1", "S0", bus).valid
