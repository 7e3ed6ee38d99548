from livebus_routing.network import NetworkSnapshot, Prediction, Route, Vehicle
from livebus_routing.proximity import find_nearby_stops
from livebus_routing.geo import Coordinate
from livebus_routing.stop import Stop


def test_prediction_usable():
    assert Prediction("S1", 120).usable
    assert Prediction("S1", 0).usable
    assert not Prediction("S1", -30).usable
    assert not Prediction("S1", None).usable
    assert not Prediction("S1", float("nan")).usable
    assert not Prediction("S1", "soon").usable
    assert Prediction("S1", "90").minutes_to_arrival == 1.5
    assert Prediction("S1", None).minutes_to_arrival is None


def test_vehicle_from_dict():
    vehicle = Vehicle.from_dict({
        "id": 42,
        "latitude": 40.0,
        "longitude": -83.0,
        "heading": 90,
        "destination": "Campus Loop",
        "predictions": [
            {"stopId": "S1", "timeToArrivalInSeconds": 60, "predictionCountdown": "1 min",
             "isDelayed": True, "stopName": "First Stop"},
            {"timeToArrivalInSeconds": 120},
        ],
    })
    assert vehicle.vehicle_id == "42"
    assert vehicle.coordinate == Coordinate(40.0, -83.0)
    assert len(vehicle.predictions) == 1
    assert vehicle.predictions[0].is_delayed
    assert vehicle.next_stop == "First Stop"


def test_vehicle_next_stop_falls_back_to_destination():
    assert Vehicle("1", destination="Downtown").next_stop == "Downtown"
    assert Vehicle("1").next_stop == "Unknown"


def test_route_from_dict_skips_malformed_stops():
    route = Route.from_dict("CC", {
        "name": "Campus Connector",
        "stops": [
            {"id": "A", "name": "A", "latitude": 40.0, "longitude": -83.0},
            {"id": "B", "name": "B", "latitude": 95.0, "longitude": -83.0},
            {"name": "C"},
        ],
    })
    assert route.name == "Campus Connector"
    assert route.color == "#990000"
    assert [s.stop_id for s in route.stops] == ["A"]


def test_route_detects_loop_from_terminal_duplicate():
    stops = [Stop("S0", "S0", 40.0, -83.0), Stop("S1", "S1", 40.01, -83.0),
             Stop("S2", "S2", 40.02, -83.0), Stop("S0", "S0", 40.0, -83.0)]
    route = Route("L", "Loop", "#000", stops)
    assert route.is_circular
    assert [s.stop_id for s in route.ring_stops] == ["S0", "S1", "S2"]
    assert not Route("L", "Line", "#000", stops[:3]).is_circular


def test_snapshot_lookup():
    route = Route("BE", "Buckeye Express", "#BB0000")
    snapshot = NetworkSnapshot([route], fetched_at=1.0)
    assert snapshot.get_route("BE") is route
    assert "BE" in snapshot
    assert snapshot.get_route("XX") is None
    assert len(snapshot) == 1


def test_find_nearby_stops_within_radius():
    route = Route("A", "A", "#000", [
        Stop("S0", "S0", 40.0, -83.0),
        Stop("S1", "S1", 40.01, -83.0),
    ])
    nearby = find_nearby_stops(Coordinate(40.0, -83.0), NetworkSnapshot([route]), 400)
    assert [s.stop_id for s in nearby] == ["S0"]
    assert nearby[0].route_id == "A"
    assert nearby[0].walk_time_minutes == 0


def test_find_nearby_stops_keeps_one_entry_per_route():
    shared = (40.0, -83.0)
    route_a = Route("A", "A", "#000", [Stop("X", "Shared", *shared)])
    route_b = Route("B", "B", "#fff", [Stop("X", "Shared", *shared)])
    empty = Route("E", "Empty", "#111", [])
    nearby = find_nearby_stops(Coordinate(*shared), NetworkSnapshot([route_a, empty, route_b]), 400)
    assert [(s.route_id, s.stop_id) for s in nearby] == [("A", "X"), ("B", "X")]


def test_find_nearby_stops_reports_loop_terminal_once():
    stops = [Stop("S0", "S0", 40.0, -83.0), Stop("S1", "S1", 40.01, -83.0),
             Stop("S2", "S2", 40.02, -83.0), Stop("S0", "S0", 40.0, -83.0)]
    nearby = find_nearby_stops(Coordinate(40.0, -83.0), NetworkSnapshot([Route("L", "L", "#000", stops)]), 400)
    assert len(nearby) == 1
