import itertools

from livebus_routing.direction import check_direction
from livebus_routing.network import Route
from livebus_routing.stop import Stop


def make_route(stop_ids, is_circular=False):
    coords = {}
    stops = []
    for i, stop_id in enumerate(stop_ids):
        lat, lon = coords.setdefault(stop_id, (40.0 + i * 0.01, -83.0))
        stops.append(Stop(stop_id, stop_id, lat, lon))
    return Route("R", "Route", "#000", stops, is_circular=is_circular)


def test_linear_route_valid_only_forward():
    ids = ["S0", "S1", "S2", "S3", "S4"]
    route = make_route(ids)
    for (i, a), (j, b) in itertools.permutations(enumerate(ids), 2):
        result = check_direction(route, a, b)
        assert result.valid == (i < j)
        assert result.stops_between == (j - i if i < j else 0)


def test_backward_trip_is_invalid():
    route = make_route(["S0", "S1", "S2", "S3"])
    result = check_direction(route, "S2", "S0")
    assert not result.valid
    assert result.stops_between == 0


def test_missing_or_identical_stops_are_invalid():
    route = make_route(["S0", "S1", "S2"])
    assert not check_direction(route, "S0", "S9").valid
    assert not check_direction(route, "S9", "S1").valid
    assert not check_direction(route, "S1", "S1").valid
    assert not check_direction(None, "S0", "S1").valid
    assert not check_direction(make_route([]), "S0", "S1").valid


def test_loop_with_repeated_terminal_wraps_around():
    route = make_route(["S0", "S1", "S2", "S0"])
    # Terminal duplicate excluded: three physical stops
    result = check_direction(route, "S2", "S0")
    assert result.valid
    assert result.stops_between == 1
    assert check_direction(route, "S1", "S0").stops_between == 2
    assert check_direction(route, "S0", "S2").stops_between == 2
    assert not check_direction(route, "S0", "S0").valid


def test_flagged_circular_route_wraps_around():
    ids = ["A", "B", "C", "D"]
    route = make_route(ids, is_circular=True)
    n = len(ids)
    for (i, a), (j, b) in itertools.permutations(enumerate(ids), 2):
        result = check_direction(route, a, b)
        assert result.valid
        expected = j - i if j > i else (n - i) + j
        assert result.stops_between == expected
