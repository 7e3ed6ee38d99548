import logging
from functools import cmp_to_key
from .api_client import APIClient
from .arrivals import estimate_ride_time, find_next_boardable_vehicle
from .config import Config
from .direction import check_direction
from .geo import distance_meters, walk_time_minutes
from .itinerary import assemble_itinerary
from .proximity import find_nearby_stops


class ErrorKind:
    MISSING_INPUT = "missing_input"
    NO_NEARBY_START_STOPS = "no_nearby_start_stops"
    NO_NEARBY_END_STOPS = "no_nearby_end_stops"
    NO_SERVICE = "no_service"


class CandidateTrip:
    """One start stop / end stop / vehicle combination and its total time."""

    def __init__(self, route, start, end, bus, ride, walk_from_stop_time, stops_between):
        self.route = route
        self.start_stop = start.stop
        self.end_stop = end.stop
        self.vehicle_id = bus.vehicle_id
        self.bus_eta = bus.eta_minutes
        self.bus_countdown = bus.countdown_label
        self.is_delayed = bus.is_delayed
        self.arrival_time = bus.predicted_clock_time
        self.walk_to_stop_time = start.walk_time_minutes
        self.bus_wait_time = bus.wait_minutes
        self.bus_travel_time = ride.minutes
        self.walk_from_stop_time = walk_from_stop_time
        self.stops_between = stops_between
        self.total_time = (
            self.walk_to_stop_time +
            self.bus_wait_time +
            self.bus_travel_time +
            self.walk_from_stop_time
        )

    def to_dict(self):
        return {
            "routeId": self.route.route_id,
            "routeName": self.route.name,
            "routeColor": self.route.color,
            "startStop": self.start_stop.to_dict(),
            "endStop": self.end_stop.to_dict(),
            "busId": self.vehicle_id,
            "busETA": self.bus_eta,
            "busCountdown": self.bus_countdown,
            "isDelayed": self.is_delayed,
            "arrivalTime": self.arrival_time,
            "walkToStopTime": self.walk_to_stop_time,
            "busWaitTime": self.bus_wait_time,
            "busTravelTime": self.bus_travel_time,
            "walkFromStopTime": self.walk_from_stop_time,
            "totalTime": self.total_time,
            "stopsBetween": self.stops_between,
        }

    def __repr__(self):
        return (f"CandidateTrip({self.route.route_id}: {self.start_stop.stop_id} -> "
                f"{self.end_stop.stop_id}, {self.total_time:.1f}min)")


class TripResult:
    """
    Outcome of a planning request. `recommendation` is either "bus", with a
    primary trip and up to two alternatives, or "error", with an error kind
    and a reason. Both variants carry the direct walking time when it could
    be computed.
    """

    def __init__(self, recommendation, direct_walk_time=None, primary_trip=None, alternatives=(),
                 error_kind=None, reason=None, nearby_start_stops=(), nearby_end_stops=()):
        self.recommendation = recommendation
        self.direct_walk_time = direct_walk_time
        self.primary_trip = primary_trip
        self.alternatives = tuple(alternatives)
        self.error_kind = error_kind
        self.reason = reason
        self.nearby_start_stops = tuple(nearby_start_stops)
        self.nearby_end_stops = tuple(nearby_end_stops)

    @classmethod
    def error(cls, error_kind, reason, direct_walk_time=None, nearby_start_stops=(), nearby_end_stops=()):
        return cls("error", direct_walk_time=direct_walk_time, error_kind=error_kind, reason=reason,
                   nearby_start_stops=nearby_start_stops, nearby_end_stops=nearby_end_stops)

    @classmethod
    def bus(cls, trips, direct_walk_time):
        return cls("bus", direct_walk_time=direct_walk_time, primary_trip=trips[0], alternatives=trips[1:3])

    @property
    def is_bus(self):
        return self.recommendation == "bus"

    @property
    def route(self):
        return self.primary_trip.route if self.primary_trip else None

    def to_dict(self):
        result = {
            "recommendation": self.recommendation,
            "directWalkTime": self.direct_walk_time,
        }
        if self.is_bus:
            result["route"] = {
                "id": self.route.route_id,
                "name": self.route.name,
                "color": self.route.color,
            }
            result["trip"] = self.primary_trip.to_dict()
            result["alternativeTrips"] = [trip.to_dict() for trip in self.alternatives]
        else:
            result["errorKind"] = self.error_kind
            result["reason"] = self.reason
            result["nearbyStartStops"] = [stop.to_dict() for stop in self.nearby_start_stops]
            result["nearbyEndStops"] = [stop.to_dict() for stop in self.nearby_end_stops]
        return result

    def __repr__(self):
        if self.is_bus:
            return f"TripResult(bus, {self.primary_trip}, {len(self.alternatives)} alternatives)"
        return f"TripResult(error, {self.error_kind}: {self.reason})"


def _trip_ordering(threshold):
    def compare(a, b):
        time_diff = a.total_time - b.total_time
        # Arrival times this close are treated as tied; prefer the closer start stop
        if abs(time_diff) <= threshold:
            walk_diff = a.walk_to_stop_time - b.walk_to_stop_time
            if walk_diff:
                return -1 if walk_diff < 0 else 1
        if time_diff:
            return -1 if time_diff < 0 else 1
        return 0
    return cmp_to_key(compare)


def rank_trips(trips, similarity_threshold=None):
    """Sorts candidate trips best first."""
    threshold = Config.TIME_SIMILARITY_THRESHOLD_MINUTES if similarity_threshold is None else similarity_threshold
    return sorted(trips, key=_trip_ordering(threshold))


def plan_trip(origin, destination, snapshot, radius_meters=None, similarity_threshold=None):
    """
    Plans the fastest walk, wait, ride, walk trip between two locations.

    Every pair of nearby start and end stops on the same route is checked for
    direction of travel, matched against live vehicle predictions and scored
    by total time. "No trip found" conditions are returned as error results,
    never raised.

    Args:
        origin: Coordinate where the rider starts
        destination: Coordinate the rider wants to reach
        snapshot: NetworkSnapshot to plan against; it is only read
        radius_meters: Walking radius used at both ends
        similarity_threshold: Minutes within which trips count as tied

    Returns:
        TripResult
    """
    if origin is None or destination is None or snapshot is None:
        logging.warning("Cannot plan trip: origin, destination or network snapshot missing")
        return TripResult.error(ErrorKind.MISSING_INPUT, "Missing required data")

    radius = Config.WALK_RADIUS_METERS if radius_meters is None else radius_meters
    direct_walk_time = walk_time_minutes(distance_meters(origin, destination))

    start_stops = find_nearby_stops(origin, snapshot, radius)
    end_stops = find_nearby_stops(destination, snapshot, radius)

    if not start_stops:
        logging.info(f"No bus stops within {radius:.0f}m of origin {origin}")
        return TripResult.error(ErrorKind.NO_NEARBY_START_STOPS, f"No bus stops nearby (within {radius:.0f}m)",
                                direct_walk_time, nearby_start_stops=start_stops, nearby_end_stops=end_stops)
    if not end_stops:
        logging.info(f"No bus stops within {radius:.0f}m of destination {destination}")
        return TripResult.error(ErrorKind.NO_NEARBY_END_STOPS, "No bus stops near destination",
                                direct_walk_time, nearby_start_stops=start_stops, nearby_end_stops=end_stops)

    logging.debug(f"Checking {len(start_stops)} start stops x {len(end_stops)} end stops")
    trips = []
    for start in start_stops:
        route = snapshot.get_route(start.route_id)
        if route is None:
            continue

        for end in end_stops:
            if end.route_id != start.route_id or end.stop_id == start.stop_id:
                continue

            direction = check_direction(route, start.stop_id, end.stop_id)
            if not direction.valid:
                continue

            bus = find_next_boardable_vehicle(route, start.stop_id, start.walk_time_minutes)
            if bus is None:
                logging.debug(f"No boardable bus at {start.stop_id} on route {route.route_id}")
                continue

            ride = estimate_ride_time(start.stop_id, end.stop_id, bus)
            if not ride.valid:
                continue

            walk_from_stop = walk_time_minutes(distance_meters(end.stop.coordinate, destination))
            trips.append(CandidateTrip(route, start, end, bus, ride, walk_from_stop, direction.stops_between))

    if not trips:
        logging.info("No candidate trips survived direction and live-data checks")
        return TripResult.error(ErrorKind.NO_SERVICE, "No buses running along your route", direct_walk_time,
                                nearby_start_stops=start_stops, nearby_end_stops=end_stops)

    ranked = rank_trips(trips, similarity_threshold)
    logging.info(f"Best of {len(ranked)} trips: {ranked[0]}")
    return TripResult.bus(ranked, direct_walk_time)


class RoutePlanner:
    def __init__(self, snapshot_source=None, api_client=None):
        """
        Initialize the RoutePlanner.

        Args:
            snapshot_source: Object with a current() method returning the latest
                NetworkSnapshot, usually a SnapshotRefresher. When omitted a
                fresh snapshot is fetched for every request.
            api_client: APIClient used for snapshots and walking directions
        """
        self.api_client = api_client or APIClient()
        self.snapshot_source = snapshot_source

    def current_snapshot(self):
        if self.snapshot_source is not None:
            return self.snapshot_source.current()
        return self.api_client.get_snapshot()

    def plan(self, origin, destination, snapshot=None):
        if snapshot is None:
            snapshot = self.current_snapshot()
        return plan_trip(origin, destination, snapshot)

    def plan_itinerary(self, origin, destination, snapshot=None, now=None):
        """
        Plans a trip and attaches walking directions for its walk segments.
        The two walks of a bus trip are fetched concurrently.
        """
        result = self.plan(origin, destination, snapshot)
        if result.is_bus:
            trip = result.primary_trip
            pairs = [
                (origin, trip.start_stop.coordinate),
                (trip.end_stop.coordinate, destination),
            ]
        else:
            pairs = [(origin, destination)]

        if origin is None or destination is None:
            walking_segments = []
        else:
            walking_segments = self.api_client.get_walking_segments(pairs)
        return assemble_itinerary(result, walking_segments, origin, destination, now=now)
