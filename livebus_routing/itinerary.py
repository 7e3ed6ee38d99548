"""
Itinerary assembly.

Turns a planning result plus walking directions into the ordered list of
segments a rider follows: walk to the stop, wait, ride, walk to the
destination. When no bus trip was found the itinerary is a single walk.
Assembly only reshapes data; wait and ride numbers are passed through as
planned.
"""

import datetime
import logging
import pytz
from .config import Config
from .geo import distance_meters, walk_time_minutes


class WalkingSegment:
    """Walking directions between two points as returned by the directions service."""

    def __init__(self, distance_meters, duration_seconds, polyline=(), steps=(), is_estimate=False):
        self.distance_meters = distance_meters
        self.duration_seconds = duration_seconds
        self.polyline = list(polyline)
        self.steps = list(steps)
        self.is_estimate = is_estimate

    @classmethod
    def estimate(cls, start, end):
        """Straight-line estimate used when real directions are unavailable."""
        distance = distance_meters(start, end)
        return cls(
            distance_meters=distance,
            duration_seconds=walk_time_minutes(distance) * 60,
            polyline=[start, end],
            steps=[],
            is_estimate=True,
        )

    @property
    def duration_minutes(self):
        return self.duration_seconds / 60

    def __repr__(self):
        flag = ", estimate" if self.is_estimate else ""
        return f"WalkingSegment({self.distance_meters:.0f}m, {self.duration_seconds:.0f}s{flag})"


def _place(coordinate, stop=None):
    if stop is not None:
        return stop.to_dict()
    return coordinate.to_dict()


class WalkSegment:
    type = "walk"

    def __init__(self, start, end, walking, from_stop=None, to_stop=None):
        self.start = start
        self.end = end
        self.from_stop = from_stop
        self.to_stop = to_stop
        self.walking = walking

    @property
    def duration(self):
        return self.walking.duration_minutes

    def to_dict(self):
        return {
            "type": self.type,
            "from": _place(self.start, self.from_stop),
            "to": _place(self.end, self.to_stop),
            "duration": self.duration,
            "distance": self.walking.distance_meters,
            "polyline": [point.to_dict() for point in self.walking.polyline],
            "steps": self.walking.steps,
            "isEstimate": self.walking.is_estimate,
        }


class WaitSegment:
    type = "wait"

    def __init__(self, stop, duration, vehicle_id, countdown=None, is_delayed=False):
        self.stop = stop
        self.duration = duration
        self.vehicle_id = vehicle_id
        self.countdown = countdown
        self.is_delayed = is_delayed

    def to_dict(self):
        return {
            "type": self.type,
            "stop": self.stop.to_dict(),
            "duration": self.duration,
            "bus": {"id": self.vehicle_id, "countdown": self.countdown, "isDelayed": self.is_delayed},
        }


class RideSegment:
    type = "ride"

    def __init__(self, from_stop, to_stop, duration, stops_between):
        self.from_stop = from_stop
        self.to_stop = to_stop
        self.duration = duration
        self.stops_between = stops_between

    def to_dict(self):
        return {
            "type": self.type,
            "fromStop": self.from_stop.to_dict(),
            "toStop": self.to_stop.to_dict(),
            "duration": self.duration,
            "stopsBetween": self.stops_between,
        }


class Itinerary:
    def __init__(self, recommendation, segments, direct_walk_time=None, route=None,
                 error=None, alternatives=(), eta=None):
        self.recommendation = recommendation
        self.segments = list(segments)
        self.direct_walk_time = direct_walk_time
        self.route = route
        self.error = error
        self.alternatives = list(alternatives)
        self.eta = eta

    @property
    def total_time(self):
        if not self.segments:
            return None
        return sum(segment.duration for segment in self.segments)

    @property
    def is_estimate(self):
        """True when any walk duration is a local estimate rather than real directions."""
        return any(s.type == "walk" and s.walking.is_estimate for s in self.segments)

    def to_dict(self):
        return {
            "recommendation": self.recommendation,
            "error": self.error,
            "route": None if self.route is None else {
                "id": self.route.route_id,
                "name": self.route.name,
                "color": self.route.color,
            },
            "segments": [segment.to_dict() for segment in self.segments],
            "totalTime": self.total_time,
            "eta": self.eta,
            "isEstimate": self.is_estimate,
            "directWalkTime": self.direct_walk_time,
            "alternativeTrips": [trip.to_dict() for trip in self.alternatives],
        }

    def __repr__(self):
        return f"Itinerary({self.recommendation}, {len(self.segments)} segments)"


def format_duration(minutes):
    """Format a duration in minutes the way riders read it."""
    if minutes < 1:
        return "less than 1 min"
    mins = round(minutes)
    return f"{mins} min{'s' if mins != 1 else ''}"


def format_eta(total_minutes, now=None):
    """
    Clock time after total_minutes, as a 12-hour "H:MM" label in Config.TIMEZONE.
    """
    tz = pytz.timezone(Config.TIMEZONE)
    if now is None:
        now = datetime.datetime.now(tz)
    elif now.tzinfo is None:
        now = tz.localize(now)
    else:
        now = now.astimezone(tz)

    eta = now + datetime.timedelta(minutes=total_minutes)
    hours = eta.hour
    if hours > 12:
        hours -= 12
    if hours == 0:
        hours = 12
    return f"{hours}:{eta.minute:02d}"


def _walking_or_estimate(walking_segments, index, start, end):
    if index < len(walking_segments) and walking_segments[index] is not None:
        return walking_segments[index]
    logging.warning(f"Walking directions missing from {start} to {end}, using estimate")
    return WalkingSegment.estimate(start, end)


def assemble_itinerary(trip_result, walking_segments, origin, destination, now=None):
    """
    Builds the ordered segment list for a planning result.

    Args:
        trip_result: TripResult from plan_trip
        walking_segments: WalkingSegment list; [to start stop, from end stop]
            for a bus trip, [direct walk] otherwise. Missing entries are
            replaced by straight-line estimates.
        origin: Coordinate the trip starts at
        destination: Coordinate the trip ends at
        now: Clock used for the ETA label

    Returns:
        Itinerary
    """
    walking_segments = list(walking_segments or [])

    if not trip_result.is_bus:
        if origin is None or destination is None:
            logging.warning(f"No locations to walk between: {trip_result.reason}")
            return Itinerary("walk", [], trip_result.direct_walk_time, error=trip_result.reason)

        walk = WalkSegment(origin, destination, _walking_or_estimate(walking_segments, 0, origin, destination))
        return Itinerary(
            "walk",
            [walk],
            direct_walk_time=trip_result.direct_walk_time,
            error=trip_result.reason,
            eta=format_eta(walk.duration, now),
        )

    trip = trip_result.primary_trip
    start = trip.start_stop.coordinate
    end = trip.end_stop.coordinate
    segments = [
        WalkSegment(origin, start, _walking_or_estimate(walking_segments, 0, origin, start),
                    to_stop=trip.start_stop),
        WaitSegment(trip.start_stop, trip.bus_wait_time, trip.vehicle_id, trip.bus_countdown, trip.is_delayed),
        RideSegment(trip.start_stop, trip.end_stop, trip.bus_travel_time, trip.stops_between),
        WalkSegment(end, destination, _walking_or_estimate(walking_segments, 1, end, destination),
                    from_stop=trip.end_stop),
    ]
    itinerary = Itinerary(
        "bus",
        segments,
        direct_walk_time=trip_result.direct_walk_time,
        route=trip_result.route,
        alternatives=trip_result.alternatives,
    )
    itinerary.eta = format_eta(itinerary.total_time, now)
    return itinerary
