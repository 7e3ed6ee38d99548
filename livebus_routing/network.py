"""
In-memory model of the live bus network.

A NetworkSnapshot is a point-in-time view of every active route, its ordered
stops and the vehicles currently tracked on it. Snapshots are built once by the
network-data client and then only read; the planner never mutates them.
"""

import logging
import math
from .geo import Coordinate
from .stop import Stop


def _as_list(value):
    if isinstance(value, list):
        return value
    if value is not None:
        logging.warning(f"Expected a list, got {type(value).__name__}")
    return []


def _parse_seconds(value):
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class Prediction:
    def __init__(self, stop_id, seconds_to_arrival=None, predicted_clock_time=None,
                 countdown_label=None, is_delayed=False, stop_name=None):
        self.stop_id = str(stop_id)
        self.seconds_to_arrival = _parse_seconds(seconds_to_arrival)
        self.predicted_clock_time = predicted_clock_time
        self.countdown_label = countdown_label
        self.is_delayed = bool(is_delayed)
        self.stop_name = stop_name

    @property
    def usable(self):
        """Negative, non-finite or missing arrival times cannot be boarded against."""
        seconds = self.seconds_to_arrival
        return seconds is not None and math.isfinite(seconds) and seconds >= 0

    @property
    def minutes_to_arrival(self):
        return self.seconds_to_arrival / 60 if self.usable else None

    @classmethod
    def from_dict(cls, data):
        return cls(
            stop_id=data["stopId"],
            seconds_to_arrival=data.get("timeToArrivalInSeconds"),
            predicted_clock_time=data.get("predictionTime"),
            countdown_label=data.get("predictionCountdown"),
            is_delayed=data.get("isDelayed", False),
            stop_name=data.get("stopName"),
        )

    def __repr__(self):
        return f"Prediction({self.stop_id}, {self.seconds_to_arrival}s)"


class Vehicle:
    def __init__(self, vehicle_id, coordinate=None, heading=None, predictions=(),
                 speed=None, destination=None, last_updated=None):
        self.vehicle_id = str(vehicle_id)
        self.coordinate = coordinate
        self.heading = heading
        self.predictions = tuple(predictions)
        self.speed = speed
        self.destination = destination
        self.last_updated = last_updated

    @property
    def next_stop(self):
        """Label for the next stop: first prediction's stop name, then destination."""
        if self.predictions and self.predictions[0].stop_name:
            return self.predictions[0].stop_name
        return self.destination or "Unknown"

    @classmethod
    def from_dict(cls, data):
        coordinate = None
        if data.get("latitude") is not None and data.get("longitude") is not None:
            try:
                coordinate = Coordinate(data["latitude"], data["longitude"])
            except (TypeError, ValueError) as e:
                logging.warning(f"Ignoring invalid position for vehicle {data.get('id')}: {e}")

        predictions = []
        for pred in _as_list(data.get("predictions")):
            try:
                predictions.append(Prediction.from_dict(pred))
            except (KeyError, TypeError) as e:
                logging.warning(f"Skipping malformed prediction on vehicle {data.get('id')}: {e}")

        return cls(
            vehicle_id=data["id"],
            coordinate=coordinate,
            heading=data.get("heading"),
            predictions=predictions,
            speed=data.get("speed"),
            destination=data.get("destination"),
            last_updated=data.get("updated"),
        )

    def __repr__(self):
        return f"Vehicle({self.vehicle_id}, {len(self.predictions)} predictions)"


class Route:
    def __init__(self, route_id, name, color, stops=(), vehicles=(), is_circular=False):
        self.route_id = str(route_id)
        self.name = name
        self.color = color
        self.stops = tuple(stops)
        self.vehicles = tuple(vehicles)
        self._is_circular = bool(is_circular)

    @property
    def has_terminal_duplicate(self):
        return len(self.stops) > 2 and self.stops[0].stop_id == self.stops[-1].stop_id

    @property
    def is_circular(self):
        return self._is_circular or self.has_terminal_duplicate

    @property
    def ring_stops(self):
        """Stops with a loop's repeated terminal stop removed."""
        if self.has_terminal_duplicate:
            return self.stops[:-1]
        return self.stops

    def get_stop(self, stop_id):
        for stop in self.stops:
            if stop.stop_id == stop_id:
                return stop
        return None

    def with_vehicles(self, vehicles):
        return Route(self.route_id, self.name, self.color, self.stops, vehicles, self._is_circular)

    @classmethod
    def from_dict(cls, route_id, data, vehicles=()):
        """Build a Route from the bus API's route payload."""
        stops = []
        for stop in _as_list(data.get("stops")):
            try:
                stops.append(Stop(
                    stop_id=stop["id"],
                    name=stop.get("name", ""),
                    lat=stop["latitude"],
                    lon=stop["longitude"],
                ))
            except (KeyError, TypeError, ValueError) as e:
                logging.warning(f"Skipping malformed stop on route {route_id}: {e}")

        return cls(
            route_id=route_id,
            name=data.get("name") or "Unknown",
            color=data.get("color") or "#990000",
            stops=stops,
            vehicles=vehicles,
            is_circular=data.get("isCircular", False),
        )

    def __repr__(self):
        return f"Route({self.route_id}, {len(self.stops)} stops, {len(self.vehicles)} vehicles)"


class NetworkSnapshot:
    """Immutable collection of routes keyed by route id."""

    def __init__(self, routes=(), fetched_at=None):
        self._routes = {route.route_id: route for route in routes}
        self.fetched_at = fetched_at

    @property
    def routes(self):
        return tuple(self._routes.values())

    def get_route(self, route_id):
        return self._routes.get(route_id)

    def __contains__(self, route_id):
        return route_id in self._routes

    def __len__(self):
        return len(self._routes)

    def __iter__(self):
        return iter(self._routes.values())

    def __repr__(self):
        return f"NetworkSnapshot({len(self._routes)} routes, fetched_at={self.fetched_at})"
