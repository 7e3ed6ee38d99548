import logging
from .config import Config
from .geo import distance_meters, walk_time_minutes
from .stop import NearbyStop


def find_nearby_stops(location, snapshot, radius_meters=None):
    """
    Finds every stop within walking distance of a location.

    Stops shared by several routes are reported once per route, since the
    caller needs the route association. A loop's repeated terminal stop is
    reported once.

    Args:
        location: Coordinate to search around
        snapshot: NetworkSnapshot to search
        radius_meters: Maximum walking distance (defaults to Config.WALK_RADIUS_METERS)

    Returns:
        list: NearbyStop objects in snapshot order
    """
    radius = Config.WALK_RADIUS_METERS if radius_meters is None else radius_meters
    nearby = []

    for route in snapshot:
        if not route.stops:
            continue
        seen = set()
        for stop in route.stops:
            if stop.stop_id in seen:
                continue
            seen.add(stop.stop_id)
            distance = distance_meters(location, stop.coordinate)
            if distance <= radius:
                nearby.append(NearbyStop(stop, route, distance, walk_time_minutes(distance)))

    logging.debug(f"Found {len(nearby)} stops within {radius:.0f}m of {location}")
    return nearby
