"""
LiveBus Routing

This module recommends the fastest walk, wait, ride, walk trip between two
points on a fixed-route bus network, using live vehicle arrival predictions.

To use, fetch a network snapshot and pass it to plan_trip, or let a
RoutePlanner fetch snapshots and walking directions for you.

Example:
    from livebus_routing import APIClient, Coordinate, RoutePlanner, SnapshotRefresher

    client = APIClient()
    refresher = SnapshotRefresher(client.get_snapshot)
    refresher.start()

    planner = RoutePlanner(refresher, client)
    itinerary = planner.plan_itinerary(Coordinate(40.0017, -83.0197), Coordinate(39.9980, -83.0090))
"""

from .api_client import APIClient
from .geo import Coordinate
from .itinerary import Itinerary, assemble_itinerary
from .network import NetworkSnapshot
from .refresher import SnapshotRefresher
from .route_planner import RoutePlanner, TripResult, plan_trip
from .stop import Stop

__all__ = [
    "APIClient",
    "Coordinate",
    "Itinerary",
    "NetworkSnapshot",
    "RoutePlanner",
    "SnapshotRefresher",
    "Stop",
    "TripResult",
    "assemble_itinerary",
    "plan_trip",
]
