#!/usr/bin/env python3
import argparse
import logging
import json
import sys

from livebus_routing.api_client import APIClient
from livebus_routing.config import Config
from livebus_routing.geo import Coordinate
from livebus_routing.itinerary import format_duration
from livebus_routing.proximity import find_nearby_stops
from livebus_routing.route_planner import RoutePlanner


def setup_logging(debug=False):
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def parse_coordinate(text):
    """argparse type for "lat,lon" arguments."""
    try:
        return Coordinate.parse(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def print_itinerary(itinerary):
    if itinerary.recommendation == "walk":
        print(f"🚶 Walk directly ({itinerary.error})")
    else:
        route = itinerary.route
        print(f"🚌 Take the {route.name} ({route.route_id})")

    for i, segment in enumerate(itinerary.segments):
        duration = format_duration(segment.duration)
        if segment.type == "walk":
            target = segment.to_stop.name if segment.to_stop else "destination"
            estimate = " (estimate)" if segment.walking.is_estimate else ""
            print(f"  {i+1}. Walk to {target}: {duration}, {segment.walking.distance_meters:.0f} m{estimate}")
        elif segment.type == "wait":
            delayed = " ⚠️ delayed" if segment.is_delayed else ""
            print(f"  {i+1}. Wait at {segment.stop.name} for bus {segment.vehicle_id}: {duration}{delayed}")
        elif segment.type == "ride":
            print(f"  {i+1}. Ride to {segment.to_stop.name}: {duration}, {segment.stops_between} stops")

    if itinerary.total_time is not None:
        print(f"  ⏱️ Total: {format_duration(itinerary.total_time)}, arrive at {itinerary.eta}")
    if itinerary.direct_walk_time is not None:
        print(f"  💡 Walking directly: {format_duration(itinerary.direct_walk_time)}")
    for trip in itinerary.alternatives:
        print(f"  ↪ Alternative: {trip.route.route_id} from {trip.start_stop.name} "
              f"to {trip.end_stop.name}, {format_duration(trip.total_time)}")


def plan(origin, destination, as_json=False):
    """Plan a trip between two coordinates with live data."""
    client = APIClient()
    planner = RoutePlanner(api_client=client)
    itinerary = planner.plan_itinerary(origin, destination)

    if as_json:
        print(json.dumps(itinerary.to_dict(), indent=2))
    else:
        print_itinerary(itinerary)


def list_stops(location, radius=None):
    """List bus stops within walking distance of a coordinate."""
    snapshot = APIClient().get_snapshot()
    stops = sorted(find_nearby_stops(location, snapshot, radius), key=lambda s: s.walk_distance_meters)
    if not stops:
        print("❌ No bus stops within walking distance.")
        return
    print(f"✅ Found {len(stops)} nearby stops:")
    for stop in stops:
        print(f"  📍 {stop.stop.name} ({stop.stop_id}) on {stop.route_id}: "
              f"{stop.walk_distance_meters:.0f} m, {format_duration(stop.walk_time_minutes)}")


def list_routes():
    """List the routes currently served and their tracked vehicles."""
    snapshot = APIClient().get_snapshot()
    if not len(snapshot):
        print("❌ No routes could be loaded.")
        return
    for route in snapshot:
        loop = " (loop)" if route.is_circular else ""
        print(f"  🚌 {route.route_id} {route.name}{loop}: {len(route.stops)} stops, {len(route.vehicles)} vehicles")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="LiveBus Routing CLI - plan bus trips with live arrival predictions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Plan a trip between two coordinates
  ./main_cli.py plan 40.0017,-83.0197 39.9980,-83.0090

  # List stops near a coordinate
  ./main_cli.py stops 40.0017,-83.0197 --radius 300

  # List routes with live vehicles
  ./main_cli.py routes
        """
    )

    parser.add_argument('--debug', action='store_true', default=Config.DEBUG, help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Sub-command help')

    plan_parser = subparsers.add_parser('plan', help='Plan a trip between two coordinates')
    plan_parser.add_argument('origin', type=parse_coordinate, help='Starting point as lat,lon')
    plan_parser.add_argument('destination', type=parse_coordinate, help='Destination as lat,lon')
    plan_parser.add_argument('--json', action='store_true', help='Print the itinerary as JSON')

    stops_parser = subparsers.add_parser('stops', help='List nearby stops')
    stops_parser.add_argument('location', type=parse_coordinate, help='Location as lat,lon')
    stops_parser.add_argument('--radius', type=float, help='Search radius in meters')

    subparsers.add_parser('routes', help='List routes and live vehicles')

    args = parser.parse_args(argv)
    setup_logging(args.debug)

    if args.command == 'plan':
        plan(args.origin, args.destination, as_json=args.json)
    elif args.command == 'stops':
        list_stops(args.location, args.radius)
    elif args.command == 'routes':
        list_routes()
    else:
        parser.print_help()
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
