import requests
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from .config import Config
from .geo import decode_polyline
from .itinerary import WalkingSegment
from .network import NetworkSnapshot, Route, Vehicle


class APIClient:
    """
    Client for the live bus network API and the OpenRouteService walking API.
    Builds network snapshots and fetches walking directions.
    """

    def __init__(self, bus_api_url=None, ors_url=None, ors_api_key=None, timeout=None, max_workers=None):
        """
        Initialize the API client. Arguments default to the Config values.
        """
        self.bus_api_url = (bus_api_url or Config.BUS_API_URL).rstrip("/")
        self.ors_url = ors_url or Config.ORS_URL
        self.ors_api_key = ors_api_key if ors_api_key is not None else Config.ORS_API_KEY
        self.timeout = timeout if timeout is not None else Config.REQUEST_TIMEOUT_SECONDS
        self.max_workers = max_workers if max_workers is not None else Config.MAX_PARALLEL_REQUESTS

    def _get_data(self, url):
        """
        GETs a bus API endpoint and returns its "data" payload, or None on failure.
        """
        headers = {"accept": "application/json"}
        try:
            response = requests.get(url, headers=headers, timeout=self.timeout)
            if response.status_code != 200:
                logging.warning(f"{url} fetch failed: HTTP {response.status_code}")
                return None
            payload = response.json()
            if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
                logging.warning(f"Unexpected response format from {url}")
                return None
            return payload["data"]
        except requests.exceptions.Timeout:
            logging.warning(f"Timeout fetching {url}")
            return None
        except requests.exceptions.RequestException as e:
            logging.error(f"Request error fetching {url}: {e}")
            return None
        except ValueError as e:
            logging.error(f"Invalid JSON from {url}: {e}")
            return None

    def fetch_vehicles(self, route_id):
        """
        Fetches the vehicles currently tracked on a route. Returns an empty list
        when the vehicle feed is unavailable.
        """
        data = self._get_data(f"{self.bus_api_url}/routes/{route_id}/vehicles")
        if not data:
            return []

        vehicle_list = data.get("vehicles") or []
        if not isinstance(vehicle_list, list):
            logging.warning(f"Unexpected vehicles format for route {route_id}")
            return []

        vehicles = []
        for vehicle in vehicle_list:
            try:
                vehicles.append(Vehicle.from_dict(vehicle))
            except (KeyError, TypeError, AttributeError) as e:
                logging.warning(f"Skipping malformed vehicle on route {route_id}: {e}")
        return vehicles

    def fetch_route(self, route_id):
        """
        Fetches a route's stops and its live vehicles.
        Returns None if the route itself could not be fetched.
        """
        data = self._get_data(f"{self.bus_api_url}/routes/{route_id}")
        if not data:
            logging.warning(f"No data for route {route_id}")
            return None

        vehicles = self.fetch_vehicles(route_id)
        route = Route.from_dict(route_id, data, vehicles)
        logging.debug(f"Fetched {route}")
        return route

    def get_snapshot(self, route_ids=None):
        """
        Fetches every route in parallel and returns a NetworkSnapshot.
        A route that fails to load is left out; the others are unaffected.
        """
        route_ids = list(route_ids or Config.ROUTE_IDS)
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            routes = list(executor.map(self.fetch_route, route_ids))

        loaded = [route for route in routes if route is not None]
        logging.info(f"Loaded {len(loaded)} of {len(route_ids)} routes")
        return NetworkSnapshot(loaded, fetched_at=time.time())

    def get_walking_segment(self, start, end):
        """
        Fetches walking directions between two Coordinates from OpenRouteService.

        If the service fails, a straight-line estimate flagged with
        is_estimate is returned instead so planning is never blocked.
        """
        headers = {
            "Content-Type": "application/json; charset=utf-8",
            "Accept": "application/json, application/geo+json; charset=utf-8",
        }
        if self.ors_api_key:
            headers["Authorization"] = self.ors_api_key

        body = {"coordinates": [[start.longitude, start.latitude], [end.longitude, end.latitude]]}
        try:
            response = requests.post(self.ors_url, json=body, headers=headers, timeout=self.timeout)
            if response.status_code != 200:
                logging.warning(f"Walking directions failed: HTTP {response.status_code}: {response.text[:200]}")
                return WalkingSegment.estimate(start, end)

            route = response.json()["routes"][0]
            segment = route["segments"][0]
            steps = [
                {
                    "distance": step.get("distance"),
                    "duration": step.get("duration"),
                    "instruction": step.get("instruction"),
                    "type": step.get("type"),
                    "name": step.get("name"),
                    "wayPoints": step.get("way_points"),
                }
                for step in segment.get("steps", [])
            ]
            return WalkingSegment(
                distance_meters=segment["distance"],
                duration_seconds=segment["duration"],
                polyline=decode_polyline(route["geometry"]),
                steps=steps,
            )
        except requests.exceptions.RequestException as e:
            logging.warning(f"Walking directions unavailable, using estimate: {e}")
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logging.warning(f"Unexpected walking directions response, using estimate: {e}")
        return WalkingSegment.estimate(start, end)

    def get_walking_segments(self, pairs):
        """
        Fetches walking directions for several (start, end) pairs concurrently.
        Results are in the same order as the pairs.
        """
        pairs = list(pairs)
        if not pairs:
            return []
        with ThreadPoolExecutor(max_workers=len(pairs)) as executor:
            return list(executor.map(lambda pair: self.get_walking_segment(*pair), pairs))
