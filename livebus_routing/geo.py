import math
from .config import Config

EARTH_RADIUS_METERS = 6371000


class Coordinate:
    """A latitude/longitude pair in degrees."""

    __slots__ = ("latitude", "longitude")

    def __init__(self, latitude, longitude):
        latitude = float(latitude)
        longitude = float(longitude)
        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            raise ValueError(f"Coordinate must be finite, got ({latitude}, {longitude})")
        if not -90 <= latitude <= 90:
            raise ValueError(f"Latitude out of range: {latitude}")
        if not -180 <= longitude <= 180:
            raise ValueError(f"Longitude out of range: {longitude}")
        self.latitude = latitude
        self.longitude = longitude

    @classmethod
    def parse(cls, text: str):
        """Parse a "lat,lon" string."""
        parts = text.split(",")
        if len(parts) != 2:
            raise ValueError(f"Expected 'lat,lon', got '{text}'")
        return cls(parts[0].strip(), parts[1].strip())

    def to_dict(self):
        return {"latitude": self.latitude, "longitude": self.longitude}

    def __eq__(self, other):
        if not isinstance(other, Coordinate):
            return NotImplemented
        return self.latitude == other.latitude and self.longitude == other.longitude

    def __hash__(self):
        return hash((self.latitude, self.longitude))

    def __repr__(self):
        return f"Coordinate({self.latitude}, {self.longitude})"


def haversine_distance(lat1, lon1, lat2, lon2):
    """
    Calculate the great-circle distance between two points on Earth in meters.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)
    a = math.sin(delta_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def distance_meters(a, b):
    """
    Distance between two Coordinates. Returns infinity when either point is
    missing so that an absent location is simply unreachable.
    """
    if a is None or b is None:
        return math.inf
    return haversine_distance(a.latitude, a.longitude, b.latitude, b.longitude)


def walk_time_minutes(distance, speed_mps=None):
    """Convert a walking distance in meters to minutes."""
    speed = speed_mps if speed_mps is not None else Config.WALKING_SPEED_MPS
    return distance / speed / 60


def decode_polyline(encoded: str, precision: int = 5):
    """Decode a Google encoded polyline into a list of Coordinates.

    OpenRouteService returns route geometry in this format unless GeoJSON
    is requested.
    """
    coordinates = []
    index = 0
    lat = 0
    lon = 0
    factor = 10 ** precision

    while index < len(encoded):
        # Decode latitude
        shift = 0
        result = 0
        while True:
            b = ord(encoded[index]) - 63
            index += 1
            result |= (b & 0x1f) << shift
            shift += 5
            if b < 0x20:
                break
        lat += ~(result >> 1) if (result & 1) else (result >> 1)

        # Decode longitude
        shift = 0
        result = 0
        while True:
            b = ord(encoded[index]) - 63
            index += 1
            result |= (b & 0x1f) << shift
            shift += 5
            if b < 0x20:
                break
        lon += ~(result >> 1) if (result & 1) else (result >> 1)

        coordinates.append(Coordinate(lat / factor, lon / factor))

    return coordinates
