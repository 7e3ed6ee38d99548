from .geo import Coordinate


class Stop:
    def __init__(self, stop_id, name, lat, lon):
        self.stop_id = str(stop_id)
        self.name = name
        self.coordinate = Coordinate(lat, lon)

    @property
    def lat(self):
        return self.coordinate.latitude

    @property
    def lon(self):
        return self.coordinate.longitude

    def to_dict(self):
        return {
            "id": self.stop_id,
            "name": self.name,
            "latitude": self.lat,
            "longitude": self.lon,
        }

    def __eq__(self, other):
        if not isinstance(other, Stop):
            return NotImplemented
        return (self.stop_id, self.name, self.coordinate) == (other.stop_id, other.name, other.coordinate)

    def __hash__(self):
        return hash((self.stop_id, self.coordinate))

    def __repr__(self):
        return f"Stop({self.stop_id}, {self.name}, {self.lat}, {self.lon})"


class NearbyStop:
    """A stop found within walking range of a location, tagged with its route."""

    def __init__(self, stop, route, walk_distance_meters, walk_time_minutes):
        self.stop = stop
        self.route_id = route.route_id
        self.route_name = route.name
        self.route_color = route.color
        self.walk_distance_meters = walk_distance_meters
        self.walk_time_minutes = walk_time_minutes

    @property
    def stop_id(self):
        return self.stop.stop_id

    def to_dict(self):
        data = self.stop.to_dict()
        data.update({
            "routeId": self.route_id,
            "routeName": self.route_name,
            "routeColor": self.route_color,
            "distanceMeters": self.walk_distance_meters,
            "walkTimeMinutes": self.walk_time_minutes,
        })
        return data

    def __repr__(self):
        return (f"NearbyStop({self.stop_id}, route={self.route_id}, "
                f"{self.walk_distance_meters:.0f}m, {self.walk_time_minutes:.1f}min)")
