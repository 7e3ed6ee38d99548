import logging


class DirectionCheck:
    def __init__(self, valid, stops_between=0):
        self.valid = valid
        self.stops_between = stops_between

    def __bool__(self):
        return self.valid

    def __eq__(self, other):
        if not isinstance(other, DirectionCheck):
            return NotImplemented
        return (self.valid, self.stops_between) == (other.valid, other.stops_between)

    def __repr__(self):
        return f"DirectionCheck(valid={self.valid}, stops_between={self.stops_between})"


INVALID = DirectionCheck(False, 0)


def check_direction(route, start_stop_id, end_stop_id):
    """
    Checks whether riding from start_stop_id to end_stop_id follows the route's
    direction of travel.

    The stop order of the route defines "forward". On a circular route the
    trip may wrap past the end of the list. When the last stop repeats the
    first one, the repeat is excluded, so every physical stop is counted once.

    Returns:
        DirectionCheck: valid flag and number of stops ridden
    """
    if route is None or not route.stops:
        logging.debug(f"No route or stops for {start_stop_id} -> {end_stop_id}")
        return INVALID

    stops = route.ring_stops
    positions = {}
    for index, stop in enumerate(stops):
        positions.setdefault(stop.stop_id, index)

    start_index = positions.get(start_stop_id)
    end_index = positions.get(end_stop_id)
    if start_index is None or end_index is None:
        return INVALID
    if start_index == end_index:
        return INVALID

    if end_index > start_index:
        return DirectionCheck(True, end_index - start_index)

    if route.is_circular:
        # Remaining stops to the end of the loop, then from the loop start to the end stop
        total_stops = len(stops)
        return DirectionCheck(True, (total_stops - start_index) + end_index)

    return INVALID
