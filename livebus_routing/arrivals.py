"""
Matching live vehicle predictions against a rider's plans.

Predictions are the only source of timing: a bus is boardable when its
predicted arrival at the stop is no earlier than the rider can walk there, and
the ride time comes from the same vehicle's predicted arrival at the end stop.
"""

import logging
import math
from .direction import check_direction


class BoardableVehicle:
    """The vehicle a rider can catch at a stop, with its wait time."""

    def __init__(self, vehicle, prediction, eta_minutes, wait_minutes, route=None):
        self.vehicle = vehicle
        self.prediction = prediction
        self.route = route
        self.eta_minutes = eta_minutes
        self.wait_minutes = wait_minutes

    @property
    def vehicle_id(self):
        return self.vehicle.vehicle_id

    @property
    def predictions(self):
        return self.vehicle.predictions

    @property
    def is_delayed(self):
        return self.prediction.is_delayed

    @property
    def countdown_label(self):
        return self.prediction.countdown_label

    @property
    def predicted_clock_time(self):
        return self.prediction.predicted_clock_time

    def __repr__(self):
        return f"BoardableVehicle({self.vehicle_id}, eta={self.eta_minutes:.1f}, wait={self.wait_minutes:.1f})"


class RideEstimate:
    def __init__(self, minutes=0.0, stops_between=0):
        self.minutes = minutes
        self.stops_between = stops_between

    @property
    def valid(self):
        return self.minutes > 0

    def __repr__(self):
        return f"RideEstimate({self.minutes:.1f}min, {self.stops_between} stops)"


def find_next_boardable_vehicle(route, stop_id, earliest_arrival_minutes=0):
    """
    Finds the soonest vehicle predicted at stop_id no earlier than the rider
    can reach it.

    Args:
        route: Route whose vehicles are scanned
        stop_id: Stop the rider boards at
        earliest_arrival_minutes: Rider's walking time to the stop

    Returns:
        BoardableVehicle or None if no vehicle qualifies
    """
    if route is None or not route.vehicles:
        return None

    best = None
    for vehicle in route.vehicles:
        for prediction in vehicle.predictions:
            if prediction.stop_id != stop_id:
                continue
            if not prediction.usable:
                logging.debug(f"Skipping unusable prediction for stop {stop_id} on vehicle {vehicle.vehicle_id}")
                continue
            eta = prediction.minutes_to_arrival
            # A bus that arrives before the rider does cannot be boarded
            if eta < earliest_arrival_minutes:
                continue
            if best is None or eta < best.eta_minutes:
                best = BoardableVehicle(vehicle, prediction, eta, eta - earliest_arrival_minutes, route)

    return best


def estimate_ride_time(start_stop_id, end_stop_id, matched_vehicle):
    """
    Estimates the ride between two stops from the matched vehicle's own
    prediction timeline.

    The end-stop prediction must fall after the boarding prediction and
    before the vehicle comes back around to the start stop, so a prediction
    from the next lap of a loop is never used. Without such a prediction the
    estimate is invalid; there is no distance-based fallback.

    Returns:
        RideEstimate: minutes is 0 when no valid estimate exists
    """
    if matched_vehicle is None or matched_vehicle.vehicle is None:
        return RideEstimate()

    route = matched_vehicle.route
    if route is not None and not check_direction(route, start_stop_id, end_stop_id):
        return RideEstimate()

    predictions = [p for p in matched_vehicle.predictions if p.usable]
    start_times = [p.seconds_to_arrival for p in predictions if p.stop_id == start_stop_id]

    boarding = matched_vehicle.prediction
    if boarding is not None and boarding.usable and boarding.stop_id == start_stop_id:
        start_seconds = boarding.seconds_to_arrival
    elif start_times:
        start_seconds = min(start_times)
    else:
        return RideEstimate()

    # The vehicle's next pass of the start stop closes the window, wherever it is listed
    loop_bound = min((s for s in start_times if s > start_seconds), default=math.inf)

    end_seconds = None
    for prediction in predictions:
        if prediction.stop_id != end_stop_id:
            continue
        seconds = prediction.seconds_to_arrival
        if start_seconds < seconds < loop_bound and (end_seconds is None or seconds < end_seconds):
            end_seconds = seconds
    if end_seconds is None:
        logging.debug(f"Vehicle {matched_vehicle.vehicle_id} has no prediction for {end_stop_id} after {start_stop_id}")
        return RideEstimate()

    stops_between = len({
        p.stop_id for p in predictions
        if start_seconds < p.seconds_to_arrival <= end_seconds
    })
    return RideEstimate((end_seconds - start_seconds) / 60, stops_between)
