"""
Turn-by-turn progress tracking.

Given the steps of a routed leg and a live location, work out which step the
user is on, how far the next maneuver is and whether they have left the
route. Step advancement only ever moves forward so noisy GPS fixes cannot
make the instruction flicker back and forth.
"""

from collections.abc import Sequence
import math
from typing import Any

import structlog

from citycast.navigation.directions import parse_directions_result
from citycast.navigation.geo import haversine_distance, round_half_up
from citycast.navigation.models import (
    Coordinates,
    LocationSample,
    NavigationProgress,
    NavigationStep,
    Route,
)

logger = structlog.get_logger(__name__)

STEP_ARRIVAL_RADIUS_METERS = 20.0
DEFAULT_OFF_ROUTE_THRESHOLD_METERS = 50.0


def _clamp_index(index: int, steps: Sequence[NavigationStep]) -> int:
    if not steps:
        return 0
    return min(max(index, 0), len(steps) - 1)


def find_current_step(
    steps: Sequence[NavigationStep],
    location: LocationSample | None,
    current_index: int = 0,
) -> int:
    """
    Scan forward from ``current_index`` for the step the user is on.

    A step whose end point is closer than 20 m counts as done and the next
    one is returned, unless it is the last step. Running off the end of the
    scan resolves to the last step.
    """
    if location is None or not steps:
        return 0

    for i in range(max(current_index, 0), len(steps)):
        step = steps[i]
        distance_to_end = haversine_distance(
            location.lat, location.lng, step.end_location.lat, step.end_location.lng
        )

        if distance_to_end < STEP_ARRIVAL_RADIUS_METERS and i < len(steps) - 1:
            return i + 1

        if distance_to_end >= STEP_ARRIVAL_RADIUS_METERS:
            return i

    return len(steps) - 1


def advance_step(
    steps: Sequence[NavigationStep],
    location: LocationSample | None,
    current_index: int = 0,
) -> int:
    """Current step after applying ``location``; never lower than ``current_index``."""
    current_index = _clamp_index(current_index, steps)
    if location is None or not steps:
        return current_index

    return max(current_index, find_current_step(steps, location, current_index))


def distance_to_maneuver(
    step: NavigationStep | None, location: LocationSample | None
) -> int:
    """Rounded metres from ``location`` to the end of ``step``."""
    if step is None or location is None:
        return 0
    return round_half_up(
        haversine_distance(
            location.lat, location.lng, step.end_location.lat, step.end_location.lng
        )
    )


def check_off_route(
    polyline: Sequence[Coordinates],
    location: LocationSample | None,
    threshold: float = DEFAULT_OFF_ROUTE_THRESHOLD_METERS,
) -> bool:
    """
    True when every polyline point is more than ``threshold`` metres away.

    The scan stops as soon as a point closer than half the threshold is
    found. A distance exactly equal to the threshold is still on route.
    """
    if location is None or not polyline:
        return False

    min_distance = math.inf
    for point in polyline:
        distance = haversine_distance(location.lat, location.lng, point.lat, point.lng)
        min_distance = min(min_distance, distance)

        if min_distance < threshold / 2:
            return False

    return min_distance > threshold


def track_progress(
    route: Route | None,
    location: LocationSample | None,
    current_step_index: int = 0,
    threshold: float = DEFAULT_OFF_ROUTE_THRESHOLD_METERS,
) -> NavigationProgress:
    """Evaluate one location sample against a route snapshot."""
    if route is None or route.is_empty:
        return NavigationProgress()

    steps = route.steps
    index = advance_step(steps, location, current_step_index)
    current_step = steps[index]
    next_step = steps[index + 1] if index + 1 < len(steps) else None

    return NavigationProgress(
        current_step_index=index,
        current_step=current_step,
        next_step=next_step,
        distance_to_maneuver=distance_to_maneuver(current_step, location),
        is_off_route=check_off_route(route.polyline, location, threshold),
    )


class NavigationTracker:
    """
    Keeps a route and the current step across successive location updates.

    Example:
        >>> tracker = NavigationTracker()
        >>> tracker.load_directions(directions_json)
        >>> progress = tracker.update(LocationSample(lat=52.37, lng=4.89))
        >>> progress.current_step_index
    """

    def __init__(self, off_route_threshold: float = DEFAULT_OFF_ROUTE_THRESHOLD_METERS):
        self.off_route_threshold = off_route_threshold
        self.route = Route.empty()
        self.current_step_index = 0
        self.is_off_route = False

    @property
    def current_step(self) -> NavigationStep | None:
        if self.route.is_empty:
            return None
        return self.route.steps[self.current_step_index]

    @property
    def next_step(self) -> NavigationStep | None:
        next_index = self.current_step_index + 1
        if next_index < len(self.route.steps):
            return self.route.steps[next_index]
        return None

    def load(self, route: Route | None) -> None:
        """Start navigating a new route from its first step."""
        self.route = route or Route.empty()
        self.current_step_index = 0
        self.is_off_route = False
        logger.info("Navigation route loaded", steps=len(self.route.steps))

    def load_directions(self, result: Any) -> bool:
        """Load a Google Directions response; False when it could not be parsed."""
        route = parse_directions_result(result)
        self.load(route)
        return route is not None

    def update(self, location: LocationSample | None) -> NavigationProgress:
        """Apply a location sample and return the resulting progress."""
        progress = track_progress(
            self.route, location, self.current_step_index, self.off_route_threshold
        )
        if progress.current_step_index != self.current_step_index:
            logger.debug(
                "Navigation step advanced",
                previous=self.current_step_index,
                current=progress.current_step_index,
            )
        if progress.is_off_route and not self.is_off_route:
            logger.info("User went off route", step=progress.current_step_index)

        self.current_step_index = progress.current_step_index
        self.is_off_route = progress.is_off_route
        return progress

    def reset(self) -> None:
        self.load(None)
