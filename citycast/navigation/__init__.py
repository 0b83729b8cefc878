"""Turn-by-turn navigation: geometry, Directions parsing and progress tracking."""

from .directions import build_route, decode_polyline, parse_directions_result, strip_html
from .geo import EARTH_RADIUS_METERS, format_distance, haversine_distance, round_half_up
from .models import (
    Coordinates,
    LocationSample,
    NavigationProgress,
    NavigationStep,
    Route,
)
from .tracker import (
    DEFAULT_OFF_ROUTE_THRESHOLD_METERS,
    STEP_ARRIVAL_RADIUS_METERS,
    NavigationTracker,
    advance_step,
    check_off_route,
    distance_to_maneuver,
    find_current_step,
    track_progress,
)

__all__ = [
    "DEFAULT_OFF_ROUTE_THRESHOLD_METERS",
    "EARTH_RADIUS_METERS",
    "STEP_ARRIVAL_RADIUS_METERS",
    "Coordinates",
    "LocationSample",
    "NavigationProgress",
    "NavigationStep",
    "NavigationTracker",
    "Route",
    "advance_step",
    "build_route",
    "check_off_route",
    "decode_polyline",
    "distance_to_maneuver",
    "find_current_step",
    "format_distance",
    "haversine_distance",
    "parse_directions_result",
    "round_half_up",
    "strip_html",
    "track_progress",
]
