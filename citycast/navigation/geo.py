"""Great-circle helpers."""

import math

EARTH_RADIUS_METERS = 6371000.0


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Distance in metres between two points using the Haversine formula."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lng2 - lng1)

    a = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, e.g. 0.5 -> 1 and 2.5 -> 3."""
    return math.floor(value + 0.5)


def format_distance(meters: float) -> str:
    """Format a distance for display: "120 m" below a kilometre, "1.2 km" above."""
    if meters < 1000:
        return f"{round_half_up(meters)} m"
    return f"{meters / 1000:.1f} km"
