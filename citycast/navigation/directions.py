"""
Turn Google Directions responses into navigation routes.

Parsing is lenient: anything that cannot be read is logged and skipped, and a
response without a usable leg yields ``None`` so callers fall back to the
neutral navigation state.
"""

from html import unescape
import math
import re
from typing import Any

import structlog

from citycast.navigation.models import Coordinates, NavigationStep, Route

logger = structlog.get_logger(__name__)

# Block-level tags become spaces so "Turn left<div>Destination</div>" keeps a gap
BLOCK_TAG_PATTERN = re.compile(r"<\s*(?:div|br|p)\b[^>]*>", re.IGNORECASE)
TAG_PATTERN = re.compile(r"<[^>]+>")
WHITESPACE_PATTERN = re.compile(r"\s+")


def strip_html(html: str | None) -> str:
    """Remove tags and entities from a Google instruction string."""
    if not html:
        return ""
    text = BLOCK_TAG_PATTERN.sub(" ", html)
    text = TAG_PATTERN.sub("", text)
    return WHITESPACE_PATTERN.sub(" ", unescape(text)).strip()


def decode_polyline(encoded: str, precision: int = 5) -> list[Coordinates]:
    """Decode a Google encoded polyline string."""
    factor = 10**precision
    points: list[Coordinates] = []
    index = lat = lng = 0
    length = len(encoded)

    while index < length:
        deltas = []
        for _ in range(2):
            shift = result = 0
            while True:
                if index >= length:
                    raise ValueError("Truncated polyline")
                byte = ord(encoded[index]) - 63
                index += 1
                result |= (byte & 0x1F) << shift
                shift += 5
                if byte < 0x20:
                    break
            deltas.append(~(result >> 1) if result & 1 else result >> 1)
        lat += deltas[0]
        lng += deltas[1]
        points.append(Coordinates(lat=lat / factor, lng=lng / factor))

    return points


def _coordinates(value: Any) -> Coordinates | None:
    """Read ``{"lat": .., "lng": ..}`` (or ``lon``/``longitude``) into Coordinates."""
    if not isinstance(value, dict):
        return None
    lat = value.get("lat", value.get("latitude"))
    lng = value.get("lng", value.get("lon", value.get("longitude")))
    try:
        lat, lng = float(lat), float(lng)
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    return Coordinates(lat=lat, lng=lng)


def _value_and_text(value: Any) -> tuple[float, str]:
    """Directions encodes distance/duration as ``{"value": .., "text": ..}``."""
    if isinstance(value, dict):
        try:
            return float(value.get("value", 0) or 0), str(value.get("text", "") or "")
        except (TypeError, ValueError):
            return 0.0, ""
    if isinstance(value, (int, float)):
        return float(value), ""
    return 0.0, ""


def parse_step(index: int, data: Any) -> NavigationStep | None:
    """Parse one step; returns None when it has no readable end location."""
    if not isinstance(data, dict):
        return None

    end_location = _coordinates(data.get("end_location", data.get("endLocation")))
    if end_location is None:
        return None

    html = data.get("html_instructions", data.get("instructions", "")) or ""
    distance, distance_text = _value_and_text(data.get("distance"))
    duration, duration_text = _value_and_text(data.get("duration"))

    return NavigationStep(
        index=index,
        end_location=end_location,
        distance=distance,
        duration=duration,
        start_location=_coordinates(data.get("start_location", data.get("startLocation"))),
        instruction=data.get("instruction") or strip_html(html),
        instruction_html=html,
        distance_text=data.get("distance_text") or distance_text,
        duration_text=data.get("duration_text") or duration_text,
        maneuver=data.get("maneuver") or "straight",
    )


def build_route(
    steps: list[Any] | None,
    polyline: list[Any] | None = None,
) -> Route:
    """
    Build a route from plain dictionaries.

    Steps and polyline points that cannot be read are skipped; step indices
    are reassigned so they stay contiguous.
    """
    parsed_steps: list[NavigationStep] = []
    skipped = 0
    for raw in steps or []:
        step = parse_step(len(parsed_steps), raw)
        if step is None:
            skipped += 1
            continue
        parsed_steps.append(step)

    points = [point for point in map(_coordinates, polyline or []) if point is not None]

    if skipped:
        logger.warning("Skipped unreadable navigation steps", skipped=skipped)

    return Route(
        steps=tuple(parsed_steps),
        polyline=tuple(points),
        total_distance=sum(step.distance for step in parsed_steps),
        total_duration=sum(step.duration for step in parsed_steps),
    )


def parse_directions_result(result: Any) -> Route | None:
    """
    Parse the first leg of a Google Directions response.

    The polyline is taken from ``overview_path`` when present, otherwise the
    encoded ``overview_polyline.points`` is decoded.
    """
    try:
        route_data = result["routes"][0]
        leg = route_data["legs"][0]
    except (KeyError, IndexError, TypeError):
        logger.warning("Invalid directions result")
        return None
    if not isinstance(leg, dict) or not isinstance(route_data, dict):
        logger.warning("Invalid directions result")
        return None

    raw_steps = leg.get("steps") or []
    overview_path = route_data.get("overview_path")
    overview = route_data.get("overview_polyline")
    encoded = overview.get("points") if isinstance(overview, dict) else None
    if (
        not isinstance(raw_steps, list)
        or (overview_path and not isinstance(overview_path, list))
        or (encoded and not isinstance(encoded, str))
    ):
        logger.warning("Invalid directions result")
        return None

    steps = []
    for raw in raw_steps:
        step = parse_step(len(steps), raw)
        if step is not None:
            steps.append(step)

    polyline: list[Coordinates] = []
    if overview_path:
        polyline = [
            point for point in map(_coordinates, overview_path) if point is not None
        ]
    elif encoded:
        try:
            polyline = decode_polyline(encoded)
        except (TypeError, ValueError):
            logger.warning("Could not decode overview polyline")

    total_distance, total_distance_text = _value_and_text(leg.get("distance"))
    total_duration, total_duration_text = _value_and_text(leg.get("duration"))

    logger.debug(
        "Directions result parsed",
        steps=len(steps),
        polyline_points=len(polyline),
        total_distance=total_distance,
    )

    return Route(
        steps=tuple(steps),
        polyline=tuple(polyline),
        total_distance=total_distance,
        total_distance_text=total_distance_text,
        total_duration=total_duration,
        total_duration_text=total_duration_text,
    )
