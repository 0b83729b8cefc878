"""Immutable snapshots used by the navigation tracker."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Coordinates:
    """A WGS84 point in decimal degrees."""

    lat: float
    lng: float

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class NavigationStep:
    """
    A single routed step from Google Directions.

    Attributes:
        index: Position of the step within its leg
        end_location: Maneuver point that ends this step
        distance: Step length in metres
        duration: Step duration in seconds
        start_location: Where the step begins, when known
        instruction: Plain-text instruction (HTML stripped)
        instruction_html: Instruction as returned by Google
        distance_text: Formatted distance, e.g. "120 m"
        duration_text: Formatted duration, e.g. "2 min"
        maneuver: Maneuver type such as "turn-left"; "straight" when absent
    """

    index: int
    end_location: Coordinates
    distance: float = 0.0
    duration: float = 0.0
    start_location: Coordinates | None = None
    instruction: str = ""
    instruction_html: str = ""
    distance_text: str = ""
    duration_text: str = ""
    maneuver: str = "straight"

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "instruction": self.instruction,
            "instruction_html": self.instruction_html,
            "distance": self.distance,
            "distance_text": self.distance_text,
            "duration": self.duration,
            "duration_text": self.duration_text,
            "maneuver": self.maneuver,
            "start_location": self.start_location.to_dict() if self.start_location else None,
            "end_location": self.end_location.to_dict(),
        }


@dataclass(frozen=True)
class LocationSample:
    """A live GPS fix."""

    lat: float
    lng: float
    accuracy: float = 0.0
    timestamp: str | None = None


@dataclass(frozen=True)
class Route:
    """Ordered steps of one leg plus the overview polyline."""

    steps: tuple[NavigationStep, ...] = ()
    polyline: tuple[Coordinates, ...] = ()
    total_distance: float = 0.0
    total_distance_text: str = ""
    total_duration: float = 0.0
    total_duration_text: str = ""

    @classmethod
    def empty(cls) -> "Route":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.steps


@dataclass(frozen=True)
class NavigationProgress:
    """Result of evaluating one location sample against a route."""

    current_step_index: int = 0
    current_step: NavigationStep | None = None
    next_step: NavigationStep | None = None
    distance_to_maneuver: int = 0
    is_off_route: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_step_index": self.current_step_index,
            "current_step": self.current_step.to_dict() if self.current_step else None,
            "next_step": self.next_step.to_dict() if self.next_step else None,
            "distance_to_maneuver": self.distance_to_maneuver,
            "is_off_route": self.is_off_route,
        }
