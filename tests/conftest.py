"""Shared test configuration and fixtures for all tests."""

import os
import tempfile

# Settings are read at import time; configure before citycast is imported
os.environ["MAPS_KEY"] = "test-maps-key"
os.environ["PLACES_API_KEY"] = "test-places-key"
os.environ["OPENTRIPMAP_API_KEY"] = "test-otm-key"
os.environ["MOLLIE_API_KEY"] = "test_mollie-key"
os.environ["DUCKDB_DB_PATH"] = os.path.join(tempfile.gettempdir(), "citycast-tests.duckdb")

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402

from citycast.main import app  # noqa: E402
from citycast.navigation import Coordinates, NavigationStep, Route  # noqa: E402
from citycast.repositories import initialize_repositories, reset_repositories  # noqa: E402
from citycast.repositories.duckdb_repository import (  # noqa: E402
    DuckDBFeedbackRepository,
    DuckDBStopRepository,
)

# A route heading due north along one meridian; 0.001 degrees of latitude is ~111 m
START = Coordinates(lat=52.3690, lng=4.8900)
STEP_ENDS = [
    Coordinates(lat=52.3700, lng=4.8900),
    Coordinates(lat=52.3710, lng=4.8900),
    Coordinates(lat=52.3720, lng=4.8900),
]


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "citycast.duckdb")


@pytest.fixture
def stop_repository(db_path) -> DuckDBStopRepository:
    return DuckDBStopRepository(db_path)


@pytest.fixture
def feedback_repository(db_path) -> DuckDBFeedbackRepository:
    return DuckDBFeedbackRepository(db_path)


@pytest.fixture
def steps() -> tuple[NavigationStep, ...]:
    """Three 111 m steps heading north."""
    return tuple(
        NavigationStep(
            index=i,
            end_location=end,
            distance=111.0,
            duration=80.0,
            instruction=f"Step {i}",
        )
        for i, end in enumerate(STEP_ENDS)
    )


@pytest.fixture
def polyline() -> tuple[Coordinates, ...]:
    """Points every ~11 m from the start to the last step end."""
    return tuple(
        Coordinates(lat=round(START.lat + i * 0.0001, 6), lng=START.lng) for i in range(31)
    )


@pytest.fixture
def route(steps, polyline) -> Route:
    return Route(steps=steps, polyline=polyline, total_distance=333.0, total_duration=240.0)


@pytest.fixture
def directions_result() -> dict:
    """Trimmed Google Directions web-service response with one leg."""
    return {
        "status": "OK",
        "routes": [
            {
                "overview_path": [
                    {"lat": START.lat, "lng": START.lng},
                    {"lat": 52.3695, "lng": 4.8900},
                    {"lat": 52.3700, "lng": 4.8900},
                    {"lat": 52.3705, "lng": 4.8900},
                    {"lat": 52.3710, "lng": 4.8900},
                ],
                "legs": [
                    {
                        "distance": {"value": 222, "text": "0,2 km"},
                        "duration": {"value": 160, "text": "3 min."},
                        "steps": [
                            {
                                "html_instructions": "Ga naar het <b>noorden</b> op <b>Damrak</b>",
                                "distance": {"value": 111, "text": "111 m"},
                                "duration": {"value": 80, "text": "1 min."},
                                "start_location": {"lat": START.lat, "lng": START.lng},
                                "end_location": {"lat": 52.3700, "lng": 4.8900},
                            },
                            {
                                "html_instructions": 'Sla <b>linksaf</b><div style="font-size:0.9em">Bestemming aan de rechterkant</div>',
                                "distance": {"value": 111, "text": "111 m"},
                                "duration": {"value": 80, "text": "1 min."},
                                "maneuver": "turn-left",
                                "start_location": {"lat": 52.3700, "lng": 4.8900},
                                "end_location": {"lat": 52.3710, "lng": 4.8900},
                            },
                        ],
                    }
                ],
            }
        ],
    }


@pytest.fixture
def client(db_path):
    """Test client backed by a fresh DuckDB file."""
    initialize_repositories(db_path=db_path)
    yield TestClient(app)
    app.dependency_overrides.clear()
    reset_repositories()
