"""
Tour stop generation.

Looks up the top sights of a city through Google Places and stores each one
as a stop record, reusing the existing record when a stop with the same name
already exists in that city.
"""

from datetime import datetime
from typing import Any
import uuid

from fastapi.concurrency import run_in_threadpool
import structlog

from citycast.clients.google import GooglePlacesClient
from citycast.errors import InvalidRequestError, NotFoundError, ServiceNotConfiguredError
from citycast.repositories.base import StopEntity, StopRepository

logger = structlog.get_logger(__name__)

CITY_PLACEHOLDER = "<<stad>>"
DEFAULT_QUERY = "top 10 {tour_type} bezienswaardigheden in {city}"
MAX_PLACES = 10


def build_search_query(stop_city: str, tour_type: str, prompt: str | None = None) -> str:
    """Text query for Places; a custom prompt may reference the city as ``<<stad>>``."""
    if prompt and prompt.strip():
        return prompt.replace(CITY_PLACEHOLDER, stop_city).strip()
    return DEFAULT_QUERY.format(tour_type=tour_type, city=stop_city)


def place_to_stop(place: dict[str, Any]) -> dict[str, Any] | None:
    """Map a Places result onto stop fields; None when name or location is missing."""
    name = (place.get("displayName") or {}).get("text")
    location = place.get("location") or {}
    lat = location.get("latitude")
    lng = location.get("longitude")
    if not name or lat is None or lng is None:
        return None
    return {"name": name, "description": name, "latitude": lat, "longitude": lng}


class StopService:
    """Creates and lists stop records."""

    def __init__(self, repository: StopRepository, places_client: GooglePlacesClient):
        self.repository = repository
        self.places_client = places_client

    async def save_stop(
        self,
        name: str,
        description: str,
        stop_city: str,
        tour_type: str,
        stop_lat: float,
        stop_lng: float,
    ) -> str:
        """Store a stop unless one with this name exists in the city; returns its id."""
        existing_id = await self.repository.find_by_name(stop_city, name)
        if existing_id:
            logger.info(
                "Stop already exists, skipping save",
                name=name,
                stop_city=stop_city,
                stop_id=existing_id,
            )
            return existing_id

        now = datetime.now()
        stop = StopEntity(
            stop_id=str(uuid.uuid4()),
            stop_city=stop_city,
            tour_type=tour_type,
            stop_name=name,
            stop_description=description,
            stop_lat=float(stop_lat),
            stop_lng=float(stop_lng),
            created_at=now,
            last_updated=now,
        )
        await self.repository.create_stop(stop)
        return stop.stop_id

    async def generate_stops(
        self,
        stop_city: str | None,
        tour_type: str | None,
        prompt: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        Search the city's sights and persist them as stops.

        Logic:
        1. Validate city and tour type
        2. Places text search (max 10 results)
        3. Save each place, reusing ids of existing stops
        4. Return the stops in search order
        """
        stop_city = (stop_city or "").strip()
        tour_type = (tour_type or "").strip()
        if not stop_city or not tour_type:
            raise InvalidRequestError("stopCity and tourType are required")

        if not self.places_client.is_configured:
            logger.error("Places API key not configured")
            raise ServiceNotConfiguredError("Places service not configured")

        query = build_search_query(stop_city, tour_type, prompt)
        places = await run_in_threadpool(
            self.places_client.search_text, query, "nl", MAX_PLACES
        )

        candidates = [stop for stop in map(place_to_stop, places) if stop is not None]
        if not candidates:
            raise NotFoundError(f"No results found for {stop_city}")

        stops = []
        for candidate in candidates:
            stop_id = await self.save_stop(
                candidate["name"],
                candidate["description"],
                stop_city,
                tour_type,
                candidate["latitude"],
                candidate["longitude"],
            )
            stops.append({**candidate, "id": stop_id})

        logger.info(
            "City stops generated",
            stop_city=stop_city,
            tour_type=tour_type,
            places=len(places),
            stops=len(stops),
        )
        return stops

    async def list_stops(
        self, stop_city: str | None, tour_type: str | None = None
    ) -> list[StopEntity]:
        stop_city = (stop_city or "").strip()
        if not stop_city:
            raise InvalidRequestError("stopCity is required")
        return await self.repository.list_stops(stop_city, tour_type or None)
