"""Stop generation, listing and enrichment endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, Query

from citycast.api.v1.dependencies import get_enrichment_service, get_stop_service
from citycast.api.v1.schemas import GeneratedStop, StopListResponse, StoredStop
from citycast.services import EnrichmentService, StopService

router = APIRouter(prefix="/api/v1/stops", tags=["stops"])


@router.get("/generate", response_model=list[GeneratedStop])
async def generate_city_stops(
    stop_city: str | None = Query(None, alias="stopCity"),
    tour_type: str | None = Query(None, alias="tourType"),
    prompt: str | None = Query(None, description="Search text; <<stad>> is replaced by the city"),
    service: StopService = Depends(get_stop_service),
) -> list[dict[str, Any]]:
    """
    Find the top sights of a city and store them as stops.

    Existing stops (same name, same city) keep their id; new ones are created.
    """
    return await service.generate_stops(stop_city, tour_type, prompt)


@router.get("", response_model=StopListResponse)
async def list_city_stops(
    stop_city: str | None = Query(None, alias="stopCity"),
    tour_type: str | None = Query(None, alias="tourType"),
    service: StopService = Depends(get_stop_service),
) -> StopListResponse:
    """Stored stops of a city, optionally for one tour type."""
    stops = await service.list_stops(stop_city, tour_type)
    return StopListResponse(
        stops=[StoredStop(**stop.to_dict()) for stop in stops], count=len(stops)
    )


@router.get("/enrichment")
async def get_stop_enrichment(
    lat: str | None = Query(None),
    lng: str | None = Query(None),
    stop_id: str | None = Query(None, alias="stopId"),
    stop_city: str | None = Query(None, alias="stopCity"),
    stop_name: str | None = Query(None, alias="stopName"),
    service: EnrichmentService = Depends(get_enrichment_service),
) -> dict[str, Any]:
    """OpenTripMap data for a stop; served from the stop record once stored."""
    return await service.get_enrichment(lat, lng, stop_id, stop_city, stop_name)
