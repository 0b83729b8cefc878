"""Geocoding proxy endpoint."""

from typing import Any

from fastapi import APIRouter, Depends

from citycast.api.v1.dependencies import get_geocoding_service
from citycast.api.v1.schemas import GeocodeRequest
from citycast.services import GeocodingService

router = APIRouter(prefix="/api/v1", tags=["geocode"])


@router.post("/geocode")
async def geocode(
    request: GeocodeRequest,
    service: GeocodingService = Depends(get_geocoding_service),
) -> dict[str, Any]:
    """Forward or reverse geocoding through Google; returns Google's JSON."""
    return await service.geocode(
        request.address, request.latlng, request.language, request.region
    )
