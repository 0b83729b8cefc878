"""Weather endpoint."""

from typing import Any

from fastapi import APIRouter, Depends, Query

from citycast.api.v1.dependencies import get_weather_service
from citycast.services import WeatherService

router = APIRouter(prefix="/api/v1", tags=["weather"])


@router.get("/weather")
async def get_weather(
    lat: str | None = Query(None),
    lng: str | None = Query(None),
    service: WeatherService = Depends(get_weather_service),
) -> dict[str, Any]:
    return await service.get_weather(lat, lng)
