"""
API v1 router.

Collects the per-resource routers into the single router mounted by the
application.
"""

from fastapi import APIRouter

from citycast.api.v1.routers import (
    feedback,
    geocode,
    health,
    navigation,
    payments,
    stops,
    weather,
)
from citycast.api.v1.schemas import ErrorResponse

# Every service error is rendered as {"error": message}
ERROR_RESPONSES = {
    status_code: {"model": ErrorResponse} for status_code in (400, 404, 500, 502)
}

router = APIRouter()

for module in (health, stops, geocode, weather, payments, feedback, navigation):
    router.include_router(module.router, responses=ERROR_RESPONSES)
