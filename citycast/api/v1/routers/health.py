"""Health check endpoints."""

from fastapi import APIRouter

from citycast.api.v1.schemas import HealthStatus
from citycast.config import settings
from citycast.repositories import get_feedback_repository, get_stop_repository

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health", response_model=HealthStatus)
async def health_check() -> HealthStatus:
    """Health check endpoint for load balancers and monitoring."""
    dependencies = {
        "google_maps": "configured" if settings.maps_key else "missing",
        "google_places": "configured" if settings.places_api_key else "missing",
        "opentripmap": "configured" if settings.opentripmap_api_key else "missing",
        "mollie": "configured" if settings.mollie_api_key else "missing",
    }

    stops_health = await get_stop_repository().health_check()
    feedback_health = await get_feedback_repository().health_check()
    dependencies["stops_store"] = stops_health.get("database", "unknown")
    dependencies["feedback_store"] = feedback_health.get("database", "unknown")

    overall_status = (
        "healthy"
        if all(status in ["configured", "healthy"] for status in dependencies.values())
        else "degraded"
    )

    return HealthStatus(
        status=overall_status,
        service="citycast-api",
        version=settings.api_version,
        environment=settings.get_environment_display(),
        dependencies=dependencies,
    )
