"""Turn-by-turn progress endpoint.

Stateless: the client sends the route snapshot, its current step index and a
location sample, and stores the returned index for the next update.
"""

from fastapi import APIRouter
import structlog

from citycast.api.v1.schemas import NavigationProgressRequest, NavigationProgressResponse
from citycast.config import settings
from citycast.navigation import (
    LocationSample,
    Route,
    build_route,
    format_distance,
    parse_directions_result,
    track_progress,
)

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/api/v1/navigation", tags=["navigation"])


def _route_from_request(request: NavigationProgressRequest) -> Route | None:
    if request.directions is not None:
        return parse_directions_result(request.directions)
    return build_route(request.steps, request.polyline)


@router.post("/progress", response_model=NavigationProgressResponse)
async def navigation_progress(
    request: NavigationProgressRequest,
) -> NavigationProgressResponse:
    route = _route_from_request(request)
    location = (
        LocationSample(**request.location.model_dump()) if request.location else None
    )
    threshold = request.threshold_meters or settings.off_route_threshold_meters

    progress = track_progress(route, location, request.current_step_index, threshold)

    if progress.is_off_route:
        logger.info("Location is off route", step=progress.current_step_index)

    body = progress.to_dict()
    return NavigationProgressResponse(
        **body,
        distance_to_maneuver_text=format_distance(progress.distance_to_maneuver),
        total_steps=len(route.steps) if route else 0,
    )
