"""Feedback and testimonial endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, Query

from citycast.api.v1.dependencies import get_feedback_service
from citycast.api.v1.schemas import FeedbackRequest
from citycast.services import FeedbackService

router = APIRouter(prefix="/api/v1/feedback", tags=["feedback"])


@router.post("")
async def submit_feedback(
    request: FeedbackRequest,
    service: FeedbackService = Depends(get_feedback_service),
) -> dict[str, Any]:
    """
    Submit feedback after a tour.

    Ratings below 3 are acknowledged but not stored; the response is a
    success either way.
    """
    return await service.submit(
        user_name=request.user_name,
        rating=request.rating,
        user_email=request.user_email,
        review=request.review,
        tour_id=request.tour_id,
        tour_city=request.tour_city,
        tour_duration=request.tour_duration,
        tour_stop_count=request.tour_stop_count,
        submitted_at=request.submitted_at,
    )


@router.get("")
async def get_testimonials(
    limit: int | None = Query(None, description="Number of testimonials (1-50, default 10)"),
    service: FeedbackService = Depends(get_feedback_service),
) -> dict[str, Any]:
    return await service.testimonials(limit)
