"""
Feedback submission and testimonials.

Only ratings of three stars and up are stored (and thereby shown as
testimonials); lower ratings are acknowledged to the user but dropped.
"""

from datetime import datetime, timezone
from typing import Any
import uuid

import structlog

from citycast.errors import InvalidRequestError
from citycast.repositories.base import FeedbackEntity, FeedbackRepository

logger = structlog.get_logger(__name__)

MIN_STORED_RATING = 3
DEFAULT_TESTIMONIAL_LIMIT = 10
MAX_TESTIMONIAL_LIMIT = 50


def clamp_limit(limit: int | None) -> int:
    """Testimonial page size: defaults to 10, clamped to 1..50."""
    if not limit:
        return DEFAULT_TESTIMONIAL_LIMIT
    return min(max(limit, 1), MAX_TESTIMONIAL_LIMIT)


class FeedbackService:
    def __init__(self, repository: FeedbackRepository):
        self.repository = repository

    async def submit(
        self,
        user_name: str | None,
        rating: float | None,
        user_email: str | None = None,
        review: str | None = None,
        tour_id: str | None = None,
        tour_city: str | None = None,
        tour_duration: float | None = None,
        tour_stop_count: int | None = None,
        submitted_at: str | None = None,
    ) -> dict[str, Any]:
        """Validate and store feedback; returns the acknowledgement body."""
        if not user_name or len(user_name.strip()) < 2:
            raise InvalidRequestError("userName is required (min 2 characters)")

        if rating is None or rating < 1 or rating > 5:
            raise InvalidRequestError("rating is required (1-5)")

        if rating < MIN_STORED_RATING:
            logger.info(
                "Feedback with low rating acknowledged but not stored",
                user_name=user_name,
                rating=rating,
            )
            return {"success": True, "message": "Feedback received"}

        feedback = FeedbackEntity(
            feedback_id=str(uuid.uuid4()),
            user_name=user_name.strip(),
            rating=rating,
            submitted_at=submitted_at or datetime.now(timezone.utc).isoformat(),
            user_email=user_email or None,
            review=review or "",
            tour_id=tour_id or None,
            tour_city=tour_city or None,
            tour_duration=tour_duration or None,
            tour_stop_count=tour_stop_count or None,
        )
        await self.repository.create_feedback(feedback)

        return {
            "success": True,
            "message": "Feedback submitted successfully",
            "feedbackId": feedback.feedback_id,
        }

    async def testimonials(self, limit: int | None = None) -> dict[str, Any]:
        """Newest approved feedback for the landing page."""
        items = await self.repository.list_approved(clamp_limit(limit))
        testimonials = [item.to_testimonial() for item in items]

        logger.info("Returning testimonials", count=len(testimonials))
        return {"testimonials": testimonials, "count": len(testimonials)}
