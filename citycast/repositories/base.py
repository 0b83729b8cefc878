"""
Abstract repository interfaces for the record store.

Stops and feedback are flat key-value records: they are created, read and
updated in place, never joined and never written transactionally.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any

APPROVED_FEEDBACK_PARTITION = "FEEDBACK#APPROVED"


@dataclass
class StopEntity:
    """
    A point of interest that can be part of a generated tour.

    Attributes:
        stop_id: Partition key (uuid4)
        stop_city: Sort key, the city the stop belongs to
        tour_type: Tour theme the stop was generated for
        stop_name: Display name
        stop_description: Short description
        stop_lat: Latitude in decimal degrees
        stop_lng: Longitude in decimal degrees
        created_at: When the record was created
        last_updated: When the record was last written
        enrichment: OpenTripMap data written onto the stop, if any
        enriched_at: When the enrichment was written
    """

    stop_id: str
    stop_city: str
    tour_type: str
    stop_name: str
    stop_description: str
    stop_lat: float
    stop_lng: float
    created_at: datetime
    last_updated: datetime
    enrichment: dict[str, Any] | None = None
    enriched_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "id": self.stop_id,
            "city": self.stop_city,
            "tour_type": self.tour_type,
            "name": self.stop_name,
            "description": self.stop_description,
            "latitude": self.stop_lat,
            "longitude": self.stop_lng,
            "created_at": self.created_at,
            "last_updated": self.last_updated,
            "enrichment": self.enrichment,
            "enriched_at": self.enriched_at,
        }


@dataclass
class FeedbackEntity:
    """User feedback on a finished tour, shown as a testimonial once approved."""

    feedback_id: str
    user_name: str
    rating: float
    submitted_at: str
    user_email: str | None = None
    review: str = ""
    tour_id: str | None = None
    tour_city: str | None = None
    tour_duration: float | None = None
    tour_stop_count: int | None = None
    status: str = "approved"

    @property
    def pk(self) -> str:
        return f"FEEDBACK#{self.feedback_id}"

    @property
    def sk(self) -> str:
        return "METADATA"

    @property
    def gsi1pk(self) -> str:
        return APPROVED_FEEDBACK_PARTITION

    @property
    def gsi1sk(self) -> str:
        return self.submitted_at

    def to_testimonial(self) -> dict[str, Any]:
        """Public view of the feedback; never exposes the e-mail address."""
        return {
            "feedbackId": self.feedback_id,
            "userName": self.user_name,
            "rating": self.rating,
            "review": self.review,
            "tourCity": self.tour_city,
            "tourDuration": self.tour_duration,
            "tourStopCount": self.tour_stop_count,
            "submittedAt": self.submitted_at,
        }


class StopRepository(ABC):
    """Abstract repository for stop records."""

    @abstractmethod
    async def find_by_name(self, stop_city: str, stop_name: str) -> str | None:
        """Return the id of the stop with this name in this city, if any."""
        pass

    @abstractmethod
    async def create_stop(self, stop: StopEntity) -> StopEntity:
        """Create a new stop."""
        pass

    @abstractmethod
    async def get_stop(self, stop_id: str, stop_city: str) -> StopEntity | None:
        """Get a stop by its full key."""
        pass

    @abstractmethod
    async def list_stops(
        self, stop_city: str, tour_type: str | None = None
    ) -> list[StopEntity]:
        """List the stops of a city, optionally for one tour type."""
        pass

    @abstractmethod
    async def update_enrichment(
        self, stop_id: str, stop_city: str, enrichment: dict[str, Any]
    ) -> bool:
        """Write enrichment onto an existing stop; False when the stop does not exist."""
        pass

    @abstractmethod
    async def health_check(self) -> dict[str, Any]:
        """Check repository health."""
        pass


class FeedbackRepository(ABC):
    """Abstract repository for feedback records."""

    @abstractmethod
    async def create_feedback(self, feedback: FeedbackEntity) -> FeedbackEntity:
        """Store approved feedback."""
        pass

    @abstractmethod
    async def list_approved(self, limit: int = 10) -> list[FeedbackEntity]:
        """Approved feedback, newest first."""
        pass

    @abstractmethod
    async def health_check(self) -> dict[str, Any]:
        """Check repository health."""
        pass
