"""Pydantic schemas for API v1 - request/response DTOs only."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt


class CamelModel(BaseModel):
    """Accepts the SPA's camelCase field names as well as snake_case."""

    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    """Uniform error body."""

    error: str
    details: list[Any] | None = None


class HealthStatus(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str
    environment: str
    timestamp: datetime = Field(default_factory=datetime.now)
    dependencies: dict[str, str] = {}


# Stops


class GeneratedStop(BaseModel):
    id: str
    name: str
    description: str
    latitude: float
    longitude: float


class StoredStop(BaseModel):
    id: str
    city: str
    tour_type: str
    name: str
    description: str
    latitude: float
    longitude: float
    created_at: datetime
    last_updated: datetime
    enrichment: dict[str, Any] | None = None
    enriched_at: datetime | None = None


class StopListResponse(BaseModel):
    stops: list[StoredStop]
    count: int


# Geocoding


class GeocodeRequest(CamelModel):
    address: str | None = None
    latlng: str | None = None
    language: str = "nl"
    region: str = "nl"


# Payments


class PaymentRequest(CamelModel):
    amount: str | float | None = None
    currency: str | None = None
    tour_id: str | None = Field(None, alias="tourId")
    tour_city: str | None = Field(None, alias="tourCity")
    redirect_url: str | None = Field(None, alias="redirectUrl")


class PaymentResponse(CamelModel):
    checkout_url: str = Field(..., alias="checkoutUrl")


# Feedback


class FeedbackRequest(CamelModel):
    user_name: str | None = Field(None, alias="userName")
    user_email: str | None = Field(None, alias="userEmail")
    rating: StrictInt | StrictFloat | None = None
    review: str | None = None
    tour_id: str | None = Field(None, alias="tourId")
    tour_city: str | None = Field(None, alias="tourCity")
    tour_duration: float | None = Field(None, alias="tourDuration")
    tour_stop_count: int | None = Field(None, alias="tourStopCount")
    submitted_at: str | None = Field(None, alias="submittedAt")


# Navigation


class LocationSchema(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    accuracy: float = 0.0
    timestamp: str | None = None


class NavigationProgressRequest(BaseModel):
    """
    One location update against a route.

    The route is either a raw Google Directions response (``directions``) or
    already-parsed ``steps`` plus ``polyline``.
    """

    directions: dict[str, Any] | None = None
    steps: list[Any] | None = None
    polyline: list[Any] | None = None
    location: LocationSchema | None = None
    current_step_index: int = Field(0, ge=0)
    threshold_meters: float | None = Field(None, gt=0)


class NavigationProgressResponse(BaseModel):
    current_step_index: int
    current_step: dict[str, Any] | None = None
    next_step: dict[str, Any] | None = None
    distance_to_maneuver: int
    distance_to_maneuver_text: str
    is_off_route: bool
    total_steps: int
