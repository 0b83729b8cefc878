"""Server-side geocoding so the Maps key never reaches the browser."""

from typing import Any

from fastapi.concurrency import run_in_threadpool
import structlog

from citycast.clients.google import GoogleGeocodingClient
from citycast.errors import (
    InvalidRequestError,
    ServiceNotConfiguredError,
    UpstreamServiceError,
)

logger = structlog.get_logger(__name__)


class GeocodingService:
    def __init__(self, client: GoogleGeocodingClient):
        self.client = client

    async def geocode(
        self,
        address: str | None = None,
        latlng: str | None = None,
        language: str = "nl",
        region: str = "nl",
    ) -> dict[str, Any]:
        if not address and not latlng:
            raise InvalidRequestError("address or latlng is required")

        if not self.client.is_configured:
            logger.error("MAPS_KEY environment variable not set")
            raise ServiceNotConfiguredError("Geocoding service not configured")

        try:
            return await run_in_threadpool(
                self.client.geocode, address, latlng, language, region
            )
        except UpstreamServiceError as e:
            raise UpstreamServiceError("Geocoding request failed") from e
