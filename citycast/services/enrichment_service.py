"""
Stop enrichment from OpenTripMap.

Enrichment is written onto the stop record so the next request for the same
stop is served from the store. Store reads and writes are best effort: a
failure there is logged and the freshly fetched data is still returned.
"""

from datetime import datetime
import math
from typing import Any

from fastapi.concurrency import run_in_threadpool
import structlog

from citycast.clients.opentripmap import (
    OpenTripMapClient,
    extract_enrichment,
    pick_best_match,
)
from citycast.errors import (
    InvalidRequestError,
    NotFoundError,
    ServiceNotConfiguredError,
    StorageError,
)
from citycast.repositories.base import StopRepository

logger = structlog.get_logger(__name__)


def parse_coordinate_pair(lat: Any, lng: Any) -> tuple[float, float]:
    """Validate query-string coordinates."""
    if lat in (None, "") or lng in (None, ""):
        raise InvalidRequestError("lat and lng query parameters are required")
    try:
        parsed_lat, parsed_lng = float(lat), float(lng)
    except (TypeError, ValueError) as err:
        raise InvalidRequestError("lat and lng must be valid numbers") from err
    if not (math.isfinite(parsed_lat) and math.isfinite(parsed_lng)):
        raise InvalidRequestError("lat and lng must be valid numbers")
    return parsed_lat, parsed_lng


def _isoformat(value: datetime | str | None) -> str | None:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class EnrichmentService:
    """Fetches and caches OpenTripMap data for stops."""

    SEARCH_RADIUS_METERS = 200

    def __init__(self, repository: StopRepository, client: OpenTripMapClient):
        self.repository = repository
        self.client = client

    async def get_existing(self, stop_id: str, stop_city: str) -> dict[str, Any] | None:
        """Enrichment already stored on the stop, if any."""
        try:
            stop = await self.repository.get_stop(stop_id, stop_city)
        except StorageError as e:
            logger.warning("Error reading existing enrichment", stop_id=stop_id, error=str(e))
            return None

        if not stop or not stop.enriched_at or stop.enrichment is None:
            return None
        return {**stop.enrichment, "enrichedAt": _isoformat(stop.enriched_at)}

    async def fetch(
        self, lat: float, lng: float, stop_name: str | None = None
    ) -> dict[str, Any] | None:
        """
        Radius search, best-match selection and detail lookup.

        Returns None when nothing suitable is found near the coordinates.
        """
        logger.info("Radius search", lat=lat, lng=lng, stop_name=stop_name)
        pois = await run_in_threadpool(
            self.client.radius_search, lat, lng, self.SEARCH_RADIUS_METERS
        )

        best_match = pick_best_match(pois, stop_name)
        if not best_match or not best_match.get("xid"):
            logger.info("No POIs found near coordinates", lat=lat, lng=lng)
            return None

        logger.info("Fetching place details", xid=best_match["xid"], name=best_match.get("name"))
        place = await run_in_threadpool(self.client.place_details, best_match["xid"])
        if not place:
            return None

        return extract_enrichment(place)

    async def get_enrichment(
        self,
        lat: Any,
        lng: Any,
        stop_id: str | None = None,
        stop_city: str | None = None,
        stop_name: str | None = None,
    ) -> dict[str, Any]:
        """Enrichment for a stop, from the store when present, else from OpenTripMap."""
        parsed_lat, parsed_lng = parse_coordinate_pair(lat, lng)
        persist = bool(stop_id and stop_city)

        if persist:
            existing = await self.get_existing(stop_id, stop_city)
            if existing:
                logger.info("Enrichment already present on stop", stop_id=stop_id)
                return {**existing, "cached": True}

        if not self.client.is_configured:
            logger.error("OpenTripMap API key not configured")
            raise ServiceNotConfiguredError("Enrichment service not configured")

        enrichment = await self.fetch(parsed_lat, parsed_lng, stop_name)
        if not enrichment:
            raise NotFoundError("No enrichment data found for this location")

        if persist:
            try:
                await self.repository.update_enrichment(stop_id, stop_city, enrichment)
            except StorageError as e:
                logger.error(
                    "Error writing enrichment to stop (non-fatal)",
                    stop_id=stop_id,
                    error=str(e),
                )
        else:
            logger.warning("stopId or stopCity missing, enrichment not persisted")

        return {**enrichment, "cached": False}
