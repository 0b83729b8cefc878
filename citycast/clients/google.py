"""Google Places Text Search and Geocoding clients."""

from typing import Any

import structlog

from citycast.clients.base import UpstreamClient
from citycast.config import settings

logger = structlog.get_logger(__name__)

PLACES_FIELD_MASK = "places.id,places.displayName,places.location"


class GooglePlacesClient(UpstreamClient):
    """Places API (New) text search."""

    service_name = "Google Places"

    def __init__(self, api_key: str | None = None, base_url: str | None = None, **kwargs):
        super().__init__(
            api_key=settings.places_api_key if api_key is None else api_key,
            base_url=base_url or settings.places_search_url,
            **kwargs,
        )

    def search_text(
        self, text_query: str, language: str = "nl", max_results: int = 10
    ) -> list[dict[str, Any]]:
        """Return the ``places`` array for a free-text query (possibly empty)."""
        logger.info("Places text search", query=text_query, max_results=max_results)

        data = self._request(
            "POST",
            self.base_url,
            json={
                "textQuery": text_query,
                "languageCode": language,
                "maxResultCount": max_results,
            },
            headers={
                "X-Goog-Api-Key": self.api_key,
                "X-Goog-FieldMask": PLACES_FIELD_MASK,
                "Content-Type": "application/json",
            },
        )
        places = data.get("places") if isinstance(data, dict) else None
        return places or []


class GoogleGeocodingClient(UpstreamClient):
    """Geocoding web service; keeps the Maps key server-side."""

    service_name = "Geocoding"

    def __init__(self, api_key: str | None = None, base_url: str | None = None, **kwargs):
        super().__init__(
            api_key=settings.maps_key if api_key is None else api_key,
            base_url=base_url or settings.geocode_url,
            **kwargs,
        )

    def geocode(
        self,
        address: str | None = None,
        latlng: str | None = None,
        language: str = "nl",
        region: str = "nl",
    ) -> dict[str, Any]:
        """Forward (address) or reverse (latlng) geocoding; returns Google's JSON untouched."""
        params = {"key": self.api_key, "language": language, "region": region}
        if address:
            params["address"] = address
        else:
            params["latlng"] = latlng or ""

        data = self._request("GET", self.base_url, params=params)

        logger.info(
            "Geocode result",
            status=data.get("status") if isinstance(data, dict) else None,
            result_count=len(data.get("results") or []) if isinstance(data, dict) else 0,
        )
        return data
