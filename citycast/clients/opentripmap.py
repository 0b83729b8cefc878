"""OpenTripMap client and enrichment normalisation."""

from typing import Any

import structlog

from citycast.clients.base import UpstreamClient
from citycast.config import settings

logger = structlog.get_logger(__name__)

RICH_KINDS = "interesting_places,historic,architecture,cultural,museums,religion,natural"


class OpenTripMapClient(UpstreamClient):
    """Radius search and place details from OpenTripMap."""

    service_name = "OpenTripMap"

    def __init__(self, api_key: str | None = None, base_url: str | None = None, **kwargs):
        super().__init__(
            api_key=settings.opentripmap_api_key if api_key is None else api_key,
            base_url=base_url or settings.opentripmap_base_url,
            **kwargs,
        )

    def radius_search(
        self,
        lat: float,
        lng: float,
        radius: int = 200,
        limit: int = 10,
        kinds: str = RICH_KINDS,
    ) -> list[dict[str, Any]]:
        """POIs around a point, nearest first."""
        data = self._request(
            "GET",
            f"{self.base_url}/radius",
            params={
                "radius": radius,
                "lon": lng,
                "lat": lat,
                "format": "json",
                "limit": limit,
                "kinds": kinds,
                "apikey": self.api_key,
            },
        )
        return data if isinstance(data, list) else []

    def place_details(self, xid: str) -> dict[str, Any]:
        """Full record for one POI, including the Wikipedia extract."""
        data = self._request(
            "GET", f"{self.base_url}/xid/{xid}", params={"apikey": self.api_key}
        )
        return data if isinstance(data, dict) else {}


def pick_best_match(
    pois: list[dict[str, Any]], stop_name: str | None = None
) -> dict[str, Any] | None:
    """Prefer a POI whose name contains (or is contained in) the stop name, else the nearest."""
    if not pois:
        return None

    if stop_name:
        name_lower = stop_name.lower()
        for poi in pois:
            poi_name = (poi.get("name") or "").lower()
            # An unnamed POI would match every stop name
            if poi_name and (poi_name in name_lower or name_lower in poi_name):
                logger.debug("Matched POI by name", name=poi.get("name"))
                return poi

    return pois[0]


def extract_enrichment(place: dict[str, Any]) -> dict[str, Any]:
    """Normalise the fields we keep from an OpenTripMap place record."""
    kinds = place.get("kinds") or ""
    preview = place.get("preview")
    extracts = place.get("wikipedia_extracts")

    enrichment: dict[str, Any] = {
        "name": place.get("name") or None,
        "kinds": [kind.strip() for kind in kinds.split(",") if kind.strip()],
        "rate": place.get("rate", 0),
        "xid": place.get("xid") or None,
        "wikidata": place.get("wikidata") or None,
        "wikipedia": place.get("wikipedia") or None,
        "url": place.get("url") or None,
        "image": place.get("image") or None,
        "preview": None,
        "extract": None,
    }

    if isinstance(preview, dict):
        enrichment["preview"] = {
            "source": preview.get("source") or None,
            "width": preview.get("width") or None,
            "height": preview.get("height") or None,
        }

    if isinstance(extracts, dict):
        enrichment["extract"] = {
            "title": extracts.get("title") or None,
            "text": extracts.get("text") or None,
            "html": extracts.get("html") or None,
        }

    logger.info(
        "Extracted enrichment",
        name=enrichment["name"],
        kinds_count=len(enrichment["kinds"]),
        rate=enrichment["rate"],
        has_image=bool(enrichment["image"]),
        has_extract=bool(enrichment["extract"]),
    )
    return enrichment
