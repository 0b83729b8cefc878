"""HTTP clients for the third-party APIs the backend proxies."""

from .base import UpstreamClient
from .google import GoogleGeocodingClient, GooglePlacesClient
from .mollie import MollieClient
from .open_meteo import OpenMeteoClient
from .opentripmap import OpenTripMapClient, extract_enrichment, pick_best_match

__all__ = [
    "GoogleGeocodingClient",
    "GooglePlacesClient",
    "MollieClient",
    "OpenMeteoClient",
    "OpenTripMapClient",
    "UpstreamClient",
    "extract_enrichment",
    "pick_best_match",
]
