"""FastAPI dependency providers; tests swap them through ``app.dependency_overrides``."""

from functools import lru_cache

from citycast.clients import (
    GoogleGeocodingClient,
    GooglePlacesClient,
    MollieClient,
    OpenMeteoClient,
    OpenTripMapClient,
)
from citycast.repositories import get_feedback_repository, get_stop_repository
from citycast.services import (
    EnrichmentService,
    FeedbackService,
    GeocodingService,
    PaymentService,
    StopService,
    WeatherService,
)


@lru_cache
def get_places_client() -> GooglePlacesClient:
    return GooglePlacesClient()


@lru_cache
def get_geocoding_client() -> GoogleGeocodingClient:
    return GoogleGeocodingClient()


@lru_cache
def get_opentripmap_client() -> OpenTripMapClient:
    return OpenTripMapClient()


@lru_cache
def get_open_meteo_client() -> OpenMeteoClient:
    return OpenMeteoClient()


@lru_cache
def get_mollie_client() -> MollieClient:
    return MollieClient()


def get_stop_service() -> StopService:
    return StopService(get_stop_repository(), get_places_client())


def get_enrichment_service() -> EnrichmentService:
    return EnrichmentService(get_stop_repository(), get_opentripmap_client())


def get_feedback_service() -> FeedbackService:
    return FeedbackService(get_feedback_repository())


def get_geocoding_service() -> GeocodingService:
    return GeocodingService(get_geocoding_client())


def get_payment_service() -> PaymentService:
    return PaymentService(get_mollie_client())


def get_weather_service() -> WeatherService:
    return WeatherService(get_open_meteo_client())
