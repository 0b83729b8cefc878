"""
Services layer: the business logic behind each endpoint.

Services validate input, call one upstream API and/or the record store and
raise ``CityCastError`` subclasses that the HTTP layer renders.
"""

from .enrichment_service import EnrichmentService
from .feedback_service import FeedbackService
from .geocoding_service import GeocodingService
from .payment_service import PaymentService
from .stop_service import StopService
from .weather_service import WeatherService

__all__ = [
    "EnrichmentService",
    "FeedbackService",
    "GeocodingService",
    "PaymentService",
    "StopService",
    "WeatherService",
]
