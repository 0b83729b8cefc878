"""Tests for the service layer with mocked upstream clients."""

from unittest.mock import AsyncMock, Mock

import pytest

from citycast.clients import (
    GoogleGeocodingClient,
    GooglePlacesClient,
    MollieClient,
    OpenMeteoClient,
    OpenTripMapClient,
)
from citycast.errors import (
    InvalidRequestError,
    NotFoundError,
    ServiceNotConfiguredError,
    StorageError,
    UpstreamServiceError,
)
from citycast.services import (
    EnrichmentService,
    FeedbackService,
    GeocodingService,
    PaymentService,
    StopService,
    WeatherService,
)
from citycast.services.enrichment_service import parse_coordinate_pair
from citycast.services.feedback_service import clamp_limit
from citycast.services.payment_service import format_amount, payment_description
from citycast.services.stop_service import build_search_query, place_to_stop
from citycast.services.weather_service import shape_forecast

PLACES = [
    {"id": "p1", "displayName": {"text": "Rijksmuseum"}, "location": {"latitude": 52.36, "longitude": 4.885}},
    {"id": "p2", "displayName": {"text": "Vondelpark"}, "location": {"latitude": 52.358, "longitude": 4.868}},
    {"id": "p3", "displayName": {"text": "Zonder locatie"}},
]


def mock_client(spec, configured: bool = True) -> Mock:
    client = Mock(spec=spec)
    client.is_configured = configured
    return client


class TestStopService:
    """Stop generation through Places with de-duplication by name."""

    def test_build_search_query(self):
        assert build_search_query("Utrecht", "cultuur") == "top 10 cultuur bezienswaardigheden in Utrecht"
        assert build_search_query("Utrecht", "cultuur", "musea in <<stad>>") == "musea in Utrecht"
        assert build_search_query("Utrecht", "cultuur", "   ") == "top 10 cultuur bezienswaardigheden in Utrecht"

    def test_place_to_stop(self):
        assert place_to_stop(PLACES[0]) == {
            "name": "Rijksmuseum",
            "description": "Rijksmuseum",
            "latitude": 52.36,
            "longitude": 4.885,
        }
        assert place_to_stop(PLACES[2]) is None

    @pytest.mark.asyncio
    async def test_generate_stops_creates_and_reuses(self, stop_repository):
        places_client = mock_client(GooglePlacesClient)
        places_client.search_text.return_value = PLACES
        service = StopService(stop_repository, places_client)

        first = await service.generate_stops("Amsterdam", "cultuur")
        second = await service.generate_stops("Amsterdam", "cultuur")

        assert [stop["name"] for stop in first] == ["Rijksmuseum", "Vondelpark"]
        assert [stop["id"] for stop in first] == [stop["id"] for stop in second]
        assert len(await stop_repository.list_stops("Amsterdam")) == 2
        places_client.search_text.assert_called_with(
            "top 10 cultuur bezienswaardigheden in Amsterdam", "nl", 10
        )

    @pytest.mark.asyncio
    async def test_same_name_in_other_city_is_a_new_stop(self, stop_repository):
        places_client = mock_client(GooglePlacesClient)
        places_client.search_text.return_value = PLACES[:1]
        service = StopService(stop_repository, places_client)

        [amsterdam] = await service.generate_stops("Amsterdam", "cultuur")
        [elsewhere] = await service.generate_stops("Haarlem", "cultuur")

        assert amsterdam["id"] != elsewhere["id"]

    @pytest.mark.asyncio
    async def test_generate_stops_validation(self):
        service = StopService(AsyncMock(), mock_client(GooglePlacesClient))

        with pytest.raises(InvalidRequestError, match="stopCity and tourType are required"):
            await service.generate_stops("", "cultuur")
        with pytest.raises(InvalidRequestError):
            await service.generate_stops("Amsterdam", None)

    @pytest.mark.asyncio
    async def test_generate_stops_without_key(self):
        service = StopService(AsyncMock(), mock_client(GooglePlacesClient, configured=False))

        with pytest.raises(ServiceNotConfiguredError):
            await service.generate_stops("Amsterdam", "cultuur")

    @pytest.mark.asyncio
    async def test_generate_stops_no_results(self):
        places_client = mock_client(GooglePlacesClient)
        places_client.search_text.return_value = []
        repository = AsyncMock()
        service = StopService(repository, places_client)

        with pytest.raises(NotFoundError, match="No results found for Amsterdam"):
            await service.generate_stops("Amsterdam", "cultuur")

        repository.create_stop.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self):
        places_client = mock_client(GooglePlacesClient)
        places_client.search_text.return_value = PLACES[:1]
        repository = AsyncMock()
        repository.find_by_name.return_value = None
        repository.create_stop.side_effect = StorageError("Record store operation failed")
        service = StopService(repository, places_client)

        with pytest.raises(StorageError):
            await service.generate_stops("Amsterdam", "cultuur")

    @pytest.mark.asyncio
    async def test_list_stops_requires_city(self):
        with pytest.raises(InvalidRequestError):
            await StopService(AsyncMock(), mock_client(GooglePlacesClient)).list_stops(" ")


class TestEnrichmentService:
    """Enrichment is fetched once and then served from the stop record."""

    PLACE = {
        "xid": "N123",
        "name": "Rijksmuseum",
        "kinds": "museums,cultural",
        "rate": "3h",
        "wikipedia_extracts": {"title": "Rijksmuseum", "text": "Het Rijksmuseum..."},
    }

    def otm_client(self) -> Mock:
        client = mock_client(OpenTripMapClient)
        client.radius_search.return_value = [
            {"xid": "N1", "name": "Museumplein"},
            {"xid": "N123", "name": "Rijksmuseum"},
        ]
        client.place_details.return_value = self.PLACE
        return client

    def test_parse_coordinate_pair(self):
        assert parse_coordinate_pair("52.36", "4.885") == (52.36, 4.885)

        with pytest.raises(InvalidRequestError, match="required"):
            parse_coordinate_pair(None, "4.885")
        with pytest.raises(InvalidRequestError, match="valid numbers"):
            parse_coordinate_pair("abc", "4.885")
        with pytest.raises(InvalidRequestError, match="valid numbers"):
            parse_coordinate_pair("nan", "4.885")

    @pytest.mark.asyncio
    async def test_fetch_then_cached(self, stop_repository):
        stop_id = await StopService(stop_repository, mock_client(GooglePlacesClient)).save_stop(
            "Rijksmuseum", "Rijksmuseum", "Amsterdam", "cultuur", 52.36, 4.885
        )
        client = self.otm_client()
        service = EnrichmentService(stop_repository, client)

        fresh = await service.get_enrichment("52.36", "4.885", stop_id, "Amsterdam", "Rijksmuseum")
        cached = await service.get_enrichment("52.36", "4.885", stop_id, "Amsterdam", "Rijksmuseum")

        assert fresh["cached"] is False
        assert fresh["xid"] == "N123"
        assert cached["cached"] is True
        assert cached["extract"]["text"] == "Het Rijksmuseum..."
        assert "enrichedAt" in cached
        client.place_details.assert_called_once_with("N123")

    @pytest.mark.asyncio
    async def test_without_stop_key_nothing_is_written(self):
        repository = AsyncMock()
        service = EnrichmentService(repository, self.otm_client())

        result = await service.get_enrichment(52.36, 4.885, stop_name="Rijksmuseum")

        assert result["cached"] is False
        repository.update_enrichment.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failures_are_not_fatal(self):
        repository = AsyncMock()
        repository.get_stop.side_effect = StorageError("down")
        repository.update_enrichment.side_effect = StorageError("down")
        service = EnrichmentService(repository, self.otm_client())

        result = await service.get_enrichment(52.36, 4.885, "s1", "Amsterdam", "Rijksmuseum")

        assert result["name"] == "Rijksmuseum"

    @pytest.mark.asyncio
    async def test_nothing_nearby(self):
        client = mock_client(OpenTripMapClient)
        client.radius_search.return_value = []
        service = EnrichmentService(AsyncMock(), client)

        with pytest.raises(NotFoundError, match="No enrichment data found"):
            await service.get_enrichment(52.36, 4.885)

        client.place_details.assert_not_called()

    @pytest.mark.asyncio
    async def test_upstream_failure(self):
        client = mock_client(OpenTripMapClient)
        client.radius_search.side_effect = UpstreamServiceError("OpenTripMap request failed")
        service = EnrichmentService(AsyncMock(), client)

        with pytest.raises(UpstreamServiceError):
            await service.get_enrichment(52.36, 4.885)


class TestFeedbackService:
    """Feedback validation, rating filter and testimonial paging."""

    @pytest.mark.asyncio
    async def test_submit_stores_good_rating(self, feedback_repository):
        service = FeedbackService(feedback_repository)

        result = await service.submit("  Anna ", 5, user_email="anna@example.com", tour_city="Utrecht")
        testimonials = await service.testimonials()

        assert result["success"] is True
        assert result["feedbackId"]
        assert testimonials["count"] == 1
        assert testimonials["testimonials"][0]["userName"] == "Anna"
        assert "userEmail" not in testimonials["testimonials"][0]

    @pytest.mark.asyncio
    async def test_low_rating_is_acknowledged_not_stored(self):
        repository = AsyncMock()
        service = FeedbackService(repository)

        result = await service.submit("Bram", 2)

        assert result == {"success": True, "message": "Feedback received"}
        repository.create_feedback.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "user_name,rating,message",
        [
            (None, 4, "userName is required"),
            (" A ", 4, "userName is required"),
            ("Anna", None, "rating is required"),
            ("Anna", 0, "rating is required"),
            ("Anna", 6, "rating is required"),
        ],
    )
    async def test_submit_validation(self, user_name, rating, message):
        service = FeedbackService(AsyncMock())

        with pytest.raises(InvalidRequestError, match=message):
            await service.submit(user_name, rating)

    def test_clamp_limit(self):
        assert clamp_limit(None) == 10
        assert clamp_limit(0) == 10
        assert clamp_limit(-4) == 1
        assert clamp_limit(25) == 25
        assert clamp_limit(500) == 50

    @pytest.mark.asyncio
    async def test_testimonials_limit_is_clamped(self):
        repository = AsyncMock()
        repository.list_approved.return_value = []
        service = FeedbackService(repository)

        result = await service.testimonials(200)

        assert result == {"testimonials": [], "count": 0}
        repository.list_approved.assert_awaited_once_with(50)


class TestPaymentService:
    """Donation amount validation and Mollie checkout."""

    @pytest.mark.parametrize(
        "amount,expected",
        [("5", "5.00"), (5, "5.00"), (2.5, "2.50"), ("2.345", "2.35"), ("1.00", "1.00")],
    )
    def test_format_amount(self, amount, expected):
        assert format_amount(amount) == expected

    @pytest.mark.parametrize("amount", [None, "", "abc", "0.99", -5, "NaN", "Infinity", True])
    def test_invalid_amount(self, amount):
        with pytest.raises(InvalidRequestError):
            format_amount(amount)

    def test_payment_description(self):
        assert payment_description("Utrecht") == "cityCast donatie – Utrecht"
        assert payment_description(None) == "cityCast donatie"

    @pytest.mark.asyncio
    async def test_create_donation(self):
        client = mock_client(MollieClient)
        client.create_payment.return_value = {
            "id": "tr_1",
            "_links": {"checkout": {"href": "https://www.mollie.com/checkout/tr_1"}},
        }
        service = PaymentService(client)

        url = await service.create_donation("3", "https://stadtour.nl/bedankt", tour_id="t1", tour_city="Utrecht")

        assert url == "https://www.mollie.com/checkout/tr_1"
        client.create_payment.assert_called_once_with(
            "3.00",
            "EUR",
            "cityCast donatie – Utrecht",
            "https://stadtour.nl/bedankt",
            {"tourId": "t1", "tourCity": "Utrecht"},
        )

    @pytest.mark.asyncio
    async def test_missing_redirect_url(self):
        with pytest.raises(InvalidRequestError, match="redirectUrl is required"):
            await PaymentService(mock_client(MollieClient)).create_donation("5", None)

    @pytest.mark.asyncio
    async def test_not_configured(self):
        service = PaymentService(mock_client(MollieClient, configured=False))

        with pytest.raises(ServiceNotConfiguredError, match="Payment service not configured"):
            await service.create_donation("5", "https://stadtour.nl")

    @pytest.mark.asyncio
    async def test_payment_without_checkout_link(self):
        client = mock_client(MollieClient)
        client.create_payment.return_value = {"id": "tr_1", "_links": {}}

        with pytest.raises(UpstreamServiceError):
            await PaymentService(client).create_donation("5", "https://stadtour.nl")


class TestWeatherService:
    """Open-Meteo response shaping."""

    FORECAST = {
        "current": {
            "temperature_2m": 12.5,
            "apparent_temperature": 10.4,
            "windspeed_10m": 15.5,
            "precipitation": 0.2,
            "weathercode": 3,
        },
        "daily": {
            "time": ["2026-10-18", "2026-10-19", "2026-10-20"],
            "weathercode": [3, 61, 42],
            "temperature_2m_max": [13.0, 14.5, 11.2],
            "temperature_2m_min": [6.0, 7.4, 5.5],
            "precipitation_sum": [0.0, 1.26, 0.04],
        },
    }

    def test_shape_forecast(self):
        shaped = shape_forecast(self.FORECAST)

        assert shaped["current"] == {
            "temp": 13,
            "feels_like": 10,
            "wind": 16,
            "precipitation": 0.2,
            "label": "Bewolkt",
            "icon": "☁️",
        }
        monday, tuesday = shaped["forecast"]
        assert monday["day"] == "ma"
        assert monday["temp_max"] == 15
        assert monday["temp_min"] == 7
        assert monday["precipitation"] == pytest.approx(1.3)
        assert monday["label"] == "Lichte regen"
        assert tuesday["day"] == "di"
        assert tuesday["label"] == "Onbekend"
        assert tuesday["precipitation"] == 0

    @pytest.mark.asyncio
    async def test_get_weather(self):
        client = mock_client(OpenMeteoClient)
        client.forecast.return_value = self.FORECAST

        result = await WeatherService(client).get_weather("52.09", "5.12")

        assert len(result["forecast"]) == 2
        client.forecast.assert_called_once_with(52.09, 5.12)

    @pytest.mark.asyncio
    async def test_unexpected_response(self):
        client = mock_client(OpenMeteoClient)
        client.forecast.return_value = {"current": {}}

        with pytest.raises(UpstreamServiceError):
            await WeatherService(client).get_weather(52.09, 5.12)

    @pytest.mark.asyncio
    async def test_missing_coordinates(self):
        with pytest.raises(InvalidRequestError):
            await WeatherService(mock_client(OpenMeteoClient)).get_weather(None, None)


class TestGeocodingService:
    @pytest.mark.asyncio
    async def test_requires_address_or_latlng(self):
        with pytest.raises(InvalidRequestError, match="address or latlng is required"):
            await GeocodingService(mock_client(GoogleGeocodingClient)).geocode()

    @pytest.mark.asyncio
    async def test_not_configured(self):
        service = GeocodingService(mock_client(GoogleGeocodingClient, configured=False))

        with pytest.raises(ServiceNotConfiguredError, match="Geocoding service not configured"):
            await service.geocode(address="Dam 1, Amsterdam")

    @pytest.mark.asyncio
    async def test_upstream_failure(self):
        client = mock_client(GoogleGeocodingClient)
        client.geocode.side_effect = UpstreamServiceError("Geocoding request failed")

        with pytest.raises(UpstreamServiceError, match="Geocoding request failed") as exc_info:
            await GeocodingService(client).geocode(address="Dam 1, Amsterdam")

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_passthrough(self):
        client = mock_client(GoogleGeocodingClient)
        client.geocode.return_value = {"status": "OK", "results": []}

        result = await GeocodingService(client).geocode(latlng="52.37,4.89", language="en")

        assert result == {"status": "OK", "results": []}
        client.geocode.assert_called_once_with(None, "52.37,4.89", "en", "nl")
