"""Current weather and a five-day outlook from Open-Meteo."""

from datetime import date
from typing import Any

from fastapi.concurrency import run_in_threadpool
import structlog

from citycast.clients.open_meteo import OpenMeteoClient
from citycast.errors import UpstreamServiceError
from citycast.navigation.geo import round_half_up
from citycast.services.enrichment_service import parse_coordinate_pair

logger = structlog.get_logger(__name__)

# WMO weather interpretation codes, labelled in Dutch for the app
WMO_CODES: dict[int, dict[str, str]] = {
    0: {"label": "Helder", "icon": "☀️"},
    1: {"label": "Overwegend helder", "icon": "🌤️"},
    2: {"label": "Gedeeltelijk bewolkt", "icon": "⛅"},
    3: {"label": "Bewolkt", "icon": "☁️"},
    45: {"label": "Mist", "icon": "🌫️"},
    48: {"label": "IJsmist", "icon": "🌫️"},
    51: {"label": "Lichte motregen", "icon": "🌦️"},
    53: {"label": "Motregen", "icon": "🌦️"},
    55: {"label": "Zware motregen", "icon": "🌧️"},
    61: {"label": "Lichte regen", "icon": "🌧️"},
    63: {"label": "Regen", "icon": "🌧️"},
    65: {"label": "Zware regen", "icon": "🌧️"},
    71: {"label": "Lichte sneeuw", "icon": "🌨️"},
    73: {"label": "Sneeuw", "icon": "❄️"},
    75: {"label": "Zware sneeuw", "icon": "❄️"},
    77: {"label": "Sneeuwkorrels", "icon": "🌨️"},
    80: {"label": "Lichte regenbuien", "icon": "🌦️"},
    81: {"label": "Regenbuien", "icon": "🌧️"},
    82: {"label": "Zware regenbuien", "icon": "⛈️"},
    85: {"label": "Sneeuwbuien", "icon": "🌨️"},
    86: {"label": "Zware sneeuwbuien", "icon": "❄️"},
    95: {"label": "Onweer", "icon": "⛈️"},
    96: {"label": "Onweer met hagel", "icon": "⛈️"},
    99: {"label": "Zwaar onweer met hagel", "icon": "⛈️"},
}
UNKNOWN_WEATHER = {"label": "Onbekend", "icon": "🌡️"}

# Indexed by date.weekday(), Monday first
DAY_NAMES = ["ma", "di", "wo", "do", "vr", "za", "zo"]


def get_weather_info(code: Any) -> dict[str, str]:
    return dict(WMO_CODES.get(code, UNKNOWN_WEATHER))


def shape_forecast(data: dict[str, Any]) -> dict[str, Any]:
    """Reduce an Open-Meteo response to what the tour screens display."""
    current = data["current"]
    daily = data["daily"]

    forecast = []
    # Index 0 is today; the outlook starts tomorrow
    for i, day in enumerate(daily["time"][1:], start=1):
        forecast.append(
            {
                "day": DAY_NAMES[date.fromisoformat(day).weekday()],
                "temp_max": round_half_up(daily["temperature_2m_max"][i]),
                "temp_min": round_half_up(daily["temperature_2m_min"][i]),
                "precipitation": round_half_up(daily["precipitation_sum"][i] * 10) / 10,
                **get_weather_info(daily["weathercode"][i]),
            }
        )

    return {
        "current": {
            "temp": round_half_up(current["temperature_2m"]),
            "feels_like": round_half_up(current["apparent_temperature"]),
            "wind": round_half_up(current["windspeed_10m"]),
            "precipitation": current["precipitation"],
            **get_weather_info(current["weathercode"]),
        },
        "forecast": forecast,
    }


class WeatherService:
    def __init__(self, client: OpenMeteoClient):
        self.client = client

    async def get_weather(self, lat: Any, lng: Any) -> dict[str, Any]:
        parsed_lat, parsed_lng = parse_coordinate_pair(lat, lng)
        data = await run_in_threadpool(self.client.forecast, parsed_lat, parsed_lng)

        try:
            return shape_forecast(data)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error("Unexpected Open-Meteo response", error=str(e))
            raise UpstreamServiceError("Open-Meteo returned an invalid response") from e
