"""Open-Meteo forecast client (no API key required)."""

from typing import Any

from citycast.clients.base import UpstreamClient
from citycast.config import settings

CURRENT_FIELDS = "temperature_2m,apparent_temperature,weathercode,windspeed_10m,precipitation"
DAILY_FIELDS = "weathercode,temperature_2m_max,temperature_2m_min,precipitation_sum"


class OpenMeteoClient(UpstreamClient):
    service_name = "Open-Meteo"

    def __init__(self, base_url: str | None = None, **kwargs):
        super().__init__(base_url=base_url or settings.open_meteo_url, **kwargs)

    @property
    def is_configured(self) -> bool:
        return True

    def forecast(self, lat: float, lng: float, forecast_days: int = 6) -> dict[str, Any]:
        data = self._request(
            "GET",
            self.base_url,
            params={
                "latitude": lat,
                "longitude": lng,
                "current": CURRENT_FIELDS,
                "daily": DAILY_FIELDS,
                "timezone": "auto",
                "forecast_days": forecast_days,
            },
        )
        return data if isinstance(data, dict) else {}
