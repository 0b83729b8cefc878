"""
Shared HTTP plumbing for third-party API clients.

Every client owns a ``requests.Session`` and applies the configured timeout.
Any failed or undecodable response becomes ``UpstreamServiceError``.
There is no retry: each call is a single request/response passthrough.
"""

from typing import Any

import requests
import structlog

from citycast.config import settings
from citycast.errors import UpstreamServiceError

logger = structlog.get_logger(__name__)


class UpstreamClient:
    """Base class for JSON-over-HTTP upstream clients."""

    service_name = "upstream"

    def __init__(
        self,
        api_key: str = "",
        base_url: str = "",
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _request(self, method: str, url: str, **kwargs) -> Any:
        """Send one request and return the decoded JSON body."""
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.error(
                "Upstream request rejected",
                service=self.service_name,
                method=method,
                status=status,
                error=str(e),
            )
            raise UpstreamServiceError(f"{self.service_name} request failed") from e
        except requests.exceptions.RequestException as e:
            logger.error(
                "Upstream request failed",
                service=self.service_name,
                method=method,
                error=str(e),
            )
            raise UpstreamServiceError(f"{self.service_name} request failed") from e
        except ValueError as e:
            logger.error(
                "Upstream response is not JSON", service=self.service_name, error=str(e)
            )
            raise UpstreamServiceError(f"{self.service_name} returned an invalid response") from e
