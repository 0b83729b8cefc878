"""Mollie payments client (REST API v2)."""

from typing import Any

import structlog

from citycast.clients.base import UpstreamClient
from citycast.config import settings
from citycast.errors import UpstreamServiceError

logger = structlog.get_logger(__name__)


class MollieClient(UpstreamClient):
    """Creates hosted-checkout payments."""

    service_name = "Mollie"

    def __init__(self, api_key: str | None = None, base_url: str | None = None, **kwargs):
        super().__init__(
            api_key=settings.mollie_api_key if api_key is None else api_key,
            base_url=base_url or settings.mollie_base_url,
            **kwargs,
        )

    def create_payment(
        self,
        value: str,
        currency: str,
        description: str,
        redirect_url: str,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Create a payment; ``value`` must already be formatted with two decimals."""
        payment = self._request(
            "POST",
            f"{self.base_url}/payments",
            json={
                "amount": {"currency": currency, "value": value},
                "description": description,
                "redirectUrl": redirect_url,
                "metadata": metadata or {},
            },
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        if not isinstance(payment, dict):
            raise UpstreamServiceError("Mollie returned an invalid response")

        logger.info("Mollie payment created", payment_id=payment.get("id"))
        return payment

    @staticmethod
    def checkout_url(payment: dict[str, Any]) -> str | None:
        """Hosted checkout link of a freshly created payment."""
        checkout = (payment.get("_links") or {}).get("checkout") or {}
        return checkout.get("href")
