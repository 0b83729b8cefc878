"""Donation payments through Mollie hosted checkout."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from fastapi.concurrency import run_in_threadpool
import structlog

from citycast.clients.mollie import MollieClient
from citycast.errors import (
    InvalidRequestError,
    ServiceNotConfiguredError,
    UpstreamServiceError,
)

logger = structlog.get_logger(__name__)

MIN_AMOUNT = Decimal("1.00")
DEFAULT_CURRENCY = "EUR"


def format_amount(amount: Any) -> str:
    """Validate a donation amount and format it with two decimals."""
    if amount is None or isinstance(amount, bool) or str(amount).strip() == "":
        raise InvalidRequestError("amount is required and must be at least 1.00")
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation as err:
        raise InvalidRequestError("amount is required and must be at least 1.00") from err
    if not value.is_finite() or value < MIN_AMOUNT:
        raise InvalidRequestError("amount is required and must be at least 1.00")
    return str(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def payment_description(tour_city: str | None) -> str:
    return f"cityCast donatie – {tour_city}" if tour_city else "cityCast donatie"


class PaymentService:
    def __init__(self, client: MollieClient):
        self.client = client

    async def create_donation(
        self,
        amount: Any,
        redirect_url: str | None,
        currency: str | None = None,
        tour_id: str | None = None,
        tour_city: str | None = None,
    ) -> str:
        """Create a payment and return the hosted checkout URL."""
        value = format_amount(amount)

        if not redirect_url or not isinstance(redirect_url, str):
            raise InvalidRequestError("redirectUrl is required")

        if not self.client.is_configured:
            logger.error("Mollie API key not configured")
            raise ServiceNotConfiguredError("Payment service not configured")

        currency = currency or DEFAULT_CURRENCY
        logger.info(
            "Creating Mollie payment",
            amount=value,
            currency=currency,
            tour_id=tour_id,
            tour_city=tour_city,
        )

        payment = await run_in_threadpool(
            self.client.create_payment,
            value,
            currency,
            payment_description(tour_city),
            redirect_url,
            {"tourId": tour_id or None, "tourCity": tour_city or None},
        )

        checkout_url = MollieClient.checkout_url(payment)
        if not checkout_url:
            logger.error("Mollie payment has no checkout link", payment_id=payment.get("id"))
            raise UpstreamServiceError("Mollie returned no checkout URL")

        return checkout_url
