"""Donation payment endpoint."""

from fastapi import APIRouter, Depends

from citycast.api.v1.dependencies import get_payment_service
from citycast.api.v1.schemas import PaymentRequest, PaymentResponse
from citycast.services import PaymentService

router = APIRouter(prefix="/api/v1", tags=["payments"])


@router.post("/payments", response_model=PaymentResponse)
async def create_payment(
    request: PaymentRequest,
    service: PaymentService = Depends(get_payment_service),
) -> PaymentResponse:
    """Create a Mollie payment and return the checkout URL to redirect to."""
    checkout_url = await service.create_donation(
        amount=request.amount,
        redirect_url=request.redirect_url,
        currency=request.currency,
        tour_id=request.tour_id,
        tour_city=request.tour_city,
    )
    return PaymentResponse(checkout_url=checkout_url)
