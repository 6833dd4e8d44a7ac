"""
Booking payment endpoint: validate, price, charge or invoice, record, notify.
"""

from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from booking_payments.api.deps import get_mailer, get_payment_gateway, get_sheets_client, get_submission
from booking_payments.core.config import Settings, get_settings
from booking_payments.core.logging import get_logger
from booking_payments.core.metrics import record_payment_request
from booking_payments.infrastructure import Mailer, PaymentGateway, SheetsClient
from booking_payments.schemas.booking import MessageResponse, ValidationErrorResponse
from booking_payments.services.booking_service import process_booking
from booking_payments.services.validation import validate_submission

logger = get_logger(__name__)
router = APIRouter(tags=["Payments"])


@router.post(
    "/processPayment",
    response_model=MessageResponse,
    responses={status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ValidationErrorResponse}},
)
async def process_payment(
    submission: dict[str, Any] = Depends(get_submission),
    sheets: SheetsClient = Depends(get_sheets_client),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    mailer: Mailer = Depends(get_mailer),
    settings: Settings = Depends(get_settings),
):
    """
    Process a booking form submission.

    An empty stripeToken records the booking as a pending invoice; otherwise
    the customer is charged for every participant before the rows are written.
    """
    violations = validate_submission(submission)
    if violations:
        logger.info("submission_rejected", params=[v.param for v in violations])
        record_payment_request("rejected")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=ValidationErrorResponse(errors=violations).model_dump(mode="json"),
        )

    await process_booking(
        submission,
        sheets=sheets,
        gateway=gateway,
        mailer=mailer,
        settings=settings,
    )
    return MessageResponse(message="OK. Successfully processed payment!")
