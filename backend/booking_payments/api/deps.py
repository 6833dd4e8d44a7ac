"""
Request dependencies: submission decoding and external service clients.
Tests swap the client providers out through app.dependency_overrides.
"""

from typing import Any

from fastapi import Depends, Request

from booking_payments.core.config import Settings, get_settings
from booking_payments.core.forms import decode_form
from booking_payments.core.logging import get_logger
from booking_payments.infrastructure import (
    Mailer,
    PaymentGateway,
    SheetsClient,
    SmtpConfig,
    SmtpMailer,
    StripeGateway,
    get_http_client,
)

logger = get_logger(__name__)


async def get_submission(request: Request) -> dict[str, Any]:
    """Decode a JSON or url-encoded body into a nested dict."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            logger.warning("submission_invalid_json")
            return {}
        return body if isinstance(body, dict) else {}

    form = await request.form()
    return decode_form(form.multi_items())


def get_sheets_client(settings: Settings = Depends(get_settings)) -> SheetsClient:
    return SheetsClient(get_http_client(), settings.BOOKING_API_URL)


def get_payment_gateway(settings: Settings = Depends(get_settings)) -> PaymentGateway:
    return StripeGateway(settings.STRIPE_SECRET)


def get_mailer(settings: Settings = Depends(get_settings)) -> Mailer:
    return SmtpMailer(SmtpConfig.from_settings(settings))
