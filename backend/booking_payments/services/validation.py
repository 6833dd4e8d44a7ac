"""
Field validation for booking submissions.

Every rule is evaluated so the client gets the full list of problems in one
response. Violations use the {location, param, msg, value} shape the booking
widget already knows how to display.
"""

from typing import Any, Callable

from booking_payments.schemas.booking import BookingType, Violation

BOOKING_TYPES = tuple(t.value for t in BookingType)


def _exists(body: dict[str, Any], field: str) -> bool:
    return body.get(field) is not None


def _required_for(booking_type: BookingType, field: str) -> Callable[[dict[str, Any]], bool]:
    def rule(body: dict[str, Any]) -> bool:
        if body.get("type") == booking_type.value:
            return bool(body.get(field))
        return True
    return rule


RULES: list[tuple[str, str, Callable[[dict[str, Any]], bool]]] = [
    ("id", "Booking ID is required!", lambda body: _exists(body, "id")),
    # An empty token is allowed: it selects the invoice path
    ("stripeToken", "Stripe token is required!", lambda body: _exists(body, "stripeToken")),
    ("type", "Booking type is invalid!", lambda body: body.get("type") in BOOKING_TYPES),
    ("email", "Email is required for individual type!", _required_for(BookingType.INDIVIDUAL, "email")),
    (
        "business_email",
        "Business email is required for company type!",
        _required_for(BookingType.COMPANY, "business_email"),
    ),
]


def validate_submission(body: dict[str, Any]) -> list[Violation]:
    """Return one violation per failed rule; an empty list means the submission is valid."""
    return [
        Violation(param=param, msg=msg, value=body.get(param))
        for param, msg, rule in RULES
        if not rule(body)
    ]
