"""
Error taxonomy for booking processing.

Critical-path failures (bad booking data, unknown price, payment processor
errors) are raised as BookingError subclasses and rendered by the handlers
registered in main.py. Best-effort side effects (sheet rows, emails) log
their failures and never raise.
"""

from typing import Any, Optional

from fastapi import status


class BookingError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, Any]:
        return {"error": {"type": type(self).__name__, "message": self.message}}


class InvalidBookingError(BookingError):
    """Submission passed field validation but cannot be turned into a booking."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, param: str, message: str, value: Any = None):
        super().__init__(message)
        self.param = param
        self.value = value

    def to_payload(self) -> dict[str, Any]:
        return {
            "errors": [
                {"location": "body", "param": self.param, "msg": self.message, "value": self.value}
            ]
        }


class PriceNotFoundError(BookingError):
    def __init__(self, booking_id: Any):
        super().__init__(f"No price found for booking id: {booking_id}")
        self.booking_id = booking_id


class UpstreamServiceError(BookingError):
    """The spreadsheet API could not be reached or answered with an error."""

    def __init__(self, service: str, message: str):
        super().__init__(f"{service} request failed: {message}")
        self.service = service


class PaymentError(BookingError):
    """Customer creation or charge failed at the payment processor."""

    def __init__(self, message: str, error_type: str = "PaymentError", code: Optional[str] = None):
        super().__init__(message)
        self.error_type = error_type
        self.code = code

    def to_payload(self) -> dict[str, Any]:
        error = {"type": self.error_type, "message": self.message}
        if self.code:
            error["code"] = self.code
        return {"error": error}
