from booking_payments.schemas.booking import (
    Booking,
    BookingType,
    MessageResponse,
    PaymentType,
    Person,
    RowStatus,
    ValidationErrorResponse,
    Violation,
)

__all__ = [
    "Booking", "BookingType", "Person", "Violation",
    "RowStatus", "PaymentType",
    "MessageResponse", "ValidationErrorResponse",
]
