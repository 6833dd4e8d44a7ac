"""
Pydantic schemas for booking submissions, derived bookings and responses.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

PERSON_FIELDS = ("first_name", "last_name", "email", "phone", "gender", "usi")


class BookingType(str, Enum):
    INDIVIDUAL = "individual"
    COMPANY = "company"


class RowStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"


class PaymentType(str, Enum):
    PAYMENT = "payment"
    INVOICE = "invoice"


class Person(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    gender: str = ""
    usi: str = ""

    model_config = {"frozen": True}


class Booking(BaseModel):
    """Normalized booking built once per request from the submission and resolved price."""

    id: int
    type: BookingType
    email: str
    additional_persons_count: int = Field(ge=0)
    price: Decimal
    stripe_token: str = ""
    student: Optional[Person] = None
    additional_persons: tuple[Person, ...] = ()

    model_config = {"frozen": True}

    @property
    def is_invoice(self) -> bool:
        return self.stripe_token == ""

    @property
    def participant_count(self) -> int:
        primary = 1 if self.type == BookingType.INDIVIDUAL else 0
        student = 1 if self.student is not None else 0
        return primary + self.additional_persons_count + student

    @property
    def total_price(self) -> Decimal:
        return self.price * self.participant_count


class Violation(BaseModel):
    location: str = "body"
    param: str
    msg: str
    value: Any = None


class ValidationErrorResponse(BaseModel):
    errors: list[Violation]


class MessageResponse(BaseModel):
    message: str
