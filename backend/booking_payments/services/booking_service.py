"""
Booking processing: assembling the booking, charging or invoicing, writing
participant rows to the bookings sheet and sending the notification.

PARTICIPANT CONVENTION
======================

  additional_persons_count counts only the indexed, non-primary people:
    - individual: always 0, the per-person arrays are ignored
    - company:    the submitted additional_persons_count

  participant_count = (1 if individual) + additional_persons_count + (1 if student)

Each participant gets exactly one sheet row and is charged the unit price,
so the charge always matches what lands in the sheet.

FAILURE BOUNDARY
================

  Pricing, customer creation and charging are the critical path: any failure
  aborts the request with a server error. Nothing already done is undone, so
  a charge followed by failed row appends is not refunded.

  Row appends and the email are best-effort: each failure is logged and
  counted, and the customer still gets a success response.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

import httpx

from booking_payments.core.config import Settings
from booking_payments.core.exceptions import InvalidBookingError
from booking_payments.core.logging import get_logger
from booking_payments.core.metrics import record_payment_request, record_row_append
from booking_payments.infrastructure.mailer import Mailer
from booking_payments.infrastructure.payment_gateway import PaymentGateway
from booking_payments.infrastructure.sheets_client import SheetsClient
from booking_payments.schemas.booking import (
    PERSON_FIELDS,
    Booking,
    BookingType,
    PaymentType,
    Person,
    RowStatus,
)
from booking_payments.services.notification_service import notify, render_submission
from booking_payments.services.pricing import resolve_price

logger = get_logger(__name__)

# Submission fields that never reach a sheet row
NON_ROW_FIELDS = frozenset({"stripeToken", "additional_persons", "student_details"})


@dataclass
class PersistResult:
    appended: int = 0
    failed: list[int] = field(default_factory=list)


@dataclass
class BookingOutcome:
    booking: Booking
    rows: PersistResult
    charge_id: Optional[str] = None


def _parse_int(value: Any, param: str, message: str) -> int:
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidBookingError(param, message, value) from None
    if not number.is_finite() or number != number.to_integral_value():
        raise InvalidBookingError(param, message, value) from None
    return int(number)


def _indexed(values: Any, index: int) -> str:
    if isinstance(values, list):
        item = values[index] if index < len(values) else None
    elif isinstance(values, dict):
        item = values.get(str(index))
    else:
        item = None
    return "" if item is None else str(item)


def _additional_persons(block: Any, count: int) -> tuple[Person, ...]:
    block = block if isinstance(block, dict) else {}
    return tuple(
        Person(**{name: _indexed(block.get(name), index) for name in PERSON_FIELDS})
        for index in range(count)
    )


def _student(block: Any) -> Optional[Person]:
    if not isinstance(block, dict) or not any(block.get(name) for name in PERSON_FIELDS):
        return None
    return Person(**{
        name: "" if block.get(name) is None else str(block.get(name))
        for name in PERSON_FIELDS
    })


def assemble_booking(submission: dict[str, Any], price: Decimal) -> Booking:
    """Build the booking record. Pure: no I/O, same inputs give an equal booking."""
    booking_type = BookingType(submission["type"])
    booking_id = _parse_int(submission.get("id"), "id", "Booking ID must be a number!")

    if booking_type == BookingType.INDIVIDUAL:
        email = submission.get("email", "")
        count = 0
        persons: tuple[Person, ...] = ()
    else:
        email = submission.get("business_email", "")
        count = _parse_int(
            submission.get("additional_persons_count"),
            "additional_persons_count",
            "Additional persons count must be a whole number!",
        )
        if count < 0:
            raise InvalidBookingError(
                "additional_persons_count",
                "Additional persons count must be a whole number!",
                submission.get("additional_persons_count"),
            )
        persons = _additional_persons(submission.get("additional_persons"), count)

    student = _student(submission.get("student_details"))
    if booking_type == BookingType.COMPANY and count == 0 and student is None:
        raise InvalidBookingError(
            "additional_persons_count",
            "A company booking needs at least one participant!",
            submission.get("additional_persons_count"),
        )

    return Booking(
        id=booking_id,
        type=booking_type,
        email=str(email),
        additional_persons_count=count,
        price=price,
        stripe_token=str(submission.get("stripeToken") or ""),
        student=student,
        additional_persons=persons,
    )


def amount_in_minor_units(booking: Booking, settings: Settings) -> int:
    total = booking.total_price * settings.minor_unit_factor
    return int(total.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def charge_description(booking: Booking) -> str:
    return (
        f"Payment for booking id: {booking.id} with price of {booking.price} "
        f"for {booking.participant_count} person(s)"
    )


def build_rows(
    booking: Booking,
    submission: dict[str, Any],
    status: RowStatus,
    payment_type: PaymentType,
) -> list[dict[str, Any]]:
    """
    Project the submission into one flat row per participant.

    Copied:      scalar submission fields, minus NON_ROW_FIELDS
    Overridden:  price (resolved), status, payment_type
    Substituted: the participant's person fields, for non-primary participants
    """
    base = {
        key: value
        for key, value in submission.items()
        if key not in NON_ROW_FIELDS and not isinstance(value, (dict, list))
    }
    base.update(
        price=f"{booking.price:.2f}",
        status=status.value,
        payment_type=payment_type.value,
    )

    rows = []
    if booking.type == BookingType.INDIVIDUAL:
        rows.append(dict(base))
    for person in booking.additional_persons:
        rows.append({**base, **person.model_dump()})
    if booking.student is not None:
        rows.append({**base, **booking.student.model_dump()})
    return rows


async def persist_rows(
    sheets: SheetsClient,
    sheet_title: str,
    rows: list[dict[str, Any]],
) -> PersistResult:
    """Append rows one at a time, in order. A failed row is logged and skipped."""
    result = PersistResult()
    for index, row in enumerate(rows):
        try:
            await sheets.append_row(sheet_title, row)
        except httpx.HTTPError as e:
            logger.error(
                "row_append_failed",
                sheet=sheet_title,
                row_index=index,
                row_count=len(rows),
                error=str(e),
            )
            record_row_append(False)
            result.failed.append(index)
            continue
        record_row_append(True)
        result.appended += 1
    return result


async def process_booking(
    submission: dict[str, Any],
    *,
    sheets: SheetsClient,
    gateway: PaymentGateway,
    mailer: Mailer,
    settings: Settings,
) -> BookingOutcome:
    """Price, charge (or invoice), record and announce a validated submission."""
    price = await resolve_price(sheets, submission.get("id"))
    booking = assemble_booking(submission, price)

    charge_id = None
    if booking.is_invoice:
        status, payment_type = RowStatus.PENDING, PaymentType.INVOICE
        subject = f"{settings.APP_NAME}: Invoice request for booking #{booking.id}"
        intro = "We have received your booking. An invoice will be sent for the amount below."
    else:
        customer_id = await gateway.create_customer(booking.email, booking.stripe_token)
        amount = amount_in_minor_units(booking, settings)
        charge_id = await gateway.create_charge(
            amount,
            settings.APP_BOOKING_CURRENCY,
            customer_id,
            charge_description(booking),
        )
        logger.info(
            "charge_created",
            booking_id=booking.id,
            charge_id=charge_id,
            amount=amount,
            currency=settings.APP_BOOKING_CURRENCY,
        )
        status, payment_type = RowStatus.COMPLETED, PaymentType.PAYMENT
        subject = f"{settings.APP_NAME}: Booking confirmation #{booking.id}"
        intro = "Thank you, your payment was successful and your booking is confirmed."

    rows = build_rows(booking, submission, status, payment_type)
    persisted = await persist_rows(sheets, settings.BOOKINGS_SHEET_TITLE, rows)

    total = f"{booking.total_price:.2f} {settings.APP_BOOKING_CURRENCY}"
    content = f"<p>{intro}</p><p><strong>Total:</strong> {total}</p>{render_submission(submission)}"
    await notify(mailer, settings, booking.email, subject, content)

    record_payment_request("invoiced" if booking.is_invoice else "charged")
    logger.info(
        "booking_processed",
        booking_id=booking.id,
        type=booking.type.value,
        payment_type=payment_type.value,
        participants=booking.participant_count,
        rows_appended=persisted.appended,
        rows_failed=len(persisted.failed),
    )
    return BookingOutcome(booking=booking, rows=persisted, charge_id=charge_id)
