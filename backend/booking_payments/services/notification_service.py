"""
Booking notification emails.
"""

from html import escape
from typing import Any

from booking_payments.core.config import Settings
from booking_payments.core.logging import get_logger
from booking_payments.core.metrics import record_notification
from booking_payments.infrastructure.mailer import Mailer

logger = get_logger(__name__)

# Fields that are internal to the form or rendered separately below
HIDDEN_FIELDS = frozenset({
    "stripeToken",
    "additional_persons",
    "student_details",
    "form_name",
    "form_id",
    "_gotcha",
    "_redirect",
    "g-recaptcha-response",
})


def title_case(field_name: str) -> str:
    """first_name -> First Name"""
    words = field_name.replace("-", "_").split("_")
    return " ".join(word.capitalize() for word in words if word)


def _item(label: str, value: Any) -> str:
    text = "" if value is None else str(value)
    return f"<li><strong>{escape(label)}:</strong> {escape(text)}</li>"


def _person_count(block: dict[str, Any]) -> int:
    return max((len(v) for v in block.values() if isinstance(v, list)), default=0)


def render_submission(submission: dict[str, Any]) -> str:
    items = [
        _item(title_case(key), value)
        for key, value in submission.items()
        if key not in HIDDEN_FIELDS and not isinstance(value, (dict, list))
    ]

    student = submission.get("student_details")
    if isinstance(student, dict):
        items.extend(
            _item(f"Student {title_case(key)}", value)
            for key, value in student.items()
            if not isinstance(value, (dict, list))
        )

    persons = submission.get("additional_persons")
    if isinstance(persons, dict):
        for index in range(_person_count(persons)):
            for key, values in persons.items():
                if isinstance(values, list) and index < len(values):
                    items.append(_item(f"Person {index + 1} {title_case(key)}", values[index]))

    return "<ul>" + "".join(items) + "</ul>"


async def notify(mailer: Mailer, settings: Settings, to: str, subject: str, content: str) -> bool:
    """Send a notification. Delivery failures are logged, never raised."""
    try:
        await mailer.send(
            to=to,
            from_addr=settings.APP_EMAIL,
            subject=subject,
            html=content,
            cc=settings.email_recipients,
        )
    except Exception as e:
        logger.error("notification_failed", to=to, subject=subject, error=str(e))
        record_notification(False)
        return False

    logger.info("notification_sent", to=to, subject=subject)
    record_notification(True)
    return True
