"""
Tests for log event redaction.
"""

from booking_payments.core.logging import redact_sensitive


def test_payment_tokens_are_masked():
    event = redact_sensitive(None, "info", {"event": "x", "stripeToken": "tok_visa", "booking_id": 5})
    assert event == {"event": "x", "stripeToken": "***", "booking_id": 5}


def test_empty_values_left_alone():
    event = redact_sensitive(None, "info", {"event": "x", "password": ""})
    assert event["password"] == ""
