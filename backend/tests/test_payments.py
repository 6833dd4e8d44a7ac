"""
Tests for the /processPayment endpoint: validation, charge and invoice paths,
and the failure boundary between critical and best-effort steps.
"""

import pytest
from httpx import AsyncClient
from prometheus_client import REGISTRY


@pytest.mark.asyncio
async def test_validation_failure_makes_no_external_calls(client: AsyncClient, sheets, gateway, mailer):
    """Missing id, token and type give three violations and touch nothing."""
    response = await client.post("/processPayment", json={"email": "ann@example.com"})
    assert response.status_code == 422
    errors = response.json()["errors"]
    assert [e["param"] for e in errors] == ["id", "stripeToken", "type"]
    assert sheets.catalog_requests == 0
    assert sheets.append_attempts == []
    assert gateway.calls == 0
    assert mailer.sent == []


@pytest.mark.asyncio
async def test_individual_without_email_rejected(client: AsyncClient, individual_submission, sheets):
    individual_submission["email"] = ""
    response = await client.post("/processPayment", json=individual_submission)
    assert response.status_code == 422
    assert response.json()["errors"] == [{
        "location": "body",
        "param": "email",
        "msg": "Email is required for individual type!",
        "value": "",
    }]
    assert sheets.catalog_requests == 0


@pytest.mark.asyncio
async def test_individual_payment(client: AsyncClient, individual_submission, sheets, gateway, mailer):
    """One participant at 20.00 is charged 2000 cents and gets one completed row."""
    response = await client.post("/processPayment", json=individual_submission)
    assert response.status_code == 200
    assert response.json() == {"message": "OK. Successfully processed payment!"}

    assert gateway.customers == [("ann@example.com", "tok_visa")]
    assert gateway.charges == [{
        "amount": 2000,
        "currency": "AUD",
        "customer": "cus_1",
        "description": "Payment for booking id: 5 with price of 20.00 for 1 person(s)",
    }]

    assert len(sheets.rows) == 1
    title, row = sheets.append_attempts[0]
    assert title == "Bookings"
    assert row["status"] == "completed"
    assert row["payment_type"] == "payment"
    assert row["price"] == "20.00"

    assert len(mailer.sent) == 1
    assert mailer.sent[0]["to"] == "ann@example.com"
    assert "confirmation" in mailer.sent[0]["subject"]


@pytest.mark.asyncio
async def test_company_invoice(client: AsyncClient, company_submission, sheets, gateway, mailer):
    """Empty token: no charge, two pending invoice rows, one email to the business."""
    response = await client.post("/processPayment", json=company_submission)
    assert response.status_code == 200

    assert gateway.calls == 0
    assert len(sheets.rows) == 2
    assert all(r["status"] == "pending" for r in sheets.rows)
    assert all(r["payment_type"] == "invoice" for r in sheets.rows)
    assert [r["first_name"] for r in sheets.rows] == ["Bob", "Cara"]

    assert len(mailer.sent) == 1
    assert mailer.sent[0]["to"] == "accounts@acme.example"
    assert "Invoice" in mailer.sent[0]["subject"]
    assert "20.00 AUD" in mailer.sent[0]["html"]


@pytest.mark.asyncio
async def test_form_encoded_company_payment(client: AsyncClient, sheets, gateway):
    form = {
        "id": "7",
        "type": "company",
        "business_email": "accounts@acme.example",
        "additional_persons_count": "2",
        "stripeToken": "tok_visa",
        "additional_persons[first_name][0]": "Bob",
        "additional_persons[first_name][1]": "Cara",
        "additional_persons[usi][0]": "USI111",
        "additional_persons[usi][1]": "USI222",
    }
    response = await client.post("/processPayment", data=form)
    assert response.status_code == 200
    assert gateway.charges[0]["amount"] == 2000
    assert [r["usi"] for r in sheets.rows] == ["USI111", "USI222"]
    assert all(r["last_name"] == "" for r in sheets.rows)


@pytest.mark.asyncio
async def test_unknown_booking_id_is_server_error(client: AsyncClient, individual_submission, sheets, gateway):
    individual_submission["id"] = "6"
    response = await client.post("/processPayment", json=individual_submission)
    assert response.status_code == 500
    assert response.json()["error"]["type"] == "PriceNotFoundError"
    assert gateway.calls == 0
    assert sheets.append_attempts == []


@pytest.mark.asyncio
async def test_catalog_outage_is_server_error(client: AsyncClient, individual_submission, sheets, gateway):
    sheets.fail_catalog = True
    response = await client.post("/processPayment", json=individual_submission)
    assert response.status_code == 500
    assert gateway.calls == 0


@pytest.mark.asyncio
async def test_declined_card_aborts_before_rows(client: AsyncClient, individual_submission, sheets, gateway, mailer):
    gateway.fail_customer = True
    response = await client.post("/processPayment", json=individual_submission)
    assert response.status_code == 500
    assert response.json() == {
        "error": {"type": "CardError", "message": "Your card was declined.", "code": "card_declined"}
    }
    assert gateway.charges == []
    assert sheets.append_attempts == []
    assert mailer.sent == []


@pytest.mark.asyncio
async def test_failed_charge_aborts_before_rows(client: AsyncClient, individual_submission, sheets, gateway):
    gateway.fail_charge = True
    response = await client.post("/processPayment", json=individual_submission)
    assert response.status_code == 500
    assert len(gateway.customers) == 1
    assert sheets.append_attempts == []


@pytest.mark.asyncio
async def test_bad_person_count_is_unprocessable(client: AsyncClient, company_submission, gateway):
    company_submission["additional_persons_count"] = "lots"
    response = await client.post("/processPayment", json=company_submission)
    assert response.status_code == 422
    assert response.json()["errors"][0]["param"] == "additional_persons_count"
    assert gateway.calls == 0


@pytest.mark.asyncio
async def test_row_failure_still_succeeds(client: AsyncClient, company_submission, sheets, mailer):
    """A failed append for the middle participant does not block the others."""
    company_submission["additional_persons_count"] = "3"
    sheets.fail_appends = {1}
    response = await client.post("/processPayment", json=company_submission)
    assert response.status_code == 200
    assert len(sheets.append_attempts) == 3
    assert len(sheets.rows) == 2
    assert len(mailer.sent) == 1


@pytest.mark.asyncio
async def test_email_failure_still_succeeds(client: AsyncClient, individual_submission, mailer, gateway):
    mailer.fail = True
    response = await client.post("/processPayment", json=individual_submission)
    assert response.status_code == 200
    assert len(gateway.charges) == 1


@pytest.mark.asyncio
async def test_response_carries_request_id(client: AsyncClient, individual_submission):
    response = await client.post(
        "/processPayment",
        json=individual_submission,
        headers={"X-Request-ID": "abc123"},
    )
    assert response.headers["X-Request-ID"] == "abc123"


@pytest.mark.asyncio
@pytest.mark.parametrize("token", ["", "tok_visa"])
async def test_company_with_no_participants_is_unprocessable(
    client: AsyncClient, company_submission, sheets, gateway, mailer, token
):
    company_submission["additional_persons_count"] = "0"
    company_submission["stripeToken"] = token
    response = await client.post("/processPayment", json=company_submission)
    assert response.status_code == 422
    assert response.json()["errors"][0]["param"] == "additional_persons_count"
    assert gateway.calls == 0
    assert sheets.append_attempts == []
    assert mailer.sent == []


@pytest.mark.asyncio
async def test_undecodable_json_body_is_unprocessable(client: AsyncClient, sheets):
    response = await client.post(
        "/processPayment",
        content=b'{"id": "\xff"}',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 422
    assert [e["param"] for e in response.json()["errors"]] == ["id", "stripeToken", "type"]
    assert sheets.catalog_requests == 0


@pytest.mark.asyncio
async def test_unprocessable_booking_counted_as_rejected(client: AsyncClient, company_submission):
    def count(result):
        return REGISTRY.get_sample_value("payment_requests_total", {"result": result}) or 0

    rejected_before, failed_before = count("rejected"), count("failed")

    company_submission["additional_persons_count"] = "lots"
    response = await client.post("/processPayment", json=company_submission)

    assert response.status_code == 422
    assert count("rejected") == rejected_before + 1
    assert count("failed") == failed_before
