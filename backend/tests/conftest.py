"""
Pytest fixtures: recording fakes for the spreadsheet API, Stripe and the
mail transport, wired into the app through dependency overrides.
"""

import smtplib
from typing import Any, AsyncGenerator, Sequence

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from booking_payments.api.deps import get_mailer, get_payment_gateway, get_sheets_client
from booking_payments.core.config import Settings, get_settings
from booking_payments.core.exceptions import PaymentError, UpstreamServiceError
from booking_payments.infrastructure import Mailer, PaymentGateway
from booking_payments.main import app


class FakeSheetsClient:
    """Records every call; fails the append calls whose index is in fail_appends."""

    def __init__(self, catalog: list[dict[str, Any]]):
        self.catalog = catalog
        self.catalog_requests = 0
        self.append_attempts: list[tuple[str, dict[str, Any]]] = []
        self.fail_appends: set[int] = set()
        self.fail_catalog = False

    @property
    def rows(self) -> list[dict[str, Any]]:
        return [
            row for index, (_, row) in enumerate(self.append_attempts)
            if index not in self.fail_appends
        ]

    async def fetch_catalog(self) -> list[dict[str, Any]]:
        self.catalog_requests += 1
        if self.fail_catalog:
            raise UpstreamServiceError("catalog", "503 Service Unavailable")
        return self.catalog

    async def append_row(self, sheet_title: str, row: dict[str, Any]) -> None:
        index = len(self.append_attempts)
        self.append_attempts.append((sheet_title, row))
        if index in self.fail_appends:
            raise httpx.ConnectError("connection refused")


class FakeGateway(PaymentGateway):
    def __init__(self):
        self.customers: list[tuple[str, str]] = []
        self.charges: list[dict[str, Any]] = []
        self.fail_customer = False
        self.fail_charge = False

    async def create_customer(self, email: str, token: str) -> str:
        if self.fail_customer:
            raise PaymentError("Your card was declined.", error_type="CardError", code="card_declined")
        self.customers.append((email, token))
        return f"cus_{len(self.customers)}"

    async def create_charge(self, amount: int, currency: str, customer_id: str, description: str) -> str:
        if self.fail_charge:
            raise PaymentError("Insufficient funds.", error_type="CardError", code="insufficient_funds")
        self.charges.append({
            "amount": amount,
            "currency": currency,
            "customer": customer_id,
            "description": description,
        })
        return f"ch_{len(self.charges)}"

    @property
    def calls(self) -> int:
        return len(self.customers) + len(self.charges)


class FakeMailer(Mailer):
    def __init__(self):
        self.sent: list[dict[str, Any]] = []
        self.fail = False

    async def send(self, to: str, from_addr: str, subject: str, html: str, cc: Sequence[str] = ()) -> None:
        if self.fail:
            raise smtplib.SMTPServerDisconnected("Connection unexpectedly closed")
        self.sent.append({"to": to, "from": from_addr, "subject": subject, "html": html, "cc": list(cc)})


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        APP_NAME="Zokal Bookings",
        APP_ENV="development",
        APP_BOOKING_CURRENCY="AUD",
        APP_EMAIL="bookings@example.com",
        APP_EMAIL_RECIPIENTS="office@example.com, trainer@example.com",
        BOOKING_API_URL="http://sheets.test/sheet",
    )


@pytest.fixture
def catalog() -> list[dict[str, Any]]:
    return [
        {"id": 5, "course": "First Aid", "price": "20.00"},
        {"id": "7", "course": "White Card", "price": "10.00"},
        {"id": 9, "course": "Forklift", "price": "149.95"},
    ]


@pytest.fixture
def sheets(catalog) -> FakeSheetsClient:
    return FakeSheetsClient(catalog)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest_asyncio.fixture
async def client(sheets, gateway, mailer, test_settings) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with every external service replaced by a fake."""
    app.dependency_overrides[get_sheets_client] = lambda: sheets
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_settings] = lambda: test_settings

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def individual_submission() -> dict[str, Any]:
    return {
        "id": "5",
        "type": "individual",
        "email": "ann@example.com",
        "first_name": "Ann",
        "last_name": "Lee",
        "phone": "0400 000 000",
        "course_date": "2026-11-02",
        "price": "0.01",
        "stripeToken": "tok_visa",
    }


@pytest.fixture
def company_submission() -> dict[str, Any]:
    return {
        "id": 7,
        "type": "company",
        "business_name": "Acme Pty Ltd",
        "business_email": "accounts@acme.example",
        "additional_persons_count": "2",
        "stripeToken": "",
        "additional_persons": {
            "first_name": ["Bob", "Cara"],
            "last_name": ["Stone", "Ng"],
            "email": ["bob@acme.example", "cara@acme.example"],
            "phone": ["0411 111 111", "0422 222 222"],
            "gender": ["male", "female"],
            "usi": ["USI111", "USI222"],
        },
    }
