"""
Payment processor gateway.

PaymentGateway is the seam the booking service charges through; StripeGateway
is the production implementation. The Stripe SDK is synchronous, so each call
runs in a worker thread to keep the event loop free.
"""

import asyncio
from abc import ABC, abstractmethod

import stripe

from booking_payments.core.exceptions import PaymentError
from booking_payments.core.logging import get_logger
from booking_payments.core.metrics import track_external_call

logger = get_logger(__name__)


class PaymentGateway(ABC):
    """
    Interface for charging customers.

    Implementations:
    - StripeGateway: Stripe customers + charges API
    """

    @abstractmethod
    async def create_customer(self, email: str, token: str) -> str:
        """
        Register a customer with a card token.

        Returns:
            The processor's customer id
        """
        pass

    @abstractmethod
    async def create_charge(
        self,
        amount: int,
        currency: str,
        customer_id: str,
        description: str,
    ) -> str:
        """
        Charge a customer.

        Args:
            amount: Amount in minor currency units (cents)
            currency: ISO currency code
            customer_id: Id returned by create_customer
            description: Human-readable line shown on the charge

        Returns:
            The processor's charge id
        """
        pass


class StripeGateway(PaymentGateway):
    def __init__(self, api_key: str):
        self.api_key = api_key

    async def create_customer(self, email: str, token: str) -> str:
        try:
            with track_external_call("stripe"):
                customer = await asyncio.to_thread(
                    stripe.Customer.create,
                    email=email,
                    source=token,
                    api_key=self.api_key,
                )
        except stripe.StripeError as e:
            raise _payment_error(e, "customer") from e
        return customer.id

    async def create_charge(
        self,
        amount: int,
        currency: str,
        customer_id: str,
        description: str,
    ) -> str:
        try:
            with track_external_call("stripe"):
                charge = await asyncio.to_thread(
                    stripe.Charge.create,
                    amount=amount,
                    currency=currency,
                    customer=customer_id,
                    description=description,
                    api_key=self.api_key,
                )
        except stripe.StripeError as e:
            raise _payment_error(e, "charge") from e
        return charge.id


def _payment_error(e: stripe.StripeError, operation: str) -> PaymentError:
    message = e.user_message or str(e) or f"Stripe {operation} failed"
    logger.error(
        "stripe_request_failed",
        operation=operation,
        error_type=type(e).__name__,
        code=e.code,
        error=message,
    )
    return PaymentError(message, error_type=type(e).__name__, code=e.code)
