"""
Payment gateway integration.

Creates card payment intents with Stripe and hands the client secret back to
the caller; the charge itself is confirmed client-side.
"""

import logging
from typing import Optional, Protocol

import stripe
from starlette.concurrency import run_in_threadpool

from parcel_backend.app.core.reliability import CircuitBreaker

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """Raised when the gateway rejects or fails a request."""


class PaymentGateway(Protocol):
    async def create_payment_intent(self, amount_in_cents: int) -> str:
        """Create a payment intent and return its client secret."""
        ...


class StripePaymentGateway:
    """Stripe-backed gateway; calls are guarded by a circuit breaker."""

    def __init__(self, api_key: Optional[str], currency: str = "usd", breaker: CircuitBreaker = None):
        self.api_key = api_key
        self.currency = currency
        self.breaker = breaker or CircuitBreaker(failure_threshold=3, reset_timeout=30)

    def _create_sync(self, amount_in_cents: int) -> str:
        intent = stripe.PaymentIntent.create(
            amount=amount_in_cents,
            currency=self.currency,
            payment_method_types=["card"],
            api_key=self.api_key,
        )
        return intent.client_secret

    async def _create(self, amount_in_cents: int) -> str:
        if not self.api_key:
            raise PaymentGatewayError("Payment gateway is not configured")
        try:
            return await run_in_threadpool(self._create_sync, amount_in_cents)
        except stripe.StripeError as e:
            logger.error("Stripe payment intent creation failed: %s", e)
            raise PaymentGatewayError(str(e)) from e

    async def create_payment_intent(self, amount_in_cents: int) -> str:
        # CircuitOpenError propagates to the caller untouched
        return await self.breaker.call(self._create, amount_in_cents)
