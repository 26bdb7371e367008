"""Stripe payment gateway."""

import json
import logging
from typing import Any, Optional

import stripe
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from storefront.config import get_settings
from storefront.errors import UpstreamError, ValidationError

logger = logging.getLogger(__name__)
settings = get_settings()

SUCCEEDED = "succeeded"


class PaymentIntent(BaseModel):
    """The slice of a provider payment intent this service uses."""

    id: str
    status: str
    amount: int = Field(..., description="Amount in minor currency units")
    currency: str
    clientSecret: Optional[str] = None
    metadata: dict[str, str] = Field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == SUCCEEDED


class StripeGateway:
    """Payment provider access through the Stripe SDK.

    The SDK is blocking, so calls run in the threadpool.
    """

    def __init__(self, api_key: str = "", webhook_secret: str = "") -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret
        if not api_key:
            logger.warning("Stripe secret key not configured - payment features will not work")

    @staticmethod
    def _to_intent(intent: Any) -> PaymentIntent:
        return PaymentIntent(
            id=intent["id"],
            status=intent["status"],
            amount=intent["amount"],
            currency=intent["currency"],
            clientSecret=intent.get("client_secret"),
            metadata=dict(intent.get("metadata") or {}),
        )

    async def create_intent(self, amount: int, currency: str, metadata: dict[str, str]) -> PaymentIntent:
        """Create a payment intent for ``amount`` minor units."""
        try:
            intent = await run_in_threadpool(
                stripe.PaymentIntent.create,
                amount=amount,
                currency=currency,
                automatic_payment_methods={"enabled": True},
                metadata=metadata,
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            logger.error("Stripe create payment intent failed: %s", e)
            raise UpstreamError("Payment provider", str(e)) from e

        logger.info("Created payment intent %s for %d %s", intent["id"], amount, currency)
        return self._to_intent(intent)

    async def retrieve_intent(self, payment_intent_id: str) -> PaymentIntent:
        """Fetch the current state of a payment intent."""
        try:
            intent = await run_in_threadpool(
                stripe.PaymentIntent.retrieve, payment_intent_id, api_key=self.api_key
            )
        except stripe.InvalidRequestError as e:
            raise ValidationError(f"Unknown payment intent: {payment_intent_id}") from e
        except stripe.StripeError as e:
            logger.error("Stripe retrieve payment intent %s failed: %s", payment_intent_id, e)
            raise UpstreamError("Payment provider", str(e)) from e
        return self._to_intent(intent)

    def parse_event(self, payload: bytes, signature: Optional[str]) -> dict[str, Any]:
        """Parse a webhook body, verifying its signature when a secret is configured.

        Raises:
            ValidationError: the payload is malformed or the signature does not verify.
        """
        # Unsigned events are only accepted without a configured secret
        if self.webhook_secret:
            if not signature:
                raise ValidationError("Missing Stripe-Signature header")
            try:
                stripe.WebhookSignature.verify_header(
                    payload.decode("utf-8"), signature, self.webhook_secret
                )
            except stripe.SignatureVerificationError as e:
                raise ValidationError(f"Webhook signature verification failed: {e}") from e

        try:
            event = json.loads(payload)
        except (ValueError, UnicodeDecodeError) as e:
            raise ValidationError(f"Invalid webhook payload: {e}") from e

        if not isinstance(event, dict) or "type" not in event:
            raise ValidationError("Invalid webhook payload: missing event type")
        return event


# Global payment gateway instance
payment_gateway = StripeGateway(settings.stripe_secret_key, settings.stripe_webhook_secret)
