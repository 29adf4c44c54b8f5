# wigshop/services/stripe_gateway.py
import json
import logging

import stripe

from ..errors import PaymentProviderError, SignatureInvalid

log = logging.getLogger(__name__)

WEBHOOK_TOLERANCE = 300  # seconds, Stripe's default


class StripeGateway:
    """
    Thin wrapper around the Stripe SDK.

    Outbound calls carry an explicit timeout and are never retried:
    checkout is user initiated and Stripe sessions are the idempotency unit.
    """

    def __init__(self, api_key, webhook_secret=None, timeout=10):
        if not api_key:
            raise ValueError("Stripe secret key is required")
        self.webhook_secret = webhook_secret
        self.client = stripe.StripeClient(
            api_key,
            max_network_retries=0,
            http_client=stripe.RequestsClient(timeout=timeout),
        )

    def _call(self, what, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except stripe.StripeError as e:
            msg = getattr(e, "user_message", None) or str(e)
            log.error("stripe %s failed: %s", what, msg)
            raise PaymentProviderError(msg) from e

    def create_checkout_session(self, params: dict):
        return self._call("checkout session", self.client.checkout.sessions.create, params=params)

    def retrieve_checkout_session(self, session_id: str):
        return self._call("session lookup", self.client.checkout.sessions.retrieve, session_id)

    def create_payment_intent(self, params: dict):
        return self._call("payment intent", self.client.payment_intents.create, params=params)

    def parse_webhook(self, payload: bytes, sig_header: str | None) -> dict:
        """Verify the signature over the untouched body, then decode it."""
        if not self.webhook_secret:
            raise SignatureInvalid("webhook secret is not configured")
        if not sig_header:
            raise SignatureInvalid("missing Stripe-Signature header")
        try:
            text = payload.decode("utf-8")
        except (AttributeError, UnicodeDecodeError):
            raise SignatureInvalid("payload is not valid UTF-8")
        try:
            stripe.WebhookSignature.verify_header(
                text, sig_header, self.webhook_secret, tolerance=WEBHOOK_TOLERANCE
            )
        except stripe.SignatureVerificationError as e:
            raise SignatureInvalid(str(e)) from e
        try:
            event = json.loads(text)
        except ValueError as e:
            raise SignatureInvalid(f"Invalid payload: {e}") from e
        if not isinstance(event, dict) or "type" not in event:
            raise SignatureInvalid("Invalid payload: not a Stripe event")
        return event
