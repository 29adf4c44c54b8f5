# wigshop/services/webhook_service.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime

from .checkout_service import SESSION_MARKER

log = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"
PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"


@dataclass(frozen=True)
class WebhookEvent:
    id: str | None
    type: str
    object: dict

    @classmethod
    def from_payload(cls, event: dict) -> "WebhookEvent":
        data = event.get("data") or {}
        return cls(
            id=event.get("id"),
            type=str(event.get("type")),
            object=(data.get("object") if isinstance(data, dict) else None) or {},
        )


class WebhookDispatcher:
    """
    Routes verified Stripe events by type.

    Unknown types are acknowledged, and a failure while handling a known
    type is logged rather than raised, so Stripe never retries an event
    whose effect has already been recorded.
    """

    def __init__(self, tracker, clock=datetime.now):
        self.tracker = tracker
        self.clock = clock
        self.handlers = {
            CHECKOUT_COMPLETED: self._payment_completed,
            PAYMENT_SUCCEEDED: self._intent_succeeded,
            PAYMENT_FAILED: self._payment_failed,
        }

    def dispatch(self, event: WebhookEvent) -> str:
        handler = self.handlers.get(event.type)
        if handler is None:
            log.info("Unhandled event type %s", event.type)
            return "ignored"
        try:
            handler(event)
        except Exception:
            log.exception("error processing %s event %s", event.type, event.id)
            return "failed"
        return "handled"

    def _payment_completed(self, event: WebhookEvent):
        log.info("payment successful for %s", event.object.get("id"))
        self.tracker.confirm(event.object, self.clock())

    def _intent_succeeded(self, event: WebhookEvent):
        metadata = event.object.get("metadata") or {}
        if metadata.get(SESSION_MARKER):
            # tracked under its checkout.session.completed event
            log.info("payment intent %s belongs to a checkout session - skipping", event.object.get("id"))
            return
        self._payment_completed(event)

    def _payment_failed(self, event: WebhookEvent):
        # no state change yet; hook for retry / customer follow-up
        log.warning("payment failed: %s", event.object.get("id"))
