# wigshop/services/order_service.py
from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime

from ..model import Order, OrderItem, find_product
from ..model.order import COUNTDOWN_EMAILS, DELIVERY_DAYS, PURGE_AFTER_DAYS

log = logging.getLogger(__name__)

FALLBACK_ITEM_NAME = "Premium Wig Order"
FALLBACK_CUSTOMER_NAME = "Valued Customer"


def _get(obj, key, default=None):
    # Stripe objects and plain dicts both support .get
    if obj is None:
        return default
    try:
        v = obj.get(key, default)
    except AttributeError:
        v = getattr(obj, key, default)
    return default if v is None else v

def items_from_metadata(raw, total_amount: int) -> list[OrderItem]:
    """
    Rebuild order lines from the `items` metadata written at checkout.
    Ids are resolved against the catalog; a missing or unreadable value
    collapses to one generic line carrying the whole amount.
    """
    items = []
    rows = []
    if raw:
        try:
            rows = json.loads(raw)
        except (TypeError, ValueError):
            log.error("could not parse order items metadata: %r", raw)
            rows = []
    for row in rows if isinstance(rows, list) else []:
        if not isinstance(row, dict):
            continue
        p = find_product(row.get("id"))
        try:
            qty = int(row.get("quantity", 1))
        except (TypeError, ValueError):
            continue
        if p and qty >= 1:
            items.append(OrderItem(p.name, qty, p.price))
    if not items:
        items = [OrderItem(FALLBACK_ITEM_NAME, 1, int(total_amount or 0))]
    return items

def order_from_payment(payment, now: datetime, delivery_days: int = DELIVERY_DAYS) -> Order:
    """Build an Order from a completed checkout session or succeeded payment intent."""
    metadata = _get(payment, "metadata", {}) or {}
    details = _get(payment, "customer_details", {}) or {}
    total = _get(payment, "amount_total") or _get(payment, "amount", 0)
    email = (_get(payment, "customer_email")
             or _get(details, "email")
             or _get(metadata, "customer_email")
             or None)
    return Order.new(
        order_id=_get(payment, "id"),
        customer_name=_get(metadata, "customer_name") or FALLBACK_CUSTOMER_NAME,
        customer_email=email,
        items=items_from_metadata(_get(metadata, "items"), total),
        total_amount=total,
        now=now,
        customer_address=_get(metadata, "customer_address") or None,
        delivery_days=delivery_days,
    )


@dataclass
class TickResult:
    sent: list[tuple[str, int]] = field(default_factory=list)      # (order id, days_left)
    purged: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    def as_api(self):
        return {
            "sent": [{"order_id": oid, "days_left": d} for oid, d in self.sent],
            "purged": self.purged,
            "failed": self.failed,
        }


class OrderTracker:
    """
    Tracks confirmed orders through the delivery countdown.

    Owns no timer: something external (cron via `flask countdown-tick`)
    calls tick(now) once a day.
    """

    def __init__(self, repository, notifier, delivery_days: int = DELIVERY_DAYS):
        self.repository = repository
        self.notifier = notifier
        self.delivery_days = delivery_days

    def confirm(self, payment, now: datetime) -> Order | None:
        """
        Record a paid order and send its confirmation email.
        Returns None when the order id is already tracked (redelivered event).
        """
        order = order_from_payment(payment, now, self.delivery_days)
        if not order.id:
            raise ValueError("payment object has no id")
        if not self.repository.put_if_absent(order):
            log.info("order %s already tracked - ignoring duplicate confirmation", order.id)
            return None

        result = self.notifier.send_confirmation(order)
        log.info("order %s confirmed: amount=%s customer=%s email_sent=%s delivery=%s",
                 order.id, order.total_amount, order.customer_email,
                 result.success, order.delivery_date.date().isoformat())
        return order

    def get(self, order_id):
        return self.repository.get(order_id)

    def orders(self):
        return self.repository.all()

    def tick(self, now: datetime) -> TickResult:
        result = TickResult()
        for order in self.repository.all():
            # one broken order must not hold up the rest of the run
            try:
                self._advance(order, now, result)
            except Exception:
                log.exception("countdown tick failed for order %s", order.id)
                result.failed.append(order.id)
        return result

    def _advance(self, order: Order, now: datetime, result: TickResult):
        days_left = order.days_left(now)

        if 0 <= days_left < COUNTDOWN_EMAILS:
            due = COUNTDOWN_EMAILS - days_left
            # at most one email per tick; skipped days are not back-filled
            if order.emails_sent < due:
                self.notifier.send_countdown(order, days_left)
                order.emails_sent = due
                self.repository.save(order)
                result.sent.append((order.id, days_left))

        if days_left < -PURGE_AFTER_DAYS:
            self.repository.delete(order.id)
            result.purged.append(order.id)
            log.info("cleaned up old order: %s", order.id)
