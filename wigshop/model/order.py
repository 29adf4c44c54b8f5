# wigshop/model/order.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from ..extensions import db
from ..utils.money import format_minor

DELIVERY_DAYS = 7
COUNTDOWN_EMAILS = 7          # days_left 6..0
PURGE_AFTER_DAYS = 7          # days past delivery before an order is dropped

@dataclass
class OrderItem:
    name: str
    quantity: int
    unit_price: int           # minor units

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity

    def as_api(self):
        return {
            "name": self.name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "line_total": self.line_total,
            "line_total_display": format_minor(self.line_total),
        }


@dataclass
class Order:
    id: str
    customer_name: str
    customer_email: str | None
    items: list[OrderItem]
    total_amount: int         # minor units
    order_date: datetime
    delivery_date: datetime
    emails_sent: int = 0
    customer_address: str | None = None

    @classmethod
    def new(cls, order_id, customer_name, customer_email, items, total_amount,
            now: datetime, customer_address=None, delivery_days: int = DELIVERY_DAYS):
        return cls(
            id=order_id,
            customer_name=customer_name,
            customer_email=customer_email,
            items=list(items),
            total_amount=int(total_amount or 0),
            order_date=now,
            delivery_date=now + timedelta(days=delivery_days),
            customer_address=customer_address,
        )

    def days_left(self, today: date | datetime) -> int:
        # whole calendar days between the two midnights
        if isinstance(today, datetime):
            today = today.date()
        return (self.delivery_date.date() - today).days

    @property
    def total_display(self) -> str:
        return format_minor(self.total_amount)

    def as_api(self, today: date | datetime | None = None):
        data = {
            "id": self.id,
            "customer": {
                "name": self.customer_name,
                "email": self.customer_email,
                "address": self.customer_address,
            },
            "items": [i.as_api() for i in self.items],
            "total_amount": self.total_amount,
            "total_display": self.total_display,
            "order_date": self.order_date.isoformat(),
            "delivery_date": self.delivery_date.isoformat(),
            "emails_sent": self.emails_sent,
        }
        if today is not None:
            data["days_left"] = self.days_left(today)
        return data


class OrderRecord(db.Model):
    """SQL row for an Order, used only when ORDER_STORE=sql."""
    __tablename__ = "tracked_order"

    id = db.Column(db.String(255), primary_key=True)     # Stripe session / intent id
    customer_name = db.Column(db.String(255))
    customer_email = db.Column(db.String(255), index=True)
    customer_address = db.Column(db.Text)
    items_json = db.Column(db.JSON, nullable=False, default=list)
    total_amount = db.Column(db.Integer, nullable=False, default=0)
    order_date = db.Column(db.DateTime, nullable=False)
    delivery_date = db.Column(db.DateTime, nullable=False, index=True)
    emails_sent = db.Column(db.Integer, nullable=False, default=0)

    @classmethod
    def from_order(cls, order: Order) -> "OrderRecord":
        rec = cls(id=order.id)
        rec.update_from(order)
        return rec

    def update_from(self, order: Order):
        self.customer_name = order.customer_name
        self.customer_email = order.customer_email
        self.customer_address = order.customer_address
        self.items_json = [
            {"name": i.name, "quantity": i.quantity, "unit_price": i.unit_price}
            for i in order.items
        ]
        self.total_amount = order.total_amount
        self.order_date = order.order_date
        self.delivery_date = order.delivery_date
        self.emails_sent = order.emails_sent

    def to_order(self) -> Order:
        return Order(
            id=self.id,
            customer_name=self.customer_name,
            customer_email=self.customer_email,
            items=[OrderItem(i["name"], int(i["quantity"]), int(i["unit_price"]))
                   for i in (self.items_json or [])],
            total_amount=self.total_amount or 0,
            order_date=self.order_date,
            delivery_date=self.delivery_date,
            emails_sent=self.emails_sent or 0,
            customer_address=self.customer_address,
        )
