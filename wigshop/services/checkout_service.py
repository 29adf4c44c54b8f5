# wigshop/services/checkout_service.py
from __future__ import annotations
import json
from dataclasses import dataclass

from ..errors import InvalidCheckoutRequest
from ..model import Product, get_product

SESSION_MARKER = "checkout_session"

@dataclass(frozen=True)
class CheckoutLine:
    product: Product
    quantity: int

    @property
    def amount(self) -> int:
        return self.product.price * self.quantity

@dataclass(frozen=True)
class Customer:
    name: str
    email: str
    address: str

    @classmethod
    def from_payload(cls, data) -> "Customer":
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise InvalidCheckoutRequest("customerInfo must be an object")
        return cls(
            name=str(data.get("name") or "").strip(),
            email=str(data.get("email") or "").strip(),
            address=str(data.get("address") or "").strip(),
        )

    def metadata(self):
        return {
            "customer_name": self.name,
            "customer_email": self.email,
            "customer_address": self.address,
        }

@dataclass(frozen=True)
class CheckoutSession:
    url: str
    session_id: str

@dataclass(frozen=True)
class PaymentIntent:
    client_secret: str
    amount: int


def parse_quantity(v) -> int | None:
    if isinstance(v, bool):
        return None
    try:
        q = int(v)
    except (TypeError, ValueError):
        return None
    if isinstance(v, float) and q != v:
        return None
    return q

def resolve_lines(items) -> list[CheckoutLine]:
    """
    Validate {id, quantity} pairs against the catalog.
    Any unknown id raises UnknownProduct; nothing partial is returned.
    """
    if not isinstance(items, list) or not items:
        raise InvalidCheckoutRequest("items must be a non-empty list")
    lines = []
    for it in items:
        if not isinstance(it, dict):
            raise InvalidCheckoutRequest("each item must be an object")
        product = get_product(it.get("id"))
        qty = parse_quantity(it.get("quantity", 1))
        if qty is None or qty < 1:
            raise InvalidCheckoutRequest(f"invalid quantity for product {product.id}")
        lines.append(CheckoutLine(product, qty))
    return lines

def order_total(lines: list[CheckoutLine]) -> int:
    return sum(l.amount for l in lines)

def items_metadata(lines: list[CheckoutLine]) -> str:
    # compact so it fits Stripe's 500 char metadata limit
    return json.dumps([{"id": l.product.id, "quantity": l.quantity} for l in lines],
                      separators=(",", ":"))

def to_stripe_line_items(lines: list[CheckoutLine], host_url: str, currency: str):
    base = host_url.rstrip("/")
    return [{
        "price_data": {
            "currency": currency,
            "product_data": {
                "name": l.product.name,
                "images": [f"{base}/{l.product.image}"],
                "description": l.product.description,
            },
            "unit_amount": l.product.price,
        },
        "quantity": l.quantity,
    } for l in lines]

def create_checkout_session(gateway, items, customer_info, host_url: str,
                            currency: str = "usd", countries=("US", "CA", "GB", "AU")) -> CheckoutSession:
    lines = resolve_lines(items)
    customer = Customer.from_payload(customer_info)
    base = host_url.rstrip("/")

    params = {
        "payment_method_types": ["card"],
        "line_items": to_stripe_line_items(lines, base, currency),
        "mode": "payment",
        "shipping_address_collection": {"allowed_countries": list(countries)},
        "billing_address_collection": "required",
        "success_url": f"{base}/success?session_id={{CHECKOUT_SESSION_ID}}",
        "cancel_url": f"{base}/cancel",
        "metadata": {**customer.metadata(), "items": items_metadata(lines)},
        # marks the intent so its own succeeded event is not tracked twice
        "payment_intent_data": {"metadata": {SESSION_MARKER: "1"}},
    }
    if customer.email:
        params["customer_email"] = customer.email

    session = gateway.create_checkout_session(params)
    return CheckoutSession(url=session.url, session_id=session.id)

def create_payment_intent(gateway, items, customer_info, currency: str = "usd") -> PaymentIntent:
    lines = resolve_lines(items)
    customer = Customer.from_payload(customer_info)
    total = order_total(lines)
    intent = gateway.create_payment_intent({
        "amount": total,
        "currency": currency,
        "metadata": {**customer.metadata(), "items": items_metadata(lines)},
    })
    return PaymentIntent(client_secret=intent.client_secret, amount=total)
