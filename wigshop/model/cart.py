# wigshop/model/cart.py
from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from decimal import Decimal

from ..utils.money import D, round_money
from .product import Product

log = logging.getLogger(__name__)

@dataclass
class CartLine:
    product_id: str
    quantity: int
    price: float               # major units, as shown to the shopper
    image: str | None = None

    def line_total_dec(self) -> Decimal:
        return round_money(D(self.price) * Decimal(self.quantity))

    def as_api(self):
        return {
            "id": self.product_id,
            "quantity": self.quantity,
            "price": self.price,
            "image": self.image,
        }


class Cart:
    """
    Shopping cart bound to a storage capability.

    Every mutation is written back to storage immediately, so a cart
    rebuilt with Cart.load(storage) always matches the last saved state.
    """

    def __init__(self, storage):
        self.storage = storage
        self.lines: dict[str, CartLine] = {}

    @classmethod
    def load(cls, storage) -> "Cart":
        cart = cls(storage)
        raw = storage.load()
        if not raw:
            return cart
        try:
            rows = json.loads(raw)
        except (TypeError, ValueError):
            log.warning("discarding unreadable cart state")
            return cart
        if not isinstance(rows, list):
            return cart
        for row in rows:
            try:
                line = CartLine(
                    product_id=str(row["id"]),
                    quantity=int(row["quantity"]),
                    price=float(row["price"]),
                    image=row.get("image"),
                )
            except (KeyError, TypeError, ValueError):
                continue
            if line.quantity >= 1:
                cart.lines[line.product_id] = line
        return cart

    # --------- mutations ----------
    def add(self, product: Product, quantity: int = 1) -> CartLine | None:
        line = self.lines.get(product.id)
        if line:
            return self.set_quantity(product.id, line.quantity + quantity)
        if quantity < 1:
            return None
        line = CartLine(product.id, quantity, product.price_major, product.image)
        self.lines[product.id] = line
        self._persist()
        return line

    def set_quantity(self, product_id: str, quantity: int) -> CartLine | None:
        line = self.lines.get(str(product_id))
        if not line:
            return None
        if quantity <= 0:
            self.remove(product_id)
            return None
        line.quantity = quantity
        self._persist()
        return line

    def remove(self, product_id: str) -> bool:
        if self.lines.pop(str(product_id), None) is None:
            return False
        self._persist()
        return True

    def clear(self):
        self.lines.clear()
        self._persist()

    # --------- reads ----------
    def is_empty(self) -> bool:
        return not self.lines

    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines.values())

    def total_dec(self) -> Decimal:
        return round_money(sum((line.line_total_dec() for line in self.lines.values()), Decimal("0")))

    def checkout_items(self):
        # shape expected by the checkout endpoints
        return [{"id": line.product_id, "quantity": line.quantity} for line in self.lines.values()]

    def to_json(self) -> str:
        return json.dumps([line.as_api() for line in self.lines.values()])

    def _persist(self):
        self.storage.save(self.to_json())

    def as_api(self):
        return {
            "items": [line.as_api() for line in self.lines.values()],
            "count": self.item_count(),
            "total": float(self.total_dec()),
        }
