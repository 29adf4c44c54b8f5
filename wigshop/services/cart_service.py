# wigshop/services/cart_service.py
from flask import session

from ..model import Cart, get_product

CART_KEY = "cart"

class MemoryCartStorage:
    """Key/value storage shaped like browser localStorage; one key per cart."""

    def __init__(self, backing=None, key=CART_KEY):
        self.backing = {} if backing is None else backing
        self.key = key

    def load(self):
        return self.backing.get(self.key)

    def save(self, raw: str):
        self.backing[self.key] = raw


class SessionCartStorage:
    """Stores the cart JSON in the signed Flask session cookie."""

    def __init__(self, key=CART_KEY):
        self.key = key

    def load(self):
        return session.get(self.key)

    def save(self, raw: str):
        session[self.key] = raw


def session_cart() -> Cart:
    return Cart.load(SessionCartStorage())

def add_to_cart(cart: Cart, product_id, quantity=1):
    # raises UnknownProduct for ids outside the catalog
    product = get_product(product_id)
    return cart.add(product, quantity)
