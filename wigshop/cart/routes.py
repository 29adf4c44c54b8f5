# wigshop/cart/routes.py
from __future__ import annotations
from flask import request

from ..errors import UnknownProduct
from ..services.cart_service import add_to_cart, session_cart
from ..services.checkout_service import parse_quantity
from ..utils.api import ok, err
from . import bp

def _qty(v, default=None) -> int | None:
    # same rules as checkout: whole numbers only, no bools or 1.5
    return default if v is None else parse_quantity(v)

@bp.get("")
def get_cart():
    return ok("cart", session_cart().as_api())

@bp.post("/items")
def add_item():
    data = request.get_json(silent=True) or {}
    qty = _qty(data.get("quantity"), 1)
    if qty is None or qty < 1:
        return err("quantity must be a positive integer", 422)
    cart = session_cart()
    try:
        add_to_cart(cart, data.get("id"), qty)
    except UnknownProduct as e:
        return err(str(e), 404)
    return ok("item added", cart.as_api(), status=201)

@bp.put("/items/<product_id>")
def update_item(product_id):
    data = request.get_json(silent=True) or {}
    qty = _qty(data.get("quantity"))
    if qty is None:
        return err("quantity is required", 422)
    cart = session_cart()
    if product_id not in cart.lines:
        return err("item not in cart", 404)
    # quantity <= 0 removes the line
    cart.set_quantity(product_id, qty)
    return ok("item updated", cart.as_api())

@bp.delete("/items/<product_id>")
def remove_item(product_id):
    cart = session_cart()
    if not cart.remove(product_id):
        return err("item not in cart", 404)
    return ok("item removed", cart.as_api())

@bp.delete("")
def clear_cart():
    cart = session_cart()
    cart.clear()
    return ok("cart cleared", cart.as_api())
