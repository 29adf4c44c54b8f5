# wigshop/checkout/routes.py
from flask import current_app, jsonify, render_template, request

from ..errors import PaymentProviderError, ShopError
from ..services import shop
from ..services.checkout_service import create_checkout_session, create_payment_intent
from ..utils.money import format_minor
from . import bp

def _failure(what: str, e: ShopError):
    current_app.logger.error("Error creating %s: %s", what, e)
    r = jsonify(error=f"Failed to create {what}", message=str(e), code=e.code)
    r.status_code = e.status_code
    return r

def _payload():
    data = request.get_json(silent=True) or {}
    return data.get("items"), data.get("customerInfo")

@bp.post("/api/create-checkout-session")
def checkout_session():
    items, customer = _payload()
    cfg = current_app.config
    try:
        session = create_checkout_session(
            shop().gateway, items, customer,
            host_url=request.host_url,
            currency=cfg["CHECKOUT_CURRENCY"],
            countries=cfg["SHIPPING_COUNTRIES"],
        )
    except ShopError as e:
        return _failure("checkout session", e)
    return jsonify(url=session.url, sessionId=session.session_id)

@bp.post("/api/create-payment-intent")
def payment_intent():
    items, customer = _payload()
    try:
        intent = create_payment_intent(
            shop().gateway, items, customer,
            currency=current_app.config["CHECKOUT_CURRENCY"],
        )
    except ShopError as e:
        return _failure("payment intent", e)
    return jsonify(clientSecret=intent.client_secret, amount=intent.amount)

@bp.get("/success")
def success():
    session_id = request.args.get("session_id")
    if not session_id:
        return render_template("success.html", session=None)
    try:
        session = shop().gateway.retrieve_checkout_session(session_id)
    except PaymentProviderError:
        return "Error retrieving session information"
    return render_template(
        "success.html",
        session=session,
        amount=format_minor(getattr(session, "amount_total", 0) or 0),
    )

@bp.get("/cancel")
def cancel():
    return render_template("cancel.html")
