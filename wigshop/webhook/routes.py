# wigshop/webhook/routes.py
from flask import current_app, jsonify, request

from ..errors import SignatureInvalid
from ..services import shop
from ..services.webhook_service import WebhookEvent
from . import bp

@bp.post("/webhook")
def stripe_webhook():
    # raw bytes: the signature covers the body exactly as sent
    payload = request.get_data(cache=False)
    sig = request.headers.get("Stripe-Signature")
    services = shop()
    try:
        event = services.gateway.parse_webhook(payload, sig)
    except SignatureInvalid as e:
        current_app.logger.warning("Webhook signature verification failed: %s", e)
        return f"Webhook Error: {e}", 400, {"Content-Type": "text/plain; charset=utf-8"}

    services.dispatcher.dispatch(WebhookEvent.from_payload(event))
    return jsonify(received=True)
