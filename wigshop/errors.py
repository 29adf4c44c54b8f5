# wigshop/errors.py
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

log = logging.getLogger(__name__)


class ShopError(Exception):
    """Base class for errors the storefront reports to callers."""
    code = "shop_error"
    status_code = 500


class UnknownProduct(ShopError):
    code = "unknown_product"

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class InvalidCheckoutRequest(ShopError):
    code = "invalid_request"
    status_code = 400


class PaymentProviderError(ShopError):
    """Stripe rejected or failed to answer an outbound call."""
    code = "payment_provider_error"


class SignatureInvalid(ShopError):
    code = "signature_invalid"
    status_code = 400


def register_error_handlers(app):
    @app.errorhandler(Exception)
    def handle_unexpected(e):
        # werkzeug 404/405 etc. pass through untouched
        if isinstance(e, HTTPException):
            return e
        log.exception("unhandled error: %s", e)
        r = jsonify({"error": "Something went wrong!"})
        r.status_code = 500
        return r
