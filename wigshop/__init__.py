# --- wigshop/__init__.py ---
import logging

from flask import Flask, jsonify

from .config import Config
from .extensions import db, cors
from .errors import register_error_handlers
from .services import Shop
from .services.notification_service import NotificationSender, SmtpTransport
from .services.order_repository import InMemoryOrderRepository, SqlOrderRepository
from .services.order_service import OrderTracker
from .services.stripe_gateway import StripeGateway
from .services.webhook_service import WebhookDispatcher

def create_app(test_config=None, gateway=None, mail_transport=None):
    """
    Application factory.

    `gateway` and `mail_transport` replace the Stripe and SMTP clients,
    which is how the test suite runs without network access.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)
    # catalog and order payloads keep their declared field order
    app.json.sort_keys = False

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if not app.config.get("STRIPE_SECRET_KEY") and gateway is None:
        app.logger.error("STRIPE_SECRET_KEY is required")
        raise RuntimeError("STRIPE_SECRET_KEY is required")
    if not app.config.get("STRIPE_WEBHOOK_SECRET"):
        app.logger.warning("STRIPE_WEBHOOK_SECRET not set - webhooks will be rejected")

    # Init extensions
    cors.init_app(app, resources={r"/*": {"origins": app.config["CORS_ORIGINS"]}},
                  supports_credentials=True)

    if app.config["ORDER_STORE"] == "sql":
        Config.init_app(app)
        db.init_app(app)
        with app.app_context():
            db.create_all()
        repository = SqlOrderRepository()
    else:
        repository = InMemoryOrderRepository()

    if gateway is None:
        gateway = StripeGateway(
            app.config["STRIPE_SECRET_KEY"],
            webhook_secret=app.config.get("STRIPE_WEBHOOK_SECRET"),
            timeout=app.config["STRIPE_TIMEOUT"],
        )
    if mail_transport is None:
        mail_transport = SmtpTransport.from_config(app.config)
    if mail_transport is None:
        app.logger.warning("Email configuration incomplete - order emails disabled (payments still work)")

    notifier = NotificationSender(mail_transport, sender=app.config["EMAIL_FROM"])
    tracker = OrderTracker(repository, notifier, delivery_days=app.config["DELIVERY_DAYS"])
    app.extensions["shop"] = Shop(
        gateway=gateway,
        notifier=notifier,
        tracker=tracker,
        dispatcher=WebhookDispatcher(tracker),
    )

    # Register blueprints
    from .product import bp as product_bp; app.register_blueprint(product_bp)
    from .checkout import bp as checkout_bp; app.register_blueprint(checkout_bp)
    from .webhook import bp as webhook_bp; app.register_blueprint(webhook_bp)
    from .cart import bp as cart_bp; app.register_blueprint(cart_bp)
    from .order import bp as order_bp; app.register_blueprint(order_bp)

    from .cli import register_cli
    register_cli(app)
    register_error_handlers(app)

    @app.get("/")
    def health():
        return jsonify(ok=True, msg="API running")

    return app
