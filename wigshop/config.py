import os

def _env_int(name, default):
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default

class Config:
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-change-me")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Stripe
    STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
    STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET")
    STRIPE_TIMEOUT = _env_int("STRIPE_TIMEOUT", 10)
    CHECKOUT_CURRENCY = "usd"
    SHIPPING_COUNTRIES = ["US", "CA", "GB", "AU"]

    # Mail (absence disables email, never payments)
    EMAIL_HOST = os.getenv("EMAIL_HOST", "smtp.gmail.com")
    EMAIL_PORT = _env_int("EMAIL_PORT", 587)
    EMAIL_USER = os.getenv("EMAIL_USER")
    EMAIL_PASS = os.getenv("EMAIL_PASS")
    EMAIL_FROM = os.getenv("EMAIL_FROM", "LUXE WIGS <noreply@example.com>")
    EMAIL_TIMEOUT = _env_int("EMAIL_TIMEOUT", 10)

    # Orders: "memory" (default, lost on restart) or "sql"
    ORDER_STORE = os.getenv("ORDER_STORE", "memory")
    DELIVERY_DAYS = 7

    CORS_ORIGINS = [
        o.strip() for o in os.getenv(
            "CORS_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000,http://localhost:8080",
        ).split(",") if o.strip()
    ]

    @staticmethod
    def init_app(app):

        if app.config.get("SQLALCHEMY_DATABASE_URI"):
            return
        if not os.getenv("DATABASE_URL"):
            os.makedirs(app.instance_path, exist_ok=True)
            app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{os.path.join(app.instance_path, 'orders.db')}"
        else:
            app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv("DATABASE_URL")
