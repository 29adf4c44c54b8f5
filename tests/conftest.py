"""Pytest fixtures for wigshop tests."""

import hashlib
import hmac
import json
import time
from datetime import datetime
from types import SimpleNamespace

import pytest

from wigshop import create_app
from wigshop.errors import PaymentProviderError
from wigshop.services.notification_service import NotificationSender
from wigshop.services.order_repository import InMemoryOrderRepository
from wigshop.services.order_service import OrderTracker
from wigshop.services.stripe_gateway import StripeGateway

WEBHOOK_SECRET = "whsec_test_secret"


class FakeGateway(StripeGateway):
    """Real webhook verification, canned Stripe API responses."""

    def __init__(self, webhook_secret=WEBHOOK_SECRET):
        super().__init__("sk_test_dummy", webhook_secret=webhook_secret)
        self.sessions = []
        self.intents = []
        self.fail_with = None

    def create_checkout_session(self, params):
        if self.fail_with:
            raise PaymentProviderError(self.fail_with)
        sid = f"cs_test_{len(self.sessions) + 1}"
        self.sessions.append(params)
        return SimpleNamespace(id=sid, url=f"https://checkout.stripe.com/c/pay/{sid}")

    def retrieve_checkout_session(self, session_id):
        if self.fail_with:
            raise PaymentProviderError(self.fail_with)
        return SimpleNamespace(id=session_id, amount_total=109998)

    def create_payment_intent(self, params):
        if self.fail_with:
            raise PaymentProviderError(self.fail_with)
        self.intents.append(params)
        return SimpleNamespace(id="pi_test_1", client_secret="pi_test_1_secret_abc")


class FakeTransport:
    def __init__(self, error=None):
        self.sent = []
        self.error = error

    def send(self, msg):
        if self.error:
            raise self.error
        self.sent.append(msg)
        return msg["Message-ID"]


def sign(payload: str, secret=WEBHOOK_SECRET, timestamp=None) -> str:
    ts = int(timestamp or time.time())
    digest = hmac.new(secret.encode(), f"{ts}.{payload}".encode(), hashlib.sha256).hexdigest()
    return f"t={ts},v1={digest}"


def make_event(event_type, obj, event_id="evt_test_1") -> str:
    return json.dumps({"id": event_id, "type": event_type, "data": {"object": obj}})


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def app(gateway, transport):
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test",
            "STRIPE_SECRET_KEY": "sk_test_dummy",
            "STRIPE_WEBHOOK_SECRET": WEBHOOK_SECRET,
            "ORDER_STORE": "memory",
        },
        gateway=gateway,
        mail_transport=transport,
    )
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def tracker(transport):
    return OrderTracker(InMemoryOrderRepository(), NotificationSender(transport))


@pytest.fixture
def order_day():
    return datetime(2026, 3, 2, 14, 30)


@pytest.fixture
def paid_session():
    """A checkout.session.completed object as Stripe sends it."""
    return {
        "id": "cs_test_paid",
        "object": "checkout.session",
        "amount_total": 109998,
        "customer_email": "jane@example.com",
        "metadata": {
            "customer_name": "Jane Doe",
            "customer_email": "jane@example.com",
            "customer_address": "1 Main St",
            "items": '[{"id":"1","quantity":2}]',
        },
    }


@pytest.fixture
def sql_app(gateway, transport):
    app = create_app(
        {
            "TESTING": True,
            "STRIPE_SECRET_KEY": "sk_test_dummy",
            "STRIPE_WEBHOOK_SECRET": WEBHOOK_SECRET,
            "ORDER_STORE": "sql",
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
        },
        gateway=gateway,
        mail_transport=transport,
    )
    with app.app_context():
        yield app
