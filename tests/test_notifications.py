"""Tests for email rendering and delivery results."""

import smtplib
from datetime import datetime

import pytest

from conftest import FakeTransport
from wigshop.model import Order, OrderItem
from wigshop.services.notification_service import (
    COUNTDOWN_MESSAGES,
    DeliveryFailed,
    NotConfigured,
    NotificationSender,
    Sent,
    render_confirmation,
    render_countdown,
)


@pytest.fixture
def order():
    return Order.new(
        order_id="cs_test_mail",
        customer_name="Jane Doe",
        customer_email="jane@example.com",
        items=[OrderItem("The 'Malibu' Blonde Wig", 2, 54999)],
        total_amount=109998,
        now=datetime(2026, 3, 2, 10, 0),
    )


class TestTemplates:
    def test_confirmation(self, order):
        email = render_confirmation(order)
        assert email.subject == "Order Confirmation - LUXE WIGS #cs_test_mail"
        assert "Total: $1099.98" in email.text
        assert "Hi Jane Doe," in email.text
        assert "<strong>Total: $1099.98</strong>" in email.html

    @pytest.mark.parametrize("days_left", sorted(COUNTDOWN_MESSAGES))
    def test_each_countdown_day_is_distinct(self, order, days_left):
        email = render_countdown(order, days_left)
        assert COUNTDOWN_MESSAGES[days_left][1] in email.text
        if days_left == 0:
            assert "Delivery Day" in email.subject
            assert "TODAY!" in email.text
        else:
            assert f"{days_left} Days Left" in email.subject
            assert f"{days_left} DAYS LEFT" in email.text

    def test_countdown_out_of_range(self, order):
        with pytest.raises(ValueError):
            render_countdown(order, 7)

    def test_html_escapes_customer_fields(self, order):
        order.customer_name = "<script>x</script>"
        assert "<script>" not in render_confirmation(order).html


class TestSender:
    def test_sent(self, order):
        transport = FakeTransport()
        result = NotificationSender(transport, sender="Shop <shop@example.com>").send_confirmation(order)
        assert isinstance(result, Sent)
        assert result.success
        msg = transport.sent[0]
        assert msg["To"] == "jane@example.com"
        assert msg["From"] == "Shop <shop@example.com>"
        assert msg.get_body(("html",)) is not None

    def test_not_configured(self, order):
        result = NotificationSender(None).send_countdown(order, 3)
        assert isinstance(result, NotConfigured)
        assert not result.success

    @pytest.mark.parametrize("error", [smtplib.SMTPAuthenticationError(535, b"bad creds"),
                                       TimeoutError("timed out"),
                                       ConnectionRefusedError("refused")])
    def test_delivery_failed(self, order, error):
        result = NotificationSender(FakeTransport(error=error)).send_confirmation(order)
        assert isinstance(result, DeliveryFailed)
        assert result.error

    def test_missing_recipient(self, order):
        order.customer_email = None
        result = NotificationSender(FakeTransport()).send_confirmation(order)
        assert isinstance(result, DeliveryFailed)

    def test_linefeed_in_recipient(self, order):
        order.customer_email = "a@example.com\r\nBcc: x@example.com"
        transport = FakeTransport()
        result = NotificationSender(transport).send_countdown(order, 2)
        assert isinstance(result, DeliveryFailed)
        assert transport.sent == []
