# wigshop/services/notification_service.py
from __future__ import annotations
import logging
import smtplib
from dataclasses import dataclass
from email.errors import MessageError
from email.message import EmailMessage
from email.utils import make_msgid

from jinja2 import Environment, PackageLoader, select_autoescape

from ..model import Order
from ..utils.money import format_minor

log = logging.getLogger(__name__)

SHOP_NAME = "LUXE WIGS"
CONTACT_EMAIL = "contact@luxewigs.com"
CONTACT_PHONE = "+1 (234) 567-890"

# days_left -> (emoji, headline)
COUNTDOWN_MESSAGES = {
    6: ("\U0001F69B", "Your amazing new wig is on its way!"),
    5: ("\U0001F4E6", "Just 5 more days until your wig arrives!"),
    4: ("⏰", "Getting closer! 4 days to go!"),
    3: ("✨", "Only 3 days left - almost there!"),
    2: ("\U0001F389", "Just 2 more days - prepare for your new look!"),
    1: ("\U0001F38A", "Tomorrow is the day! Your wig arrives soon!"),
    0: ("\U0001F381", "Delivery day is here! Your wig should arrive today!"),
}

_env = Environment(
    loader=PackageLoader("wigshop", "templates/email"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
_env.filters["money"] = format_minor


# ---- delivery results ---------------------------------------------------
@dataclass(frozen=True)
class Sent:
    message_id: str
    success = True

@dataclass(frozen=True)
class NotConfigured:
    reason: str = "Email not configured"
    success = False

@dataclass(frozen=True)
class DeliveryFailed:
    error: str
    success = False


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str
    text: str


# ---- templates ----------------------------------------------------------
def _context(order: Order, **extra):
    return {
        "shop": SHOP_NAME,
        "contact_email": CONTACT_EMAIL,
        "contact_phone": CONTACT_PHONE,
        "order": order,
        **extra,
    }

def render_confirmation(order: Order) -> RenderedEmail:
    ctx = _context(order)
    return RenderedEmail(
        subject=f"Order Confirmation - {SHOP_NAME} #{order.id}",
        html=_env.get_template("confirmation.html").render(ctx),
        text=_env.get_template("confirmation.txt").render(ctx),
    )

def render_countdown(order: Order, days_left: int) -> RenderedEmail:
    if days_left not in COUNTDOWN_MESSAGES:
        raise ValueError(f"no countdown message for {days_left} days")
    emoji, message = COUNTDOWN_MESSAGES[days_left]
    label = "Delivery Day" if days_left == 0 else f"{days_left} Days Left"
    ctx = _context(order, days_left=days_left, message=message)
    return RenderedEmail(
        subject=f"{emoji} {label} - {SHOP_NAME} Order #{order.id}",
        html=_env.get_template("countdown.html").render(ctx),
        text=_env.get_template("countdown.txt").render(ctx),
    )


# ---- transport ----------------------------------------------------------
class SmtpTransport:
    def __init__(self, host, port, user, password, timeout=10):
        self.host = host
        self.port = int(port)
        self.user = user
        self.password = password
        self.timeout = timeout

    def send(self, msg: EmailMessage) -> str:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.starttls()
            smtp.login(self.user, self.password)
            smtp.send_message(msg)
        return msg["Message-ID"]

    @classmethod
    def from_config(cls, config) -> "SmtpTransport | None":
        if not (config.get("EMAIL_USER") and config.get("EMAIL_PASS")):
            return None
        return cls(
            config.get("EMAIL_HOST") or "smtp.gmail.com",
            config.get("EMAIL_PORT") or 587,
            config["EMAIL_USER"],
            config["EMAIL_PASS"],
            timeout=config.get("EMAIL_TIMEOUT", 10),
        )


class NotificationSender:
    """
    Renders and delivers order emails.

    Never raises: an unconfigured or failing transport comes back as a
    NotConfigured / DeliveryFailed result so order handling carries on.
    """

    def __init__(self, transport=None, sender="LUXE WIGS <noreply@example.com>"):
        self.transport = transport
        self.sender = sender

    @property
    def configured(self) -> bool:
        return self.transport is not None

    def send_confirmation(self, order: Order):
        return self._deliver(order, render_confirmation(order), "confirmation")

    def send_countdown(self, order: Order, days_left: int):
        return self._deliver(order, render_countdown(order, days_left), f"{days_left}-day countdown")

    def _deliver(self, order: Order, email: RenderedEmail, kind: str):
        if not self.transport:
            log.warning("email not configured - skipping %s for order %s", kind, order.id)
            return NotConfigured()
        if not order.customer_email:
            log.warning("order %s has no customer email - skipping %s", order.id, kind)
            return DeliveryFailed("order has no customer email")

        try:
            # header values come from checkout input; CR/LF raises ValueError here
            msg = EmailMessage()
            msg["From"] = self.sender
            msg["To"] = order.customer_email
            msg["Subject"] = email.subject
            msg["Message-ID"] = make_msgid(domain="luxewigs.com")
            msg.set_content(email.text)
            msg.add_alternative(email.html, subtype="html")
            message_id = self.transport.send(msg)
        except (ValueError, MessageError, smtplib.SMTPException, OSError) as e:
            log.error("failed to send %s to %s: %s", kind, order.customer_email, e)
            return DeliveryFailed(str(e))
        log.info("%s email sent to %s: %s", kind, order.customer_email, message_id)
        return Sent(message_id)
