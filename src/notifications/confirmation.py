"""Order confirmation email: builds, renders and dispatches the email.

The email is sent at most once per order: an order already marked as
confirmed is skipped. Provider failures are reported in the result and
leave the order untouched so the send can be retried.
"""

import os
from dataclasses import dataclass

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from notifications.channel import get_email_channel
from notifications.channel.email_port import EmailPort
from notifications.templates import get_template
from ordering.order.confirmation import MarkConfirmationEmailSent
from ordering.order.order import Order

logger = structlog.get_logger(__name__)

DEFAULT_APP_URL = "http://localhost:3000"
STANDARD_DELIVERY = "7-10 business days"
PRE_ORDER_DELIVERY = "March 2025"


@dataclass(frozen=True)
class ConfirmationResult:
    order_id: str
    status: str  # "sent", "skipped" or "failed"
    message_id: str | None = None
    error: str | None = None
    error_type: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status != "failed"


def _display_name(order: Order) -> str:
    if order.customer_name:
        return order.customer_name
    if order.customer_email:
        return order.customer_email.split("@")[0]
    return "Customer"


def build_confirmation_context(order: Order) -> dict:
    """Derive the display values the confirmation template needs."""
    app_url = os.environ.get("APP_URL") or DEFAULT_APP_URL
    address = order.shipping_address
    return {
        "customer_name": _display_name(order),
        "customer_email": order.customer_email,
        "order_number": order.order_number,
        "team_name": order.team_name or "Your Team",
        "plaque_type": order.plaque_type or "standard",
        "plaque_style": order.plaque_style or "classic",
        "subtotal": order.pricing.subtotal or order.pricing.total_amount or 0.0,
        "discount_amount": order.pricing.discount_amount or 0.0,
        "total_amount": order.pricing.total_amount or 0.0,
        "currency": order.pricing.currency or "USD",
        "gift_packaging": bool(order.gift_packaging),
        "is_pre_order": bool(order.is_pre_order),
        "estimated_delivery": PRE_ORDER_DELIVERY if order.is_pre_order else STANDARD_DELIVERY,
        "shipping_address": (
            {
                "line1": address.line1,
                "line2": address.line2,
                "city": address.city,
                "state": address.state,
                "postal_code": address.postal_code,
                "country": address.country or "US",
            }
            if address
            else None
        ),
        "preview_url": order.preview_url,
        "order_url": f"{app_url.rstrip('/')}/order-success?payment_intent={order.payment_intent_id}",
    }


def render_order_confirmation(order_id: str) -> dict:
    """Render subject, text and HTML for an order without sending anything."""
    order = current_domain.repository_for(Order).get(order_id)
    return get_template("OrderConfirmation").render(build_confirmation_context(order))


def send_order_confirmation(order_id: str, channel: EmailPort | None = None) -> ConfirmationResult:
    """Send the confirmation email for ``order_id``.

    Raises ObjectNotFoundError for an unknown order and ValidationError when
    the order has no customer email.
    """
    order = current_domain.repository_for(Order).get(order_id)

    if order.confirmation_email_sent:
        logger.info("Confirmation email already sent", order_id=order_id)
        return ConfirmationResult(order_id=order_id, status="skipped")

    if not order.customer_email:
        raise ValidationError({"customer_email": ["Customer email not found"]})

    content = get_template("OrderConfirmation").render(build_confirmation_context(order))
    result = (channel or get_email_channel()).send(
        to=order.customer_email,
        subject=content["subject"],
        body=content["body"],
        html_body=content["html_body"],
    )

    if result["status"] != "sent":
        logger.error(
            "Confirmation email failed",
            order_id=order_id,
            error=result.get("error"),
            error_type=result.get("error_type"),
        )
        return ConfirmationResult(
            order_id=order_id,
            status="failed",
            error=result.get("error"),
            error_type=result.get("error_type") or "provider_error",
        )

    current_domain.process(
        MarkConfirmationEmailSent(order_id=order_id, message_id=result.get("message_id")),
        asynchronous=False,
    )
    logger.info("Confirmation email sent", order_id=order_id, message_id=result.get("message_id"))
    return ConfirmationResult(order_id=order_id, status="sent", message_id=result.get("message_id"))
