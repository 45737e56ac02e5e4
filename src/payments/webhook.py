"""Stripe webhook processing: translates verified gateway events into
ordering commands.

Supported events:
    payment_intent.succeeded       → RecordPaymentSuccess, then confirmation email
    payment_intent.payment_failed  → RecordPaymentFailure
    checkout.session.completed     → RecordCheckoutCompleted
    charge.refunded                → RecordRefund

Any other event type is acknowledged and ignored. Amounts arrive in minor
units (cents) and are converted before they reach the domain.
"""

import structlog
from protean.utils.globals import current_domain

from notifications.confirmation import send_order_confirmation
from ordering.order.payment import (
    RecordCheckoutCompleted,
    RecordPaymentFailure,
    RecordPaymentSuccess,
    RecordRefund,
)
from payments.gateway.port import WebhookEvent

logger = structlog.get_logger(__name__)


def _major_units(amount) -> float:
    return round((amount or 0) / 100, 2)


def _handle_payment_succeeded(event: WebhookEvent):
    intent = event.data_object
    order_id = current_domain.process(
        RecordPaymentSuccess(
            payment_intent_id=intent["id"],
            stripe_customer_id=intent.get("customer"),
            provider_event_id=event.id,
        ),
        asynchronous=False,
    )
    if order_id is None:
        return None

    # The payment is committed at this point; email problems must not undo it
    try:
        result = send_order_confirmation(order_id)
        if not result.succeeded:
            logger.warning("Confirmation email not sent", order_id=order_id, error=result.error)
    except Exception as exc:
        logger.error("Error sending confirmation email", order_id=order_id, error=str(exc))
    return order_id


def _handle_payment_failed(event: WebhookEvent):
    intent = event.data_object
    last_error = intent.get("last_payment_error") or {}
    return current_domain.process(
        RecordPaymentFailure(
            payment_intent_id=intent["id"],
            reason=last_error.get("message") or "Unknown error",
            provider_event_id=event.id,
        ),
        asynchronous=False,
    )


def _handle_checkout_completed(event: WebhookEvent):
    session = event.data_object
    payment_intent_id = session.get("payment_intent")
    if not payment_intent_id:
        logger.info("Checkout session has no payment intent", checkout_session_id=session.get("id"))
        return None

    details = session.get("customer_details") or {}
    return current_domain.process(
        RecordCheckoutCompleted(
            payment_intent_id=payment_intent_id,
            checkout_session_id=session["id"],
            customer_email=details.get("email") or session.get("customer_email"),
            customer_name=details.get("name"),
            customer_phone=details.get("phone"),
        ),
        asynchronous=False,
    )


def _handle_charge_refunded(event: WebhookEvent):
    charge = event.data_object
    payment_intent_id = charge.get("payment_intent")
    if not payment_intent_id:
        logger.info("Refunded charge has no payment intent", charge_id=charge.get("id"))
        return None

    return current_domain.process(
        RecordRefund(
            payment_intent_id=payment_intent_id,
            amount_refunded=_major_units(charge.get("amount_refunded")),
            charge_amount=_major_units(charge.get("amount")),
            currency=(charge.get("currency") or "usd").upper(),
            provider_event_id=event.id,
        ),
        asynchronous=False,
    )


EVENT_HANDLERS = {
    "payment_intent.succeeded": _handle_payment_succeeded,
    "payment_intent.payment_failed": _handle_payment_failed,
    "checkout.session.completed": _handle_checkout_completed,
    "charge.refunded": _handle_charge_refunded,
}


def process_webhook_event(event: WebhookEvent) -> str | None:
    """Apply ``event`` to its order.

    Returns the order id when the event changed an order, None when it was
    ignored (unknown type, unknown order or replay).
    """
    handler = EVENT_HANDLERS.get(event.type)
    if handler is None:
        logger.info("Unhandled webhook event type", event_id=event.id, event_type=event.type)
        return None

    logger.info("Processing webhook event", event_id=event.id, event_type=event.type)
    return handler(event)
