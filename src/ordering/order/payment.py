"""Order payment: commands and handler.

Applies verified payment provider events to the order they refer to. Orders
are looked up by payment intent id, since that is the only reference the
provider carries.

Provider events may be delivered more than once and out of order. A command
whose transition is not allowed from the order's current state (or whose
order does not exist) is logged and skipped rather than raised, so a replay
never adds a second history row. Handlers return the order id when the
command was applied and None when it was skipped.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, String
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.order.order import Order, PaymentStatus


@ordering.command(part_of="Order")
class RecordCheckoutCompleted:
    payment_intent_id = String(required=True, max_length=255)
    checkout_session_id = String(required=True, max_length=255)
    customer_email = String(max_length=255)
    customer_name = String(max_length=255)
    customer_phone = String(max_length=50)


@ordering.command(part_of="Order")
class RecordPaymentSuccess:
    payment_intent_id = String(required=True, max_length=255)
    stripe_customer_id = String(max_length=255)
    provider_event_id = String(max_length=255)


@ordering.command(part_of="Order")
class RecordPaymentFailure:
    payment_intent_id = String(required=True, max_length=255)
    reason = String(required=True, max_length=500)
    provider_event_id = String(max_length=255)


@ordering.command(part_of="Order")
class RecordRefund:
    payment_intent_id = String(required=True, max_length=255)
    amount_refunded = Float(required=True)  # Cumulative, major units
    charge_amount = Float(required=True)  # Major units
    currency = String(max_length=3, default="USD")
    provider_event_id = String(max_length=255)


def _load(payment_intent_id):
    try:
        return current_domain.repository_for(Order).find_by_payment_intent(payment_intent_id)
    except ObjectNotFoundError:
        logger.warning("No order for payment intent", payment_intent_id=payment_intent_id)
        return None


@ordering.command_handler(part_of=Order)
class RecordPaymentHandler:
    @handle(RecordCheckoutCompleted)
    def record_checkout_completed(self, command):
        order = _load(command.payment_intent_id)
        if order is None:
            return None
        if order.checkout_session_id == command.checkout_session_id:
            logger.info("Checkout already recorded", order_id=str(order.id))
            return None

        order.record_checkout_completed(
            checkout_session_id=command.checkout_session_id,
            customer_email=command.customer_email,
            customer_name=command.customer_name,
            customer_phone=command.customer_phone,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)

    @handle(RecordPaymentSuccess)
    def record_payment_success(self, command):
        order = _load(command.payment_intent_id)
        if order is None:
            return None
        if not order.can_transition_payment(PaymentStatus.SUCCEEDED):
            logger.info(
                "Skipping payment success",
                order_id=str(order.id),
                payment_status=order.payment_status,
            )
            return None

        order.record_payment_success(
            stripe_customer_id=command.stripe_customer_id,
            provider_event_id=command.provider_event_id,
        )
        current_domain.repository_for(Order).add(order)
        logger.info("Payment succeeded", order_id=str(order.id), order_number=order.order_number)
        return str(order.id)

    @handle(RecordPaymentFailure)
    def record_payment_failure(self, command):
        order = _load(command.payment_intent_id)
        if order is None:
            return None
        if not order.can_transition_payment(PaymentStatus.FAILED):
            logger.info(
                "Skipping payment failure",
                order_id=str(order.id),
                payment_status=order.payment_status,
            )
            return None

        order.record_payment_failure(reason=command.reason, provider_event_id=command.provider_event_id)
        current_domain.repository_for(Order).add(order)
        logger.info("Payment failed", order_id=str(order.id), reason=command.reason)
        return str(order.id)

    @handle(RecordRefund)
    def record_refund(self, command):
        order = _load(command.payment_intent_id)
        if order is None:
            return None
        target = order.refund_target(command.amount_refunded, command.charge_amount)
        if target is None or not order.can_transition_payment(target):
            logger.info(
                "Skipping refund",
                order_id=str(order.id),
                payment_status=order.payment_status,
                amount_refunded=command.amount_refunded,
            )
            return None

        order.record_refund(
            amount_refunded=command.amount_refunded,
            charge_amount=command.charge_amount,
            currency=command.currency or "USD",
            provider_event_id=command.provider_event_id,
        )
        current_domain.repository_for(Order).add(order)
        logger.info("Refund recorded", order_id=str(order.id), payment_status=order.payment_status)
        return str(order.id)
