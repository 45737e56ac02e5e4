"""Domain events for the Order aggregate.

Raised on every state change and consumed by the ordering projections
(order summary, daily sales).
"""

from protean.fields import Boolean, DateTime, Float, Identifier, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderCreated:
    """An order was created at checkout with a pending payment."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    payment_intent_id = String(required=True)
    customer_email = String()
    customer_name = String()
    team_name = String()
    total_amount = Float(required=True)
    currency = String(required=True)
    created_at = DateTime(required=True)


@ordering.event(part_of="Order")
class CheckoutCompleted:
    """The hosted checkout session finished and supplied customer details."""

    __version__ = 1

    order_id = Identifier(required=True)
    checkout_session_id = String(required=True)
    customer_email = String()
    customer_name = String()
    completed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PaymentSucceeded:
    """The payment provider confirmed the charge."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_intent_id = String(required=True)
    amount = Float(required=True)
    currency = String(required=True)
    provider_event_id = String()
    paid_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PaymentFailed:
    """The payment provider reported a failed charge attempt."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_intent_id = String(required=True)
    reason = String(required=True)
    provider_event_id = String()
    failed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderRefunded:
    """All or part of the charge was refunded."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_intent_id = String(required=True)
    refund_amount = Float(required=True)
    amount_refunded = Float(required=True)
    currency = String(required=True)
    full_refund = Boolean(required=True)
    provider_event_id = String()
    refunded_at = DateTime(required=True)


@ordering.event(part_of="Order")
class ConfirmationEmailSent:
    """The order confirmation email was accepted by the email provider."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_email = String(required=True)
    message_id = String()
    sent_at = DateTime(required=True)


@ordering.event(part_of="Order")
class FulfillmentStatusChanged:
    """The plaque moved to a new production / shipping stage."""

    __version__ = 1

    order_id = Identifier(required=True)
    old_status = String(required=True)
    new_status = String(required=True)
    changed_by = String(required=True)
    notes = String()
    changed_at = DateTime(required=True)
