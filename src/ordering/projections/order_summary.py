"""Order summary: lightweight listing view for the admin order list."""

from protean.core.projector import on
from protean.fields import Boolean, DateTime, Float, Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.events import (
    CheckoutCompleted,
    ConfirmationEmailSent,
    FulfillmentStatusChanged,
    OrderCreated,
    OrderRefunded,
    PaymentFailed,
    PaymentSucceeded,
)
from ordering.order.order import Order


@ordering.projection
class OrderSummary:
    order_id = Identifier(identifier=True, required=True)
    order_number = String(required=True)
    payment_intent_id = String(required=True)
    customer_email = String()
    customer_name = String()
    team_name = String()
    payment_status = String(required=True)
    fulfillment_status = String(required=True)
    total_amount = Float(default=0.0)
    amount_refunded = Float(default=0.0)
    currency = String(default="USD")
    confirmation_email_sent = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()


@ordering.projector(projector_for=OrderSummary, aggregates=[Order])
class OrderSummaryProjector:
    @on(OrderCreated)
    def on_order_created(self, event):
        current_domain.repository_for(OrderSummary).add(
            OrderSummary(
                order_id=event.order_id,
                order_number=event.order_number,
                payment_intent_id=event.payment_intent_id,
                customer_email=event.customer_email,
                customer_name=event.customer_name,
                team_name=event.team_name,
                payment_status="pending",
                fulfillment_status="pending",
                total_amount=event.total_amount,
                amount_refunded=0.0,
                currency=event.currency or "USD",
                confirmation_email_sent=False,
                created_at=event.created_at,
                updated_at=event.created_at,
            )
        )

    def _update(self, order_id, updated_at, **changes):
        repo = current_domain.repository_for(OrderSummary)
        summary = repo.get(order_id)
        for name, value in changes.items():
            setattr(summary, name, value)
        summary.updated_at = updated_at
        repo.add(summary)

    @on(CheckoutCompleted)
    def on_checkout_completed(self, event):
        self._update(
            event.order_id,
            event.completed_at,
            customer_email=event.customer_email,
            customer_name=event.customer_name,
        )

    @on(PaymentSucceeded)
    def on_payment_succeeded(self, event):
        self._update(event.order_id, event.paid_at, payment_status="succeeded")

    @on(PaymentFailed)
    def on_payment_failed(self, event):
        self._update(event.order_id, event.failed_at, payment_status="failed")

    @on(OrderRefunded)
    def on_order_refunded(self, event):
        self._update(
            event.order_id,
            event.refunded_at,
            payment_status="refunded" if event.full_refund else "partial_refund",
            amount_refunded=event.amount_refunded,
        )

    @on(ConfirmationEmailSent)
    def on_confirmation_email_sent(self, event):
        self._update(event.order_id, event.sent_at, confirmation_email_sent=True)

    @on(FulfillmentStatusChanged)
    def on_fulfillment_status_changed(self, event):
        self._update(event.order_id, event.changed_at, fulfillment_status=event.new_status)
