"""Daily sales projection: revenue dashboard for the shop.

Keyed by date (YYYY-MM-DD) of the event that moved the money: orders are
counted on the day they were created, revenue on the day the payment
succeeded and refunds on the day they were processed.
"""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Integer, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.events import (
    OrderCreated,
    OrderRefunded,
    PaymentFailed,
    PaymentSucceeded,
)
from ordering.order.order import Order


@ordering.projection
class DailySales:
    date = String(identifier=True, required=True, max_length=10)  # YYYY-MM-DD
    orders_created = Integer(default=0)
    orders_paid = Integer(default=0)
    payments_failed = Integer(default=0)
    refunds_processed = Integer(default=0)
    gross_revenue = Float(default=0.0)
    total_refunds = Float(default=0.0)
    net_revenue = Float(default=0.0)


def _get_or_create(date_key):
    repo = current_domain.repository_for(DailySales)
    try:
        return repo.get(date_key)
    except ObjectNotFoundError:
        return DailySales(
            date=date_key,
            orders_created=0,
            orders_paid=0,
            payments_failed=0,
            refunds_processed=0,
            gross_revenue=0.0,
            total_refunds=0.0,
            net_revenue=0.0,
        )


@ordering.projector(projector_for=DailySales, aggregates=[Order])
class DailySalesProjector:
    @on(OrderCreated)
    def on_order_created(self, event):
        record = _get_or_create(event.created_at.date().isoformat())
        record.orders_created = (record.orders_created or 0) + 1
        current_domain.repository_for(DailySales).add(record)

    @on(PaymentSucceeded)
    def on_payment_succeeded(self, event):
        record = _get_or_create(event.paid_at.date().isoformat())
        record.orders_paid = (record.orders_paid or 0) + 1
        record.gross_revenue = (record.gross_revenue or 0.0) + (event.amount or 0.0)
        record.net_revenue = record.gross_revenue - (record.total_refunds or 0.0)
        current_domain.repository_for(DailySales).add(record)

    @on(PaymentFailed)
    def on_payment_failed(self, event):
        record = _get_or_create(event.failed_at.date().isoformat())
        record.payments_failed = (record.payments_failed or 0) + 1
        current_domain.repository_for(DailySales).add(record)

    @on(OrderRefunded)
    def on_order_refunded(self, event):
        record = _get_or_create(event.refunded_at.date().isoformat())
        record.refunds_processed = (record.refunds_processed or 0) + 1
        record.total_refunds = (record.total_refunds or 0.0) + (event.refund_amount or 0.0)
        record.net_revenue = (record.gross_revenue or 0.0) - record.total_refunds
        current_domain.repository_for(DailySales).add(record)
