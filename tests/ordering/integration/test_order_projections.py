"""Integration tests for the order summary and daily sales projections."""

from datetime import UTC, datetime

from ordering.order.confirmation import MarkConfirmationEmailSent
from ordering.order.creation import CreateOrder
from ordering.order.fulfillment import UpdateFulfillmentStatus
from ordering.order.payment import (
    RecordCheckoutCompleted,
    RecordPaymentFailure,
    RecordPaymentSuccess,
    RecordRefund,
)
from ordering.projections.daily_sales import DailySales
from ordering.projections.order_summary import OrderSummary
from protean import current_domain


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _create_order(payment_intent_id="pi_proj_001", total=200.0):
    return _process(
        CreateOrder(
            payment_intent_id=payment_intent_id,
            customer_email="fan@example.com",
            team_name="Wolves",
            subtotal=total,
            total_amount=total,
        )
    )


def _summary(order_id):
    return current_domain.repository_for(OrderSummary).get(order_id)


def _today():
    return current_domain.repository_for(DailySales).get(datetime.now(UTC).date().isoformat())


class TestOrderSummaryProjection:
    def test_created(self):
        order_id = _create_order()
        summary = _summary(order_id)

        assert summary.payment_intent_id == "pi_proj_001"
        assert summary.payment_status == "pending"
        assert summary.fulfillment_status == "pending"
        assert summary.total_amount == 200.0
        assert summary.team_name == "Wolves"

    def test_checkout_completed(self):
        order_id = _create_order()
        _process(
            RecordCheckoutCompleted(
                payment_intent_id="pi_proj_001",
                checkout_session_id="cs_1",
                customer_email="buyer@example.com",
                customer_name="Buyer",
            )
        )
        summary = _summary(order_id)
        assert summary.customer_email == "buyer@example.com"
        assert summary.customer_name == "Buyer"

    def test_paid_then_refunded(self):
        order_id = _create_order()
        _process(RecordPaymentSuccess(payment_intent_id="pi_proj_001"))
        assert _summary(order_id).payment_status == "succeeded"

        _process(RecordRefund(payment_intent_id="pi_proj_001", amount_refunded=50.0, charge_amount=200.0))
        summary = _summary(order_id)
        assert summary.payment_status == "partial_refund"
        assert summary.amount_refunded == 50.0

    def test_failed(self):
        order_id = _create_order()
        _process(RecordPaymentFailure(payment_intent_id="pi_proj_001", reason="Declined"))
        assert _summary(order_id).payment_status == "failed"

    def test_fulfillment_and_confirmation(self):
        order_id = _create_order()
        _process(RecordPaymentSuccess(payment_intent_id="pi_proj_001"))
        _process(MarkConfirmationEmailSent(order_id=order_id))
        _process(UpdateFulfillmentStatus(order_id=order_id, status="processing"))

        summary = _summary(order_id)
        assert summary.confirmation_email_sent is True
        assert summary.fulfillment_status == "processing"


class TestDailySalesProjection:
    def test_counts_and_revenue(self):
        _create_order("pi_day_001", total=100.0)
        _create_order("pi_day_002", total=80.0)
        _create_order("pi_day_003", total=30.0)
        _process(RecordPaymentSuccess(payment_intent_id="pi_day_001"))
        _process(RecordPaymentSuccess(payment_intent_id="pi_day_002"))
        _process(RecordPaymentFailure(payment_intent_id="pi_day_003", reason="Declined"))

        record = _today()
        assert record.orders_created == 3
        assert record.orders_paid == 2
        assert record.payments_failed == 1
        assert record.gross_revenue == 180.0
        assert record.net_revenue == 180.0

    def test_refunds_reduce_net_revenue(self):
        _create_order("pi_day_001", total=100.0)
        _process(RecordPaymentSuccess(payment_intent_id="pi_day_001"))
        _process(RecordRefund(payment_intent_id="pi_day_001", amount_refunded=30.0, charge_amount=100.0))
        _process(RecordRefund(payment_intent_id="pi_day_001", amount_refunded=100.0, charge_amount=100.0))

        record = _today()
        assert record.refunds_processed == 2
        assert record.total_refunds == 100.0
        assert record.net_revenue == 0.0
