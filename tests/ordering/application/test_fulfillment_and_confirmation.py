import pytest
from ordering.order.confirmation import MarkConfirmationEmailSent
from ordering.order.creation import CreateOrder
from ordering.order.fulfillment import UpdateFulfillmentStatus
from ordering.order.order import Order, StatusType
from ordering.order.payment import RecordPaymentSuccess
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _paid_order():
    order_id = current_domain.process(
        CreateOrder(
            payment_intent_id="pi_admin_001",
            customer_email="fan@example.com",
            subtotal=75.0,
            total_amount=75.0,
        ),
        asynchronous=False,
    )
    current_domain.process(RecordPaymentSuccess(payment_intent_id="pi_admin_001"), asynchronous=False)
    return order_id


class TestUpdateFulfillmentStatusCommand:
    def test_update_persists(self):
        order_id = _paid_order()
        result = current_domain.process(
            UpdateFulfillmentStatus(order_id=order_id, status="processing", notes="Engraving"),
            asynchronous=False,
        )

        assert result == "processing"
        order = current_domain.repository_for(Order).get(order_id)
        assert order.fulfillment_status == "processing"
        entry = order.history_for(StatusType.FULFILLMENT)[0]
        assert entry.changed_by == "admin"
        assert entry.notes == "Engraving"

    def test_invalid_transition_raises(self):
        order_id = _paid_order()
        with pytest.raises(ValidationError):
            current_domain.process(
                UpdateFulfillmentStatus(order_id=order_id, status="delivered"),
                asynchronous=False,
            )

    def test_unknown_order_raises(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                UpdateFulfillmentStatus(order_id="missing-order", status="processing"),
                asynchronous=False,
            )


class TestMarkConfirmationEmailSentCommand:
    def test_mark_persists(self):
        order_id = _paid_order()
        current_domain.process(
            MarkConfirmationEmailSent(order_id=order_id, message_id="msg_001"),
            asynchronous=False,
        )

        order = current_domain.repository_for(Order).get(order_id)
        assert order.confirmation_email_sent is True

    def test_second_mark_raises(self):
        order_id = _paid_order()
        current_domain.process(MarkConfirmationEmailSent(order_id=order_id), asynchronous=False)
        with pytest.raises(ValidationError):
            current_domain.process(MarkConfirmationEmailSent(order_id=order_id), asynchronous=False)
