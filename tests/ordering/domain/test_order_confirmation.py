import pytest
from ordering.order.events import ConfirmationEmailSent
from ordering.order.order import Order
from protean.exceptions import ValidationError


def _make_order(customer_email="fan@example.com"):
    return Order.create(
        payment_intent_id="pi_conf_001",
        pricing={"subtotal": 60.0, "total_amount": 60.0},
        customer_email=customer_email,
    )


class TestConfirmationEmailFlag:
    def test_mark_sent(self):
        order = _make_order()
        order.mark_confirmation_email_sent(message_id="msg_123")

        assert order.confirmation_email_sent is True
        assert order.confirmation_email_sent_at is not None

    def test_mark_sent_raises_event(self):
        order = _make_order()
        order.mark_confirmation_email_sent(message_id="msg_123")

        event = order._events[-1]
        assert isinstance(event, ConfirmationEmailSent)
        assert event.customer_email == "fan@example.com"
        assert event.message_id == "msg_123"

    def test_mark_sent_twice_is_rejected(self):
        order = _make_order()
        order.mark_confirmation_email_sent()
        with pytest.raises(ValidationError) as exc:
            order.mark_confirmation_email_sent()
        assert "confirmation_email_sent" in exc.value.messages

    def test_order_without_email_is_rejected(self):
        order = _make_order(customer_email=None)
        with pytest.raises(ValidationError) as exc:
            order.mark_confirmation_email_sent()
        assert "customer_email" in exc.value.messages
        assert order.confirmation_email_sent is False
