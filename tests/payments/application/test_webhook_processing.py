"""Application tests for translating gateway events into order commands."""

from ordering.order.creation import CreateOrder
from ordering.order.order import Order, StatusType
from payments.gateway.port import WebhookEvent
from payments.webhook import process_webhook_event
from protean import current_domain


def _create_order(payment_intent_id="pi_wh_001", total=129.99):
    return current_domain.process(
        CreateOrder(
            payment_intent_id=payment_intent_id,
            customer_email="fan@example.com",
            customer_name="Sam Fan",
            team_name="Wolves",
            subtotal=total,
            total_amount=total,
        ),
        asynchronous=False,
    )


def _event(event_type, data_object, event_id="evt_001"):
    return WebhookEvent(id=event_id, type=event_type, data_object=data_object)


def _get(order_id):
    return current_domain.repository_for(Order).get(order_id)


class TestPaymentIntentSucceeded:
    def test_marks_paid_and_sends_confirmation(self, fake_email):
        order_id = _create_order()
        result = process_webhook_event(
            _event("payment_intent.succeeded", {"id": "pi_wh_001", "customer": "cus_001"})
        )

        assert result == order_id
        order = _get(order_id)
        assert order.payment_status == "succeeded"
        assert order.stripe_customer_id == "cus_001"
        assert order.confirmation_email_sent is True
        assert len(fake_email.sent_emails) == 1
        assert fake_email.sent_emails[0]["to"] == "fan@example.com"

    def test_replay_changes_nothing(self, fake_email):
        order_id = _create_order()
        event = _event("payment_intent.succeeded", {"id": "pi_wh_001"})
        process_webhook_event(event)
        assert process_webhook_event(event) is None

        assert len(_get(order_id).history_for(StatusType.PAYMENT)) == 1
        assert len(fake_email.sent_emails) == 1

    def test_email_failure_keeps_payment(self, fake_email):
        fake_email.configure(should_succeed=False, failure_type="timeout")
        order_id = _create_order()
        process_webhook_event(_event("payment_intent.succeeded", {"id": "pi_wh_001"}))

        order = _get(order_id)
        assert order.payment_status == "succeeded"
        assert order.confirmation_email_sent is False
        assert fake_email.attempts == 1

    def test_order_without_email_is_still_paid(self, fake_email):
        order_id = current_domain.process(
            CreateOrder(payment_intent_id="pi_wh_002", subtotal=10.0, total_amount=10.0),
            asynchronous=False,
        )
        process_webhook_event(_event("payment_intent.succeeded", {"id": "pi_wh_002"}))

        assert _get(order_id).payment_status == "succeeded"
        assert fake_email.sent_emails == []

    def test_unknown_payment_intent_is_ignored(self, fake_email):
        assert process_webhook_event(_event("payment_intent.succeeded", {"id": "pi_unknown"})) is None
        assert fake_email.attempts == 0


class TestPaymentIntentFailed:
    def test_records_provider_message(self):
        order_id = _create_order()
        process_webhook_event(
            _event(
                "payment_intent.payment_failed",
                {"id": "pi_wh_001", "last_payment_error": {"message": "Your card was declined."}},
            )
        )

        order = _get(order_id)
        assert order.payment_status == "failed"
        assert order.history_for(StatusType.PAYMENT)[0].notes == "Payment failed: Your card was declined."

    def test_missing_error_message(self):
        order_id = _create_order()
        process_webhook_event(_event("payment_intent.payment_failed", {"id": "pi_wh_001"}))
        assert _get(order_id).history_for(StatusType.PAYMENT)[0].notes == "Payment failed: Unknown error"


class TestChargeRefunded:
    def _paid(self):
        order_id = _create_order(total=100.0)
        process_webhook_event(_event("payment_intent.succeeded", {"id": "pi_wh_001"}))
        return order_id

    def test_full_refund(self, fake_email):
        order_id = self._paid()
        process_webhook_event(
            _event(
                "charge.refunded",
                {
                    "id": "ch_001",
                    "payment_intent": "pi_wh_001",
                    "amount": 10000,
                    "amount_refunded": 10000,
                    "currency": "usd",
                },
                event_id="evt_refund_1",
            )
        )

        order = _get(order_id)
        assert order.payment_status == "refunded"
        assert order.amount_refunded == 100.0
        assert order.history_for(StatusType.PAYMENT)[-1].notes == "Refund processed: 100.00 USD"

    def test_partial_refund(self, fake_email):
        order_id = self._paid()
        process_webhook_event(
            _event(
                "charge.refunded",
                {"id": "ch_001", "payment_intent": "pi_wh_001", "amount": 10000, "amount_refunded": 2550, "currency": "usd"},
            )
        )

        order = _get(order_id)
        assert order.payment_status == "partial_refund"
        assert order.amount_refunded == 25.5

    def test_charge_without_payment_intent_is_ignored(self):
        assert process_webhook_event(_event("charge.refunded", {"id": "ch_002", "amount": 100})) is None


class TestCheckoutSessionCompleted:
    def test_copies_customer_details(self):
        order_id = _create_order()
        process_webhook_event(
            _event(
                "checkout.session.completed",
                {
                    "id": "cs_001",
                    "payment_intent": "pi_wh_001",
                    "customer_details": {"email": "buyer@example.com", "name": "Buyer", "phone": "+15555550100"},
                },
            )
        )

        order = _get(order_id)
        assert order.checkout_session_id == "cs_001"
        assert order.customer_email == "buyer@example.com"
        assert order.customer_phone == "+15555550100"

    def test_session_without_payment_intent_is_ignored(self):
        assert process_webhook_event(_event("checkout.session.completed", {"id": "cs_002"})) is None


class TestUnhandledEvents:
    def test_unknown_type_is_ignored(self):
        assert process_webhook_event(_event("customer.created", {"id": "cus_001"})) is None
