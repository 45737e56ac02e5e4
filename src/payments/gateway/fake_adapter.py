"""Configurable fake payment gateway for development and testing.

This adapter simulates a real payment gateway without any external calls.
It can be configured at runtime to succeed or fail, making it useful for:
- Local checkout runs without gateway credentials
- Automated tests with predictable outcomes

Webhooks are accepted when signed with the literal ``test-signature``.
"""

import json
from uuid import uuid4

from payments.gateway.port import (
    GatewayError,
    PaymentGateway,
    PaymentIntentResult,
    WebhookEvent,
    WebhookSignatureError,
)

TEST_SIGNATURE = "test-signature"


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Card declined"
        self.calls: list[dict] = []
        self._intents: dict[str, PaymentIntentResult] = {}

    def configure(self, should_succeed: bool, failure_reason: str = "Card declined") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_payment_intent(
        self,
        amount: int,
        currency: str,
        metadata: dict[str, str],
        receipt_email: str | None,
        idempotency_key: str,
    ) -> PaymentIntentResult:
        call = {
            "method": "create_payment_intent",
            "amount": amount,
            "currency": currency,
            "metadata": metadata,
            "receipt_email": receipt_email,
            "idempotency_key": idempotency_key,
        }
        self.calls.append(call)

        if not self.should_succeed:
            raise GatewayError(self.failure_reason)

        # Same idempotency key, same intent
        if idempotency_key in self._intents:
            return self._intents[idempotency_key]

        intent_id = f"pi_fake_{uuid4().hex[:16]}"
        result = PaymentIntentResult(
            payment_intent_id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:8]}",
            status="requires_payment_method",
            amount=amount,
            currency=currency,
        )
        self._intents[idempotency_key] = result
        return result

    def construct_webhook_event(self, payload: str, signature: str) -> WebhookEvent:
        self.calls.append({"method": "construct_webhook_event", "signature": signature})

        if signature != TEST_SIGNATURE:
            raise WebhookSignatureError("No signatures found matching the expected signature for payload")
        try:
            data = json.loads(payload)
        except ValueError as exc:
            raise WebhookSignatureError(f"Invalid payload: {exc}") from exc

        return WebhookEvent(
            id=data.get("id", ""),
            type=data.get("type", ""),
            data_object=data.get("data", {}).get("object", {}),
            created=data.get("created"),
        )
