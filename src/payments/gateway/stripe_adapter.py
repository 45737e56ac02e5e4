"""Stripe payment gateway adapter.

Uses the stripe-python SDK to create PaymentIntents and to verify webhook
signatures with the endpoint's signing secret. All API calls go through a
requests-based HTTP client with a 10 second timeout.
"""

import json

import stripe

from payments.gateway.port import (
    GatewayError,
    PaymentGateway,
    PaymentIntentResult,
    WebhookEvent,
    WebhookSignatureError,
)

REQUEST_TIMEOUT_SECONDS = 10
MAX_NETWORK_RETRIES = 2


def is_test_key(secret_key: str | None) -> bool:
    return bool(secret_key and secret_key.startswith("sk_test_"))


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str, webhook_secret: str) -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret
        self._client = stripe.StripeClient(
            api_key,
            http_client=stripe.RequestsClient(timeout=REQUEST_TIMEOUT_SECONDS),
            max_network_retries=MAX_NETWORK_RETRIES,
        )

    def create_payment_intent(
        self,
        amount: int,
        currency: str,
        metadata: dict[str, str],
        receipt_email: str | None,
        idempotency_key: str,
    ) -> PaymentIntentResult:
        params = {
            "amount": amount,
            "currency": currency.lower(),
            "metadata": metadata,
            "automatic_payment_methods": {"enabled": True},
        }
        if receipt_email:
            params["receipt_email"] = receipt_email

        try:
            intent = self._client.payment_intents.create(
                params=params,
                options={"idempotency_key": idempotency_key},
            )
        except stripe.StripeError as exc:
            raise GatewayError(exc.user_message or str(exc)) from exc

        return PaymentIntentResult(
            payment_intent_id=intent.id,
            client_secret=intent.client_secret,
            status=intent.status,
            amount=intent.amount,
            currency=intent.currency,
        )

    def construct_webhook_event(self, payload: str, signature: str) -> WebhookEvent:
        try:
            stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as exc:
            raise WebhookSignatureError(str(exc)) from exc
        except ValueError as exc:
            raise WebhookSignatureError(f"Invalid payload: {exc}") from exc

        data = json.loads(payload)
        return WebhookEvent(
            id=data["id"],
            type=data["type"],
            data_object=data.get("data", {}).get("object", {}),
            created=data.get("created"),
        )
