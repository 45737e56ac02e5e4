"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and StripeGateway
(production) without changing any domain or application code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


class WebhookSignatureError(Exception):
    """The webhook payload could not be verified as coming from the gateway."""


class GatewayError(Exception):
    """A call to the gateway failed (network, authentication, invalid request)."""


@dataclass(frozen=True)
class PaymentIntentResult:
    """A payment intent created at the gateway, ready for client-side confirmation."""

    payment_intent_id: str
    client_secret: str
    status: str
    amount: int  # Minor units (cents)
    currency: str


@dataclass(frozen=True)
class WebhookEvent:
    """A verified gateway event."""

    id: str
    type: str
    data_object: dict[str, Any] = field(default_factory=dict)
    created: int | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_payment_intent(
        self,
        amount: int,
        currency: str,
        metadata: dict[str, str],
        receipt_email: str | None,
        idempotency_key: str,
    ) -> PaymentIntentResult:
        """Create a payment intent for ``amount`` minor units.

        Raises GatewayError if the gateway rejects the request or cannot be reached.
        """
        ...

    @abstractmethod
    def construct_webhook_event(self, payload: str, signature: str) -> WebhookEvent:
        """Verify ``signature`` over the raw ``payload`` and parse the event.

        Raises WebhookSignatureError if verification fails.
        """
        ...
