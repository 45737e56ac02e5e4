"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- StripeGateway when STRIPE_SECRET_KEY and STRIPE_WEBHOOK_SECRET are set
- FakeGateway otherwise (development and testing)
"""

import os

from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import PaymentGateway

_current_gateway: PaymentGateway | None = None


def _gateway_from_environment() -> PaymentGateway:
    api_key = os.environ.get("STRIPE_SECRET_KEY")
    webhook_secret = os.environ.get("STRIPE_WEBHOOK_SECRET")
    if api_key and webhook_secret:
        from payments.gateway.stripe_adapter import StripeGateway

        return StripeGateway(api_key=api_key, webhook_secret=webhook_secret)
    return FakeGateway()


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, selected from the environment on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _gateway_from_environment()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
