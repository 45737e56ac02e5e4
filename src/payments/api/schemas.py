"""Pydantic request/response schemas for the Payments API.

Checkout payloads come from the storefront and use camelCase field names;
both camelCase and snake_case are accepted on input.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
class ShippingAddressSchema(_CamelModel):
    line1: str
    line2: str | None = None
    city: str
    state: str | None = None
    postal_code: str
    country: str = "US"


class CreatePaymentIntentRequest(_CamelModel):
    amount: float | None = Field(default=None, description="Total to charge, in major units")
    currency: str = "usd"
    subtotal: float | None = None
    discount_amount: float = 0.0
    shipping_cost: float = 0.0
    customer_email: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    team_name: str | None = None
    sport: str | None = None
    plaque_type: str | None = None
    plaque_style: str | None = None
    gift_packaging: bool = False
    is_pre_order: bool = False
    preview_url: str | None = None
    promo_code: str | None = None
    shipping_address: ShippingAddressSchema | None = None
    idempotency_key: str | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "amount": 129.99,
                    "currency": "usd",
                    "customerEmail": "fan@example.com",
                    "customerName": "Sam Fan",
                    "teamName": "Wolves",
                    "sport": "NFL",
                    "plaqueType": "wood",
                    "plaqueStyle": "classic",
                }
            ]
        },
    )


class PaymentIntentResponse(_CamelModel):
    client_secret: str
    payment_intent_id: str
    order_id: str
    order_number: str


# ---------------------------------------------------------------------------
# Webhooks
# ---------------------------------------------------------------------------
class WebhookReceivedResponse(BaseModel):
    received: bool = True


# ---------------------------------------------------------------------------
# Provider status / gateway configuration
# ---------------------------------------------------------------------------
class KeyStatus(BaseModel):
    present: bool
    prefix: str


class ProviderStatusResponse(BaseModel):
    configured: bool
    test_mode: bool
    environment: str
    gateway: str
    keys: dict[str, KeyStatus]
    webhook_endpoint: str
    recommendations: list[str]


class ConfigureGatewayRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Card declined"


class GatewayConfigResponse(BaseModel):
    gateway: str
    should_succeed: bool
    failure_reason: str
