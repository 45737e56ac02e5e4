"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer): separate from
internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class UpdateFulfillmentRequest(BaseModel):
    status: str
    notes: str | None = Field(default=None, max_length=500)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "processing",
                    "notes": "Plaque sent to engraving",
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    line1: str
    line2: str | None = None
    city: str
    state: str | None = None
    postal_code: str
    country: str = "US"


class PricingSchema(BaseModel):
    subtotal: float
    discount_amount: float = 0.0
    shipping_cost: float = 0.0
    total_amount: float
    currency: str = "USD"


class StatusHistorySchema(BaseModel):
    status_type: str
    old_status: str | None = None
    new_status: str
    changed_by: str
    notes: str | None = None
    recorded_at: datetime


class OrderDetailResponse(BaseModel):
    order_id: str
    order_number: str
    payment_intent_id: str
    payment_status: str
    fulfillment_status: str
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
    pricing: PricingSchema
    amount_refunded: float = 0.0
    shipping_address: AddressSchema | None = None
    confirmation_email_sent: bool = False
    paid_at: datetime | None = None
    created_at: datetime | None = None
    status_history: list[StatusHistorySchema] = []

    @classmethod
    def from_order(cls, order) -> "OrderDetailResponse":
        history = sorted(order.status_history or [], key=lambda entry: entry.recorded_at)
        address = order.shipping_address
        return cls(
            order_id=str(order.id),
            order_number=order.order_number,
            payment_intent_id=order.payment_intent_id,
            payment_status=order.payment_status,
            fulfillment_status=order.fulfillment_status,
            customer_email=order.customer_email,
            customer_name=order.customer_name,
            customer_phone=order.customer_phone,
            team_name=order.team_name,
            sport=order.sport,
            plaque_type=order.plaque_type,
            plaque_style=order.plaque_style,
            gift_packaging=bool(order.gift_packaging),
            is_pre_order=bool(order.is_pre_order),
            preview_url=order.preview_url,
            pricing=PricingSchema(
                subtotal=order.pricing.subtotal,
                discount_amount=order.pricing.discount_amount or 0.0,
                shipping_cost=order.pricing.shipping_cost or 0.0,
                total_amount=order.pricing.total_amount,
                currency=order.pricing.currency or "USD",
            ),
            amount_refunded=order.amount_refunded or 0.0,
            shipping_address=(
                AddressSchema(
                    line1=address.line1,
                    line2=address.line2,
                    city=address.city,
                    state=address.state,
                    postal_code=address.postal_code,
                    country=address.country or "US",
                )
                if address
                else None
            ),
            confirmation_email_sent=bool(order.confirmation_email_sent),
            paid_at=order.paid_at,
            created_at=order.created_at,
            status_history=[
                StatusHistorySchema(
                    status_type=entry.status_type,
                    old_status=entry.old_status,
                    new_status=entry.new_status,
                    changed_by=entry.changed_by,
                    notes=entry.notes,
                    recorded_at=entry.recorded_at,
                )
                for entry in history
            ],
        )


class OrderSummarySchema(BaseModel):
    order_id: str
    order_number: str
    customer_email: str | None = None
    customer_name: str | None = None
    team_name: str | None = None
    payment_status: str
    fulfillment_status: str
    total_amount: float
    currency: str
    created_at: datetime | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderSummarySchema]
    total: int
    page: int
    limit: int
    total_revenue: float


class FulfillmentResponse(BaseModel):
    order_id: str
    fulfillment_status: str


class DailySalesSchema(BaseModel):
    date: str
    orders_created: int
    orders_paid: int
    payments_failed: int
    refunds_processed: int
    gross_revenue: float
    total_refunds: float
    net_revenue: float
