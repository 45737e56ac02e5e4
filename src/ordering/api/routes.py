"""FastAPI routes for the Ordering domain: admin order views and sales."""

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    DailySalesSchema,
    FulfillmentResponse,
    OrderDetailResponse,
    OrderListResponse,
    OrderSummarySchema,
    UpdateFulfillmentRequest,
)
from ordering.order.fulfillment import UpdateFulfillmentStatus
from ordering.order.order import Order
from ordering.projections.daily_sales import DailySales
from ordering.projections.order_summary import OrderSummary

# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=OrderListResponse)
async def list_orders(
    payment_status: str | None = None,
    fulfillment_status: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> OrderListResponse:
    filters = {}
    if payment_status:
        filters["payment_status"] = payment_status
    if fulfillment_status:
        filters["fulfillment_status"] = fulfillment_status

    repo = current_domain.repository_for(OrderSummary)
    query = repo._dao.query.filter(**filters) if filters else repo._dao.query
    summaries = sorted(query.all().items, key=lambda s: s.created_at, reverse=True)

    paid = repo._dao.query.filter(payment_status="succeeded").all().items
    start = (page - 1) * limit
    return OrderListResponse(
        orders=[
            OrderSummarySchema(
                order_id=str(s.order_id),
                order_number=s.order_number,
                customer_email=s.customer_email,
                customer_name=s.customer_name,
                team_name=s.team_name,
                payment_status=s.payment_status,
                fulfillment_status=s.fulfillment_status,
                total_amount=s.total_amount or 0.0,
                currency=s.currency or "USD",
                created_at=s.created_at,
            )
            for s in summaries[start : start + limit]
        ],
        total=len(summaries),
        page=page,
        limit=limit,
        total_revenue=round(sum(s.total_amount or 0.0 for s in paid), 2),
    )


@order_router.get("/by-payment-intent/{payment_intent_id}", response_model=OrderDetailResponse)
async def get_order_by_payment_intent(payment_intent_id: str) -> OrderDetailResponse:
    order = current_domain.repository_for(Order).find_by_payment_intent(payment_intent_id)
    return OrderDetailResponse.from_order(order)


@order_router.get("/{order_id}", response_model=OrderDetailResponse)
async def get_order(order_id: str) -> OrderDetailResponse:
    order = current_domain.repository_for(Order).get(order_id)
    return OrderDetailResponse.from_order(order)


@order_router.put("/{order_id}/fulfillment", response_model=FulfillmentResponse)
async def update_fulfillment(order_id: str, body: UpdateFulfillmentRequest) -> FulfillmentResponse:
    command = UpdateFulfillmentStatus(
        order_id=order_id,
        status=body.status,
        notes=body.notes,
    )
    status = current_domain.process(command, asynchronous=False)
    return FulfillmentResponse(order_id=order_id, fulfillment_status=status)


# ---------------------------------------------------------------------------
# Sales Router
# ---------------------------------------------------------------------------
sales_router = APIRouter(prefix="/sales", tags=["sales"])


@sales_router.get("/daily", response_model=list[DailySalesSchema])
async def daily_sales() -> list[DailySalesSchema]:
    records = current_domain.repository_for(DailySales)._dao.query.all().items
    return [
        DailySalesSchema(
            date=r.date,
            orders_created=r.orders_created or 0,
            orders_paid=r.orders_paid or 0,
            payments_failed=r.payments_failed or 0,
            refunds_processed=r.refunds_processed or 0,
            gross_revenue=r.gross_revenue or 0.0,
            total_refunds=r.total_refunds or 0.0,
            net_revenue=r.net_revenue or 0.0,
        )
        for r in sorted(records, key=lambda r: r.date, reverse=True)
    ]
