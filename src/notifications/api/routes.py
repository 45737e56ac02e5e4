"""FastAPI routes for order confirmation emails.

Thin adapters over notifications.confirmation; no business logic here.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from notifications.api.schemas import (
    EmailPreviewResponse,
    OrderConfirmationRequest,
    OrderConfirmationResponse,
)
from notifications.confirmation import render_order_confirmation, send_order_confirmation

router = APIRouter(tags=["notifications"])


@router.post("/order-confirmation", response_model=OrderConfirmationResponse)
async def order_confirmation(body: OrderConfirmationRequest):
    """Send (or re-send after a failure) the confirmation email for an order."""
    if not body.order_id:
        return JSONResponse(status_code=400, content={"error": "Order ID is required"})

    result = send_order_confirmation(body.order_id)
    if not result.succeeded:
        return JSONResponse(status_code=502, content={"error": result.error_type})

    if result.status == "skipped":
        message = "Order confirmation email already sent"
    else:
        message = "Order confirmation email sent successfully!"
    return OrderConfirmationResponse(
        data={"order_id": result.order_id, "status": result.status, "message_id": result.message_id},
        message=message,
    )


@router.get("/email-preview/{order_id}", response_model=EmailPreviewResponse)
async def email_preview(order_id: str) -> EmailPreviewResponse:
    content = render_order_confirmation(order_id)
    return EmailPreviewResponse(**content)
