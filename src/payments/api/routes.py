"""FastAPI routes for the Payments domain: checkout, Stripe webhooks and
provider status."""

import os
from uuid import uuid4

import structlog
from fastapi import APIRouter, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from protean.utils.globals import current_domain

from ordering.order.creation import CreateOrder
from ordering.order.order import Order
from payments.api.schemas import (
    ConfigureGatewayRequest,
    CreatePaymentIntentRequest,
    GatewayConfigResponse,
    KeyStatus,
    PaymentIntentResponse,
    ProviderStatusResponse,
    WebhookReceivedResponse,
)
from payments.gateway import get_gateway
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import GatewayError, WebhookSignatureError
from payments.gateway.stripe_adapter import is_test_key
from payments.webhook import process_webhook_event

logger = structlog.get_logger(__name__)

DEFAULT_APP_URL = "http://localhost:3000"

# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("/payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(body: CreatePaymentIntentRequest):
    """Create a payment intent at the gateway and a pending order for it."""
    if not body.amount or body.amount <= 0:
        return JSONResponse(status_code=400, content={"error": "Invalid amount provided"})

    metadata = {
        "team_name": body.team_name or "",
        "sport": body.sport or "",
        "plaque_type": body.plaque_type or "",
        "plaque_style": body.plaque_style or "",
        "is_pre_order": "true" if body.is_pre_order else "false",
    }
    try:
        intent = get_gateway().create_payment_intent(
            amount=int(round(body.amount * 100)),
            currency=body.currency.lower(),
            metadata=metadata,
            receipt_email=body.customer_email,
            idempotency_key=body.idempotency_key or f"checkout-{uuid4().hex}",
        )
    except GatewayError as exc:
        logger.error("Payment intent creation failed", error=str(exc))
        return JSONResponse(status_code=502, content={"error": "Failed to create payment intent"})

    command = CreateOrder(
        payment_intent_id=intent.payment_intent_id,
        customer_email=body.customer_email,
        customer_name=body.customer_name,
        customer_phone=body.customer_phone,
        team_name=body.team_name,
        sport=body.sport,
        plaque_type=body.plaque_type,
        plaque_style=body.plaque_style,
        gift_packaging=body.gift_packaging,
        is_pre_order=body.is_pre_order,
        preview_url=body.preview_url,
        promo_code=body.promo_code,
        subtotal=body.subtotal if body.subtotal is not None else body.amount,
        discount_amount=body.discount_amount,
        shipping_cost=body.shipping_cost,
        total_amount=body.amount,
        currency=body.currency.upper(),
        shipping_address=body.shipping_address.model_dump_json() if body.shipping_address else None,
    )
    order_id = current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)

    return PaymentIntentResponse(
        client_secret=intent.client_secret,
        payment_intent_id=intent.payment_intent_id,
        order_id=order_id,
        order_number=order.order_number,
    )


# ---------------------------------------------------------------------------
# Webhook Router
# ---------------------------------------------------------------------------
webhook_router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@webhook_router.post("/stripe", response_model=WebhookReceivedResponse)
async def stripe_webhook(request: Request, stripe_signature: str | None = Header(default=None)):
    """Receive a Stripe event; the signature is checked against the raw body."""
    if not stripe_signature:
        return JSONResponse(status_code=400, content={"error": "No signature provided"})

    payload = (await request.body()).decode("utf-8")
    try:
        event = get_gateway().construct_webhook_event(payload, stripe_signature)
    except WebhookSignatureError as exc:
        logger.warning("Webhook signature verification failed", error=str(exc))
        return JSONResponse(status_code=400, content={"error": f"Webhook Error: {exc}"})

    try:
        process_webhook_event(event)
    except Exception as exc:
        logger.error("Webhook handler failed", event_id=event.id, event_type=event.type, error=str(exc))
        return JSONResponse(status_code=500, content={"error": "Webhook handler failed"})

    return WebhookReceivedResponse()


# ---------------------------------------------------------------------------
# Payment Provider Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payments", tags=["payments"])


def _key_status(value: str | None) -> KeyStatus:
    return KeyStatus(present=bool(value), prefix=value[:7] if value else "not-set")


@payment_router.get("/status", response_model=ProviderStatusResponse)
async def provider_status(authorization: str | None = Header(default=None)) -> ProviderStatusResponse:
    """Report which Stripe credentials are configured, without revealing them."""
    environment = os.environ.get("PROTEAN_ENV") or "development"
    admin_key = os.environ.get("ADMIN_API_KEY")
    if environment == "production" and (not admin_key or authorization != f"Bearer {admin_key}"):
        raise HTTPException(status_code=401, detail="Unauthorized")

    secret_key = os.environ.get("STRIPE_SECRET_KEY")
    publishable_key = os.environ.get("STRIPE_PUBLISHABLE_KEY")
    webhook_secret = os.environ.get("STRIPE_WEBHOOK_SECRET")
    configured = bool(secret_key and publishable_key)
    test_mode = is_test_key(secret_key)

    recommendations = []
    if not configured:
        recommendations.append("Add all required Stripe environment variables")
    if test_mode and environment == "production":
        recommendations.append("Switch to live Stripe keys for production")
    if not webhook_secret:
        recommendations.append("Configure webhook endpoint secret for reliable payment processing")
    if environment == "production" and not admin_key:
        recommendations.append("Set ADMIN_API_KEY environment variable to secure this endpoint")

    app_url = (os.environ.get("APP_URL") or DEFAULT_APP_URL).rstrip("/")
    return ProviderStatusResponse(
        configured=configured,
        test_mode=test_mode,
        environment=environment,
        gateway=type(get_gateway()).__name__,
        keys={
            "publishable_key": _key_status(publishable_key),
            "secret_key": _key_status(secret_key),
            "webhook_secret": _key_status(webhook_secret),
        },
        webhook_endpoint=f"{app_url}/webhooks/stripe",
        recommendations=recommendations,
    )


@payment_router.post("/gateway/configure", response_model=GatewayConfigResponse)
async def configure_gateway(body: ConfigureGatewayRequest) -> GatewayConfigResponse:
    """Configure the FakeGateway behavior (non-production only).

    This endpoint is only available when PROTEAN_ENV is not 'production'.
    It allows toggling success/failure behavior for manual API testing.
    """
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeGateway")

    gateway.configure(
        should_succeed=body.should_succeed,
        failure_reason=body.failure_reason,
    )
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        should_succeed=gateway.should_succeed,
        failure_reason=gateway.failure_reason,
    )
