"""RosterFrame FastAPI application.

Checkout, Stripe webhooks, confirmation emails and admin order views. All
routes run inside the ordering domain context; commands are processed
synchronously.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       → event_processing = "sync"  (projectors fire in UoW)
#   - "production" → event_processing = "async" (projectors fire via Engine)
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from ordering.domain import ordering

ordering.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="RosterFrame API",
    description="Custom plaque checkout, payment webhooks and order administration",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_DOMAIN_FREE_PATHS = ("/health", "/docs", "/openapi.json", "/redoc")


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the ordering domain context for every API request."""
    if request.url.path.startswith(_DOMAIN_FREE_PATHS):
        return await call_next(request)
    with ordering.domain_context():
        response = await call_next(request)
    return response


register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from notifications.api.routes import router as notifications_router  # noqa: E402
from ordering.api.routes import order_router, sales_router  # noqa: E402
from payments.api.routes import checkout_router, payment_router, webhook_router  # noqa: E402

app.include_router(checkout_router)
app.include_router(webhook_router)
app.include_router(payment_router)
app.include_router(notifications_router)
app.include_router(order_router)
app.include_router(sales_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "ordering": {"name": ordering.name},
            },
        }
    )
