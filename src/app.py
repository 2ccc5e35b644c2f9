"""AutoTradeHub partner ledger & tracking API.

Multi-domain web server that processes commands synchronously via HTTP.
Each request is wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ledger.domain import ledger
from shared.http import register_error_handlers
from shared.logging import bind_request_context, clear_request_context, configure_logging
from tracking.domain import tracking

configure_logging()

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the config overlay in each domain.toml:
#   - default/"test" → memory providers, sync event processing
#   - "production"   → PostgreSQL + Redis, async event processing via the Engine
ledger.init()
tracking.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/partners": ledger,
    "/orders": ledger,
    "/wallets": ledger,
    "/tracking": tracking,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="AutoTradeHub API",
    description="Partner ledger, payouts and shipment tracking",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    bind_request_context(request_id=request.headers.get("X-Request-ID", uuid4().hex), path=request.url.path)
    try:
        domain = _resolve_domain(request.url.path)
        if domain is not None:
            with domain.domain_context():
                return await call_next(request)
        # No domain match: health check, docs
        return await call_next(request)
    finally:
        clear_request_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from ledger.api import order_router, partner_router, wallet_router  # noqa: E402
from tracking.api import tracking_router  # noqa: E402

app.include_router(partner_router)
app.include_router(order_router)
app.include_router(wallet_router)
app.include_router(tracking_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "ledger": {"name": ledger.name},
                "tracking": {"name": tracking.name},
            },
        }
    )
