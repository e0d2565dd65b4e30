"""HerTrade FastAPI application.

Web server that processes marketplace commands synchronously via HTTP.
Every request runs inside the marketplace domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from marketplace.domain import marketplace
from marketplace.utils.logging import add_context, clear_context

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - unset/"test" → in-memory provider, sync event processing
#   - "production" → PostgreSQL via DATABASE_URL
marketplace.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="HerTrade API",
    description="Marketplace connecting women suppliers with buyers; payment on delivery",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the marketplace domain context for each request."""
    clear_context()
    add_context(method=request.method, path=request.url.path)
    with marketplace.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
# Imported after init() so the command classes the routes use are registered
from marketplace.api import (  # noqa: E402
    admin_router,
    cart_router,
    order_router,
    product_router,
    profile_router,
    register_error_handlers,
    sms_router,
    supplier_router,
)

register_error_handlers(app)

app.include_router(profile_router)
app.include_router(product_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(supplier_router)
app.include_router(admin_router)
app.include_router(sms_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": marketplace.name})
