"""Wishlist Logistics FastAPI application.

Operator-facing web server that processes logistics commands synchronously
via HTTP. Each request runs inside the logistics domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
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
from logistics.domain import logistics
from logistics.utils.logging import bind_operator_context, clear_context, configure_logging
from protean.integrations.fastapi import register_exception_handlers

configure_logging()
logistics.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Wishlist Logistics API",
    description="Order consolidation and fulfillment for partner organizations",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the logistics domain context for every logistics request."""
    if request.url.path.startswith("/logistics"):
        bind_operator_context(method=request.method, path=request.url.path)
        try:
            with logistics.domain_context():
                response = await call_next(request)
        finally:
            clear_context()
        return response
    # Health check, docs, etc.
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from logistics.api.routes import logistics_router  # noqa: E402

app.include_router(logistics_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": logistics.name})
