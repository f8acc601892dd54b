"""Custody ledger FastAPI application.

Processes custody commands synchronously via HTTP. Each request is wrapped
in the custody domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied.
from custody.utils.logging import configure_logging  # noqa: E402
from custody.domain import custody  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

configure_logging()
custody.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Custody Ledger API",
    description="Role-gated custody of goods between owner, supplier and couriers",
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the custody domain context for contract routes."""
    if request.url.path.startswith("/contracts"):
        with custody.domain_context():
            response = await call_next(request)
        return response
    # Health check, docs, etc.
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from custody.api import contract_router, register_custody_error_handlers  # noqa: E402

app.include_router(contract_router)
register_exception_handlers(app)
register_custody_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {"custody": {"name": custody.name}},
        }
    )
