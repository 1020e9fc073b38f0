"""Storefront FastAPI application.

Single-domain web server that processes commands synchronously via HTTP.
Every request runs inside the storefront domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from domain.toml:
#   - unset        → in-memory providers, handy for local runs
#   - "sqlite"     → file backed SQLite database
#   - "production" → PostgreSQL from DATABASE_URL
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.domain import storefront

storefront.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
from storefront.shared.http import bind_domain_context, register_exception_handlers  # noqa: E402

app = FastAPI(
    title="Storefront API",
    description="E-commerce storefront: catalog, cart, checkout, reviews and back office",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

bind_domain_context(app, storefront)
register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from storefront.admin.api import admin_router  # noqa: E402
from storefront.cart.api import cart_router  # noqa: E402
from storefront.catalogue.api import product_router  # noqa: E402
from storefront.identity.api import auth_router  # noqa: E402
from storefront.ordering.api import order_router  # noqa: E402

for router in (auth_router, product_router, cart_router, order_router, admin_router):
    app.include_router(router, prefix="/api")


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domain": storefront.name,
            "environment": os.getenv("PROTEAN_ENV", "development"),
        }
    )
