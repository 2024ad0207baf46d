"""
FastAPI application for the Catalog Query Service.

This module wires the in-memory catalog, the cart store and the rate limiter
into the app and mounts the routers:
- /api/products: catalog queries and admin mutations (api/routers/products.py)
- /api/cart: per-user carts (api/routers/cart.py)
- GET /health: liveness check
- GET /: service information

Catalog, cart store and rate limiter live on app.state so that tests can swap
them for small deterministic instances.

Run the API with:
    uvicorn api.main:app --reload

Access API documentation at:
    http://localhost:8000/docs (Swagger UI)
    http://localhost:8000/redoc (ReDoc)
"""

# Import config early to load .env file before any other code accesses environment variables
import api.config  # noqa: F401

import asyncio
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from api.config import (
    CartConfig,
    CatalogConfig,
    RateLimitConfig,
    validate_required_config,
)
from api.rate_limit import RateLimiter
from api.routers import cart, products
from catalog.cart import CartStore
from catalog.models import utc_now_iso
from catalog.store import CatalogIndex

logging.basicConfig(
    level=CatalogConfig.get_log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"
API_VERSION_HEADER = "X-API-Version"

# Track app start time for uptime calculation
_APP_START_TIME = time.time()


async def _sweep_carts(app: FastAPI, interval_seconds: float) -> None:
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            app.state.cart_store.purge_expired()
        except Exception as e:
            logger.error("Cart sweep failed: %s", e, exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        validate_required_config()
    except RuntimeError as e:
        # Catalog reads still work; authenticated routes answer 500 until JWT_SECRET is set
        logger.warning("%s", e)

    sweeper = asyncio.create_task(_sweep_carts(app, CartConfig.get_sweep_interval_seconds()))
    try:
        yield
    finally:
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass


app = FastAPI(
    title="Catalog Query Service",
    description="Searchable, filterable, sortable and paginated product catalog with carts",
    version=API_VERSION,
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "products",
            "description": "Query the catalog (search, category filter, sort, pagination) and manage products (admin).",
        },
        {
            "name": "cart",
            "description": "Per-user shopping carts. Requires a bearer token.",
        },
        {
            "name": "health",
            "description": "Health check and monitoring endpoints.",
        },
    ],
)

app.state.catalog = CatalogIndex(
    seed_count=CatalogConfig.get_product_count(),
    seed=CatalogConfig.get_seed(),
    cache_ttl_seconds=CatalogConfig.get_cache_ttl_seconds(),
    cache_max_entries=CatalogConfig.get_cache_max_entries(),
    base_url=CatalogConfig.get_backend_url(),
)
app.state.cart_store = CartStore(app.state.catalog, ttl_seconds=CartConfig.get_ttl_seconds())
app.state.rate_limiter = RateLimiter(
    max_requests=RateLimitConfig.get_max_requests(),
    window_seconds=RateLimitConfig.get_window_seconds(),
)


@app.middleware("http")
async def rate_limit_and_version(request: Request, call_next):
    """
    Reject clients over the rate limit with 429 and tag every response with
    the API version header.
    """
    client = request.client.host if request.client else "unknown"
    if not request.app.state.rate_limiter.hit(client):
        logger.warning("Rate limit exceeded for %s", client)
        response = JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={"detail": "Too many requests"},
        )
    else:
        response = await call_next(request)
    response.headers[API_VERSION_HEADER] = API_VERSION
    return response


app.include_router(products.router)
app.include_router(cart.router)


@app.get("/health", tags=["health"])
def health():
    """
    Health check endpoint for monitoring and status checks.

    Returns:
        Dictionary with status, timestamp, uptime and catalog size.
        Always returns 200 OK if the endpoint is reachable.
    """
    catalog = app.state.catalog
    return {
        "status": "OK",
        "timestamp": utc_now_iso(),
        "uptime_seconds": int(time.time() - _APP_START_TIME),
        "products": len(catalog.indexes.products),
        "generation": catalog.generation,
    }


@app.get("/")
def root():
    """
    Root endpoint providing API information.

    Returns:
        Dictionary with API name and version
    """
    return {
        "name": "Catalog Query Service",
        "version": API_VERSION,
        "description": "Searchable, filterable, sortable and paginated product catalog with carts",
        "docs": "/docs",
    }
