"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api.middleware import LoggingMiddleware, RateLimitMiddleware
from storefront.api.routes import router
from storefront.config import get_settings
from storefront.database.mongodb import mongodb
from storefront.errors import (
    ConcurrentModificationError,
    EmptyCartError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    PaymentNotCompletedError,
    StorefrontError,
    UnauthorizedError,
    UpstreamError,
    ValidationError,
)
from storefront.services.catalog_service import ProductCatalog
from storefront.utils.cache import TTLCache
from storefront.utils.logger import setup_logging

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

settings = get_settings()

ERROR_STATUS_CODES: dict[type, int] = {
    UnauthorizedError: 401,
    ForbiddenError: 403,
    NotFoundError: 404,
    ValidationError: 400,
    InvalidTransitionError: 400,
    EmptyCartError: 400,
    PaymentNotCompletedError: 400,
    ConcurrentModificationError: 409,
    UpstreamError: 502,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting application...")
    cache = TTLCache(
        default_ttl=settings.cache_default_ttl,
        sweep_interval=settings.cache_sweep_interval,
    )
    client = httpx.AsyncClient(base_url=settings.catalog_base_url, timeout=settings.catalog_timeout)
    try:
        await mongodb.connect()
        cache.start()
        app.state.catalog = ProductCatalog(client, cache, settings)
        logger.info("Application started")

        yield

    finally:
        logger.info("Shutting down application...")
        await cache.stop()
        await client.aclose()
        await mongodb.disconnect()
        logger.info("Application stopped")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="E-commerce storefront: catalog, cart, wishlist, checkout and order administration",
    lifespan=lifespan,
)

# Add CORS middleware; the session cookie needs credentials
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add custom middleware
app.add_middleware(LoggingMiddleware)
app.add_middleware(
    RateLimitMiddleware,
    max_requests=settings.rate_limit_requests,
    period=settings.rate_limit_period,
)

# Include routers
app.include_router(router)


# Exception handlers
@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    """Map StorefrontError subclasses to HTTP responses."""
    status_code = next(
        (ERROR_STATUS_CODES[cls] for cls in type(exc).__mro__ if cls in ERROR_STATUS_CODES),
        500,
    )
    if status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler."""
    logger.error("Unhandled exception: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred",
        },
    )


# Root endpoint
@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
