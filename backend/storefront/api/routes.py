"""API router: health check plus the resource routers."""

import logging

from fastapi import APIRouter, Request

from storefront.api import admin, cart, orders, products, users, wishlist
from storefront.config import get_settings
from storefront.database.mongodb import mongodb
from storefront.models.request import HealthResponse

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix=settings.api_prefix)


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint."""
    mongodb_status = "connected" if mongodb.db is not None else "disconnected"
    catalog_status = "configured" if getattr(request.app.state, "catalog", None) else "not_configured"

    return HealthResponse(
        status="healthy" if mongodb_status == "connected" else "degraded",
        version=settings.app_version,
        services={
            "mongodb": mongodb_status,
            "catalog": catalog_status,
            "stripe": "configured" if settings.stripe_secret_key else "not_configured",
        },
    )


router.include_router(users.router)
router.include_router(products.router)
router.include_router(cart.router)
router.include_router(wishlist.router)
router.include_router(orders.router)
router.include_router(admin.router)
