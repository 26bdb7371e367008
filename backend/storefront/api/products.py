"""Product catalog routes."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from storefront.api.dependencies import CatalogDep, require_role
from storefront.models.product import ProductQuery, ProductSearchQuery
from storefront.models.request import CacheClearResponse, CacheStatsResponse
from storefront.models.user import UserRole

router = APIRouter(prefix="/products", tags=["products"])


@router.get("")
async def list_products(catalog: CatalogDep, query: Annotated[ProductQuery, Query()]) -> dict[str, Any]:
    """List products with optional pagination, projection and sorting."""
    return await catalog.get_products(query)


@router.get("/search")
async def search_products(
    catalog: CatalogDep, query: Annotated[ProductSearchQuery, Query()]
) -> dict[str, Any]:
    return await catalog.search_products(query)


@router.get("/categories")
async def get_categories(catalog: CatalogDep) -> list[dict[str, Any]]:
    return await catalog.get_categories()


@router.get("/category-list")
async def get_category_list(catalog: CatalogDep) -> list[str]:
    return await catalog.get_category_list()


@router.get("/category/{category}")
async def get_products_by_category(
    category: str, catalog: CatalogDep, query: Annotated[ProductQuery, Query()]
) -> dict[str, Any]:
    return await catalog.get_products_by_category(category, query)


@router.get(
    "/cache/stats",
    response_model=CacheStatsResponse,
    dependencies=[Depends(require_role(UserRole.ADMIN))],
)
async def cache_stats(catalog: CatalogDep) -> CacheStatsResponse:
    return CacheStatsResponse(**catalog.cache_stats())


@router.post(
    "/cache/clear",
    response_model=CacheClearResponse,
    dependencies=[Depends(require_role(UserRole.ADMIN))],
)
async def clear_cache(catalog: CatalogDep) -> CacheClearResponse:
    """Drop every cached catalog response."""
    return CacheClearResponse(**catalog.clear_cache())


@router.get("/{product_id}")
async def get_product(product_id: int, catalog: CatalogDep) -> dict[str, Any]:
    return await catalog.get_product(product_id)
