"""Product catalog service: cache-fronted reads of the external catalog API."""

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from storefront.config import Settings
from storefront.errors import NotFoundError, UpstreamError
from storefront.models.product import ProductQuery, ProductSearchQuery
from storefront.utils.cache import TTLCache

logger = logging.getLogger(__name__)

PROVIDER = "Product catalog"


class ProductCatalog:
    """Read-only catalog client.

    Every read is served from the TTL cache when possible; misses go to the
    provider and are cached with a per-resource TTL.
    """

    def __init__(self, client: httpx.AsyncClient, cache: TTLCache, settings: Settings) -> None:
        self.client = client
        self.cache = cache
        self.settings = settings

    async def _fetch(
        self,
        path: str,
        params: Optional[dict[str, str]] = None,
        missing: Optional[NotFoundError] = None,
    ) -> Any:
        try:
            response = await self.client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.error("Catalog request %s failed: %s", path, e)
            raise UpstreamError(PROVIDER, str(e)) from e

        if response.is_error:
            if response.status_code == 404 and missing is not None:
                raise missing
            logger.error("Catalog request %s returned %d", path, response.status_code)
            raise UpstreamError(PROVIDER, f"{response.status_code} {response.reason_phrase}")

        return response.json()

    async def _cached(
        self,
        key: str,
        ttl: float,
        path: str,
        params: Optional[dict[str, str]] = None,
        missing: Optional[NotFoundError] = None,
    ) -> Any:
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache HIT %s", key)
            return cached

        logger.debug("Cache MISS %s", key)
        data = await self._fetch(path, params, missing)
        self.cache.set(key, data, ttl)
        return data

    async def get_products(self, query: ProductQuery) -> dict[str, Any]:
        params = query.to_params()
        key = f"products:{httpx.QueryParams(params)}"
        return await self._cached(key, self.settings.cache_ttl_products, "/products", params)

    async def search_products(self, query: ProductSearchQuery) -> dict[str, Any]:
        params = query.to_params()
        key = f"search:{query.q}:{httpx.QueryParams(params)}"
        return await self._cached(
            key,
            self.settings.cache_ttl_search,
            "/products/search",
            {"q": query.q, **params},
        )

    async def get_categories(self) -> list[dict[str, Any]]:
        return await self._cached(
            "categories", self.settings.cache_ttl_categories, "/products/categories"
        )

    async def get_category_list(self) -> list[str]:
        return await self._cached(
            "category-list", self.settings.cache_ttl_categories, "/products/category-list"
        )

    async def get_products_by_category(self, category: str, query: ProductQuery) -> dict[str, Any]:
        params = query.to_params()
        key = f"category:{category}:{httpx.QueryParams(params)}"
        return await self._cached(
            key,
            self.settings.cache_ttl_products,
            f"/products/category/{quote(category, safe='')}",
            params,
        )

    async def get_product(self, product_id: int) -> dict[str, Any]:
        """Get a single product; an unknown id raises NotFoundError."""
        return await self._cached(
            f"product:{product_id}",
            self.settings.cache_ttl_product_single,
            f"/products/{product_id}",
            missing=NotFoundError("Product", product_id),
        )

    def clear_cache(self) -> dict[str, Any]:
        self.cache.clear()
        logger.info("Product cache cleared")
        return {"cleared": True, "stats": self.cache.stats()}

    def cache_stats(self) -> dict[str, Any]:
        return self.cache.stats()
