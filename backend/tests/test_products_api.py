"""Tests for the cache-fronted product catalog."""

import httpx
import pytest

from storefront.config import get_settings
from storefront.errors import NotFoundError, UpstreamError
from storefront.models.product import ProductQuery, ProductSearchQuery
from storefront.services.catalog_service import ProductCatalog
from storefront.utils.cache import TTLCache


class TestProductCatalog:
    async def test_second_read_is_served_from_cache(self, catalog, catalog_requests):
        first = await catalog.get_products(ProductQuery(limit=10, skip=20))
        second = await catalog.get_products(ProductQuery(limit=10, skip=20))

        assert first == second
        assert len(catalog_requests) == 1
        assert catalog.cache_stats()["keys"] == ["products:limit=10&skip=20"]

    async def test_entries_expire_per_resource_ttl(self, catalog, catalog_requests, clock):
        await catalog.search_products(ProductSearchQuery(q="phone"))
        clock.advance(181)
        await catalog.search_products(ProductSearchQuery(q="phone"))

        assert len(catalog_requests) == 2

    async def test_cache_keys(self, catalog):
        await catalog.get_product(1)
        await catalog.get_categories()
        await catalog.get_category_list()
        await catalog.get_products_by_category("beauty", ProductQuery(limit=5))
        await catalog.search_products(ProductSearchQuery(q="mascara", sortBy="price", order="asc"))

        assert set(catalog.cache_stats()["keys"]) == {
            "product:1",
            "categories",
            "category-list",
            "category:beauty:limit=5",
            "search:mascara:sortBy=price&order=asc",
        }

    async def test_select_is_normalized(self, catalog, catalog_requests):
        await catalog.get_products(ProductQuery(select="title, price,,"))
        assert catalog_requests[0].url.params["select"] == "title,price"

    async def test_unknown_product_is_not_found(self, catalog):
        with pytest.raises(NotFoundError):
            await catalog.get_product(404)

    async def test_provider_error_is_upstream(self, catalog):
        with pytest.raises(UpstreamError):
            await catalog.get_product(500)
        assert catalog.cache_stats()["size"] == 0

    async def test_transport_error_is_upstream(self, clock):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url="https://catalog.test")
        catalog = ProductCatalog(client, TTLCache(clock=clock), get_settings())

        with pytest.raises(UpstreamError):
            await catalog.get_products(ProductQuery())


class TestProductRoutes:
    def test_list_products(self, client_for):
        response = client_for(None).get("/api/products", params={"limit": 2, "skip": 4})

        assert response.status_code == 200
        assert response.json()["skip"] == 4

    def test_search_requires_query(self, client_for):
        assert client_for(None).get("/api/products/search").status_code == 422

    def test_product_by_id(self, client_for):
        response = client_for(None).get("/api/products/1")
        assert response.json()["title"] == "Essence Mascara Lash Princess"

    def test_missing_product_is_404(self, client_for):
        response = client_for(None).get("/api/products/404")

        assert response.status_code == 404
        assert response.json() == {"error": "NotFoundError", "detail": "Product not found: 404"}

    def test_provider_failure_is_502(self, client_for):
        response = client_for(None).get("/api/products/500")

        assert response.status_code == 502
        assert response.json()["error"] == "UpstreamError"

    def test_category_routes(self, client_for):
        client = client_for(None)
        assert client.get("/api/products/categories").json()[0]["slug"] == "beauty"
        assert client.get("/api/products/category-list").json() == ["beauty", "fragrances"]
        assert client.get("/api/products/category/beauty").json()["products"][0]["category"] == "beauty"

    def test_cache_admin_routes_need_admin(self, client_for, customer):
        assert client_for(customer).get("/api/products/cache/stats").status_code == 403
        assert client_for(customer).post("/api/products/cache/clear").status_code == 403

    def test_cache_stats_and_clear(self, client_for, admin):
        client = client_for(admin)
        client.get("/api/products/1")

        assert client.get("/api/products/cache/stats").json() == {"size": 1, "keys": ["product:1"]}
        assert client.post("/api/products/cache/clear").json() == {
            "cleared": True,
            "stats": {"size": 0, "keys": []},
        }


class TestHealth:
    def test_reports_services(self, client_for):
        body = client_for(None).get("/api/health").json()

        assert body["status"] == "healthy"
        assert body["services"]["mongodb"] == "connected"
        assert body["services"]["stripe"] == "configured"
