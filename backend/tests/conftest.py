"""Pytest fixtures for storefront tests."""

import os

# Settings are read once at import time
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_fake"
os.environ["STRIPE_WEBHOOK_SECRET"] = ""
os.environ["LOG_FORMAT"] = "text"

from typing import Callable, Optional

import httpx
import mongomock
import pytest
from fastapi.testclient import TestClient

from storefront.api.dependencies import get_catalog, get_current_user
from storefront.config import get_settings
from storefront.database.mongodb import mongodb
from storefront.models.order import ShippingAddress
from storefront.models.user import CurrentUser, UserRole
from storefront.services.catalog_service import ProductCatalog
from storefront.services.order_service import order_service
from storefront.utils.cache import TTLCache
from tests.factories import FakeClock, insert_user
from tests.fakes import AsyncDatabase, FakeGateway


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def db():
    """In-memory MongoDB wired into the global connection manager."""
    database = AsyncDatabase(mongomock.MongoClient()["storefront_test"])
    mongodb.db = database
    yield database
    mongodb.db = None


@pytest.fixture
def gateway(monkeypatch) -> FakeGateway:
    fake = FakeGateway()
    monkeypatch.setattr(order_service, "gateway", fake)
    return fake


@pytest.fixture
def customer(db) -> CurrentUser:
    return insert_user(db, "Casey Customer", "casey@example.com")


@pytest.fixture
def admin(db) -> CurrentUser:
    return insert_user(db, "Ada Admin", "ada@example.com", role=UserRole.ADMIN)


@pytest.fixture
def shipping_address() -> ShippingAddress:
    return ShippingAddress(
        fullName="Casey Customer",
        address="1 Market Street",
        city="Springfield",
        state="IL",
        postalCode="62701",
        country="US",
        phone="+1 555 0100",
    )


@pytest.fixture
def catalog_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def catalog(catalog_requests, clock) -> ProductCatalog:
    """Catalog backed by a canned DummyJSON-style transport."""

    def handler(request: httpx.Request) -> httpx.Response:
        catalog_requests.append(request)
        path = request.url.path
        if path == "/products/categories":
            return httpx.Response(
                200,
                json=[{"slug": "beauty", "name": "Beauty", "url": "https://catalog.test/products/category/beauty"}],
            )
        if path == "/products/category-list":
            return httpx.Response(200, json=["beauty", "fragrances"])
        if path == "/products/search":
            q = request.url.params.get("q")
            return httpx.Response(200, json={"products": [{"id": 1, "title": f"{q} match"}], "total": 1})
        if path.startswith("/products/category/"):
            return httpx.Response(200, json={"products": [{"id": 5, "category": path.rsplit("/", 1)[-1]}]})
        if path == "/products/1":
            return httpx.Response(200, json={"id": 1, "title": "Essence Mascara Lash Princess", "price": 9.99})
        if path == "/products/500":
            return httpx.Response(500, json={"message": "boom"})
        if path == "/products":
            return httpx.Response(
                200,
                json={
                    "products": [{"id": 1}, {"id": 2}],
                    "total": 2,
                    "skip": int(request.url.params.get("skip", 0)),
                    "limit": int(request.url.params.get("limit", 30)),
                },
            )
        return httpx.Response(404, json={"message": "not found"})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="https://catalog.test")
    return ProductCatalog(client, TTLCache(default_ttl=300, clock=clock), get_settings())


@pytest.fixture
def app(db, catalog):
    from storefront.main import app

    app.dependency_overrides[get_catalog] = lambda: catalog
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client_for(app) -> Callable[[Optional[CurrentUser]], TestClient]:
    """Build a client authenticated as the given user (None: anonymous)."""

    def make(user: Optional[CurrentUser]) -> TestClient:
        if user is None:
            app.dependency_overrides.pop(get_current_user, None)
        else:
            app.dependency_overrides[get_current_user] = lambda: user
        return TestClient(app)

    return make
