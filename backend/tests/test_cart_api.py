"""Tests for cart and wishlist endpoints."""

import pytest

from storefront.errors import ConcurrentModificationError
from storefront.services.cart_service import cart_service
from tests.factories import cart_line


@pytest.fixture
def client(client_for, customer):
    return client_for(customer)


class TestCart:
    def test_cart_is_created_on_first_read(self, client, customer):
        response = client.get("/api/cart")

        assert response.status_code == 200
        body = response.json()
        assert body["userId"] == customer.id
        assert body["items"] == []
        assert body["totalPrice"] == 0.0

    def test_add_merges_quantity_and_refreshes_price(self, client):
        client.post("/api/cart/items", json=cart_line(1, 10.0, 2))
        response = client.post("/api/cart/items", json={**cart_line(1, 12.0), "quantity": 1})

        body = response.json()
        assert len(body["items"]) == 1
        assert body["items"][0]["quantity"] == 3
        assert body["items"][0]["price"] == 12.0
        assert body["totalItems"] == 3
        assert body["totalPrice"] == 36.0

    def test_update_quantity_and_remove_with_zero(self, client):
        client.post("/api/cart/items", json=cart_line(1, 10.0, 2))
        client.post("/api/cart/items", json=cart_line(2, 5.0, 1))

        response = client.put("/api/cart/items/1", json={"quantity": 4})
        assert response.json()["totalPrice"] == 45.0

        response = client.put("/api/cart/items/2", json={"quantity": 0})
        assert [item["productId"] for item in response.json()["items"]] == [1]

    def test_update_missing_item_is_404(self, client):
        response = client.put("/api/cart/items/99", json={"quantity": 1})

        assert response.status_code == 404
        assert response.json()["error"] == "NotFoundError"

    def test_remove_count_check_and_clear(self, client):
        client.post("/api/cart/items", json=cart_line(1, 10.0, 2))
        client.post("/api/cart/items", json=cart_line(2, 5.0, 1))

        assert client.get("/api/cart/count").json() == {"count": 3}
        assert client.get("/api/cart/check/2").json()["inCart"] is True

        client.delete("/api/cart/items/2")
        assert client.get("/api/cart/check/2").json()["inCart"] is False

        response = client.delete("/api/cart")
        assert response.json()["items"] == []
        assert client.get("/api/cart/count").json() == {"count": 0}

    def test_invalid_item_is_rejected(self, client):
        response = client.post("/api/cart/items", json={**cart_line(1, 10.0), "quantity": 0})
        assert response.status_code == 422

    def test_carts_are_per_user(self, client_for, client, admin):
        client.post("/api/cart/items", json=cart_line(1, 10.0, 2))

        other = client_for(admin)
        assert other.get("/api/cart").json()["items"] == []


class TestWishlist:
    def test_duplicate_add_is_reported(self, client):
        first = client.post("/api/wishlist/items", json=cart_line(7, 30.0)).json()
        second = client.post("/api/wishlist/items", json=cart_line(7, 30.0)).json()

        assert first["added"] is True
        assert second["added"] is False
        assert second["wishlist"]["totalItems"] == 1

    def test_move_to_cart(self, client):
        client.post("/api/wishlist/items", json=cart_line(7, 30.0))
        client.post("/api/cart/items", json=cart_line(7, 30.0, 2))

        response = client.post("/api/wishlist/move-to-cart/7")

        assert response.status_code == 200
        body = response.json()
        assert body["wishlist"]["items"] == []
        assert body["cart"]["items"][0]["quantity"] == 3

    def test_failed_cart_write_keeps_wishlist_item(self, client, customer, monkeypatch):
        client.post("/api/wishlist/items", json=cart_line(7, 30.0))

        async def failing_add_item(user_id, item):
            raise ConcurrentModificationError("Cart", user_id)

        monkeypatch.setattr(cart_service, "add_item", failing_add_item)
        response = client.post("/api/wishlist/move-to-cart/7")

        assert response.status_code == 409
        assert client.get("/api/wishlist/check/7").json()["inWishlist"] is True

    def test_move_missing_item_is_404(self, client):
        assert client.post("/api/wishlist/move-to-cart/7").status_code == 404

    def test_remove_check_count_clear(self, client):
        client.post("/api/wishlist/items", json=cart_line(7, 30.0))
        client.post("/api/wishlist/items", json=cart_line(8, 15.0))

        assert client.get("/api/wishlist/count").json() == {"count": 2}
        assert client.get("/api/wishlist/check/8").json()["inWishlist"] is True

        assert client.delete("/api/wishlist/items/8").status_code == 200
        assert client.get("/api/wishlist/check/8").json()["inWishlist"] is False
        assert client.delete("/api/wishlist/items/8").status_code == 404

        assert client.delete("/api/wishlist").json()["totalItems"] == 0
