"""Tests for checkout and order endpoints."""

import json

import pytest

from storefront.models.order import OrderStatus, PaymentStatus
from tests.factories import cart_line, insert_order

ADDRESS = {
    "fullName": "Casey Customer",
    "address": "1 Market Street",
    "city": "Springfield",
    "state": "IL",
    "postalCode": "62701",
    "country": "US",
}


@pytest.fixture
def client(client_for, customer):
    return client_for(customer)


def fill_cart(client) -> None:
    client.post("/api/cart/items", json=cart_line(1, 10.0, 2))
    client.post("/api/cart/items", json=cart_line(2, 5.0, 1))


class TestCheckout:
    def test_requires_session(self, client_for):
        response = client_for(None).post("/api/orders/create-payment-intent", json={"shippingAddress": ADDRESS})

        assert response.status_code == 401
        assert response.json()["error"] == "UnauthorizedError"

    def test_empty_cart(self, client, gateway):
        response = client.post("/api/orders/create-payment-intent", json={"shippingAddress": ADDRESS})

        assert response.status_code == 400
        assert response.json() == {"error": "EmptyCartError", "detail": "Cart is empty"}
        assert gateway.create_calls == []

    def test_invalid_address_is_rejected_before_provider_call(self, client, gateway):
        fill_cart(client)
        response = client.post(
            "/api/orders/create-payment-intent",
            json={"shippingAddress": {**ADDRESS, "city": ""}},
        )

        assert response.status_code == 422
        assert gateway.create_calls == []

    def test_checkout_flow(self, client, gateway):
        fill_cart(client)

        intent = client.post("/api/orders/create-payment-intent", json={"shippingAddress": ADDRESS}).json()
        assert gateway.create_calls[0]["amount"] == 2750
        confirm_body = {"paymentIntentId": intent["paymentIntentId"], "shippingAddress": ADDRESS}

        unpaid = client.post("/api/orders/confirm", json=confirm_body)
        assert unpaid.status_code == 400
        assert unpaid.json()["error"] == "PaymentNotCompletedError"

        gateway.succeed(intent["paymentIntentId"])
        confirmed = client.post("/api/orders/confirm", json=confirm_body)
        assert confirmed.status_code == 201
        order = confirmed.json()
        assert order["orderStatus"] == "processing"
        assert order["paymentStatus"] == "paid"
        assert order["totalPrice"] == 27.5
        assert [entry["status"] for entry in order["statusHistory"]] == ["pending", "processing"]

        again = client.post("/api/orders/confirm", json=confirm_body)
        assert again.json()["_id"] == order["_id"]

        assert client.get("/api/cart").json()["items"] == []
        listed = client.get("/api/orders").json()
        assert [o["_id"] for o in listed] == [order["_id"]]
        assert client.get(f"/api/orders/{order['_id']}").json()["paymentIntentId"] == intent["paymentIntentId"]


class TestOrderReads:
    def test_other_users_order_is_404(self, db, client, admin):
        order_id = insert_order(db, admin.id)
        assert client.get(f"/api/orders/{order_id}").status_code == 404

    def test_malformed_id_is_404(self, client):
        assert client.get("/api/orders/not-an-id").status_code == 404


class TestWebhook:
    def test_unsigned_event_updates_payment_status(self, db, client_for, customer, gateway):
        insert_order(db, customer.id, payment_status=PaymentStatus.PAID)
        intent_id = db.sync["orders"].find_one()["paymentIntentId"]
        payload = {"type": "charge.refunded", "data": {"object": {"payment_intent": intent_id}}}

        response = client_for(None).post("/api/orders/webhook", content=json.dumps(payload))

        assert response.status_code == 200
        assert response.json() == {"received": True}
        assert db.sync["orders"].find_one()["paymentStatus"] == "refunded"

    def test_malformed_payload_is_400(self, client_for, gateway):
        response = client_for(None).post("/api/orders/webhook", content=b"not json")

        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"


class TestAdminStatusRoutes:
    def test_customer_cannot_change_status(self, db, client, customer):
        order_id = insert_order(db, customer.id)
        response = client.patch(f"/api/orders/{order_id}/status", json={"status": "shipped"})

        assert response.status_code == 403
        assert response.json()["error"] == "ForbiddenError"

    def test_ship_with_tracking(self, db, client_for, admin, customer):
        order_id = insert_order(db, customer.id)

        response = client_for(admin).patch(
            f"/api/orders/{order_id}/status",
            json={
                "status": "shipped",
                "note": "Picked up",
                "trackingInfo": {"carrier": "UPS", "trackingNumber": "1Z999"},
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["orderStatus"] == "shipped"
        assert body["trackingInfo"]["carrier"] == "UPS"
        assert body["statusHistory"][-1]["note"] == "Picked up"

    def test_invalid_transition_is_400(self, db, client_for, admin, customer):
        order_id = insert_order(db, customer.id, status=OrderStatus.DELIVERED)

        response = client_for(admin).patch(f"/api/orders/{order_id}/status", json={"status": "cancelled"})

        assert response.status_code == 400
        assert response.json() == {
            "error": "InvalidTransitionError",
            "detail": "Invalid status transition from delivered to cancelled",
        }

    def test_unknown_status_is_422(self, db, client_for, admin, customer):
        order_id = insert_order(db, customer.id)
        response = client_for(admin).patch(f"/api/orders/{order_id}/status", json={"status": "lost"})
        assert response.status_code == 422

    def test_bulk_update(self, db, client_for, admin, customer):
        ids = [insert_order(db, customer.id) for _ in range(2)]

        response = client_for(admin).post(
            "/api/orders/bulk-update",
            json={"orderIds": [*ids, "665f1c2e8b3e4a1f2c9d0e99"], "status": "shipped"},
        )

        assert response.json() == {
            "success": False,
            "updated": 2,
            "failed": 1,
            "errors": ["Order 665f1c2e8b3e4a1f2c9d0e99 not found"],
        }
