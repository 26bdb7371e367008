"""Tests for session cookie authentication and the profile routes."""

from datetime import timedelta

import pytest

from storefront.config import get_settings
from storefront.services.auth_service import session_token_from_cookie
from storefront.utils.helpers import naive_utc, utcnow

COOKIE = get_settings().session_cookie_name


def insert_session(db, user_id: str, token: str = "tok123", expires_in: timedelta = timedelta(days=7)) -> None:
    db.sync[get_settings().mongodb_session_collection].insert_one(
        {"token": token, "userId": user_id, "expiresAt": naive_utc(utcnow() + expires_in)}
    )


@pytest.fixture
def anonymous(client_for):
    return client_for(None)


class TestSessionCookie:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("tok123.signature", "tok123"),
            ("tok123.sig.with.dots", "tok123"),
            ("tok123%2Esignature", "tok123"),
            ("bare", "bare"),
            ("", None),
            (None, None),
            (".sig", None),
        ],
    )
    def test_token_extraction(self, value, expected):
        assert session_token_from_cookie(value) == expected

    def test_valid_session(self, db, anonymous, customer):
        insert_session(db, customer.id)
        anonymous.cookies.set(COOKIE, "tok123.sig")

        response = anonymous.get("/api/users/me")

        assert response.status_code == 200
        assert response.json()["email"] == "casey@example.com"

    def test_secure_cookie_variant(self, db, anonymous, customer):
        insert_session(db, customer.id)
        anonymous.cookies.set(f"__Secure-{COOKIE}", "tok123.sig")

        assert anonymous.get("/api/users/me").status_code == 200

    def test_missing_cookie(self, anonymous):
        response = anonymous.get("/api/users/me")

        assert response.status_code == 401
        assert response.json()["error"] == "UnauthorizedError"

    def test_unknown_token(self, db, anonymous, customer):
        insert_session(db, customer.id)
        anonymous.cookies.set(COOKIE, "other.sig")

        assert anonymous.get("/api/users/me").status_code == 401

    def test_expired_session(self, db, anonymous, customer):
        insert_session(db, customer.id, expires_in=timedelta(minutes=-1))
        anonymous.cookies.set(COOKIE, "tok123.sig")

        response = anonymous.get("/api/users/me")

        assert response.status_code == 401
        assert response.json()["detail"] == "Session expired"

    def test_session_of_deleted_user(self, db, anonymous):
        insert_session(db, "665f1c2e8b3e4a1f2c9d0e99")
        anonymous.cookies.set(COOKIE, "tok123.sig")

        assert anonymous.get("/api/users/me").status_code == 401

    def test_customer_cannot_reach_admin(self, db, anonymous, customer):
        insert_session(db, customer.id)
        anonymous.cookies.set(COOKIE, "tok123.sig")

        response = anonymous.get("/api/admin/dashboard")

        assert response.status_code == 403
        assert response.json() == {"error": "ForbiddenError", "detail": "Admin access required"}


class TestProfile:
    def test_update_profile(self, db, client_for, customer):
        client = client_for(customer)

        response = client.patch("/api/users/me", json={"firstName": "Casey", "lastName": "Jones"})

        assert response.status_code == 200
        body = response.json()
        assert (body["firstName"], body["lastName"], body["name"]) == ("Casey", "Jones", "Casey Customer")
        stored = db.sync[get_settings().mongodb_user_collection].find_one({"email": "casey@example.com"})
        assert stored["firstName"] == "Casey"

    def test_role_cannot_be_self_assigned(self, db, client_for, customer):
        client = client_for(customer)

        client.patch("/api/users/me", json={"name": "Casey", "role": "admin"})

        assert client.get("/api/users/me").json()["role"] == "customer"

    def test_empty_name_is_rejected(self, client_for, customer):
        assert client_for(customer).patch("/api/users/me", json={"name": ""}).status_code == 422
