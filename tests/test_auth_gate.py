from datetime import timedelta

import pytest
from jose import jwt

from app.core.security import (
    UserRole, create_access_token, identity_from_payload, verify_token
)
from tests.utils import auth_headers


def test_token_round_trip(settings):
    token = create_access_token("user-1", UserRole.PATIENT, settings)

    payload = verify_token(token, settings)
    assert payload.sub == "user-1"
    assert payload.role == "patient"
    # Seven day lifetime
    assert payload.exp - payload.iat == 7 * 24 * 3600

    identity = identity_from_payload(payload)
    assert identity.user_id == "user-1"
    assert identity.role is UserRole.PATIENT


def test_expired_token_is_rejected(settings):
    token = create_access_token("user-1", UserRole.PATIENT, settings, timedelta(seconds=-10))
    assert verify_token(token, settings) is None


def test_token_from_another_secret_is_rejected(settings):
    other = settings.model_copy(update={"SECRET_KEY": "someone-else"})
    token = create_access_token("user-1", UserRole.ADMIN, other)
    assert verify_token(token, settings) is None


def test_unknown_role_has_no_identity(settings):
    token = jwt.encode(
        {"sub": "user-1", "role": "doctor"},
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )
    payload = verify_token(token, settings)
    assert payload is not None
    assert identity_from_payload(payload) is None


class TestAuthGate:

    def test_book_without_token(self, client):
        response = client.post("/api/book", json={"slotId": "anything"})
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_non_bearer_scheme(self, client):
        response = client.get("/api/my-bookings", headers={"Authorization": "Basic dXNlcjpwYXNz"})
        assert response.status_code == 401

    def test_garbage_token(self, client):
        response = client.get("/api/my-bookings", headers=auth_headers("invalid_token"))
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    def test_expired_token(self, client, settings):
        token = create_access_token("user-1", UserRole.PATIENT, settings, timedelta(minutes=-1))
        response = client.get("/api/my-bookings", headers=auth_headers(token))
        assert response.status_code == 403

    def test_foreign_signature(self, client, settings):
        token = jwt.encode(
            {"sub": "user-1", "role": "admin"}, "not-the-server-secret", algorithm="HS256"
        )
        response = client.get("/api/all-bookings", headers=auth_headers(token))
        assert response.status_code == 403

    def test_patient_on_admin_route(self, client, patient_token):
        response = client.get("/api/all-bookings", headers=auth_headers(patient_token))
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    def test_admin_on_patient_route(self, client, admin_token):
        response = client.post(
            "/api/book", json={"slotId": "anything"}, headers=auth_headers(admin_token)
        )
        assert response.status_code == 403

    @pytest.mark.parametrize("path", ["/api/my-bookings", "/api/all-bookings"])
    def test_listing_requires_token(self, client, path):
        response = client.get(path)
        assert response.status_code == 401

    def test_admin_route_with_admin_token(self, client, admin_token):
        response = client.get("/api/all-bookings", headers=auth_headers(admin_token))
        assert response.status_code == 200
        assert response.json() == []
