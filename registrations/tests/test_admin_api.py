import time

import pytest
from jose import jwt

from registrations import auth
from registrations.auth import AuthError
from registrations.models import Registration
from registrations.validation import validate_registration

LOGIN_URL = "/api/admin/login"
LIST_URL = "/api/admin/registrations"


class TestAuthGate:

    def test_login_returns_verifiable_token(self):
        token = auth.login("admin", "test-pass-123")

        claims = auth.verify(token)
        assert claims["role"] == "admin"
        assert claims["exp"] - claims["iat"] == 3600

    def test_login_username_case_insensitive_and_trimmed(self):
        assert auth.verify(auth.login("  ADMIN ", " test-pass-123 "))

    def test_login_password_is_case_sensitive(self):
        with pytest.raises(AuthError) as exc_info:
            auth.login("admin", "TEST-PASS-123")
        assert exc_info.value.status == 401

    def test_expired_token_rejected(self, settings):
        token = auth.create_token("admin", settings.ADMIN_JWT_SECRET, lifetime=-10)

        with pytest.raises(AuthError) as exc_info:
            auth.verify(token)
        assert exc_info.value.status == 403

    def test_token_signed_with_other_secret_rejected(self):
        token = auth.create_token("admin", "some-other-secret")

        with pytest.raises(AuthError):
            auth.verify(token)

    def test_non_admin_role_rejected(self, settings):
        now = int(time.time())
        token = jwt.encode({"role": "viewer", "iat": now, "exp": now + 60}, settings.ADMIN_JWT_SECRET, algorithm="HS256")

        with pytest.raises(AuthError) as exc_info:
            auth.verify(token)
        assert exc_info.value.status == 403

    def test_unconfigured_gate_rejects_tokens(self, settings):
        token = auth.login("admin", "test-pass-123")
        settings.ADMIN_JWT_SECRET = None

        with pytest.raises(AuthError):
            auth.verify(token)


@pytest.mark.django_db
class TestAdminLoginView:

    def test_success(self, post_json):
        response = post_json(LOGIN_URL, {"username": "admin", "password": "test-pass-123"})

        assert response.status_code == 200
        assert auth.verify(response.json()["token"])["role"] == "admin"

    @pytest.mark.parametrize("body", [{}, {"username": "admin"}, {"password": "x"}, {"username": "", "password": ""}])
    def test_missing_fields(self, post_json, body):
        response = post_json(LOGIN_URL, body)

        assert response.status_code == 400
        assert response.json() == {"error": "Username and password are required"}

    def test_wrong_password(self, post_json):
        response = post_json(LOGIN_URL, {"username": "admin", "password": "nope"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    def test_not_configured(self, post_json, settings):
        settings.ADMIN_PASSWORD = None

        response = post_json(LOGIN_URL, {"username": "admin", "password": "test-pass-123"})

        assert response.status_code == 503


@pytest.mark.django_db
class TestAdminRegistrationsView:

    def test_without_token_is_401(self, client):
        response = client.get(LIST_URL)

        assert response.status_code == 401
        assert response.json() == {"error": "No token provided"}

    def test_malformed_token_is_403(self, client):
        response = client.get(LIST_URL, HTTP_AUTHORIZATION="Bearer not-a-jwt")

        assert response.status_code == 403
        assert response.json() == {"error": "Invalid or expired token"}

    def test_header_without_bearer_token_is_403(self, client):
        assert client.get(LIST_URL, HTTP_AUTHORIZATION="Bearer").status_code == 403

    def test_expired_token_is_403(self, client, settings):
        token = auth.create_token("admin", settings.ADMIN_JWT_SECRET, lifetime=-10)

        response = client.get(LIST_URL, HTTP_AUTHORIZATION=f"Bearer {token}")

        assert response.status_code == 403

    def test_lists_all_registrations_newest_first(self, client, solo_payload, group_payload):
        Registration.objects.create_registration(validate_registration(solo_payload()), "YUKTI-2025-AAAAAAAA")
        Registration.objects.create_registration(validate_registration(group_payload()), "YUKTI-2025-BBBBBBBB")
        token = auth.login("admin", "test-pass-123")

        response = client.get(LIST_URL, HTTP_AUTHORIZATION=f"Bearer {token}")

        assert response.status_code == 200
        data = response.json()
        assert [r["uniqueId"] for r in data] == ["YUKTI-2025-BBBBBBBB", "YUKTI-2025-AAAAAAAA"]
        group = data[0]
        assert group["members"] == [
            {"name": "Member 1", "usn": "U1"},
            {"name": "Member 2", "usn": "U2"},
            {"name": "Member 3", "usn": "U3"},
        ]
        assert group["payment"] == {"transactionId": "TXN-2001", "amount": 450.0, "method": "Card"}
        assert data[1]["USN"] == "1VT21CS001"
        assert data[1]["createdAt"]

    def test_empty_list(self, client):
        token = auth.login("admin", "test-pass-123")

        response = client.get(LIST_URL, HTTP_AUTHORIZATION=f"Bearer {token}")

        assert response.json() == []
