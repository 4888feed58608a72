"""Tests for admin and artisan authentication endpoints."""

from artisan_admin.core.config import settings
from artisan_admin.core.security import decode_token
from artisan_admin.db.database import get_db
from artisan_admin.models.user import UserRole
from artisan_admin.repositories.user_repository import UserRepository
from conftest import DEFAULT_PASSWORD


def _fetch_user(user_id):
    with get_db() as conn:
        return UserRepository(conn).get_by_id(user_id)


class TestAdminLogin:
    def test_success_sets_http_only_cookie(self, client, admin):
        response = client.post(
            "/api/auth/admin/login",
            json={"email": "ADMIN@example.com ", "password": DEFAULT_PASSWORD},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        assert body["user"]["email"] == "admin@example.com"
        assert "token" not in body
        assert "hashedPassword" not in body["user"]

        cookie_header = response.headers["set-cookie"]
        assert cookie_header.startswith(f"{settings.ADMIN_COOKIE_NAME}=")
        assert "HttpOnly" in cookie_header
        assert "SameSite=strict" in cookie_header or "samesite=strict" in cookie_header.lower()
        assert "Max-Age=86400" in cookie_header

        claims = decode_token(response.cookies[settings.ADMIN_COOKIE_NAME])
        assert claims["userId"] == admin.id
        assert claims["role"] == "ADMIN"

    def test_success_records_last_login(self, client, admin):
        client.post("/api/auth/admin/login", json={"email": admin.email, "password": DEFAULT_PASSWORD})

        assert _fetch_user(admin.id).last_login is not None

    def test_wrong_password(self, client, admin):
        response = client.post("/api/auth/admin/login", json={"email": admin.email, "password": "nope"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    def test_non_admin_gets_same_error(self, client, artisan):
        response = client.post(
            "/api/auth/admin/login", json={"email": artisan.email, "password": DEFAULT_PASSWORD}
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    def test_inactive_admin_gets_same_error(self, client, make_user):
        make_user("sleepy@example.com", role=UserRole.ADMIN, is_active=False)

        response = client.post(
            "/api/auth/admin/login", json={"email": "sleepy@example.com", "password": DEFAULT_PASSWORD}
        )

        assert response.status_code == 401

    def test_unknown_email(self, client):
        response = client.post(
            "/api/auth/admin/login", json={"email": "ghost@example.com", "password": DEFAULT_PASSWORD}
        )

        assert response.status_code == 401

    def test_missing_fields_are_bad_request(self, client):
        response = client.post("/api/auth/admin/login", json={"email": "admin@example.com"})

        assert response.status_code == 400
        assert "error" in response.json()

    def test_missing_jwt_secret_is_server_error(self, client, admin, monkeypatch):
        monkeypatch.setattr(settings, "JWT_SECRET", None)

        response = client.post(
            "/api/auth/admin/login", json={"email": admin.email, "password": DEFAULT_PASSWORD}
        )

        assert response.status_code == 500
        assert response.json() == {"error": "JWT_SECRET is not configured."}


class TestAdminSession:
    def test_cookie_from_login_authenticates_me(self, client, admin):
        client.post("/api/auth/admin/login", json={"email": admin.email, "password": DEFAULT_PASSWORD})

        response = client.get("/api/auth/admin/me")

        assert response.status_code == 200
        assert response.json()["id"] == admin.id

    def test_me_without_cookie(self, client):
        response = client.get("/api/auth/admin/me")

        assert response.status_code == 401
        assert "error" in response.json()

    def test_logout_clears_cookie(self, admin_client):
        response = admin_client.post("/api/auth/admin/logout")

        assert response.status_code == 200
        assert response.json() == {"message": "Logout successful"}
        assert f'{settings.ADMIN_COOKIE_NAME}=""' in response.headers["set-cookie"] or (
            "Max-Age=0" in response.headers["set-cookie"]
        )


class TestArtisanLogin:
    def test_success_returns_bearer_token(self, client, artisan):
        response = client.post(
            "/api/auth/artisan/login",
            json={"email": " KOFI@example.com", "password": DEFAULT_PASSWORD},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["role"] == "ARTISAN"
        claims = decode_token(body["token"])
        assert claims["userId"] == artisan.id
        assert claims["name"] == "Kofi Mensah"
        assert claims["exp"] - claims["iat"] == 7 * 24 * 60 * 60
        assert _fetch_user(artisan.id).last_login is not None

    def test_wrong_password(self, client, artisan):
        response = client.post("/api/auth/artisan/login", json={"email": artisan.email, "password": "nope"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials or not an artisan account."}

    def test_admin_cannot_use_artisan_login(self, client, admin):
        response = client.post(
            "/api/auth/artisan/login", json={"email": admin.email, "password": DEFAULT_PASSWORD}
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials or not an artisan account."}

    def test_inactive_artisan_is_forbidden_without_side_effects(self, client, make_user):
        user = make_user("idle@example.com", role=UserRole.ARTISAN, is_active=False)

        response = client.post(
            "/api/auth/artisan/login", json={"email": "idle@example.com", "password": DEFAULT_PASSWORD}
        )

        assert response.status_code == 403
        assert response.json() == {"error": "Account is inactive. Please contact support."}
        assert "token" not in response.json()
        assert _fetch_user(user.id).last_login is None


class TestArtisanRegister:
    PAYLOAD = {
        "name": "  Yaw Boateng ",
        "email": "Yaw@Example.com",
        "password": "secret1",
        "phoneNumber": "024 123 4567",
        "nationalId": "gha-123456789-0",
    }

    def test_creates_active_artisan(self, client):
        response = client.post("/api/auth/artisan/register", json=self.PAYLOAD)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Artisan registration successful!"
        user = body["user"]
        assert user["name"] == "Yaw Boateng"
        assert user["email"] == "yaw@example.com"
        assert user["role"] == "ARTISAN"
        assert user["isActive"] is True
        assert user["nationalId"] == "GHA-123456789-0"
        assert decode_token(body["token"])["userId"] == user["id"]

    def test_accepts_international_format(self, client):
        payload = {**self.PAYLOAD, "phoneNumber": "+233551234567"}

        assert client.post("/api/auth/artisan/register", json=payload).status_code == 201

    def test_duplicate_email_conflicts(self, client, artisan):
        payload = {**self.PAYLOAD, "email": artisan.email}

        response = client.post("/api/auth/artisan/register", json=payload)

        assert response.status_code == 409
        assert response.json() == {"error": "An account with this email already exists."}

    def test_invalid_phone_number(self, client):
        payload = {**self.PAYLOAD, "phoneNumber": "0441234567"}

        response = client.post("/api/auth/artisan/register", json=payload)

        assert response.status_code == 400
        assert "Invalid Ghanaian phone number format." in response.json()["error"]

    def test_short_password(self, client):
        payload = {**self.PAYLOAD, "password": "abc"}

        assert client.post("/api/auth/artisan/register", json=payload).status_code == 400

    def test_short_name(self, client):
        payload = {**self.PAYLOAD, "name": " Y "}

        response = client.post("/api/auth/artisan/register", json=payload)

        assert response.status_code == 400
        assert "at least 2 characters" in response.json()["error"]
