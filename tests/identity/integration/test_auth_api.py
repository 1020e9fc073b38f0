"""Integration tests for the /api/auth endpoints."""

from protean import current_domain

from storefront.identity.security import verify_password
from storefront.identity.user import User

REGISTRATION = {
    "name": "Aziz Rahimov",
    "email": "aziz@example.com",
    "password": "secret123",
    "phone": "+998901234567",
}


class TestRegisterEndpoint:
    def test_register(self, client):
        response = client.post("/api/auth/register", json=REGISTRATION)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["token"]
        assert body["user"]["email"] == "aziz@example.com"
        assert body["user"]["role"] == "user"
        assert "password_hash" not in body["user"]
        assert response.cookies.get("token") == body["token"]

    def test_duplicate_email(self, client):
        client.post("/api/auth/register", json=REGISTRATION)
        response = client.post("/api/auth/register", json=REGISTRATION)

        assert response.status_code == 409
        assert response.json() == {"success": False, "message": "User already exists with this email"}

    def test_short_password(self, client):
        response = client.post("/api/auth/register", json={**REGISTRATION, "password": "123"})
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_invalid_email(self, client):
        response = client.post("/api/auth/register", json={**REGISTRATION, "email": "not-an-email"})
        assert response.status_code == 400
        assert response.json()["message"] == "Please provide a valid email"


class TestLoginEndpoints:
    def test_login(self, client, make_user):
        make_user(email="aziz@example.com", password="secret123")

        response = client.post("/api/auth/login", json={"email": "aziz@example.com", "password": "secret123"})

        assert response.status_code == 200
        assert response.json()["token"]

    def test_bad_credentials(self, client, make_user):
        make_user(email="aziz@example.com", password="secret123")
        response = client.post("/api/auth/login", json={"email": "aziz@example.com", "password": "nope"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    def test_admin_login_rejects_shoppers(self, client, make_user):
        make_user(email="aziz@example.com", password="secret123")
        response = client.post("/api/auth/admin/login", json={"email": "aziz@example.com", "password": "secret123"})
        assert response.status_code == 403

    def test_admin_login(self, client, make_user):
        make_user(email="admin@example.com", password="secret123", role="admin")
        response = client.post("/api/auth/admin/login", json={"email": "admin@example.com", "password": "secret123"})
        assert response.status_code == 200
        assert response.json()["user"]["role"] == "admin"


class TestProtectedEndpoints:
    def test_me_requires_a_token(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["message"] == "Not authorized to access this route"

    def test_me(self, client, make_user, auth_headers):
        user = make_user(email="aziz@example.com")
        response = client.get("/api/auth/me", headers=auth_headers(user))
        assert response.status_code == 200
        assert response.json()["data"]["id"] == str(user.id)

    def test_cookie_is_accepted(self, client):
        client.post("/api/auth/register", json=REGISTRATION)
        response = client.get("/api/auth/me")
        assert response.status_code == 200
        assert response.json()["data"]["email"] == "aziz@example.com"

    def test_logout_clears_cookie(self, client):
        client.post("/api/auth/register", json=REGISTRATION)
        client.post("/api/auth/logout")
        assert client.get("/api/auth/me").status_code == 401

    def test_tampered_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.token"})
        assert response.status_code == 401

    def test_update_profile(self, client, make_user, auth_headers):
        user = make_user(email="aziz@example.com")
        response = client.put(
            "/api/auth/update-profile",
            json={"name": "Aziz R.", "phone": "+998911112233"},
            headers=auth_headers(user),
        )
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Aziz R."

    def test_change_password(self, client, make_user, auth_headers):
        user = make_user(email="aziz@example.com", password="secret123")
        response = client.put(
            "/api/auth/change-password",
            json={"current_password": "secret123", "new_password": "new-secret"},
            headers=auth_headers(user),
        )
        assert response.status_code == 200
        assert response.json()["token"]
        assert verify_password("new-secret", current_domain.repository_for(User).get(user.id).password_hash)

    def test_change_password_with_wrong_current(self, client, make_user, auth_headers):
        user = make_user(email="aziz@example.com", password="secret123")
        response = client.put(
            "/api/auth/change-password",
            json={"current_password": "wrong", "new_password": "new-secret"},
            headers=auth_headers(user),
        )
        assert response.status_code == 401


class TestAdminRegister:
    def test_requires_admin(self, client, make_user, auth_headers):
        shopper = make_user(email="aziz@example.com")
        response = client.post(
            "/api/auth/admin/register",
            json={**REGISTRATION, "email": "new-admin@example.com"},
            headers=auth_headers(shopper),
        )
        assert response.status_code == 403

    def test_admin_creates_admin(self, client, make_user, auth_headers):
        admin = make_user(email="admin@example.com", role="admin")
        response = client.post(
            "/api/auth/admin/register",
            json={**REGISTRATION, "email": "new-admin@example.com"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 201
        assert response.json()["data"]["role"] == "admin"


class TestPasswordResetEndpoints:
    def test_forgot_and_reset(self, client, make_user):
        make_user(email="aziz@example.com", password="secret123")

        forgot = client.post("/api/auth/forgot-password", json={"email": "aziz@example.com"})
        assert forgot.status_code == 200
        token = forgot.json()["data"]["reset_token"]

        reset = client.put(f"/api/auth/reset-password/{token}", json={"password": "brand-new"})
        assert reset.status_code == 200

        login = client.post("/api/auth/login", json={"email": "aziz@example.com", "password": "brand-new"})
        assert login.status_code == 200

    def test_forgot_for_unknown_email(self, client):
        response = client.post("/api/auth/forgot-password", json={"email": "nobody@example.com"})
        assert response.status_code == 404

    def test_reset_with_bad_token(self, client):
        response = client.put("/api/auth/reset-password/not-a-token", json={"password": "brand-new"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid or expired reset token"
