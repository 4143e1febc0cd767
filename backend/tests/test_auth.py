"""
Tests for authentication endpoints and role guards.
"""

from sqlalchemy import select

from mooprompt_api.models import SystemLog
from shared.config.constants import Roles, SystemAction
from shared.security.password import hash_password, verify_password

from tests.conftest import TEST_PASSWORD, headers_for, make_user


class TestPasswordHashing:
    """Test password hashing utilities."""

    def test_hash_password_returns_bcrypt_hash(self):
        """Hash should return bcrypt format."""
        hashed = hash_password("mypassword")
        assert hashed.startswith("$2b$")

    def test_verify_password_correct(self):
        hashed = hash_password("mypassword")
        assert verify_password("mypassword", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = hash_password("mypassword")
        assert verify_password("wrongpassword", hashed) is False

    def test_plain_text_hash_never_verifies(self):
        """Only bcrypt hashes are accepted."""
        assert verify_password("plaintext", "plaintext") is False


class TestAuthEndpoints:
    """Test authentication API endpoints."""

    def test_login_success(self, client, seed_admin_user):
        """Valid credentials should return a token and the user."""
        response = client.post(
            "/api/auth/login",
            json={"username": "admin", "password": TEST_PASSWORD},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["access_token"]
        assert data["token_type"] == "Bearer"
        assert data["expires_in"] > 0
        assert data["user"]["username"] == "admin"
        assert data["user"]["role"] == Roles.ADMIN

    def test_login_wrong_password(self, client, seed_admin_user):
        response = client.post(
            "/api/auth/login",
            json={"username": "admin", "password": "wrong"},
        )
        assert response.status_code == 401

    def test_unknown_user_gets_same_answer_as_wrong_password(self, client, seed_admin_user):
        unknown = client.post(
            "/api/auth/login",
            json={"username": "nobody", "password": "wrong"},
            headers={"Accept-Language": "en"},
        )
        wrong = client.post(
            "/api/auth/login",
            json={"username": "admin", "password": "wrong"},
            headers={"Accept-Language": "en"},
        )
        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json() == wrong.json() == {"detail": "Invalid username or password"}

    def test_deactivated_user_cannot_login(self, client, db_session, seed_admin_user):
        seed_admin_user.is_active = False
        db_session.commit()

        response = client.post(
            "/api/auth/login",
            json={"username": "admin", "password": TEST_PASSWORD},
        )
        assert response.status_code == 401

    def test_login_attempts_are_logged(self, client, db_session, seed_admin_user):
        client.post("/api/auth/login", json={"username": "admin", "password": "wrong"})
        client.post("/api/auth/login", json={"username": "admin", "password": TEST_PASSWORD})

        actions = db_session.scalars(select(SystemLog.action).order_by(SystemLog.id)).all()
        assert actions == [SystemAction.LOGIN_FAILED, SystemAction.LOGIN]

    def test_empty_body_is_a_validation_error(self, client):
        response = client.post("/api/auth/login", json={})
        assert response.status_code == 400
        assert {e["field"] for e in response.json()["errors"]} == {"username", "password"}

    def test_me_returns_current_user(self, client, auth_headers):
        response = client.get("/api/auth/me", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["username"] == "admin"

    def test_me_requires_token(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401

    def test_me_rejects_garbage_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_token_of_deleted_user_is_rejected(self, client, db_session, seed_admin_user):
        headers = headers_for(seed_admin_user)
        seed_admin_user.is_active = False
        db_session.commit()

        response = client.get("/api/auth/me", headers=headers)
        assert response.status_code == 401


class TestFlowAuth:
    """FlowTrak shares the login flow under /api/flow/auth."""

    def test_flow_login_and_me(self, client, seed_admin_user):
        response = client.post(
            "/api/flow/auth/login",
            json={"username": "admin", "password": TEST_PASSWORD},
        )
        assert response.status_code == 200
        headers = {"Authorization": f"Bearer {response.json()['access_token']}"}

        me = client.get("/api/flow/auth/me", headers=headers)
        assert me.status_code == 200
        assert me.json()["id"] == seed_admin_user.id

    def test_logout_succeeds_for_signed_in_user(self, client, auth_headers):
        response = client.post("/api/flow/auth/logout", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"success": True}

    def test_flow_login_is_rate_limited(self, client, seed_admin_user):
        """Five attempts per 15 minutes per client."""
        codes = [
            client.post(
                "/api/flow/auth/login",
                json={"username": "admin", "password": "wrong"},
            ).status_code
            for _ in range(6)
        ]
        assert codes[:5] == [401] * 5
        assert codes[5] == 429


class TestRoleGuards:
    """Role-restricted endpoints answer 403 to other roles."""

    def test_kitchen_cannot_manage_tables(self, client, kitchen_headers):
        response = client.post("/api/tables", json={"name": "B1"}, headers=kitchen_headers)
        assert response.status_code == 403

    def test_cashier_cannot_manage_users(self, client, cashier_headers):
        response = client.get("/api/users", headers=cashier_headers)
        assert response.status_code == 403

    def test_manager_cannot_manage_users(self, client, manager_headers):
        response = client.get("/api/users", headers=manager_headers)
        assert response.status_code == 403

    def test_forbidden_message_lists_roles(self, client, db_session):
        runner = make_user(db_session, "runner", Roles.RUNNER)
        response = client.post(
            "/api/tables",
            json={"name": "B1"},
            headers={**headers_for(runner), "Accept-Language": "en"},
        )
        assert response.status_code == 403
        assert "ADMIN" in response.json()["detail"]
