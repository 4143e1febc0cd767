"""
Tests for staff administration and the system log viewer.
"""

from mooprompt_api.models import SystemLog, User
from shared.config.constants import SystemAction
from shared.security.password import verify_password
from tests.conftest import TEST_PASSWORD


class TestUserAdmin:
    def test_create_user(self, client, db_session, auth_headers):
        response = client.post(
            "/api/users",
            json={"name": "  Nok  ", "username": "nok", "password": "secret99", "role": "CASHIER"},
            headers=auth_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Nok"
        assert data["role"] == "CASHIER"
        assert "password" not in data and "password_hash" not in data

        user = db_session.get(User, data["id"])
        assert verify_password("secret99", user.password_hash)

    def test_username_is_unique_ignoring_case(self, client, auth_headers, seed_cashier_user):
        response = client.post(
            "/api/users",
            json={
                "name": "Other",
                "username": seed_cashier_user.username.upper(),
                "password": "secret99",
            },
            headers={**auth_headers, "Accept-Language": "en"},
        )
        assert response.status_code == 400
        assert "already taken" in response.json()["detail"]

    def test_short_password_is_rejected(self, client, auth_headers):
        response = client.post(
            "/api/users",
            json={"name": "Nok", "username": "nok", "password": "123"},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "password"

    def test_list_filters(self, client, auth_headers, seed_cashier_user, seed_kitchen_user):
        response = client.get(
            "/api/users",
            params={"role": "KITCHEN"},
            headers=auth_headers,
        )
        data = response.json()
        assert data["total"] == 1
        assert data["users"][0]["username"] == seed_kitchen_user.username

        by_name = client.get(
            "/api/users",
            params={"sort_by": "username", "sort_order": "asc"},
            headers=auth_headers,
        ).json()
        names = [u["username"] for u in by_name["users"]]
        assert names == sorted(names)

    def test_password_is_masked_in_log(self, client, db_session, auth_headers, seed_cashier_user):
        response = client.patch(
            f"/api/users/{seed_cashier_user.id}",
            json={"password": "newsecret1"},
            headers=auth_headers,
        )
        assert response.status_code == 200

        entry = db_session.query(SystemLog).filter_by(action=SystemAction.UPDATE_USER).one()
        assert entry.detail["changes"] == {"password": "***"}

        login = client.post(
            "/api/auth/login",
            json={"username": seed_cashier_user.username, "password": "newsecret1"},
        )
        assert login.status_code == 200

    def test_delete_deactivates(self, client, db_session, auth_headers, seed_cashier_user):
        response = client.delete(f"/api/users/{seed_cashier_user.id}", headers=auth_headers)
        assert response.status_code == 200

        db_session.expire_all()
        assert db_session.get(User, seed_cashier_user.id).is_active is False

        login = client.post(
            "/api/auth/login",
            json={"username": seed_cashier_user.username, "password": TEST_PASSWORD},
        )
        assert login.status_code == 401

        inactive = client.get("/api/users", params={"active": "inactive"}, headers=auth_headers).json()
        assert [u["id"] for u in inactive["users"]] == [seed_cashier_user.id]

    def test_admin_cannot_delete_self(self, client, auth_headers, seed_admin_user):
        response = client.delete(f"/api/users/{seed_admin_user.id}", headers=auth_headers)
        assert response.status_code == 400

    def test_manager_cannot_manage_users(self, client, manager_headers):
        assert client.get("/api/users", headers=manager_headers).status_code == 403


class TestSystemLogs:
    def test_filter_by_action(self, client, manager_headers, seed_table):
        client.post("/api/tables", json={"name": "B2"}, headers=manager_headers)
        client.patch(f"/api/tables/{seed_table.id}", json={"name": "A9"}, headers=manager_headers)

        response = client.get(
            "/api/logs",
            params={"action": SystemAction.CREATE_TABLE},
            headers=manager_headers,
        )
        assert response.status_code == 200
        entries = response.json()
        assert len(entries) == 1
        assert entries[0]["detail"]["name"] == "B2"

    def test_newest_first(self, client, manager_headers):
        for name in ("B1", "B2", "B3"):
            client.post("/api/tables", json={"name": name}, headers=manager_headers)
        entries = client.get("/api/logs", params={"limit": 2}, headers=manager_headers).json()
        assert [e["detail"]["name"] for e in entries] == ["B3", "B2"]

    def test_cashier_cannot_read_logs(self, client, cashier_headers):
        assert client.get("/api/logs", headers=cashier_headers).status_code == 403
