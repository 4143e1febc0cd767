"""
Tests for table management endpoints.
"""

from shared.config.constants import TableStatus


class TestTableEndpoints:
    def test_create_and_list(self, client, cashier_headers):
        response = client.post("/api/tables", json={"name": "B2"}, headers=cashier_headers)
        assert response.status_code == 201
        assert response.json()["status"] == TableStatus.AVAILABLE

        listed = client.get("/api/tables", headers=cashier_headers).json()
        assert [t["name"] for t in listed] == ["B2"]
        assert listed[0]["active_session"] is None

    def test_duplicate_name_ignores_case(self, client, cashier_headers, seed_table):
        response = client.post("/api/tables", json={"name": "a1"}, headers=cashier_headers)
        assert response.status_code == 400

    def test_list_requires_sign_in(self, client, seed_table):
        assert client.get("/api/tables").status_code == 401

    def test_filter_by_status(self, client, cashier_headers, buffet_session, db_session):
        client.post("/api/tables", json={"name": "Z9"}, headers=cashier_headers)

        occupied = client.get(
            "/api/tables", params={"status": "OCCUPIED"}, headers=cashier_headers
        ).json()
        assert [t["name"] for t in occupied] == ["A1"]
        assert occupied[0]["active_session"]["id"] == buffet_session.id

    def test_rename(self, client, cashier_headers, seed_table):
        response = client.patch(
            f"/api/tables/{seed_table.id}", json={"name": "Window"}, headers=cashier_headers
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Window"

    def test_cannot_mark_occupied_without_session(self, client, cashier_headers, seed_table):
        response = client.patch(
            f"/api/tables/{seed_table.id}", json={"status": "OCCUPIED"}, headers=cashier_headers
        )
        assert response.status_code == 400

    def test_delete_refused_while_seated(self, client, cashier_headers, buffet_session):
        response = client.delete(f"/api/tables/{buffet_session.table_id}", headers=cashier_headers)
        assert response.status_code == 400

    def test_delete_hides_table(self, client, cashier_headers, seed_table):
        response = client.delete(f"/api/tables/{seed_table.id}", headers=cashier_headers)
        assert response.status_code == 200
        assert client.get("/api/tables", headers=cashier_headers).json() == []
        assert client.get(f"/api/tables/{seed_table.id}", headers=cashier_headers).status_code == 404

    def test_unknown_table_is_404(self, client, cashier_headers):
        response = client.get("/api/tables/999", headers={**cashier_headers, "Accept-Language": "en"})
        assert response.status_code == 404
        assert response.json() == {"detail": "Table not found"}
