"""
Tests for opening, cancelling and finding table sessions.
"""

from datetime import timedelta

from mooprompt_api.models import Table, utcnow
from shared.config.constants import SessionStatus, SessionType, TableStatus
from shared.infrastructure.events import SESSION_CANCELLED, SESSION_OPENED


class TestOpenSession:
    def test_open_buffet_session(self, client, cashier_headers, db_session, seed_table, seed_package, events):
        response = client.post(
            "/api/sessions/open",
            json={"table_id": seed_table.id, "people_count": 4, "package_id": seed_package.id},
            headers=cashier_headers,
        )
        assert response.status_code == 201
        session = response.json()["session"]
        assert session["status"] == SessionStatus.ACTIVE
        assert session["session_type"] == SessionType.BUFFET
        assert session["expire_time"] is not None
        assert session["table"]["status"] == TableStatus.OCCUPIED

        db_session.expire_all()
        assert db_session.get(Table, seed_table.id).status == TableStatus.OCCUPIED

        opened = events.of_type(SESSION_OPENED)
        assert len(opened) == 1
        assert opened[0].data["table_name"] == "A1"
        assert opened[0].room is None

    def test_a_la_carte_session_has_no_expiry(self, client, cashier_headers, seed_table):
        response = client.post(
            "/api/sessions/open",
            json={"table_id": seed_table.id, "people_count": 2},
            headers=cashier_headers,
        )
        session = response.json()["session"]
        assert session["session_type"] == SessionType.A_LA_CARTE
        assert session["expire_time"] is None

    def test_occupied_table_cannot_be_opened_twice(self, client, cashier_headers, buffet_session):
        response = client.post(
            "/api/sessions/open",
            json={"table_id": buffet_session.table_id, "people_count": 2},
            headers=cashier_headers,
        )
        assert response.status_code == 400

    def test_unknown_extra_charge_is_404(self, client, cashier_headers, seed_table):
        response = client.post(
            "/api/sessions/open",
            json={"table_id": seed_table.id, "people_count": 2, "extra_charge_ids": [42]},
            headers=cashier_headers,
        )
        assert response.status_code == 404

    def test_people_count_must_be_positive(self, client, cashier_headers, seed_table):
        response = client.post(
            "/api/sessions/open",
            json={"table_id": seed_table.id, "people_count": 0},
            headers=cashier_headers,
        )
        assert response.status_code == 400

    def test_kitchen_cannot_seat_tables(self, client, kitchen_headers, seed_table):
        response = client.post(
            "/api/sessions/open",
            json={"table_id": seed_table.id, "people_count": 2},
            headers=kitchen_headers,
        )
        assert response.status_code == 403


class TestCloseSession:
    def test_cancel_frees_table(self, client, cashier_headers, db_session, buffet_session, events):
        response = client.post(
            "/api/sessions/close",
            json={"session_id": buffet_session.id},
            headers=cashier_headers,
        )
        assert response.status_code == 200

        db_session.expire_all()
        assert db_session.get(Table, buffet_session.table_id).status == TableStatus.AVAILABLE
        assert len(events.of_type(SESSION_CANCELLED)) == 1

    def test_cancel_refused_with_open_orders(self, client, cashier_headers, buffet_session, seed_menu):
        client.post(
            "/api/orders",
            json={
                "table_session_id": buffet_session.id,
                "items": [{"menu_item_id": seed_menu["pork"].id, "qty": 1}],
            },
        )
        response = client.post(
            "/api/sessions/close",
            json={"session_id": buffet_session.id},
            headers=cashier_headers,
        )
        assert response.status_code == 400

    def test_cancel_twice_is_refused(self, client, cashier_headers, buffet_session):
        client.post("/api/sessions/close", json={"session_id": buffet_session.id}, headers=cashier_headers)
        response = client.post(
            "/api/sessions/close",
            json={"session_id": buffet_session.id},
            headers=cashier_headers,
        )
        assert response.status_code == 400


class TestSessionLookup:
    def test_public_detail(self, client, buffet_session):
        response = client.get(f"/api/sessions/{buffet_session.id}")
        assert response.status_code == 200
        data = response.json()
        assert data["is_active"] is True
        assert data["is_expired"] is False
        assert data["package"]["name"] == "Buffet 299"

    def test_detail_lists_active_extra_charges(self, client, cashier_headers, seed_table, seed_extra_charges):
        water, corkage = seed_extra_charges
        opened = client.post(
            "/api/sessions/open",
            json={
                "table_id": seed_table.id,
                "people_count": 2,
                "extra_charge_ids": [corkage.id, water.id, water.id],
            },
            headers=cashier_headers,
        ).json()["session"]
        assert opened["extra_charge_ids"] == [corkage.id, water.id]

        detail = client.get(f"/api/sessions/{opened['id']}").json()
        assert [c["name"] for c in detail["extra_charges"]] == ["Water refill", "Corkage"]

    def test_find_by_partial_table_name(self, client, buffet_session):
        response = client.get("/api/sessions/find", params={"table_name": "a"})
        assert response.status_code == 200
        assert response.json()["session"]["id"] == buffet_session.id

    def test_find_requires_name(self, client, buffet_session):
        assert client.get("/api/sessions/find").status_code == 400

    def test_find_without_active_session_is_404(self, client, seed_table):
        assert client.get("/api/sessions/find", params={"table_name": "A1"}).status_code == 404

    def test_find_expired_session_is_refused(self, client, db_session, buffet_session):
        buffet_session.expire_time = utcnow() - timedelta(minutes=1)
        db_session.commit()
        assert client.get("/api/sessions/find", params={"table_name": "A1"}).status_code == 400

    def test_active_list(self, client, cashier_headers, buffet_session):
        response = client.get("/api/sessions/active", headers=cashier_headers)
        assert response.status_code == 200
        data = response.json()
        assert [s["id"] for s in data] == [buffet_session.id]
        assert data[0]["order_count"] == 0
        assert data[0]["open_order_ids"] == []
