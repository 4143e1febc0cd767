"""
Tests for FlowTrak departments, workflow templates and user administration.
"""

from tests.conftest import headers_for


class TestDepartments:
    def test_list_with_counts(self, client, seed_template, sales_member, seed_work_order):
        response = client.get("/api/flow/departments", headers=headers_for(sales_member))
        assert response.status_code == 200
        data = {d["name"]: d for d in response.json()}
        assert list(data) == ["Production", "Sales"]
        assert data["Sales"]["user_count"] == 1
        assert data["Sales"]["checkpoint_count"] == 2
        assert data["Production"]["checkpoint_count"] == 1

    def test_admin_creates(self, client, seed_admin_user):
        response = client.post(
            "/api/flow/departments",
            json={"name": "Design"},
            headers=headers_for(seed_admin_user),
        )
        assert response.status_code == 201
        assert response.json()["user_count"] == 0

    def test_manager_cannot_create(self, client, seed_manager_user):
        response = client.post(
            "/api/flow/departments",
            json={"name": "Design"},
            headers=headers_for(seed_manager_user),
        )
        assert response.status_code == 403

    def test_duplicate_name(self, client, seed_admin_user, seed_departments):
        response = client.post(
            "/api/flow/departments",
            json={"name": "sales"},
            headers=headers_for(seed_admin_user),
        )
        assert response.status_code == 400

    def test_rename(self, client, seed_admin_user, seed_departments):
        sales, _ = seed_departments
        response = client.put(
            f"/api/flow/departments/{sales.id}",
            json={"name": "Sales & Marketing"},
            headers=headers_for(seed_admin_user),
        )
        assert response.json()["name"] == "Sales & Marketing"

    def test_department_in_use_cannot_be_deleted(self, client, seed_admin_user, seed_template):
        production_id = seed_template.checkpoints[1].owner_dept_id
        response = client.delete(
            f"/api/flow/departments/{production_id}",
            headers=headers_for(seed_admin_user),
        )
        assert response.status_code == 400

    def test_unused_department_is_deleted(self, client, seed_admin_user, seed_departments):
        sales, production = seed_departments
        headers = headers_for(seed_admin_user)
        assert client.delete(f"/api/flow/departments/{production.id}", headers=headers).status_code == 200
        assert client.get(f"/api/flow/departments/{production.id}", headers=headers).status_code == 404
        assert [d["name"] for d in client.get("/api/flow/departments", headers=headers).json()] == ["Sales"]


class TestTemplates:
    def test_create_with_steps(self, client, seed_admin_user, seed_departments):
        sales, production = seed_departments
        response = client.post(
            "/api/flow/templates",
            json={
                "name": "Rush job",
                "checkpoints": [
                    {"name": "Build", "owner_dept_id": production.id, "order": 2},
                    {"name": "Quote", "owner_dept_id": sales.id, "order": 1},
                ],
            },
            headers=headers_for(seed_admin_user),
        )
        assert response.status_code == 201
        steps = response.json()["checkpoints"]
        assert [s["name"] for s in steps] == ["Quote", "Build"]
        assert steps[1]["owner_dept"]["name"] == "Production"

    def test_duplicate_step_order(self, client, seed_admin_user, seed_departments):
        sales, _ = seed_departments
        response = client.post(
            "/api/flow/templates",
            json={
                "name": "Broken",
                "checkpoints": [
                    {"name": "A", "owner_dept_id": sales.id, "order": 1},
                    {"name": "B", "owner_dept_id": sales.id, "order": 1},
                ],
            },
            headers={**headers_for(seed_admin_user), "Accept-Language": "en"},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Step order 1 is used twice"

    def test_unknown_department(self, client, seed_admin_user):
        response = client.post(
            "/api/flow/templates",
            json={"name": "Broken", "checkpoints": [{"name": "A", "owner_dept_id": 99, "order": 1}]},
            headers=headers_for(seed_admin_user),
        )
        assert response.status_code == 404

    def test_replace_steps(self, client, seed_admin_user, seed_template, seed_departments):
        sales, _ = seed_departments
        response = client.put(
            f"/api/flow/templates/{seed_template.id}",
            json={"checkpoints": [{"name": "Only step", "owner_dept_id": sales.id, "order": 1}]},
            headers=headers_for(seed_admin_user),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Standard job"
        assert [s["name"] for s in data["checkpoints"]] == ["Only step"]

    def test_step_endpoints(self, client, seed_admin_user, seed_template, seed_departments):
        _, production = seed_departments
        headers = headers_for(seed_admin_user)

        added = client.post(
            "/api/flow/templates/checkpoints",
            json={"template_id": seed_template.id, "name": "Install", "owner_dept_id": production.id, "order": 4},
            headers=headers,
        )
        assert added.status_code == 201
        step_id = added.json()["id"]

        clash = client.put(
            f"/api/flow/templates/checkpoints/{step_id}",
            json={"order": 1},
            headers=headers,
        )
        assert clash.status_code == 400

        renamed = client.put(
            f"/api/flow/templates/checkpoints/{step_id}",
            json={"name": "Install on site"},
            headers=headers,
        )
        assert renamed.json()["name"] == "Install on site"

        assert client.delete(f"/api/flow/templates/checkpoints/{step_id}", headers=headers).status_code == 200
        steps = client.get(f"/api/flow/templates/{seed_template.id}", headers=headers).json()["checkpoints"]
        assert [s["name"] for s in steps] == ["Quote", "Build", "Deliver"]

    def test_staff_can_read_but_not_edit(self, client, sales_member, seed_template):
        headers = headers_for(sales_member)
        assert client.get("/api/flow/templates", headers=headers).status_code == 200
        response = client.delete(f"/api/flow/templates/{seed_template.id}", headers=headers)
        assert response.status_code == 403

    def test_deleted_template_is_hidden(self, client, seed_admin_user, seed_template):
        headers = headers_for(seed_admin_user)
        client.delete(f"/api/flow/templates/{seed_template.id}", headers=headers)
        assert client.get("/api/flow/templates", headers=headers).json() == []
        assert client.get(f"/api/flow/templates/{seed_template.id}", headers=headers).status_code == 404


class TestFlowUsers:
    def test_mention_picker_lists_active_users(self, client, db_session, sales_member, production_member):
        production_member.is_active = False
        db_session.commit()
        response = client.get("/api/flow/users", headers=headers_for(sales_member))
        assert [u["username"] for u in response.json()] == ["sally"]
        assert response.json()[0]["department"]["name"] == "Sales"

    def test_admin_pages_users(self, client, seed_admin_user, sales_member, production_member):
        response = client.get(
            "/api/flow/admin/users",
            params={"page": 1, "limit": 2},
            headers=headers_for(seed_admin_user),
        )
        data = response.json()
        assert len(data["users"]) == 2
        assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "total_pages": 2}

    def test_admin_filters_by_department(self, client, seed_admin_user, seed_departments, sales_member, production_member):
        _, production = seed_departments
        response = client.get(
            "/api/flow/admin/users",
            params={"department_id": production.id},
            headers=headers_for(seed_admin_user),
        )
        assert [u["username"] for u in response.json()["users"]] == ["pete"]

    def test_create_member_in_department(self, client, seed_admin_user, seed_departments):
        sales, _ = seed_departments
        response = client.post(
            "/api/flow/admin/users",
            json={"name": "Dao", "username": "dao", "password": "secret99", "department_id": sales.id},
            headers=headers_for(seed_admin_user),
        )
        assert response.status_code == 201
        assert response.json()["department"]["name"] == "Sales"
        assert response.json()["role"] == "STAFF"

    def test_move_member(self, client, seed_admin_user, seed_departments, sales_member):
        _, production = seed_departments
        response = client.put(
            f"/api/flow/admin/users/{sales_member.id}",
            json={"department_id": production.id},
            headers=headers_for(seed_admin_user),
        )
        assert response.json()["department_id"] == production.id

    def test_staff_cannot_administer(self, client, sales_member):
        assert client.get("/api/flow/admin/users", headers=headers_for(sales_member)).status_code == 403
