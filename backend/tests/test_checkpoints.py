"""
Tests for checkpoint actions: status flow, department authority and events.
"""

import pytest

from mooprompt_api.services.flow import CheckpointService
from shared.config.constants import CheckpointStatus
from shared.infrastructure.events import ACTIVITY_NEW, CHECKPOINT_UPDATED
from shared.utils.exceptions import ForbiddenError, InvalidTransitionError, ValidationError
from tests.conftest import headers_for


def _act(client, checkpoint_id, action, user, note=None, locale=None):
    headers = headers_for(user)
    if locale:
        headers["Accept-Language"] = locale
    return client.post(
        f"/api/flow/checkpoints/{checkpoint_id}/action",
        json={"action": action, "note": note},
        headers=headers,
    )


def _claims(user):
    return {"sub": str(user.id), "role": user.role, "username": user.username}


class TestCheckpointService:
    def test_start_then_complete(self, db_session, seed_work_order, sales_member):
        service = CheckpointService(db_session)
        quote = seed_work_order.checkpoints[0]

        checkpoint, entry = service.apply_action(quote.id, "start", _claims(sales_member), "on it")
        assert checkpoint.status == CheckpointStatus.PROCESSING
        assert checkpoint.started_at is not None
        assert entry.action == "CHECKPOINT_START"
        assert entry.data == {
            "checkpoint_id": quote.id,
            "from": "PENDING",
            "to": "PROCESSING",
            "note": "on it",
        }

        checkpoint, _ = service.apply_action(quote.id, "complete", _claims(sales_member))
        assert checkpoint.status == CheckpointStatus.COMPLETED
        assert checkpoint.ended_at is not None

    def test_complete_requires_processing(self, db_session, seed_work_order, sales_member):
        with pytest.raises(InvalidTransitionError):
            CheckpointService(db_session).apply_action(
                seed_work_order.checkpoints[0].id, "complete", _claims(sales_member)
            )

    def test_other_department_is_forbidden(self, db_session, seed_work_order, production_member):
        with pytest.raises(ForbiddenError):
            CheckpointService(db_session).apply_action(
                seed_work_order.checkpoints[0].id, "start", _claims(production_member)
            )

    def test_cannot_skip_ahead(self, db_session, seed_work_order, production_member):
        with pytest.raises(ValidationError) as exc:
            CheckpointService(db_session).apply_action(
                seed_work_order.checkpoints[1].id, "start", _claims(production_member)
            )
        assert exc.value.params == {"name": "Quote"}

    def test_department_is_read_fresh(self, db_session, seed_work_order, seed_departments, production_member):
        sales, _ = seed_departments
        stale_claims = _claims(production_member)
        production_member.department_id = sales.id
        db_session.commit()

        checkpoint, _ = CheckpointService(db_session).apply_action(
            seed_work_order.checkpoints[0].id, "start", stale_claims
        )
        assert checkpoint.status == CheckpointStatus.PROCESSING

    def test_returned_step_can_restart(self, db_session, seed_work_order, sales_member):
        service = CheckpointService(db_session)
        quote_id = seed_work_order.checkpoints[0].id
        actor = _claims(sales_member)
        service.apply_action(quote_id, "start", actor)
        checkpoint, _ = service.apply_action(quote_id, "return", actor)
        assert checkpoint.status == CheckpointStatus.RETURNED

        checkpoint, _ = service.apply_action(quote_id, "start", actor)
        assert checkpoint.status == CheckpointStatus.PROCESSING
        assert checkpoint.ended_at is None


class TestCheckpointEndpoint:
    def test_action_emits_to_work_room(self, client, seed_work_order, sales_member, events):
        quote_id = seed_work_order.checkpoints[0].id
        response = _act(client, quote_id, "start", sales_member)
        assert response.status_code == 200
        data = response.json()
        assert data["checkpoint"]["status"] == "PROCESSING"
        assert data["activity"]["user"]["username"] == "sally"

        updated = events.of_type(CHECKPOINT_UPDATED)
        activity = events.of_type(ACTIVITY_NEW)
        assert len(updated) == 1 and len(activity) == 1
        assert updated[0].room == f"work:{seed_work_order.id}"
        assert updated[0].data["id"] == quote_id
        assert activity[0].data["action"] == "CHECKPOINT_START"

    def test_progress_moves_with_completion(self, client, seed_work_order, sales_member):
        quote_id = seed_work_order.checkpoints[0].id
        _act(client, quote_id, "start", sales_member)
        _act(client, quote_id, "complete", sales_member)

        work = client.get(f"/api/flow/work/{seed_work_order.id}", headers=headers_for(sales_member)).json()
        assert work["progress"] == 33
        assert work["current_checkpoint"]["name"] == "Build"

    def test_forbidden_message(self, client, seed_work_order, production_member):
        response = _act(client, seed_work_order.checkpoints[0].id, "start", production_member, locale="en")
        assert response.status_code == 403
        assert response.json()["detail"] == "Only the owning department or an admin can act on this checkpoint"

    def test_previous_incomplete_message(self, client, seed_work_order, production_member):
        response = _act(client, seed_work_order.checkpoints[1].id, "start", production_member, locale="en")
        assert response.status_code == 400
        assert response.json()["detail"] == "Complete Quote first"

    def test_admin_may_act_anywhere(self, client, seed_work_order, seed_admin_user):
        response = _act(client, seed_work_order.checkpoints[0].id, "start", seed_admin_user)
        assert response.status_code == 200

    def test_problem(self, client, seed_work_order, sales_member):
        quote_id = seed_work_order.checkpoints[0].id
        _act(client, quote_id, "start", sales_member)
        response = _act(client, quote_id, "problem", sales_member, note="Customer unreachable")
        assert response.json()["checkpoint"]["status"] == "PROBLEM"
        assert response.json()["activity"]["data"]["note"] == "Customer unreachable"

    def test_unknown_action(self, client, seed_work_order, sales_member):
        response = _act(client, seed_work_order.checkpoints[0].id, "skip", sales_member)
        assert response.status_code == 400

    def test_deleted_work_order_hides_checkpoints(self, client, seed_work_order, seed_admin_user, sales_member):
        client.delete(f"/api/flow/work/{seed_work_order.id}", headers=headers_for(seed_admin_user))
        response = _act(client, seed_work_order.checkpoints[0].id, "start", sales_member)
        assert response.status_code == 404
