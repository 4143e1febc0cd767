"""
Tests for comment threads, mentions and attachments.
"""

import io
import json

import pytest

from mooprompt_api.services.flow import parse_mentions
from mooprompt_api.services.storage import attachment_path
from shared.config.constants import ActivityAction
from shared.infrastructure.events import COMMENT_NEW
from shared.utils.exceptions import NotFoundError, ValidationError
from tests.conftest import headers_for


def _post(client, user, files=None, **form):
    data = {k: str(v) for k, v in form.items() if v is not None}
    return client.post("/api/flow/comments", data=data, files=files, headers=headers_for(user))


class TestParseMentions:
    def test_empty(self):
        assert parse_mentions(None) == []
        assert parse_mentions("  ") == []

    def test_ids_are_deduplicated(self):
        assert parse_mentions("[3, \"4\", 3]") == [3, 4]

    @pytest.mark.parametrize("raw", ["not json", "{\"id\": 1}", "[\"abc\"]", "[null]"])
    def test_invalid(self, raw):
        with pytest.raises(ValidationError):
            parse_mentions(raw)


class TestAttachmentPath:
    @pytest.mark.parametrize("name", ["../settings.py", "/etc/passwd", "a\\b", ""])
    def test_escape_attempts(self, name):
        with pytest.raises(ValidationError):
            attachment_path(name)

    def test_missing_file(self):
        with pytest.raises(NotFoundError):
            attachment_path("0-nothing-here.pdf")


class TestComments:
    def test_comment_on_checkpoint(self, client, seed_work_order, sales_member, production_member, events):
        checkpoint = seed_work_order.checkpoints[0]
        response = _post(
            client,
            sales_member,
            checkpoint_id=checkpoint.id,
            message="  Quote sent  ",
            mentioned_user_ids=json.dumps([production_member.id]),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Quote sent"
        assert data["user"]["username"] == "sally"
        assert data["mentioned_user_ids"] == [production_member.id]

        published = events.of_type(COMMENT_NEW)
        assert len(published) == 1
        assert published[0].room == f"work:{seed_work_order.id}"

        detail = client.get(f"/api/flow/work/{seed_work_order.id}", headers=headers_for(sales_member)).json()
        assert [c["id"] for c in detail["comments"]] == [data["id"]]
        assert detail["activity"][0]["action"] == ActivityAction.ADD_COMMENT

    def test_replies_are_threaded(self, client, seed_work_order, sales_member, production_member):
        top = _post(client, sales_member, work_id=seed_work_order.id, message="Ready?").json()
        reply = _post(client, production_member, parent_id=top["id"], message="Yes").json()
        assert reply["work_order_id"] == seed_work_order.id

        threads = client.get(
            "/api/flow/comments",
            params={"work_id": seed_work_order.id},
            headers=headers_for(sales_member),
        ).json()
        assert len(threads) == 1
        assert [r["message"] for r in threads[0]["replies"]] == ["Yes"]

    def test_attachment_round_trip(self, client, seed_work_order, sales_member):
        response = _post(
            client,
            sales_member,
            files={"file": ("quote final.pdf", io.BytesIO(b"%PDF-1.4 quote"), "application/pdf")},
            work_id=seed_work_order.id,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["message"] is None
        assert data["file_name"] == "quote final.pdf"
        assert data["file_url"].startswith("/api/flow/uploads/")

        download = client.get(data["file_url"], headers=headers_for(sales_member))
        assert download.status_code == 200
        assert download.content == b"%PDF-1.4 quote"
        assert download.headers["content-type"] == "application/pdf"

    def test_download_requires_sign_in(self, client):
        assert client.get("/api/flow/uploads/anything.pdf").status_code == 401

    def test_download_rejects_traversal(self, client, sales_member):
        response = client.get("/api/flow/uploads/..secret", headers=headers_for(sales_member))
        assert response.status_code == 400

    def test_empty_comment(self, client, seed_work_order, sales_member):
        response = _post(client, sales_member, work_id=seed_work_order.id, message="   ")
        assert response.status_code == 400

    def test_target_required(self, client, sales_member):
        response = _post(client, sales_member, message="Hello")
        assert response.status_code == 400
        assert client.get("/api/flow/comments", headers=headers_for(sales_member)).status_code == 400

    def test_invalid_mentions(self, client, seed_work_order, sales_member):
        response = _post(
            client, sales_member, work_id=seed_work_order.id, message="Hi", mentioned_user_ids="sally"
        )
        assert response.status_code == 400

    def test_unknown_targets(self, client, sales_member):
        assert _post(client, sales_member, work_id=999, message="Hi").status_code == 404
        assert _post(client, sales_member, checkpoint_id=999, message="Hi").status_code == 404
        assert _post(client, sales_member, parent_id=999, message="Hi").status_code == 404
