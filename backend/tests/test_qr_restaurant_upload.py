"""
Tests for table QR codes, the restaurant profile and image upload.
"""

import io

from mooprompt_api.models import SystemLog
from mooprompt_api.services.domain.qr_service import session_url
from shared.config.constants import SystemAction

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\xff"
    b"\xff?\x00\x05\xfe\x02\xfe\xa7\x9a\xa0\xa0\x00\x00\x00\x00IEND\xaeB`\x82"
)


class TestQrCodes:
    def test_session_url(self):
        assert session_url("https://pos.example.com", 12) == "https://pos.example.com/session/12"

    def test_generate(self, client, cashier_headers, buffet_session):
        response = client.get(
            "/api/qr/generate",
            params={"session_id": buffet_session.id},
            headers={**cashier_headers, "X-Forwarded-Proto": "https", "Host": "pos.example.com"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["session_url"] == f"https://pos.example.com/session/{buffet_session.id}"
        assert data["qr_code_url"].startswith("data:image/png;base64,")

    def test_generate_requires_session_id(self, client, cashier_headers):
        assert client.get("/api/qr/generate", headers=cashier_headers).status_code == 400

    def test_kitchen_cannot_print_codes(self, client, kitchen_headers, buffet_session):
        response = client.get(
            "/api/qr/generate",
            params={"session_id": buffet_session.id},
            headers=kitchen_headers,
        )
        assert response.status_code == 403

    def test_ticket_pdf(self, client, cashier_headers, buffet_session):
        response = client.get(
            "/api/qr/pdf",
            params={"session_id": buffet_session.id},
            headers=cashier_headers,
        )
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert 'filename="table-A1-qr.pdf"' in response.headers["content-disposition"]
        assert response.content.startswith(b"%PDF")

    def test_no_ticket_for_closed_session(self, client, cashier_headers, buffet_session):
        client.post("/api/sessions/close", json={"session_id": buffet_session.id}, headers=cashier_headers)
        response = client.get(
            "/api/qr/pdf",
            params={"session_id": buffet_session.id},
            headers=cashier_headers,
        )
        assert response.status_code == 400


class TestRestaurantInfo:
    def test_defaults_on_first_read(self, client):
        response = client.get("/api/restaurant-info")
        assert response.status_code == 200
        assert response.json()["name"] == "Mooprompt Restaurant"

    def test_update(self, client, db_session, manager_headers):
        response = client.patch(
            "/api/restaurant-info",
            json={"name": "  Moo Moo  ", "open_time": "17:00", "logo_url": "/uploads/restaurant/logo.png"},
            headers=manager_headers,
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Moo Moo"
        assert client.get("/api/restaurant-info").json()["open_time"] == "17:00"

        logged = db_session.query(SystemLog).filter_by(action=SystemAction.UPDATE_RESTAURANT_INFO).count()
        assert logged == 1

    def test_invalid_time_is_rejected(self, client, manager_headers):
        response = client.patch(
            "/api/restaurant-info",
            json={"close_time": "25:00"},
            headers=manager_headers,
        )
        assert response.status_code == 400

    def test_external_logo_is_rejected(self, client, manager_headers):
        response = client.patch(
            "/api/restaurant-info",
            json={"logo_url": "https://evil.example.com/logo.png"},
            headers=manager_headers,
        )
        assert response.status_code == 400


class TestUpload:
    def test_png_is_stored_and_served(self, client, manager_headers):
        response = client.post(
            "/api/upload/image",
            files={"file": ("dish.png", io.BytesIO(PNG_BYTES), "image/png")},
            headers=manager_headers,
        )
        assert response.status_code == 200
        url = response.json()["url"]
        assert url.startswith("/uploads/restaurant/")
        assert url.endswith(".png")

        served = client.get(url)
        assert served.status_code == 200
        assert served.content == PNG_BYTES

    def test_other_types_are_rejected(self, client, manager_headers):
        response = client.post(
            "/api/upload/image",
            files={"file": ("notes.txt", io.BytesIO(b"hello"), "text/plain")},
            headers={**manager_headers, "Accept-Language": "en"},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Only JPEG, PNG and WebP images are accepted"

    def test_missing_file(self, client, manager_headers):
        response = client.post("/api/upload/image", headers=manager_headers)
        assert response.status_code == 400

    def test_requires_management(self, client, cashier_headers):
        response = client.post(
            "/api/upload/image",
            files={"file": ("dish.png", io.BytesIO(PNG_BYTES), "image/png")},
            headers=cashier_headers,
        )
        assert response.status_code == 403
