"""
Tests for health check endpoints.
"""

from fastapi.testclient import TestClient

from ws_gateway.main import app as gateway_app


class TestHealthEndpoints:
    """Test health check API endpoints."""

    def test_health_check(self, client):
        """Basic health check should return healthy status."""
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "rest-api"

    def test_detailed_health_reports_each_dependency(self, client):
        """Redis is not running under test, so the detailed check degrades to 503."""
        response = client.get("/api/health/detailed")
        data = response.json()
        assert set(data["dependencies"]) == {"database", "redis"}
        assert data["dependencies"]["database"]["status"] == "healthy"
        if data["dependencies"]["redis"]["status"] != "healthy":
            assert response.status_code == 503

    def test_gateway_health_check(self):
        """The gateway answers without starting its lifespan tasks."""
        response = TestClient(gateway_app).get("/ws/health")
        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "ws-gateway"
        assert data["total_connections"] == 0


class TestHttpHardening:
    def test_request_id_is_generated(self, client):
        response = client.get("/api/health")
        assert len(response.headers["X-Request-ID"]) == 32

    def test_request_id_is_echoed(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "pos-terminal-3:42"})
        assert response.headers["X-Request-ID"] == "pos-terminal-3:42"

    def test_unsafe_request_id_is_replaced(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "bad id\twith spaces"})
        assert response.headers["X-Request-ID"] != "bad id\twith spaces"

    def test_security_headers(self, client):
        response = client.get("/api/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Cache-Control"] == "no-store"

    def test_unsupported_body_type(self, client):
        response = client.post(
            "/api/auth/login",
            content="username=a",
            headers={"Content-Type": "text/plain", "Accept-Language": "en"},
        )
        assert response.status_code == 415
        assert response.json() == {"detail": "Unsupported content type"}
