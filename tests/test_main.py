import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client():
    from smarthrms.main import app
    return TestClient(app)


class TestApp:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Request-ID" in response.headers

    def test_routes_are_mounted(self, client):
        paths = {route.path for route in client.app.routes}
        for path in (
            "/api/employees/all",
            "/api/tasks/{task_id}/assign",
            "/api/leaves/{leave_id}/approve",
            "/api/attendance/check-in",
            "/api/match/tasks/{task_id}/recommendations",
            "/api/match/skill-gaps",
            "/api/reports/dashboard",
            "/api/reports/skill-gaps",
        ):
            assert path in paths
