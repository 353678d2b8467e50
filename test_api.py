"""HTTP-level tests for the FastAPI app."""

import pytest
from fastapi.testclient import TestClient

from verifake.main import create_app


@pytest.fixture
def client(service):
    return TestClient(create_app(service))


def test_health(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "online"


class TestAnalyzeEndpoint:

    def test_analyze_success(self, client):
        response = client.post("/api/analyze", json={"url": "https://twitter.com/fake_bot", "platform": "twitter"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["account"]["username"] == "fake_bot"
        assert body["detection"]["accountId"] == body["account"]["id"]
        assert body["detection"]["riskLevel"] == "high"
        assert body["detection"]["fakeScore"] == 75
        assert isinstance(body["detection"]["fakeScore"], int)
        assert isinstance(body["detection"]["confidence"], int)

    def test_analyze_validation_error(self, client):
        response = client.post("/api/analyze", json={"url": "nope", "platform": "myspace"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert sorted(err["path"] for err in body["error"]) == [["platform"], ["url"]]

    def test_analyze_non_object_body(self, client):
        response = client.post("/api/analyze", json=["https://twitter.com/x"])
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_analyze_missing_body(self, client):
        response = client.post("/api/analyze")
        assert response.status_code == 400

    def test_detection_history(self, client):
        first = client.post("/api/analyze", json={"url": "https://twitter.com/jane", "platform": "twitter"}).json()
        client.post("/api/analyze", json={"url": "https://twitter.com/jane", "platform": "twitter"})

        response = client.get(f"/api/accounts/{first['account']['id']}/detections")
        assert response.status_code == 200
        assert len(response.json()["detections"]) == 2

    def test_detection_history_unknown_account(self, client):
        response = client.get("/api/accounts/missing/detections")
        assert response.status_code == 404
        assert response.json() == {"error": "Account not found", "success": False}


class TestDashboardEndpoints:

    def test_dashboard(self, client):
        client.post("/api/analyze", json={"url": "https://twitter.com/jane", "platform": "twitter"})

        body = client.get("/api/analytics/dashboard").json()
        assert body["success"] is True
        assert body["analytics"]["totalAnalyzed"] == 2847
        assert len(body["recentDetections"]) == 1

    def test_recent_activity(self, client):
        client.post("/api/analyze", json={"url": "https://instagram.com/jane", "platform": "instagram"})

        body = client.get("/api/activity/recent").json()
        assert body["success"] is True
        assert body["activities"][0]["username"] == "jane"
        assert set(body["activities"][0]) == {"id", "username", "platform", "riskLevel", "analyzedAt", "fakeScore"}

    def test_internal_failure_is_generic(self, client, service, monkeypatch):
        def broken(limit):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(service.store, "get_recent_accounts", broken)
        response = client.get("/api/activity/recent")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch recent activity", "success": False}


class TestAdminEndpoints:

    def test_system_status(self, client):
        body = client.get("/api/admin/system-status").json()
        assert body["success"] is True
        assert body["metrics"]["uptime"] == 98.9

    def test_system_status_history(self, client):
        body = client.get("/api/admin/system-status/history", params={"hours": 48}).json()
        assert len(body["metrics"]) == 1

    def test_system_status_history_rejects_bad_hours(self, client):
        assert client.get("/api/admin/system-status/history", params={"hours": 0}).status_code == 400

    def test_list_users_without_passwords(self, client):
        body = client.get("/api/admin/users").json()
        assert body["success"] is True
        assert body["users"][0]["username"] == "admin"
        assert all("password" not in user for user in body["users"])

    def test_create_user(self, client):
        response = client.post("/api/admin/users", json={
            "username": "ann", "email": "ann@example.com", "password": "secret1", "role": "analyst",
        })
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["role"] == "analyst"
        assert "password" not in user

    def test_create_user_validation(self, client):
        response = client.post("/api/admin/users", json={
            "username": "an", "email": "ann@example.com", "password": "secret1",
        })
        assert response.status_code == 400
        assert response.json()["error"][0]["path"] == ["username"]

    def test_update_user(self, client):
        admin = client.get("/api/admin/users").json()["users"][0]
        response = client.patch(f"/api/admin/users/{admin['id']}", json={"isActive": False})
        assert response.status_code == 200
        assert response.json()["user"]["isActive"] is False

    def test_update_unknown_user(self, client):
        response = client.patch("/api/admin/users/missing", json={"role": "analyst"})
        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_trends(self, client):
        body = client.get("/api/admin/analytics/trends").json()
        assert body["success"] is True
        assert body["trends"][0]["totalAnalyzed"] == 2847


def test_trends_synthetic_on_empty_store(empty_store):
    from verifake.service import DetectionService

    client = TestClient(create_app(DetectionService(empty_store)))
    body = client.get("/api/admin/analytics/trends").json()
    assert len(body["trends"]) == 30
    assert set(body["trends"][0]) == {"date", "analyzed", "fake", "accuracy"}
