"""Tests for FastAPI endpoints."""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch

from src.api.config import APISettings
from src.api.main import create_app


@pytest.fixture
def client(ab_testing):
    """Create test client serving the fixture registry."""
    return TestClient(create_app(ab_testing))


@pytest.fixture
def empty_client():
    """Create test client with an empty registry."""
    return TestClient(create_app())


class TestHealthEndpoint:
    """Tests for health endpoint."""

    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["experiments_registered"] == 3
        assert data["experiments_active"] == 2
        assert "version" in data

    def test_health_degraded_without_experiments(self, empty_client):
        response = empty_client.get("/health")
        assert response.json()["status"] == "degraded"


class TestRootEndpoint:
    """Tests for root endpoint."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200

        data = response.json()
        assert "name" in data
        assert "version" in data
        assert "docs" in data


class TestCORS:
    """Tests for CORS configuration."""

    def test_cors_header_on_response(self, client):
        response = client.get("/health", headers={"Origin": "https://dashboard.example.com"})
        assert "access-control-allow-origin" in response.headers

    def test_cors_origins_from_environment(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", '["https://dashboard.example.com"]')
        assert APISettings().cors_origins == ["https://dashboard.example.com"]


class TestExperimentsEndpoint:
    """Tests for experiment endpoints."""

    def test_list_experiments(self, client):
        response = client.get("/experiments")
        assert response.status_code == 200
        assert [e["id"] for e in response.json()] == ["exp-1", "exp-weighted", "exp-off"]

    def test_list_experiments_active_filter(self, client):
        response = client.get("/experiments?active=false")
        assert [e["id"] for e in response.json()] == ["exp-off"]

    def test_get_experiment(self, client):
        response = client.get("/experiments/exp-1")
        assert response.status_code == 200

        data = response.json()
        assert data["isActive"] is True
        assert data["trafficSplit"] == 100.0
        assert data["variants"][1] == {
            "id": "B", "name": "Treatment", "weight": 50.0, "config": {"color": "blue"},
        }

    def test_get_experiment_not_found(self, client):
        response = client.get("/experiments/missing")
        assert response.status_code == 404
        assert "not found" in response.json()["detail"]

    def test_put_experiment_creates(self, empty_client):
        body = {
            "id": "exp-new",
            "name": "New",
            "isActive": True,
            "variants": [{"id": "only", "name": "Only", "weight": 100}],
        }
        response = empty_client.put("/experiments/exp-new", json=body)
        assert response.status_code == 200

        response = empty_client.get("/experiments/exp-new/assignments/user-1")
        assert response.json()["variant"]["id"] == "only"

    def test_put_experiment_replaces(self, client):
        body = {
            "id": "exp-1",
            "name": "Replaced",
            "is_active": False,
            "variants": [{"id": "A", "name": "A", "weight": 100}],
        }
        response = client.put("/experiments/exp-1", json=body)
        assert response.status_code == 200
        assert response.json()["isActive"] is False

        response = client.get("/experiments/exp-1")
        assert response.json()["name"] == "Replaced"
        assert len(response.json()["variants"]) == 1

    def test_put_experiment_id_mismatch(self, client):
        body = {"id": "other", "name": "Other", "variants": []}
        response = client.put("/experiments/exp-1", json=body)
        assert response.status_code == 400

    def test_put_experiment_invalid_body(self, client):
        response = client.put("/experiments/exp-1", json={"name": "No id"})
        assert response.status_code == 422

    def test_experiment_status(self, client):
        assert client.get("/experiments/exp-1/active").json() == {
            "experiment_id": "exp-1", "is_active": True,
        }
        assert client.get("/experiments/exp-off/active").json()["is_active"] is False
        assert client.get("/experiments/missing/active").json()["is_active"] is False


class TestAssignmentEndpoint:
    """Tests for assignment endpoints."""

    def test_assignment(self, client):
        response = client.get("/experiments/exp-1/assignments/user-42")
        assert response.status_code == 200

        data = response.json()
        assert data["assigned"] is True
        assert data["bucket"] == 33
        assert data["variant"]["id"] == "A"

    def test_assignment_inactive(self, client):
        data = client.get("/experiments/exp-off/assignments/user-42").json()
        assert data["assigned"] is False
        assert data["variant"] is None

    def test_assignment_unknown_experiment(self, client):
        response = client.get("/experiments/missing/assignments/user-42")
        assert response.status_code == 200
        assert response.json()["assigned"] is False

    def test_subject_assignments(self, client):
        response = client.get("/subjects/user-42/assignments")
        assert response.status_code == 200

        data = response.json()
        assert data["subject_id"] == "user-42"
        assert set(data["assignments"]) == {"exp-1", "exp-weighted"}
        assert data["assignments"]["exp-1"]["id"] == "A"


class TestStartup:
    """Tests for loading experiments on startup."""

    def test_loads_experiments_file(self, experiments_file):
        with patch("src.api.main.settings") as mock_settings:
            mock_settings.experiments_file = experiments_file
            mock_settings.log_level = "INFO"

            with TestClient(create_app()) as client:
                response = client.get("/experiments")

        assert [e["id"] for e in response.json()] == ["route-optimizer-v2", "delivery-eta-banner"]

    def test_missing_experiments_file(self, tmp_path):
        with patch("src.api.main.settings") as mock_settings:
            mock_settings.experiments_file = tmp_path / "missing.json"
            mock_settings.log_level = "INFO"

            with TestClient(create_app()) as client:
                response = client.get("/health")

        assert response.json()["experiments_registered"] == 0
