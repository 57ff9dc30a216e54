"""Tests for health check endpoints."""

from datetime import datetime

from tests.consts import API_BASE


class TestHealthEndpointsNoAuthRequired:
    """Tests verifying health endpoints work without authentication."""

    def test_health_check_no_auth_required(self, unauthenticated_client):
        response = unauthenticated_client.get(f"{API_BASE}/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_readiness_no_auth_required(self, unauthenticated_client):
        response = unauthenticated_client.get(f"{API_BASE}/health/ready")

        assert response.status_code in [200, 503]

    def test_openapi_no_auth_required(self, unauthenticated_client):
        response = unauthenticated_client.get("/openapi.json")

        assert response.status_code == 200
        assert "Projects-list_projects" in response.text


def test_health_check(unauthenticated_client):
    """Test basic health check endpoint."""
    response = unauthenticated_client.get(f"{API_BASE}/health")

    assert response.status_code == 200
    data = response.json()

    assert data["status"] == "healthy"
    assert data["service"] == "FilmOps API"
    assert data["version"] == "v1"
    assert data["environment"] == "test"

    # Verify timestamp is a valid ISO format
    datetime.fromisoformat(data["timestamp"])


def test_readiness_check_success(unauthenticated_client, mock_db_pool):
    response = unauthenticated_client.get(f"{API_BASE}/health/ready")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["database"] == "ok"
    mock_db_pool.health_check.assert_awaited()


def test_readiness_check_database_down(unauthenticated_client, mock_db_pool):
    mock_db_pool.health_check.return_value = False

    response = unauthenticated_client.get(f"{API_BASE}/health/ready")

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "unavailable"
    assert data["database"] == "unreachable"


def test_startup_opens_and_shutdown_closes_pool(app, mock_db_pool):
    from fastapi.testclient import TestClient

    with TestClient(app):
        mock_db_pool.initialize.assert_awaited_once()

    mock_db_pool.close.assert_awaited_once()
