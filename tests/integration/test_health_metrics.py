"""Integration tests for /healthz and /metrics endpoints."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from docqa.main import app


@pytest.fixture
def client() -> TestClient:
    """Create test client."""
    return TestClient(app)


class TestHealthEndpoint:
    """Test /health and /healthz endpoints."""

    def test_health_always_ok(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @patch("docqa.api.routes.health.check_db")
    @patch("docqa.api.routes.health.check_reasoning")
    def test_healthz_returns_200_when_db_ok(
        self,
        mock_check_reasoning: MagicMock,
        mock_check_db: MagicMock,
        client: TestClient,
    ) -> None:
        """Test /healthz returns 200 when the database is reachable."""
        mock_check_db.return_value = (True, "ok")
        mock_check_reasoning.return_value = "stub"

        response = client.get("/healthz")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["components"] == {"db": "ok", "reasoning": "stub"}

    @patch("docqa.api.routes.health.check_db")
    @patch("docqa.api.routes.health.check_reasoning")
    def test_healthz_returns_503_when_db_fails(
        self,
        mock_check_reasoning: MagicMock,
        mock_check_db: MagicMock,
        client: TestClient,
    ) -> None:
        """Test /healthz returns 503 when DB check fails."""
        mock_check_db.return_value = (False, "error: OperationalError")
        mock_check_reasoning.return_value = "configured"

        response = client.get("/healthz")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "degraded"
        assert data["components"]["db"] == "error: OperationalError"
        assert data["components"]["reasoning"] == "configured"


class TestMetricsEndpoint:
    """Test /metrics endpoint."""

    def test_metrics_exposes_synthesis_series(self, client: TestClient) -> None:
        response = client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        body = response.text
        assert "synthesis_latency_ms" in body
        assert "synthesis_outcomes_total" in body
        assert "exchange_persist_errors_total" in body


def test_root(client: TestClient) -> None:
    assert client.get("/").json() == {"message": "DocQA API", "version": "0.1.0"}
