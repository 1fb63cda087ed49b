"""
Unit tests for the Admission HTTP service.
"""

import pytest
from fastapi.testclient import TestClient

from shared.config import get_config
from service_admission.app.main import AdmissionService


class TestAdmissionService:
    """Test cases for AdmissionService."""

    @pytest.fixture
    def service(self, directory, clock):
        """Create AdmissionService with the default guard order and a limit of 3."""
        config = get_config("admission", 8020, rate_limit=3)
        return AdmissionService(config=config, directory=directory, clock=clock)

    @pytest.fixture
    def client(self, service):
        """Create test client."""
        return TestClient(service.app)

    def test_root_endpoint(self, client):
        """Test root endpoint."""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "admission"
        assert data["version"] == "1.0.0"

    def test_health_endpoint(self, client):
        """Test health endpoint."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "admission"
        assert data["status"] == "ok"

    def test_no_cross_origin_access(self, client):
        """Admission answers are never shared with browser origins."""
        response = client.post(
            "/api/v1/admit",
            json={"identity": "user@example.com", "credential": "user_pass"},
            headers={"Origin": "https://evil.example.com"}
        )
        assert response.status_code == 200
        assert "access-control-allow-origin" not in response.headers
        assert "access-control-allow-credentials" not in response.headers

    def test_admit_success(self, client):
        """Valid credentials return 200 and admitted."""
        response = client.post(
            "/api/v1/admit",
            json={"identity": "user@example.com", "credential": "user_pass"}
        )

        assert response.status_code == 200
        assert response.json() == {"admitted": True, "reason": "", "decided_by": None}

    def test_admit_admin(self, client):
        """Admins are admitted by the role guard."""
        response = client.post(
            "/api/v1/admit",
            json={"identity": "admin@example.com", "credential": "admin_pass"}
        )

        assert response.status_code == 200
        assert response.json()["decided_by"] == "role"

    def test_admit_rejected(self, client):
        """Rejections return 403 with the reason."""
        response = client.post(
            "/api/v1/admit",
            json={"identity": "ghost@example.com", "credential": "x"}
        )

        assert response.status_code == 403
        data = response.json()
        assert data["admitted"] is False
        assert data["reason"] == "unknown identity"

    def test_admit_rate_limited(self, client):
        """Exceeding the limit returns 429."""
        body = {"identity": "user@example.com", "credential": "user_pass"}
        for _ in range(3):
            assert client.post("/api/v1/admit", json=body).status_code == 200

        response = client.post("/api/v1/admit", json=body)

        assert response.status_code == 429
        assert response.json()["reason"] == "rate limit exceeded"

    def test_admit_validation(self, client):
        """Missing fields are rejected by request validation."""
        response = client.post("/api/v1/admit", json={"identity": "user@example.com"})
        assert response.status_code == 422

    def test_describe_chain(self, client):
        """Chain endpoint lists guards in order."""
        response = client.get("/api/v1/chain")

        assert response.status_code == 200
        assert response.json() == {"guards": ["rate_limit", "credentials", "role"]}

    def test_rate_limit_status_and_reset(self, client):
        """Status reflects usage and reset clears it."""
        client.post("/api/v1/admit", json={"identity": "user@example.com", "credential": "user_pass"})

        status = client.get("/api/v1/rate-limit").json()
        assert status["current_count"] == 1
        assert status["remaining"] == 2

        assert client.post("/api/v1/rate-limit/reset").json()["reset"] is True
        assert client.get("/api/v1/rate-limit").json()["current_count"] == 0

    def test_metrics_endpoint(self, client):
        """Metrics endpoint exposes admission counters."""
        client.post("/api/v1/admit", json={"identity": "user@example.com", "credential": "user_pass"})

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "admission_decisions_total" in response.text


class TestAdmissionServicePerIdentity:
    """Admission service configured with per-identity limits."""

    @pytest.fixture
    def client(self, directory, clock):
        """Create test client with per-identity limiting."""
        config = get_config("admission", 8020, rate_limit=1, rate_limit_scope="identity")
        service = AdmissionService(config=config, directory=directory, clock=clock)
        return TestClient(service.app)

    def test_identities_limited_independently(self, client):
        """One identity's burst does not block another."""
        user = {"identity": "user@example.com", "credential": "user_pass"}
        admin = {"identity": "admin@example.com", "credential": "admin_pass"}

        assert client.post("/api/v1/admit", json=user).status_code == 200
        assert client.post("/api/v1/admit", json=user).status_code == 429
        assert client.post("/api/v1/admit", json=admin).status_code == 200

    def test_status_requires_identity(self, client):
        """Per-identity status needs an identity parameter."""
        response = client.get("/api/v1/rate-limit")
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

        response = client.get("/api/v1/rate-limit", params={"identity": "user@example.com"})
        assert response.status_code == 200
        assert response.json()["current_count"] == 0
