"""
Integration tests for complete admission flows.
"""

import asyncio

import httpx
import pytest

from shared.test_helpers import (
    ManualClock, TestDataFactory, get_mock_environment, write_directory_file
)
from service_admission.app.chain import GuardChain
from service_admission.app.directory import InMemoryIdentityDirectory
from service_admission.app.gateway import AdmissionGateway
from service_admission.app.guards import CredentialGuard, RateLimiter, RoleGuard
from service_admission.app.main import create_app


class TestAdmissionFlow:
    """End-to-end admission through rate limit, credential and role guards."""

    @pytest.fixture
    def clock(self):
        """Manual clock."""
        return ManualClock(start=100.0)

    @pytest.fixture
    def gateway(self, clock):
        """Gateway over [RateLimiter(2), CredentialGuard, RoleGuard]."""
        directory = InMemoryIdentityDirectory({"admin@x.com": "pw1"})
        chain = GuardChain([
            RateLimiter(limit=2, clock=clock),
            CredentialGuard(directory),
            RoleGuard(privileged="admin@x.com"),
        ])
        return AdmissionGateway(chain)

    def test_login_scenario(self, gateway):
        """Admin admitted, wrong password rejected, third call rate limited."""
        first = gateway.admit("admin@x.com", "pw1")
        assert first.admitted is True
        assert first.decided_by == "role"

        second = gateway.admit("admin@x.com", "wrong")
        assert second.admitted is False
        assert second.reason == "invalid credential"

        third = gateway.admit("admin@x.com", "pw1")
        assert third.admitted is False
        assert third.reason == "rate limit exceeded"

        other = gateway.admit("someone@x.com", "pw1")
        assert other.reason == "rate limit exceeded"

    def test_limit_recovers_after_window(self, gateway, clock):
        """After a minute the shared budget is available again."""
        for _ in range(3):
            gateway.admit("admin@x.com", "pw1")

        clock.advance_ms(60_001)

        assert gateway.admit("admin@x.com", "pw1").admitted is True

    def test_role_first_bypasses_limit_and_credentials(self, clock):
        """Placing the role guard first lets the admin skip every other check."""
        directory = InMemoryIdentityDirectory({"admin@x.com": "pw1"})
        gateway = AdmissionGateway(GuardChain([
            RoleGuard(privileged="admin@x.com"),
            RateLimiter(limit=1, clock=clock),
            CredentialGuard(directory),
        ]))

        results = [gateway.admit("admin@x.com", "not-even-the-password") for _ in range(5)]

        assert all(result.admitted for result in results)
        assert gateway.admit("user@x.com", "x").reason == "unknown identity"
        assert gateway.admit("user@x.com", "x").reason == "rate limit exceeded"


class TestAdmissionServiceFlow:
    """Admission over HTTP with configuration taken from the environment."""

    @pytest.fixture
    def app(self, tmp_path, monkeypatch):
        """Service app seeded from a directory file via environment variables."""
        directory_file = write_directory_file(tmp_path / "users.yaml")
        env = get_mock_environment(directory_file, rate_limit=4)
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        return create_app()

    @pytest.mark.asyncio
    async def test_concurrent_http_admissions(self, app):
        """Concurrent callers share the global budget exactly."""
        user = TestDataFactory.create_test_users()[1]
        transport = httpx.ASGITransport(app=app)

        async with httpx.AsyncClient(transport=transport, base_url="http://admission") as client:
            responses = await asyncio.gather(*[
                client.post("/api/v1/admit", json={"identity": user.identity, "credential": user.credential})
                for _ in range(10)
            ])

        status_codes = sorted(response.status_code for response in responses)
        assert status_codes == [200] * 4 + [429] * 6

    @pytest.mark.asyncio
    async def test_directory_loaded_from_file(self, app):
        """Users from the directory file are recognised."""
        transport = httpx.ASGITransport(app=app)
        admin = TestDataFactory.create_test_users()[0]

        async with httpx.AsyncClient(transport=transport, base_url="http://admission") as client:
            admitted = await client.post(
                "/api/v1/admit",
                json={"identity": admin.identity, "credential": admin.credential}
            )
            unknown = await client.post(
                "/api/v1/admit",
                json={"identity": "ghost@example.com", "credential": "x"}
            )

        assert admitted.status_code == 200
        assert admitted.json()["decided_by"] == "role"
        assert unknown.status_code == 403
        assert unknown.json()["reason"] == "unknown identity"
