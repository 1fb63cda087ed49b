"""
Shared fixtures for Admission service tests.
"""

import pytest

from shared.test_helpers import ManualClock
from service_admission.app.directory import InMemoryIdentityDirectory
from service_admission.app.guards.base import AdmissionRequest, Decision, Guard


class RecordingGuard(Guard):
    """Guard returning a fixed decision and counting its calls."""

    def __init__(self, name: str, decision: Decision):
        self.name = name
        self.decision = decision
        self.calls = 0

    def evaluate(self, request: AdmissionRequest) -> Decision:
        self.calls += 1
        return self.decision


@pytest.fixture
def clock():
    """Fake clock for window arithmetic."""
    return ManualClock(start=1000.0)


@pytest.fixture
def directory():
    """Directory seeded with one admin and one regular user."""
    return InMemoryIdentityDirectory({
        "admin@example.com": "admin_pass",
        "user@example.com": "user_pass",
    })


@pytest.fixture
def request_for():
    """Factory for admission requests."""
    def _make(identity: str = "user@example.com", credential: str = "user_pass") -> AdmissionRequest:
        return AdmissionRequest(identity=identity, credential=credential)
    return _make


@pytest.fixture
def make_guard():
    """Factory for call-counting guards."""
    def _make(name: str, decision: Decision) -> RecordingGuard:
        return RecordingGuard(name, decision)
    return _make
