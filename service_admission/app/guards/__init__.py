"""
Admission guards.

Holds the guard contract and the concrete checks a chain is built from:
fixed window rate limiting, credential verification and role fast-path.
"""

from .base import AdmissionRequest, Decision, DecisionKind, Guard
from .credentials import CredentialGuard
from .rate_limit import PerIdentityRateLimiter, RateLimiter
from .roles import RoleGuard

__all__ = [
    "AdmissionRequest",
    "Decision",
    "DecisionKind",
    "Guard",
    "CredentialGuard",
    "PerIdentityRateLimiter",
    "RateLimiter",
    "RoleGuard",
]
