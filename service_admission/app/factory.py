"""
Build guard chains from service configuration.
"""

import time
from typing import Callable, List, Optional

from shared.config import BaseConfig
from shared.errors import ConfigurationError
from .chain import GuardChain
from .directory import IdentityDirectory
from .guards.base import Guard
from .guards.credentials import CredentialGuard
from .guards.rate_limit import PerIdentityRateLimiter, RateLimiter
from .guards.roles import RoleGuard

RATE_LIMIT_SCOPES = ("global", "identity")


def build_rate_limiter(config: BaseConfig, clock: Optional[Callable[[], float]] = None) -> Guard:
    """Create the limiter variant selected by ``rate_limit_scope``."""
    clock = clock or time.monotonic
    scope = config.rate_limit_scope.lower()
    if scope == "global":
        return RateLimiter(config.rate_limit, config.rate_limit_window_ms, clock=clock)
    if scope == "identity":
        return PerIdentityRateLimiter(config.rate_limit, config.rate_limit_window_ms, clock=clock)
    raise ConfigurationError(
        "Unknown rate limit scope",
        details={"scope": config.rate_limit_scope, "allowed": list(RATE_LIMIT_SCOPES)}
    )


def build_chain(config: BaseConfig, directory: Optional[IdentityDirectory],
                clock: Optional[Callable[[], float]] = None) -> GuardChain:
    """Create guards in ``config.guard_order`` and wrap them in a chain."""
    guards: List[Guard] = []
    for name in config.guard_order:
        if name == "rate_limit":
            guards.append(build_rate_limiter(config, clock))
        elif name == "credentials":
            guards.append(CredentialGuard(directory))
        elif name == "role":
            guards.append(RoleGuard(privileged=config.privileged_identities))
        else:
            raise ConfigurationError(
                "Unknown guard in guard_order",
                details={"guard": name}
            )
    return GuardChain(guards)
