"""
Fixed window rate limiting guards.
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from shared.errors import ConfigurationError
from shared.logging import get_logger
from .base import AdmissionRequest, Decision, Guard

RATE_LIMIT_EXCEEDED = "rate limit exceeded"
DEFAULT_WINDOW_MS = 60_000


@dataclass
class _FixedWindow:
    """Counter for one fixed window."""
    window_start: float
    count: int = 0

    def hit(self, now: float, window_seconds: float) -> int:
        """Roll the window if it has elapsed, then count this request."""
        if now - self.window_start > window_seconds:
            self.count = 0
            self.window_start = now
        self.count += 1
        return self.count

    def status(self, now: float, window_seconds: float, limit: int) -> Dict[str, Any]:
        elapsed = now - self.window_start
        current_count = 0 if elapsed > window_seconds else self.count
        return {
            "current_count": current_count,
            "limit": limit,
            "remaining": max(0, limit - current_count),
            "reset_in_seconds": max(0.0, window_seconds - elapsed),
        }


def _validate(limit: int, window_length_ms: float) -> None:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ConfigurationError(
            "Rate limit must be a positive integer",
            details={"limit": limit}
        )
    if not isinstance(window_length_ms, (int, float)) or window_length_ms <= 0:
        raise ConfigurationError(
            "Rate limit window must be positive",
            details={"window_length_ms": window_length_ms}
        )


class RateLimiter(Guard):
    """Single fixed window shared by every identity.

    The window opens when the guard is constructed, not on the first
    request. A burst from one identity consumes the budget of all others;
    use ``PerIdentityRateLimiter`` when that is not wanted.
    """

    name = "rate_limit"

    def __init__(self, limit: int, window_length_ms: float = DEFAULT_WINDOW_MS,
                 clock: Callable[[], float] = time.monotonic):
        _validate(limit, window_length_ms)
        self.limit = limit
        self.window_length_ms = window_length_ms
        self._window_seconds = window_length_ms / 1000.0
        self._clock = clock
        self._lock = threading.Lock()
        self._window = _FixedWindow(window_start=clock())
        self.logger = get_logger("admission.rate_limiter")

    def evaluate(self, request: AdmissionRequest) -> Decision:
        with self._lock:
            count = self._window.hit(self._clock(), self._window_seconds)

        if count > self.limit:
            self.logger.warning(
                "Rate limit exceeded",
                identity=request.identity,
                current_count=count,
                limit=self.limit
            )
            return Decision.reject(RATE_LIMIT_EXCEEDED)
        return Decision.admit()

    def get_status(self) -> Dict[str, Any]:
        """Get current window usage."""
        with self._lock:
            return self._window.status(self._clock(), self._window_seconds, self.limit)

    def reset(self) -> None:
        """Open a fresh window starting now."""
        with self._lock:
            self._window = _FixedWindow(window_start=self._clock())
        self.logger.info("Rate limit reset", guard=self.name)


class PerIdentityRateLimiter(Guard):
    """Fixed window rate limiter with an independent window per identity.

    Each identity's window opens on its first request.
    """

    name = "rate_limit"

    def __init__(self, limit: int, window_length_ms: float = DEFAULT_WINDOW_MS,
                 clock: Callable[[], float] = time.monotonic):
        _validate(limit, window_length_ms)
        self.limit = limit
        self.window_length_ms = window_length_ms
        self._window_seconds = window_length_ms / 1000.0
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: Dict[str, _FixedWindow] = {}
        self.logger = get_logger("admission.rate_limiter")

    def evaluate(self, request: AdmissionRequest) -> Decision:
        with self._lock:
            now = self._clock()
            window = self._windows.get(request.identity)
            if window is None:
                window = self._windows[request.identity] = _FixedWindow(window_start=now)
            count = window.hit(now, self._window_seconds)

        if count > self.limit:
            self.logger.warning(
                "Rate limit exceeded",
                identity=request.identity,
                current_count=count,
                limit=self.limit
            )
            return Decision.reject(RATE_LIMIT_EXCEEDED)
        return Decision.admit()

    def get_status(self, identity: str) -> Dict[str, Any]:
        """Get current window usage for one identity."""
        with self._lock:
            window = self._windows.get(identity)
            if window is None:
                return {
                    "current_count": 0,
                    "limit": self.limit,
                    "remaining": self.limit,
                    "reset_in_seconds": self._window_seconds,
                }
            return window.status(self._clock(), self._window_seconds, self.limit)

    def prune(self) -> int:
        """Drop windows that have elapsed. Returns how many were removed."""
        with self._lock:
            now = self._clock()
            stale = [
                identity for identity, window in self._windows.items()
                if now - window.window_start > self._window_seconds
            ]
            for identity in stale:
                del self._windows[identity]
        return len(stale)

    def reset(self, identity: Optional[str] = None) -> None:
        """Forget one identity's window, or all of them."""
        with self._lock:
            if identity is None:
                self._windows.clear()
            else:
                self._windows.pop(identity, None)
        self.logger.info("Rate limit reset", guard=self.name, identity=identity)
