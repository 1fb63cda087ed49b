"""
Admission gateway: entry point that runs credentials through a guard chain.
"""

import time
from typing import Optional

from shared.errors import ConfigurationError
from shared.logging import get_logger, reset_identity_context, set_identity_context
from shared.metrics import MetricsCollector
from .chain import AdmissionResult, GuardChain
from .guards.base import AdmissionRequest
from .guards.rate_limit import RATE_LIMIT_EXCEEDED


class AdmissionGateway:
    """Front door for admission checks.

    The chain is built by the caller and referenced, not copied.
    """

    def __init__(self, chain: GuardChain, metrics: Optional[MetricsCollector] = None):
        self.logger = get_logger("admission.gateway")
        self.metrics = metrics
        self._chain = self._check_chain(chain)

    @staticmethod
    def _check_chain(chain: GuardChain) -> GuardChain:
        if not isinstance(chain, GuardChain):
            raise ConfigurationError(
                "AdmissionGateway requires a GuardChain",
                details={"type": type(chain).__name__}
            )
        return chain

    @property
    def chain(self) -> GuardChain:
        return self._chain

    def set_chain(self, chain: GuardChain) -> None:
        """Swap in a new chain. Calls already running finish on the old one."""
        self._chain = self._check_chain(chain)
        self.logger.info("Guard chain replaced", guards=[guard.name for guard in chain])

    def admit(self, identity: str, credential: str) -> AdmissionResult:
        """Run the identity and credential through the chain."""
        chain = self._chain
        request = AdmissionRequest(identity=identity, credential=credential)
        token = set_identity_context(identity)
        try:
            return self._admit(chain, request)
        finally:
            reset_identity_context(token)

    def _admit(self, chain: GuardChain, request: AdmissionRequest) -> AdmissionResult:
        identity = request.identity
        start_time = time.time()
        result = chain.admit(request)
        duration = time.time() - start_time

        if result.admitted:
            self.logger.info(
                "Admission granted",
                identity=identity,
                decided_by=result.decided_by,
                duration_ms=round(duration * 1000, 3)
            )
        else:
            self.logger.warning(
                "Admission rejected",
                identity=identity,
                reason=result.reason,
                decided_by=result.decided_by,
                duration_ms=round(duration * 1000, 3)
            )

        if self.metrics is not None:
            self.metrics.record_admission(
                admitted=result.admitted,
                duration=duration,
                guard=result.decided_by,
                reason=result.reason
            )
            if result.reason == RATE_LIMIT_EXCEEDED:
                self.metrics.record_rate_limit_hit(result.decided_by or "rate_limit")

        return result
