"""
Ordered guard chain and its evaluation algorithm.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

from shared.errors import ConfigurationError
from shared.logging import get_logger
from .guards.base import AdmissionRequest, Decision, DecisionKind, Guard

GUARD_ERROR = "guard error"


@dataclass(frozen=True)
class AdmissionResult:
    """Outcome of one admission call."""
    admitted: bool
    reason: str = ""
    decided_by: Optional[str] = None


class GuardChain:
    """Immutable, ordered sequence of guards.

    Every guard runs in construction order until one rejects or admits
    finally. A chain that reaches its end without objection admits the
    request, so an empty chain admits everything.
    """

    def __init__(self, guards: Iterable[Guard] = ()):
        guards = tuple(guards)
        for position, guard in enumerate(guards):
            if not isinstance(guard, Guard):
                raise ConfigurationError(
                    "Chain elements must be guards",
                    details={"position": position, "type": type(guard).__name__}
                )
        self._guards: Tuple[Guard, ...] = guards
        self.logger = get_logger("admission.chain")

    @property
    def guards(self) -> Tuple[Guard, ...]:
        return self._guards

    def with_guards(self, guards: Iterable[Guard]) -> "GuardChain":
        """Build a new chain; this one is left untouched."""
        return GuardChain(guards)

    def __len__(self) -> int:
        return len(self._guards)

    def __iter__(self) -> Iterator[Guard]:
        return iter(self._guards)

    def admit(self, request: AdmissionRequest) -> AdmissionResult:
        """Evaluate guards in order and return the first terminal decision."""
        for guard in self._guards:
            decision = self._evaluate(guard, request)

            if decision.kind == DecisionKind.REJECT:
                self.logger.debug(
                    "Guard rejected request",
                    guard=guard.name,
                    identity=request.identity,
                    reason=decision.reason
                )
                return AdmissionResult(admitted=False, reason=decision.reason, decided_by=guard.name)

            if decision.kind == DecisionKind.ADMIT_FINAL:
                self.logger.debug(
                    "Guard admitted request finally",
                    guard=guard.name,
                    identity=request.identity
                )
                return AdmissionResult(admitted=True, decided_by=guard.name)

            if decision.kind != DecisionKind.ADMIT:
                self.logger.error(
                    "Guard returned an unknown decision kind",
                    guard=guard.name,
                    kind=str(decision.kind)
                )
                return AdmissionResult(admitted=False, reason=GUARD_ERROR, decided_by=guard.name)

        return AdmissionResult(admitted=True)

    def _evaluate(self, guard: Guard, request: AdmissionRequest) -> Decision:
        # A misbehaving guard rejects instead of unwinding past admit()
        try:
            decision = guard.evaluate(request)
        except Exception as e:
            self.logger.error(
                "Guard evaluation error",
                guard=guard.name,
                identity=request.identity,
                error=str(e),
                exc_info=True
            )
            return Decision.reject(GUARD_ERROR)

        if not isinstance(decision, Decision):
            self.logger.error(
                "Guard returned an invalid decision",
                guard=guard.name,
                decision_type=type(decision).__name__
            )
            return Decision.reject(GUARD_ERROR)

        return decision
