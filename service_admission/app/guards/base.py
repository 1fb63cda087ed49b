"""
Guard contract shared by every admission check.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

from shared.errors import ConfigurationError


class DecisionKind(str, Enum):
    """Outcome of a single guard evaluation."""
    ADMIT = "admit"
    ADMIT_FINAL = "admit_final"
    REJECT = "reject"


@dataclass(frozen=True)
class AdmissionRequest:
    """Credential-bearing request evaluated by a guard chain."""
    identity: str
    credential: str = field(repr=False)


@dataclass(frozen=True)
class Decision:
    """Verdict returned by ``Guard.evaluate``.

    ``ADMIT`` lets the chain continue, ``ADMIT_FINAL`` approves the request
    and stops the chain, ``REJECT`` denies it and stops the chain.
    """
    kind: DecisionKind
    reason: str = ""

    def __post_init__(self):
        try:
            kind = DecisionKind(self.kind)
        except ValueError as e:
            raise ConfigurationError(
                "Unknown decision kind",
                details={"kind": str(self.kind)}
            ) from e
        object.__setattr__(self, "kind", kind)

        if kind == DecisionKind.REJECT and not self.reason:
            raise ConfigurationError("A rejection requires a reason")

    @classmethod
    def admit(cls) -> "Decision":
        return cls(DecisionKind.ADMIT)

    @classmethod
    def admit_final(cls) -> "Decision":
        return cls(DecisionKind.ADMIT_FINAL)

    @classmethod
    def reject(cls, reason: str) -> "Decision":
        return cls(DecisionKind.REJECT, reason)

    @property
    def is_reject(self) -> bool:
        return self.kind == DecisionKind.REJECT

    @property
    def is_final(self) -> bool:
        return self.kind == DecisionKind.ADMIT_FINAL


class Guard(ABC):
    """A single admission check.

    Guards return a ``Decision`` for every outcome and never raise for
    control flow. A guard that does not apply to a request returns
    ``Decision.admit()`` so later guards still run. Guards may only mutate
    their own state.
    """

    name: str = "guard"

    @abstractmethod
    def evaluate(self, request: AdmissionRequest) -> Decision:
        """Evaluate the request."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
