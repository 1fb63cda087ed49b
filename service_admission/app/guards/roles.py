"""
Role check that fast-paths privileged identities.
"""

from typing import Callable, Iterable, Optional

from shared.errors import ConfigurationError
from shared.logging import get_logger
from .base import AdmissionRequest, Decision, Guard


class RoleGuard(Guard):
    """Admits privileged identities outright and defers everyone else.

    Guards placed after this one never see a privileged identity, so its
    position in the chain decides which checks administrators skip.
    """

    name = "role"

    def __init__(self, privileged: Optional[Iterable[str]] = None,
                 predicate: Optional[Callable[[str], bool]] = None):
        if (privileged is None) == (predicate is None):
            raise ConfigurationError("RoleGuard requires exactly one of 'privileged' or 'predicate'")

        if privileged is not None:
            if isinstance(privileged, str):
                privileged = [privileged]
            identities = frozenset(privileged)
            if not identities:
                raise ConfigurationError("RoleGuard requires at least one privileged identity")
            self.privileged = identities
            self._is_privileged = identities.__contains__
        else:
            if not callable(predicate):
                raise ConfigurationError("RoleGuard predicate must be callable")
            self.privileged = None
            self._is_privileged = predicate

        self.logger = get_logger("admission.role_guard")

    def evaluate(self, request: AdmissionRequest) -> Decision:
        if self._is_privileged(request.identity):
            self.logger.info("Privileged identity admitted", identity=request.identity)
            return Decision.admit_final()
        return Decision.admit()
