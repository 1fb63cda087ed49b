"""
Credential verification against the identity directory.
"""

from shared.errors import ConfigurationError
from shared.logging import get_logger
from ..directory import IdentityDirectory
from .base import AdmissionRequest, Decision, Guard

UNKNOWN_IDENTITY = "unknown identity"
INVALID_CREDENTIAL = "invalid credential"
DIRECTORY_UNAVAILABLE = "identity directory unavailable"


class CredentialGuard(Guard):
    """Rejects unknown identities and mismatched credentials."""

    name = "credentials"

    def __init__(self, directory: IdentityDirectory):
        if directory is None:
            raise ConfigurationError("CredentialGuard requires an identity directory")
        self.directory = directory
        self.logger = get_logger("admission.credential_guard")

    def evaluate(self, request: AdmissionRequest) -> Decision:
        try:
            if not self.directory.exists(request.identity):
                self.logger.info("Identity not registered", identity=request.identity)
                return Decision.reject(UNKNOWN_IDENTITY)

            if not self.directory.matches(request.identity, request.credential):
                self.logger.info("Credential mismatch", identity=request.identity)
                return Decision.reject(INVALID_CREDENTIAL)
        except Exception as e:
            self.logger.error(
                "Identity directory lookup failed",
                identity=request.identity,
                error=str(e)
            )
            return Decision.reject(DIRECTORY_UNAVAILABLE)

        return Decision.admit()
