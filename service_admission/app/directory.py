"""
Identity directory interface and in-memory implementation.
"""

import hmac
import threading
from pathlib import Path
from typing import Dict, Iterator, Optional, Protocol, Union, runtime_checkable

import yaml

from shared.errors import ConfigurationError
from shared.logging import get_logger


@runtime_checkable
class IdentityDirectory(Protocol):
    """Store of registered identities and their secrets."""

    def exists(self, identity: str) -> bool:
        ...

    def matches(self, identity: str, credential: str) -> bool:
        ...


class InMemoryIdentityDirectory:
    """Dictionary-backed identity directory."""

    def __init__(self, users: Optional[Dict[str, str]] = None):
        self._users: Dict[str, str] = dict(users or {})
        self._lock = threading.Lock()
        self.logger = get_logger("admission.directory")

    def register(self, identity: str, credential: str) -> None:
        """Register or replace an identity."""
        if not identity:
            raise ConfigurationError("Identity must not be empty")
        with self._lock:
            self._users[identity] = credential
        self.logger.info("Identity registered", identity=identity)

    def exists(self, identity: str) -> bool:
        return identity in self._users

    def matches(self, identity: str, credential: str) -> bool:
        stored = self._users.get(identity)
        if stored is None:
            return False
        return hmac.compare_digest(stored.encode("utf-8"), credential.encode("utf-8"))

    def __contains__(self, identity: object) -> bool:
        return identity in self._users

    def __len__(self) -> int:
        return len(self._users)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._users))


def load_directory(path: Union[str, Path]) -> InMemoryIdentityDirectory:
    """Build a directory from a YAML mapping of identity to credential."""
    path = Path(path)
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(
            "Identity directory file could not be read",
            details={"path": str(path), "error": str(e)}
        ) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(
            "Identity directory file is not valid YAML",
            details={"path": str(path), "error": str(e)}
        ) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            "Identity directory file must contain a mapping",
            details={"path": str(path)}
        )

    directory = InMemoryIdentityDirectory()
    for identity, credential in data.items():
        if not isinstance(identity, str) or not isinstance(credential, str):
            raise ConfigurationError(
                "Identity directory entries must map strings to strings",
                details={"path": str(path), "identity": str(identity)}
            )
        directory.register(identity, credential)

    return directory
