"""
Interactive login loop over an admission gateway.
"""

from typing import Callable, Optional

from .chain import AdmissionResult
from .gateway import AdmissionGateway
from .guards.roles import RoleGuard


def login_loop(gateway: AdmissionGateway,
               read: Callable[[str], str] = input,
               write: Callable[[str], None] = print,
               max_attempts: Optional[int] = None) -> Optional[AdmissionResult]:
    """Prompt for credentials until admitted.

    Returns the admitting result, or ``None`` when ``max_attempts`` runs out
    or input ends.
    """
    attempts = 0
    while max_attempts is None or attempts < max_attempts:
        attempts += 1
        try:
            identity = read("Enter email: ").strip()
            credential = read("Input password: ")
        except EOFError:
            return None

        result = gateway.admit(identity, credential)
        if result.admitted:
            if result.decided_by == RoleGuard.name:
                write("Hello, admin!")
            else:
                write("Hello, user!")
            write("Authorization has been successful!")
            return result

        write(f"Access denied: {result.reason}")

    return None
