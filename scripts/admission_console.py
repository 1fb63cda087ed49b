#!/usr/bin/env python3
"""
Interactive console login against a locally built guard chain.

Prompts for an email and password until the chain admits them. Useful for
trying out guard ordering and rate limits without running the HTTP service.
"""

import argparse
import os
import sys
from pathlib import Path

from shared.config import get_config
from shared.logging import configure_logging
from service_admission.app.directory import InMemoryIdentityDirectory, load_directory
from service_admission.app.factory import build_chain
from service_admission.app.gateway import AdmissionGateway
from service_admission.app.console import login_loop

DEMO_USERS = {
    "admin@example.com": "admin_pass",
    "user@example.com": "user_pass",
}


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Log in through the admission guard chain.")
    parser.add_argument("--directory-file", type=Path, default=os.getenv("ADMISSION_DIRECTORY_FILE"), help="YAML mapping of identity to credential (demo users when omitted)")
    parser.add_argument("--limit", type=int, default=None, help="Requests admitted per window")
    parser.add_argument("--window-ms", type=int, default=None, help="Rate limit window in milliseconds")
    parser.add_argument("--scope", choices=["global", "identity"], default=None, help="Rate limit scope")
    parser.add_argument("--log-level", default="warning", help="Log level for guard output")
    return parser.parse_args()


def main() -> int:
    args = _parse_args()

    overrides = {"log_level": args.log_level}
    if args.limit is not None:
        overrides["rate_limit"] = args.limit
    if args.window_ms is not None:
        overrides["rate_limit_window_ms"] = args.window_ms
    if args.scope is not None:
        overrides["rate_limit_scope"] = args.scope

    try:
        config = get_config("admission", 0, **overrides)
        configure_logging("admission", config.log_level)

        if args.directory_file:
            directory = load_directory(args.directory_file)
        else:
            directory = InMemoryIdentityDirectory(DEMO_USERS)

        gateway = AdmissionGateway(build_chain(config, directory))
    except Exception as exc:  # pragma: no cover - CLI surface
        print(f"[admission] failed to start: {exc}", file=sys.stderr)
        return 1

    try:
        result = login_loop(gateway)
    except KeyboardInterrupt:
        return 130

    return 0 if result is not None else 1


if __name__ == "__main__":
    raise SystemExit(main())
