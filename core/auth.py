"""Shared-secret authentication for incoming requests."""

import secrets

BACKEND_KEY_HEADER = "x-backend-key"


def is_authorized(presented: str | None, expected: str) -> bool:
    """Check the presented backend key against the configured one.

    An empty configured key rejects everything.
    """
    if not presented or not expected:
        return False
    return secrets.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))
