"""Shared request data types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UpstreamReply:
    """Successful upstream response, relayed to the caller unmodified."""

    status_code: int
    content: bytes
    media_type: str = "application/json"
