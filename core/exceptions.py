"""Custom exception hierarchy for the image generation proxy."""

from typing import Any


class ProxyError(Exception):
    """Base exception for errors rendered to the caller as a JSON envelope.

    Attributes:
        message: Short error text placed under ``error``
        detail: Optional payload placed under ``detail``
    """

    status_code = 500

    def __init__(self, message: str, detail: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_envelope(self) -> dict[str, Any]:
        return {"error": self.message, "detail": self.detail}


class MethodNotAllowed(ProxyError):
    """Request method is neither POST nor OPTIONS."""

    status_code = 405

    def __init__(self) -> None:
        super().__init__("Method not allowed")


class Unauthorized(ProxyError):
    """Backend key header is missing or wrong."""

    status_code = 401

    def __init__(self) -> None:
        super().__init__("Unauthorized: invalid backend key")


class ConfigMissing(ProxyError):
    """Raised when the upstream API key is not configured."""

    status_code = 500

    def __init__(self) -> None:
        super().__init__("GEN_API_KEY missing on server")


class UpstreamFailure(ProxyError):
    """Raised when the upstream call fails, times out or returns non-2xx.

    Attributes:
        upstream_status: HTTP status code from upstream, if a response arrived
        log_message: Redacted one-line description for diagnostics
    """

    status_code = 502

    def __init__(
        self,
        detail: Any,
        log_message: str,
        upstream_status: int | None = None,
    ) -> None:
        super().__init__("Proxy failed", detail)
        self.log_message = log_message
        self.upstream_status = upstream_status
