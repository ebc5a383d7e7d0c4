"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard or PlainLogger)."""

    def log_forward(self, status: int, elapsed: float) -> None: ...
    def log_rejected(self, status: int) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...
