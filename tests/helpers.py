"""Constants and fakes shared by the test modules."""

from collections.abc import Callable

import httpx

from core.config import ProxyConfig

BACKEND_KEY = "backend-secret-123"
GEN_API_KEY = "AIzaSy-test-upstream-key"
ENDPOINT = "/api/generate"


class RecordingLogger:
    """RequestLogger that keeps every call in memory."""

    def __init__(self):
        self.forwarded: list[int] = []
        self.rejected: list[int] = []
        self.errors: list[tuple[str, int, str]] = []

    def log_forward(self, status: int, elapsed: float) -> None:
        self.forwarded.append(status)

    def log_rejected(self, status: int) -> None:
        self.rejected.append(status)

    def log_error(self, route: str, status: int, message: str) -> None:
        self.errors.append((route, status, message))


class UpstreamStub:
    """MockTransport handler that records requests and replays a canned answer."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"candidates": []}
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)


def make_config(**overrides) -> ProxyConfig:
    values = {"backend_key": BACKEND_KEY, "gen_api_key": GEN_API_KEY}
    values.update(overrides)
    return ProxyConfig.model_validate(values)
