"""Shared fixtures for proxy tests."""

from contextlib import ExitStack

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from tests.helpers import RecordingLogger, UpstreamStub, make_config


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def make_client(logger, upstream):
    """Build a TestClient around an app with the given config overrides."""
    with ExitStack() as stack:
        def _make(**overrides) -> TestClient:
            app = create_app(make_config(**overrides), logger, transport=httpx.MockTransport(upstream))
            return stack.enter_context(TestClient(app))

        yield _make


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()
