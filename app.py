"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from starlette.types import Receive, Scope, Send

from api.handlers import handle_generate
from core.config import ProxyConfig
from core.protocols import RequestLogger
from services.upstream import UpstreamClient

GENERATE_PATH = "/api/generate"


class GenerateEndpoint:
    """ASGI endpoint passing requests of any method to handle_generate.

    Starlette only restricts methods for function endpoints, so a callable
    instance sees TRACE, PROPFIND and custom verbs too and can answer them
    with the proxy's own 405 envelope and CORS headers.
    """

    def __init__(self, config: ProxyConfig, logger: RequestLogger) -> None:
        self._config = config
        self._logger = logger

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive, send)
        response = await handle_generate(request, self._config, self._logger)
        await response(scope, receive, send)


def create_app(
    config: ProxyConfig,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(max_connections=100, max_keepalive_connections=20)
        client = httpx.AsyncClient(
            timeout=config.upstream.timeout,
            limits=limits,
            transport=transport,
        )
        app.state.upstream_client = UpstreamClient(client, config.upstream)
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(
        title="Image Generation Proxy",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.add_route(GENERATE_PATH, GenerateEndpoint(config, logger), include_in_schema=False)

    return app
