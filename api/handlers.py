"""FastAPI route handlers."""

import time

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from core.auth import BACKEND_KEY_HEADER, is_authorized
from core.config import ProxyConfig
from core.cors import CorsPolicy
from core.exceptions import (
    ConfigMissing,
    MethodNotAllowed,
    ProxyError,
    Unauthorized,
    UpstreamFailure,
)
from core.protocols import RequestLogger


async def handle_generate(
    request: Request,
    config: ProxyConfig,
    logger: RequestLogger,
) -> Response:
    """Authenticate the caller and forward the body to the image API."""
    cors_headers = CorsPolicy.from_config(config).headers_for(request.headers.get("origin"))

    if request.method == "OPTIONS":
        return Response(status_code=204, headers=cors_headers)

    try:
        if request.method != "POST":
            raise MethodNotAllowed()
        if not is_authorized(
            request.headers.get(BACKEND_KEY_HEADER),
            config.backend_key.get_secret_value(),
        ):
            raise Unauthorized()
        api_key = config.gen_api_key.get_secret_value()
        if not api_key:
            raise ConfigMissing()

        body = await request.body()
        upstream = request.app.state.upstream_client
        started = time.monotonic()
        reply = await upstream.generate_content(body, api_key)
    except UpstreamFailure as e:
        logger.log_error("upstream", e.status_code, e.log_message)
        return _error_response(e, cors_headers)
    except ProxyError as e:
        logger.log_rejected(e.status_code)
        return _error_response(e, cors_headers)

    logger.log_forward(reply.status_code, time.monotonic() - started)
    return Response(
        content=reply.content,
        status_code=reply.status_code,
        media_type=reply.media_type,
        headers=cors_headers,
    )


def _error_response(error: ProxyError, cors_headers: dict[str, str]) -> JSONResponse:
    return JSONResponse(
        content=error.to_envelope(),
        status_code=error.status_code,
        headers=cors_headers,
    )
