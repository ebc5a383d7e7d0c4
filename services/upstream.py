"""HTTP forwarding to the image generation API."""

import asyncio
import json
from typing import Any
from urllib.parse import quote

import httpx

from core.config import UpstreamSettings
from core.exceptions import UpstreamFailure
from core.request_types import UpstreamReply
from ui.log_utils import redact, redact_value


class UpstreamClient:
    """Forward request bodies to the generateContent endpoint."""

    def __init__(self, client: httpx.AsyncClient, settings: UpstreamSettings) -> None:
        self._client = client
        self._settings = settings

    async def generate_content(self, body: bytes, api_key: str) -> UpstreamReply:
        """POST ``body`` upstream once and return the reply.

        The whole exchange, body download included, must finish within
        ``settings.timeout`` seconds. httpx's own timeout only bounds each
        connect/read step.

        Raises UpstreamFailure on transport errors, timeouts and non-2xx replies.
        """
        secrets = key_forms(api_key)
        try:
            async with asyncio.timeout(self._settings.timeout):
                response = await self._client.post(
                    self._settings.url,
                    params={"key": api_key},
                    content=body,
                    headers={"Content-Type": "application/json"},
                    timeout=self._settings.timeout,
                )
            response.raise_for_status()
        except TimeoutError:
            raise _deadline_failure(self._settings.timeout) from None
        except httpx.HTTPStatusError as e:
            raise _status_failure(e.response, secrets) from None
        except httpx.RequestError as e:
            raise _request_failure(e, secrets) from None

        return UpstreamReply(
            status_code=response.status_code,
            content=response.content,
            media_type=response.headers.get("content-type", "application/json"),
        )


def key_forms(api_key: str) -> tuple[str, ...]:
    """Return the key as given plus the encodings it takes inside a URL."""
    forms = {
        api_key,
        quote(api_key, safe=""),
        str(httpx.QueryParams(key=api_key)).removeprefix("key="),
    }
    return tuple(sorted((form for form in forms if form), key=len, reverse=True))


def _status_failure(response: httpx.Response, secrets: tuple[str, ...]) -> UpstreamFailure:
    """Map a non-2xx upstream reply, preferring its body as detail."""
    body = _error_body(response)
    message = f"{response.status_code} {response.reason_phrase}".strip()
    detail = body if body is not None else message
    log_message = f"HTTPStatusError: {message}"
    if response.text:
        log_message += f" | {response.text}"
    return UpstreamFailure(
        detail=redact_value(detail, secrets),
        log_message=redact(log_message, secrets),
        upstream_status=response.status_code,
    )


def _request_failure(error: httpx.RequestError, secrets: tuple[str, ...]) -> UpstreamFailure:
    """Map a transport error or httpx timeout."""
    message = _error_message(error)
    return UpstreamFailure(
        detail=redact(message, secrets),
        log_message=redact(f"{type(error).__name__}: {message}", secrets),
    )


def _deadline_failure(timeout: float) -> UpstreamFailure:
    message = f"timeout of {timeout:g}s exceeded"
    return UpstreamFailure(detail=message, log_message=f"TimeoutError: {message}")


def _error_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


def _error_message(error: Exception) -> str:
    # Some httpx timeouts carry an empty message
    return str(error) or type(error).__name__
