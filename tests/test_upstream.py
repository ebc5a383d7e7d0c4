import asyncio
import time

import httpx
import pytest

from core.config import UpstreamSettings
from core.exceptions import UpstreamFailure
from services.upstream import UpstreamClient, key_forms

KEY = "upstream-key-xyz"


def _generate(handler, body: bytes = b"{}", timeout: float = 120.0, key: str = KEY):
    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            settings = UpstreamSettings(url="https://upstream.test/v1/gen", timeout=timeout)
            return await UpstreamClient(client, settings).generate_content(body, key)

    return asyncio.run(run())


def test_reply_carries_status_body_and_media_type():
    reply = _generate(
        lambda request: httpx.Response(
            200, content=b'{"ok": true}', headers={"content-type": "application/json; charset=UTF-8"}
        )
    )

    assert reply.status_code == 200
    assert reply.content == b'{"ok": true}'
    assert reply.media_type == "application/json; charset=UTF-8"


def test_request_shape():
    seen: list[httpx.Request] = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={})

    _generate(handler, body=b'{"contents": []}')

    (request,) = seen
    assert str(request.url) == f"https://upstream.test/v1/gen?key={KEY}"
    assert request.content == b'{"contents": []}'
    assert request.headers["content-type"] == "application/json"


def test_status_failure_keeps_upstream_status():
    with pytest.raises(UpstreamFailure) as exc_info:
        _generate(lambda request: httpx.Response(429, json={"error": {"code": 429}}))

    failure = exc_info.value
    assert failure.status_code == 502
    assert failure.upstream_status == 429
    assert failure.detail == {"error": {"code": 429}}
    assert KEY not in failure.log_message
    assert failure.to_envelope() == {"error": "Proxy failed", "detail": {"error": {"code": 429}}}


def test_status_failure_without_body_uses_status_line():
    with pytest.raises(UpstreamFailure) as exc_info:
        _generate(lambda request: httpx.Response(500), key="k3y/with+chars=")

    assert exc_info.value.detail == "500 Internal Server Error"
    assert exc_info.value.log_message == "HTTPStatusError: 500 Internal Server Error"


def test_transport_failure_has_no_upstream_status():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(UpstreamFailure) as exc_info:
        _generate(handler)

    assert exc_info.value.upstream_status is None
    assert exc_info.value.detail == "timed out"
    assert exc_info.value.log_message == "ConnectTimeout: timed out"


def test_transport_failure_redacts_encoded_key():
    key = "k3y/with+chars="

    def handler(request):
        raise httpx.ConnectError(f"cannot reach {request.url}", request=request)

    with pytest.raises(UpstreamFailure) as exc_info:
        _generate(handler, key=key)

    assert exc_info.value.detail == "cannot reach https://upstream.test/v1/gen?key=***"
    assert "k3y" not in exc_info.value.log_message


def test_slow_drip_body_hits_total_deadline():
    async def drip():
        for _ in range(20):
            yield b" "
            await asyncio.sleep(0.05)

    started = time.monotonic()
    with pytest.raises(UpstreamFailure) as exc_info:
        _generate(lambda request: httpx.Response(200, content=drip()), timeout=0.2)
    elapsed = time.monotonic() - started

    assert exc_info.value.detail == "timeout of 0.2s exceeded"
    assert exc_info.value.log_message == "TimeoutError: timeout of 0.2s exceeded"
    assert elapsed < 0.9


def test_key_forms_cover_url_encodings():
    forms = key_forms("k3y/with+chars=")

    assert forms[0] == "k3y%2Fwith%2Bchars%3D"
    assert "k3y/with+chars=" in forms
    assert key_forms("plain") == ("plain",)
    assert key_forms("") == ()
