"""
Tests for the httpx-backed transport.

httpx.MockTransport stands in for the network so status handling and
error mapping can be checked without a server.
"""

import asyncio

import httpx
import pytest

from collection_runner.config import Settings
from collection_runner.exceptions import TransportError
from collection_runner.services.transport import (
    HttpxTransport,
    TransportRequest,
    TransportResponse,
    create_client,
)


def _send(handler, request, fail_on_http_error=True):
    """Send one request through an HttpxTransport over a mock handler."""
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            transport = HttpxTransport(client, fail_on_http_error=fail_on_http_error)
            return await transport.send(request)

    return asyncio.run(_run())


class TestSuccessfulResponses:

    def test_returns_status_and_body(self):
        response = _send(
            lambda request: httpx.Response(200, text='{"ok": true}'),
            TransportRequest(method="GET", url="https://api.test/ok"),
        )

        assert response == TransportResponse(status_code=200, body='{"ok": true}')

    def test_sends_method_headers_and_body(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = request.content.decode()
            return httpx.Response(201)

        _send(handler, TransportRequest(
            method="POST",
            url="https://api.test/items",
            headers={"Authorization": "Bearer abc"},
            body='{"name": "widget"}',
        ))

        assert seen == {
            "method": "POST",
            "url": "https://api.test/items",
            "auth": "Bearer abc",
            "body": '{"name": "widget"}',
        }


class TestHttpErrorPolicy:

    @pytest.mark.parametrize("status_code", [400, 404, 500, 503])
    def test_error_status_raises_by_default(self, status_code):
        with pytest.raises(TransportError) as exc_info:
            _send(
                lambda request: httpx.Response(status_code, text="nope"),
                TransportRequest(method="GET", url="https://api.test/fail"),
            )

        assert exc_info.value.status_code == status_code
        assert exc_info.value.body == "nope"
        assert str(status_code) in exc_info.value.message

    @pytest.mark.parametrize("status_code", [400, 404, 500])
    def test_error_status_passes_through_when_allowed(self, status_code):
        response = _send(
            lambda request: httpx.Response(status_code, text="nope"),
            TransportRequest(method="GET", url="https://api.test/fail"),
            fail_on_http_error=False,
        )

        assert response == TransportResponse(status_code=status_code, body="nope")

    def test_with_http_error_policy_shares_client(self):
        async def _run():
            handler = lambda request: httpx.Response(500, text="boom")
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
                strict = HttpxTransport(client)
                lenient = strict.with_http_error_policy(False)
                return await lenient.send(TransportRequest(method="GET", url="https://api.test"))

        assert asyncio.run(_run()).status_code == 500


class TestNetworkErrors:

    def test_connect_error(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        with pytest.raises(TransportError) as exc_info:
            _send(handler, TransportRequest(method="GET", url="https://down.test"))

        assert exc_info.value.message.startswith("Failed to connect to server")
        assert exc_info.value.status_code is None
        assert exc_info.value.body is None

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(TransportError, match="Request timed out"):
            _send(handler, TransportRequest(method="GET", url="https://slow.test"))

    def test_other_http_errors(self):
        def handler(request):
            raise httpx.RemoteProtocolError("Server disconnected", request=request)

        with pytest.raises(TransportError, match="HTTP error occurred: Server disconnected"):
            _send(handler, TransportRequest(method="GET", url="https://flaky.test"))


def test_create_client_uses_timeout():
    client = create_client(Settings(request_timeout=5.0))
    try:
        assert client.timeout.read == 5.0
        assert client.follow_redirects is True
    finally:
        asyncio.run(client.aclose())
