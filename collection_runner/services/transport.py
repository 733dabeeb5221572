"""
HTTP transport for sending requests.

The runner only depends on the Transport protocol: send a request, get a
response or a TransportError. HttpxTransport implements it on top of a
shared httpx.AsyncClient and decides whether 4xx/5xx responses count as
errors.
"""

from dataclasses import dataclass, field
from typing import Protocol

import httpx

from ..config import Settings
from ..exceptions import TransportError


@dataclass(frozen=True)
class TransportRequest:
    """A fully prepared request."""
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None


@dataclass(frozen=True)
class TransportResponse:
    """A response as seen by the runner."""
    status_code: int
    body: str | None = None


class Transport(Protocol):
    async def send(self, request: TransportRequest) -> TransportResponse:
        ...


def create_client(settings: Settings) -> httpx.AsyncClient:
    """Create the HTTP client shared by every request in a batch."""
    return httpx.AsyncClient(timeout=settings.request_timeout, follow_redirects=True)


class HttpxTransport:
    """
    Transport backed by httpx.

    Args:
        client: Shared async client
        fail_on_http_error: Raise TransportError for 4xx/5xx responses
    """

    def __init__(self, client: httpx.AsyncClient, fail_on_http_error: bool = True) -> None:
        self._client = client
        self._fail_on_http_error = fail_on_http_error

    async def send(self, request: TransportRequest) -> TransportResponse:
        try:
            response = await self._client.request(
                method=request.method,
                url=request.url,
                headers=request.headers,
                content=request.body,
            )
            if self._fail_on_http_error:
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"Request failed with status code {e.response.status_code}",
                status_code=e.response.status_code,
                body=e.response.text,
            ) from e
        except httpx.TimeoutException as e:
            raise TransportError("Request timed out") from e
        except httpx.ConnectError as e:
            raise TransportError(f"Failed to connect to server: {e}") from e
        except httpx.InvalidURL as e:
            raise TransportError(f"Invalid URL: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error occurred: {e}") from e

        return TransportResponse(status_code=response.status_code, body=response.text)

    def with_http_error_policy(self, fail_on_http_error: bool) -> "HttpxTransport":
        """Return a transport sharing this client with a different status policy."""
        return HttpxTransport(self._client, fail_on_http_error)
