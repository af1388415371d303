"""HTTP forwarding to the target origin."""

import httpx

from core.config import UpstreamSettings
from core.exceptions import UpstreamUnreachable
from core.request_types import PreparedRequest, UpstreamResponse

_IDENTITY_ENCODINGS = ("", "identity")


def build_http_client(
    settings: UpstreamSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the outbound client shared by all requests of one process."""
    limits = httpx.Limits(
        max_connections=settings.max_connections,
        max_keepalive_connections=settings.max_keepalive_connections,
    )
    return httpx.AsyncClient(
        timeout=settings.timeout,
        limits=limits,
        follow_redirects=True,
        max_redirects=settings.max_redirects,
        verify=settings.verify_tls,
        transport=transport,
    )


class UpstreamClient:
    """Replay prepared requests against their target and buffer the response."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def forward(self, prepared: PreparedRequest) -> UpstreamResponse:
        """Send the request, following redirects.

        HEAD responses are closed without reading the body.
        """
        try:
            # Header values that are not ASCII fail while the request is built
            request = self._client.build_request(
                prepared.method,
                prepared.target.url,
                headers=prepared.headers,
                content=prepared.body,
            )
            response = await self._client.send(request, stream=True, follow_redirects=True)
        except (httpx.RequestError, UnicodeEncodeError) as e:
            raise UpstreamUnreachable(str(e)) from e

        try:
            body = b"" if prepared.method == "HEAD" else await response.aread()
        except httpx.RequestError as e:
            raise UpstreamUnreachable(str(e)) from e
        finally:
            await response.aclose()

        encoding = response.headers.get("content-encoding", "").strip().lower()
        return UpstreamResponse(
            status=response.status_code,
            headers=response.headers,
            url=str(response.url),
            body=body,
            decoded=bool(body) and encoding not in _IDENTITY_ENCODINGS,
        )
