"""FastAPI route handlers."""

import base64

from fastapi import Request, Response

from core.headers import HeaderMap
from core.request_types import InboundRequest, OutboundResponse

MAX_BODY_SIZE = 50 * 1024 * 1024  # 50MB


async def build_inbound_request(request: Request, body: bytes | None = None) -> InboundRequest:
    """Convert a Starlette request into the adapter-neutral InboundRequest."""
    if body is None:
        body = await request.body()
    return InboundRequest(
        method=request.method,
        query_params=dict(request.query_params),
        headers=HeaderMap(request.headers),
        body=body or None,
    )


def to_http_response(outbound: OutboundResponse) -> Response:
    """Unwrap base64 framing; plain HTTP carries binary bodies as-is."""
    if outbound.is_base64_encoded:
        content = base64.b64decode(outbound.body)
    else:
        content = outbound.body.encode("utf-8")
    return Response(
        content=content,
        status_code=outbound.status_code,
        headers=outbound.headers,
    )


async def handle_proxy(request: Request) -> Response:
    """Handle the forwarding endpoint."""
    content_length = request.headers.get("content-length", "")
    if content_length.isdigit() and int(content_length) > MAX_BODY_SIZE:
        return to_http_response(OutboundResponse.json_error(413, "Request body too large"))

    # Chunked bodies carry no Content-Length
    body = await request.body()
    if len(body) > MAX_BODY_SIZE:
        return to_http_response(OutboundResponse.json_error(413, "Request body too large"))

    inbound = await build_inbound_request(request, body)
    outbound = await request.app.state.gateway.handle(inbound)
    return to_http_response(outbound)
