"""Serverless entry point (API Gateway / Netlify style events)."""

import asyncio
from typing import Any

import httpx

from core.config import Config
from core.protocols import RequestLogger
from core.request_types import InboundRequest
from services.gateway import GatewayService
from services.upstream import UpstreamClient, build_http_client
from ui.dashboard import ConsoleLogger


def event_to_request(event: dict[str, Any]) -> InboundRequest:
    """Build an InboundRequest from a serverless event."""
    return InboundRequest(
        method=event.get("httpMethod") or "GET",
        query_params=event.get("queryStringParameters") or {},
        headers=event.get("headers") or {},
        body=event.get("body"),
        body_is_encoded=bool(event.get("isBase64Encoded")),
    )


async def handle_event(
    event: dict[str, Any],
    config: Config | None = None,
    logger: RequestLogger | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Run one event through the gateway with a client scoped to the invocation."""
    config = config or Config()
    logger = logger or ConsoleLogger(log_file=None)
    async with build_http_client(config.upstream, transport=transport) as client:
        gateway = GatewayService(UpstreamClient(client), logger)
        response = await gateway.handle(event_to_request(event))
    return response.to_event()


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """Synchronous handler for runtimes that do not await."""
    return asyncio.run(handle_event(event))
