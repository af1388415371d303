"""
Test Configuration Module
"""

import base64
from collections.abc import Callable

import httpx
import pytest
import pytest_asyncio

from core.config import UpstreamSettings
from services.gateway import GatewayService
from services.upstream import UpstreamClient, build_http_client


class RecordingLogger:
    """RequestLogger that keeps every call for assertions."""

    def __init__(self):
        self.forwarded: list[dict] = []
        self.rejected: list[tuple[str, int, str]] = []
        self.errors: list[tuple[str, int, str]] = []

    def log_forward(self, method, target_url, status, *, final_url, size=None, headers=None):
        self.forwarded.append(
            {
                "method": method,
                "target_url": target_url,
                "status": status,
                "final_url": final_url,
                "size": size,
                "headers": headers,
            }
        )

    def log_rejected(self, method, status, message):
        self.rejected.append((method, status, message))

    def log_error(self, target_url, status, message):
        self.errors.append((target_url, status, message))


@pytest.fixture
def b64() -> Callable[[str], str]:
    """Encode text the way browser clients build the query parameters"""
    return lambda text: base64.b64encode(text.encode("utf-8")).decode("ascii")


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest_asyncio.fixture
async def make_gateway(logger):
    """Build GatewayService instances backed by an httpx.MockTransport"""
    clients: list[httpx.AsyncClient] = []

    def factory(handler) -> GatewayService:
        client = build_http_client(UpstreamSettings(), transport=httpx.MockTransport(handler))
        clients.append(client)
        return GatewayService(UpstreamClient(client), logger)

    yield factory

    for client in clients:
        await client.aclose()
