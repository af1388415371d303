"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from api.handlers import handle_proxy
from core.config import Config
from core.protocols import RequestLogger
from services.gateway import GatewayService
from services.upstream import UpstreamClient, build_http_client


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = build_http_client(config.upstream, transport=transport)
        app.state.gateway = GatewayService(UpstreamClient(client), logger)
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title="m3u8 proxy", version="0.1.0", lifespan=lifespan)

    @app.get("/health")
    async def health():
        return {"ok": True}

    # No method list: every method reaches MethodClassifier, which owns the 405
    app.add_route("/", handle_proxy, methods=None, include_in_schema=False)

    return app
