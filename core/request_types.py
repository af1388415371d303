"""Shared request data types."""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from core.exceptions import UnsupportedScheme
from core.headers import CORS_HEADERS, HeaderMap

SUPPORTED_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class InboundRequest:
    """Request as handed over by a hosting adapter."""

    method: str = "GET"
    query_params: Mapping[str, str] = field(default_factory=dict)
    headers: HeaderMap = field(default_factory=HeaderMap)
    body: bytes | str | None = None
    body_is_encoded: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.headers, HeaderMap):
            object.__setattr__(self, "headers", HeaderMap(self.headers))


@dataclass(frozen=True)
class DecodedTarget:
    """Validated absolute target URL."""

    url: str
    scheme: str

    def __post_init__(self) -> None:
        if self.scheme not in SUPPORTED_SCHEMES:
            raise UnsupportedScheme(self.scheme)


@dataclass(frozen=True)
class PreparedRequest:
    """Prepared data for an upstream request."""

    method: str
    target: DecodedTarget
    headers: dict[str, str]
    body: bytes | None = None


@dataclass(frozen=True)
class UpstreamResponse:
    """Response received from the target origin."""

    status: int
    headers: Mapping[str, str]
    url: str
    body: bytes = b""
    decoded: bool = False


@dataclass(frozen=True)
class OutboundResponse:
    """Response returned to the caller."""

    status_code: int
    headers: dict[str, str]
    body: str = ""
    is_base64_encoded: bool = False

    @classmethod
    def empty(cls, status_code: int, extra_headers: Mapping[str, str] | None = None) -> "OutboundResponse":
        headers = dict(CORS_HEADERS)
        headers.update(extra_headers or {})
        return cls(status_code=status_code, headers=headers)

    @classmethod
    def json_error(cls, status_code: int, message: str) -> "OutboundResponse":
        headers = {**CORS_HEADERS, "Content-Type": "application/json"}
        return cls(
            status_code=status_code,
            headers=headers,
            body=json.dumps({"error": message}),
        )

    def to_event(self) -> dict[str, Any]:
        """Serverless response envelope."""
        return {
            "statusCode": self.status_code,
            "headers": dict(self.headers),
            "body": self.body,
            "isBase64Encoded": self.is_base64_encoded,
        }
