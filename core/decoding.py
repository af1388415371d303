"""Decoding of the base64 query parameters and request bodies."""

import base64
import json
from typing import Any

import httpx

from core.exceptions import InvalidEncoding, InvalidHeaderPayload, MissingParameter, UnsupportedScheme
from core.request_types import SUPPORTED_SCHEMES, DecodedTarget

_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")


def decode_base64(value: str, *, from_query: bool = True) -> bytes:
    """Decode standard or URL-safe base64, restoring stripped padding.

    Query string un-escaping turns `+` into a space, so spaces are put back
    for query values. Other input outside the alphabet raises ValueError.
    """
    if from_query:
        cleaned = value.replace(" ", "+").strip()
    else:
        cleaned = "".join(value.split())
    cleaned = cleaned.translate(_URLSAFE_TO_STANDARD)
    cleaned += "=" * (-len(cleaned) % 4)
    return base64.b64decode(cleaned, validate=True)


def decode_base64_text(value: str) -> str:
    return decode_base64(value).decode("utf-8")


def decode_target_url(encoded: str | None) -> DecodedTarget:
    """Decode the `url` parameter into a validated absolute http(s) URL."""
    if not encoded:
        raise MissingParameter("url")

    try:
        text = decode_base64_text(encoded).strip()
        url = httpx.URL(text)
    except (ValueError, httpx.InvalidURL):
        raise InvalidEncoding() from None

    scheme = url.scheme.lower()
    if not scheme:
        raise InvalidEncoding()
    if scheme not in SUPPORTED_SCHEMES:
        raise UnsupportedScheme(scheme)
    if not url.host:
        raise InvalidEncoding()
    return DecodedTarget(url=str(url), scheme=scheme)


def decode_header_blob(encoded: str | None) -> dict[str, str]:
    """Decode the `h` parameter into lowercase header overrides.

    Valid JSON that is not an object yields no overrides rather than an error.
    """
    if not encoded:
        return {}

    try:
        parsed: Any = json.loads(decode_base64_text(encoded))
    except ValueError:
        raise InvalidHeaderPayload() from None

    if not isinstance(parsed, dict):
        return {}
    return {
        str(key).lower(): value
        for key, value in parsed.items()
        if isinstance(value, str)
    }


def decode_body(body: bytes | str | None, is_encoded: bool) -> bytes | None:
    """Turn an adapter-supplied body into raw bytes."""
    if not body:
        return None
    if is_encoded:
        try:
            return decode_base64(body.decode("ascii") if isinstance(body, bytes) else body, from_query=False)
        except ValueError:
            raise InvalidEncoding("Invalid request body") from None
    if isinstance(body, str):
        return body.encode("utf-8")
    return body
