"""Header policy: forwarded request headers and relayed response headers."""

from collections.abc import Iterator, Mapping

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

CORS_HEADERS: Mapping[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": (
        "Content-Type, Range, Accept, Accept-Encoding, Accept-Language, "
        "User-Agent, Origin, Referer"
    ),
    "Access-Control-Allow-Methods": "GET,HEAD,OPTIONS",
    "Access-Control-Expose-Headers": "Content-Type, Content-Length, Accept-Ranges, Content-Range",
}

# Caller headers that may reach the target without being named in `h`.
FORWARDED_REQUEST_HEADERS = (
    "range",
    "accept",
    "accept-encoding",
    "accept-language",
    "referer",
    "origin",
    "user-agent",
)

PASSTHROUGH_RESPONSE_HEADERS = (
    "content-type",
    "content-length",
    "accept-ranges",
    "content-range",
    "cache-control",
    "etag",
    "last-modified",
    "expires",
)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class HeaderMap(Mapping[str, str]):
    """Read-only header mapping with lowercase keys.

    If the source carries one name in several casings, the exactly-lowercase
    entry wins, otherwise the first one seen.
    """

    def __init__(self, headers: Mapping[str, str] | None = None) -> None:
        self._items: dict[str, str] = {}
        for key, value in (headers or {}).items():
            lower = key.lower()
            if key == lower or lower not in self._items:
                self._items[lower] = value

    def __getitem__(self, key: str) -> str:
        return self._items[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"HeaderMap({self._items!r})"


def title_case(name: str) -> str:
    """Re-case a header name: `last-modified` -> `Last-Modified`."""
    return "-".join(chunk[:1].upper() + chunk[1:] for chunk in name.lower().split("-"))


class HeaderBuilder:
    """Build forwarded request headers and caller-facing response headers."""

    def build_forward_headers(
        self,
        explicit: Mapping[str, str],
        incoming: Mapping[str, str],
    ) -> dict[str, str]:
        """Merge the decoded `h` blob, whitelisted caller headers and the default UA."""
        forwarded = {key.lower(): value for key, value in explicit.items()}
        incoming = incoming if isinstance(incoming, HeaderMap) else HeaderMap(incoming)

        for name in FORWARDED_REQUEST_HEADERS:
            if forwarded.get(name):
                continue
            value = incoming.get(name)
            if value:
                forwarded[name] = value

        if not forwarded.get("user-agent"):
            forwarded["user-agent"] = DEFAULT_USER_AGENT
        return forwarded

    def build_response_headers(
        self,
        upstream: Mapping[str, str],
        final_url: str,
    ) -> dict[str, str]:
        """Copy the passthrough whitelist from upstream and add CORS + X-Final-Url."""
        upstream = upstream if isinstance(upstream, HeaderMap) else HeaderMap(upstream)
        headers = dict(CORS_HEADERS)
        for name in PASSTHROUGH_RESPONSE_HEADERS:
            value = upstream.get(name)
            if value:
                headers[title_case(name)] = value
        headers["X-Final-Url"] = final_url
        headers.setdefault("Content-Type", DEFAULT_CONTENT_TYPE)
        return headers
