"""Translation of upstream responses into caller-facing responses."""

import base64

from core.headers import HeaderBuilder
from core.request_types import OutboundResponse, UpstreamResponse


class ResponseTranslator:
    """Map upstream status, headers and body onto an OutboundResponse."""

    def __init__(self, header_builder: HeaderBuilder | None = None) -> None:
        self._headers = header_builder or HeaderBuilder()

    def translate(
        self,
        method: str,
        upstream: UpstreamResponse,
        requested_url: str,
    ) -> OutboundResponse:
        headers = self._headers.build_response_headers(
            upstream.headers,
            upstream.url or requested_url,
        )

        if method == "HEAD":
            return OutboundResponse(status_code=upstream.status, headers=headers)

        # A decoded body no longer matches the upstream (compressed) length
        if "Content-Length" not in headers or upstream.decoded:
            headers["Content-Length"] = str(len(upstream.body))

        return OutboundResponse(
            status_code=upstream.status,
            headers=headers,
            body=base64.b64encode(upstream.body).decode("ascii"),
            is_base64_encoded=True,
        )
