"""Request pipeline: classify, decode, assemble headers, forward, translate."""

from core.classifier import MethodClassifier
from core.decoding import decode_body, decode_header_blob, decode_target_url
from core.exceptions import GatewayError, UpstreamUnreachable
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import InboundRequest, OutboundResponse, PreparedRequest
from services.translator import ResponseTranslator
from services.upstream import UpstreamClient

_BODYLESS_METHODS = ("GET", "HEAD")


class GatewayService:
    """Turn an InboundRequest into an OutboundResponse."""

    def __init__(
        self,
        upstream: UpstreamClient,
        logger: RequestLogger,
        classifier: MethodClassifier | None = None,
        header_builder: HeaderBuilder | None = None,
        translator: ResponseTranslator | None = None,
    ) -> None:
        self._upstream = upstream
        self._logger = logger
        self._classifier = classifier or MethodClassifier()
        self._headers = header_builder or HeaderBuilder()
        self._translator = translator or ResponseTranslator(self._headers)

    def prepare(self, method: str, inbound: InboundRequest) -> PreparedRequest:
        """Decode and validate the query parameters into an upstream request."""
        target = decode_target_url(inbound.query_params.get("url"))
        explicit = decode_header_blob(inbound.query_params.get("h"))
        headers = self._headers.build_forward_headers(explicit, inbound.headers)

        body = None
        if method not in _BODYLESS_METHODS:
            body = decode_body(inbound.body, inbound.body_is_encoded)
        return PreparedRequest(method=method, target=target, headers=headers, body=body)

    async def handle(self, inbound: InboundRequest) -> OutboundResponse:
        decision = self._classifier.classify(inbound.method)
        if decision.response is not None:
            if decision.response.status_code == 405:
                self._logger.log_rejected(decision.method, 405, "Method not allowed")
            return decision.response

        method = decision.method
        try:
            prepared = self.prepare(method, inbound)
        except GatewayError as e:
            self._logger.log_rejected(method, e.status_code, e.message)
            return OutboundResponse.json_error(e.status_code, e.message)

        try:
            upstream = await self._upstream.forward(prepared)
        except UpstreamUnreachable as e:
            self._logger.log_error(prepared.target.url, e.status_code, e.message)
            return OutboundResponse.json_error(e.status_code, e.message)

        response = self._translator.translate(method, upstream, prepared.target.url)
        self._logger.log_forward(
            method,
            prepared.target.url,
            response.status_code,
            final_url=response.headers["X-Final-Url"],
            size=len(upstream.body) if method != "HEAD" else None,
            headers=prepared.headers,
        )
        return response
