"""Request method classification - preflight, rejection or forward."""

from dataclasses import dataclass

from core.request_types import OutboundResponse

ALLOWED_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})
ALLOW_HEADER = "GET,HEAD,OPTIONS"


@dataclass(frozen=True)
class MethodDecision:
    """Classification result for a request method.

    `response` is set when the request is answered without contacting upstream.
    """

    method: str
    response: OutboundResponse | None = None

    @property
    def forward(self) -> bool:
        return self.response is None


class MethodClassifier:
    """Decide whether a request is a preflight, rejected, or forwarded."""

    def classify(self, raw_method: str | None) -> MethodDecision:
        method = (raw_method or "GET").upper()
        if method == "OPTIONS":
            return MethodDecision(method, OutboundResponse.empty(204))
        if method not in ALLOWED_METHODS:
            return MethodDecision(method, OutboundResponse.empty(405, {"Allow": ALLOW_HEADER}))
        return MethodDecision(method)
