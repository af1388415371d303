"""Custom exception hierarchy for the m3u8 proxy."""


class ProxyError(Exception):
    """Base exception for all proxy errors."""


class GatewayError(ProxyError):
    """Raised when a request cannot be forwarded.

    Attributes:
        message: Error message returned to the caller
        status_code: HTTP status code of the error response
    """

    status_code = 400

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class MissingParameter(GatewayError):
    """Required query parameter is absent."""

    def __init__(self, name: str = "url") -> None:
        super().__init__(f"Missing {name} parameter")
        self.name = name


class InvalidEncoding(GatewayError):
    """Target URL or request body could not be decoded."""

    def __init__(self, message: str = "Invalid url parameter") -> None:
        super().__init__(message)


class UnsupportedScheme(InvalidEncoding):
    """Target URL uses a scheme other than http or https."""

    def __init__(self, scheme: str = "") -> None:
        super().__init__("Only http/https protocols are supported")
        self.scheme = scheme


class InvalidHeaderPayload(GatewayError):
    """The `h` parameter is not base64 encoded JSON."""

    def __init__(self) -> None:
        super().__init__("Invalid h parameter")


class UpstreamUnreachable(GatewayError):
    """Raised when the target origin cannot be contacted."""

    status_code = 502

    def __init__(self, reason: str) -> None:
        super().__init__(f"Upstream request failed: {reason or 'unknown'}")
        self.reason = reason
