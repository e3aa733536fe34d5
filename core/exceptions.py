"""Custom exception hierarchy for the external URL proxy."""

from typing import Any

USAGE = "POST /proxy?url=https://external-api-url"
EXAMPLE = "POST /proxy?url=https://api.example.com/endpoint"


class ProxyError(Exception):
    """Base exception for all proxy errors."""

    status_code = 500
    error = "Internal server error"

    def to_payload(self) -> dict[str, Any]:
        """Render the JSON body sent back to the caller."""
        return {"error": self.error, "message": str(self)}


class ConfigurationError(ProxyError):
    """Raised when configuration is missing or invalid."""


class TargetError(ProxyError):
    """Raised when the target URL supplied by the caller is unusable.

    Attributes:
        target: Raw value of the ``url`` query parameter (may be None)
    """

    status_code = 400

    def __init__(self, message: str, target: str | None = None) -> None:
        super().__init__(message)
        self.target = target


class MissingTarget(TargetError):
    """No ``url`` query parameter was supplied."""

    error = "Missing URL parameter"

    def __init__(self) -> None:
        super().__init__("Missing URL parameter")

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.error, "usage": USAGE, "example": EXAMPLE}


class InvalidTarget(TargetError):
    """The ``url`` query parameter is not an absolute http(s) URL."""

    error = "Invalid URL format"

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.error, "target": self.target}


class UpstreamError(ProxyError):
    """Raised when the target could not be reached or answered badly.

    Attributes:
        target: Target URL the request was sent to
    """

    status_code = 502
    error = "Failed to reach external URL"

    def __init__(self, message: str, target: str | None = None) -> None:
        super().__init__(message)
        self.target = target


class UnreachableTarget(UpstreamError):
    """DNS failure, refused connection, TLS or protocol error."""


class TargetTimeout(UpstreamError):
    """The round trip did not finish within the forwarding budget."""


class ResponseTooLarge(UpstreamError):
    """Target response body exceeds the configured size limit."""


class InternalFault(ProxyError):
    """Unexpected error while building or relaying a request."""


class RequestTooLarge(ProxyError):
    """Request body exceeds size limit."""

    status_code = 413
    error = "Request body too large"

    def __init__(self, limit: int) -> None:
        super().__init__(f"Request body exceeds {limit} bytes")
        self.limit = limit

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.error, "limit": self.limit}
