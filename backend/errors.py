"""Exceptions raised while serving a ranked-keywords lookup.

Each exception carries the HTTP status and the public ``error`` string that
main.py renders into the JSON error body.
"""


class ProxyError(Exception):
    """Base class for errors that map onto a JSON error response."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.error)
        self.message = message or self.error


class MissingDomain(ProxyError):
    """Request body has no usable ``domain``."""

    status_code = 400
    error = "Domain is required"


class Unauthorized(ProxyError):
    """``Authorization`` header does not carry the expected bearer token."""

    status_code = 401
    error = "Unauthorized"


class UpstreamError(ProxyError):
    """Any failure talking to DataForSEO. Rendered with a ``details`` field."""

    status_code = 500
    error = "Failed to fetch keywords"


class UpstreamProtocolError(UpstreamError):
    """DataForSEO answered, but not with a recognizable task envelope."""

    def __init__(self, message: str = "Invalid response from DataForSEO API") -> None:
        super().__init__(message)


class UpstreamTransportFailure(UpstreamError):
    """Network error, timeout or non-2xx status from DataForSEO."""
