"""
Error taxonomy for feed retrieval.

Every failure carries a human-readable ``message``; the state containers
only ever display that message, so no structured error codes are exposed
beyond the exception type itself.
"""

NETWORK_ERROR_MESSAGE = "Please check your internet connection"
SERVER_ERROR_MESSAGE = "Something went wrong. Please try again"
UNAUTHORIZED_MESSAGE = "Session expired. Please login again"


class FeedError(Exception):
    """Base class for feed retrieval failures."""

    retryable = True

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TransportError(FeedError):
    """Raised when the request never produced a response (network, timeout)."""


class HttpStatusError(FeedError):
    """Raised for non-2xx responses."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class ApplicationError(FeedError):
    """Raised when the backend answers ``success: false``."""


class ResponseShapeError(FeedError):
    """Raised when the response body is not the expected JSON envelope."""


class AuthenticationRequiredError(FeedError):
    """Raised before any request when there is no authenticated session."""

    retryable = False
