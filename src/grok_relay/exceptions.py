"""Errors raised while relaying a request."""


class RelayError(Exception):
    """Base exception rendered to the caller as an ``{"error": ...}`` body."""

    status_code = 500
    error_type = "api_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthorizationError(RelayError):
    """Raised when the inbound request carries no Authorization header."""

    status_code = 401
    error_type = "authorization_error"

    def __init__(self, message: str = "Authorization header is required") -> None:
        super().__init__(message)


class NotFoundError(RelayError):
    """Raised for any method/path pair the relay does not serve."""

    status_code = 404
    error_type = "not_found"

    def __init__(self, message: str = "The requested endpoint was not found") -> None:
        super().__init__(message)


class ApiError(RelayError):
    """Catch-all for failures while handling a relayed call."""
    pass


class UpstreamError(ApiError):
    """Raised when the upstream provider answers with a non-2xx status."""

    def __init__(self, status_code: int, text: str) -> None:
        super().__init__(f"Grok API error ({status_code}): {text}")
        self.upstream_status = status_code
        self.upstream_text = text


class UpstreamTimeoutError(ApiError):
    """Raised when the upstream call does not finish before the deadline."""

    def __init__(
        self,
        message: str = "Request timed out: the API did not respond within the expected time",
    ) -> None:
        super().__init__(message)
