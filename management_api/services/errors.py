"""
Service layer exceptions.

Every failure that crosses a bound executor is one of these. Each error
carries a human readable ``message``, a machine checkable ``name`` and, when
the remote answered, its ``status_code``.
"""

from asyncio import CancelledError


class ManagementError(Exception):
    """Base exception for management API client errors."""

    retryable: bool = False

    def __init__(
        self,
        message: str,
        name: str | None = None,
        status_code: int | None = None,
        retry_after: float | None = None,
    ):
        self.message = message
        self.name = name or type(self).__name__
        self.status_code = status_code
        self.retry_after = retry_after
        super().__init__(message)


class ConfigurationError(ManagementError):
    """Invalid construction input or unresolved path parameter."""

    pass


class AuthError(ManagementError):
    """Credential exchange failed."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        transient: bool = False,
    ):
        super().__init__(message, status_code=status_code)
        self.retryable = transient


class NetworkError(ManagementError):
    """Transport failure, no response was received."""

    retryable = True

    def __init__(self, message: str):
        super().__init__(message, name="NetworkError")


class RequestTimeoutError(NetworkError):
    """Request timed out."""

    def __init__(self, url: str, timeout: float | None):
        self.timeout = timeout
        super().__init__(f"Request to '{url}' timed out after {timeout}s")


class ApiError(ManagementError):
    """The remote API answered with a structured error."""

    def __init__(
        self,
        message: str,
        name: str,
        status_code: int,
        retry_after: float | None = None,
        error_code: str | None = None,
        retry_hint: bool = False,
    ):
        self.error_code = error_code
        super().__init__(
            message, name=name, status_code=status_code, retry_after=retry_after
        )
        # Server errors are only transient when the remote sent Retry-After
        self.retryable = status_code >= 500 and retry_hint


class RateLimitError(ApiError):
    """Rate limit exceeded."""

    def __init__(
        self,
        message: str,
        name: str = "RateLimitError",
        retry_after: float | None = None,
        error_code: str | None = None,
    ):
        super().__init__(
            message,
            name=name,
            status_code=429,
            retry_after=retry_after,
            error_code=error_code,
        )
        self.retryable = True


__all__ = [
    "ManagementError",
    "ConfigurationError",
    "AuthError",
    "NetworkError",
    "RequestTimeoutError",
    "ApiError",
    "RateLimitError",
    "CancelledError",
]
