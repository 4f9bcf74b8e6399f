"""
Custom exceptions for the Koordinates API client.

This module defines a hierarchy of exceptions for the error conditions
reported by the Koordinates API or detected while handling its responses.
Network-level failures raised by httpx and filesystem errors raised while
saving downloads are not wrapped; they reach the caller unchanged.
"""

from typing import Any, Optional


class KoordinatesError(Exception):
    """Base exception for all Koordinates client errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        """
        Initialize the client error.

        Args:
            message: Human-readable error description.
            cause: The underlying exception that caused this error, if any.
        """
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message} (caused by: {self.cause})"
        return self.message


class KoordinatesAPIError(KoordinatesError):
    """Raised when the API answers with an ``errors`` envelope."""

    def __init__(
        self,
        message: str,
        errors: Any = None,
        status_code: Optional[int] = None,
    ) -> None:
        """
        Initialize the API error.

        Args:
            message: Message derived from the error envelope.
            errors: The raw ``errors`` value from the response body.
            status_code: The ``status_code`` field of the envelope, if present.
        """
        super().__init__(message)
        self.errors = errors
        self.status_code = status_code


class InvalidResponseError(KoordinatesError):
    """Raised when the server returns an invalid or unparseable response."""

    def __init__(
        self,
        message: str,
        response_text: Optional[str] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        """
        Initialize the invalid response error.

        Args:
            message: Human-readable error description.
            response_text: The raw response text that couldn't be parsed.
            cause: The underlying exception that caused this error.
        """
        super().__init__(message, cause)
        self.response_text = response_text[:500] if response_text else None


class AuthenticationError(KoordinatesError):
    """Raised when a download is refused (401/403)."""

    def __init__(
        self,
        message: str,
        status_code: int,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, cause)
        self.status_code = status_code


class NotFoundError(KoordinatesError):
    """Raised when a download URL no longer resolves (404/410)."""

    def __init__(
        self,
        message: str,
        url: str,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, cause)
        self.url = url


class RateLimitError(KoordinatesError):
    """Raised when the download host answers 429."""

    def __init__(
        self,
        message: str,
        retry_after: Optional[float] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        """
        Initialize the rate limit error.

        Args:
            message: Human-readable error description.
            retry_after: Server-suggested wait in seconds. Informational only,
                the client never retries.
            cause: The underlying exception that caused this error.
        """
        super().__init__(message, cause)
        self.retry_after = retry_after


class ServerError(KoordinatesError):
    """Raised when the download host returns a 5xx error."""

    def __init__(
        self,
        message: str,
        status_code: int,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, cause)
        self.status_code = status_code
