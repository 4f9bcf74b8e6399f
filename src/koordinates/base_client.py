"""
Base client for the Koordinates REST API.

This module provides the AsyncAPIClient base class that implements:
- httpx.AsyncClient lifecycle management (shared session or per call)
- Authenticated request construction against the versioned API root
- JSON decoding with structural detection of the ``errors`` envelope
- Classification of HTTP status errors for raw (non-JSON) downloads

No retries, rate limiting or caching are performed. Transport errors raised
by httpx propagate to the caller unchanged.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, AsyncIterator, Mapping, Optional, TypeVar

import httpx

from .exceptions import (
    AuthenticationError,
    InvalidResponseError,
    KoordinatesAPIError,
    NotFoundError,
    RateLimitError,
    ServerError,
)
from .models import ErrorResponse, KoordinatesConfig

logger = logging.getLogger(__name__)

ClientT = TypeVar("ClientT", bound="AsyncAPIClient")


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """
    Convert a Retry-After header to seconds.

    Accepts both the delay-seconds and the HTTP-date forms. Dates in the past
    give 0.0, unparseable values give None.
    """
    if not value:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        pass
    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    return max((retry_at - datetime.now(timezone.utc)).total_seconds(), 0.0)


def raise_for_error_envelope(data: Any) -> Any:
    """
    Raise if a decoded JSON body is the service's error envelope.

    Args:
        data: The decoded JSON value.

    Returns:
        ``data`` unchanged when it carries no ``errors`` key.

    Raises:
        KoordinatesAPIError: If ``data`` is an object with an ``errors`` key.
    """
    if isinstance(data, dict) and "errors" in data:
        envelope = ErrorResponse(
            errors=data["errors"], status_code=data.get("status_code")
        )
        raise KoordinatesAPIError(
            envelope.message,
            errors=envelope.errors,
            status_code=envelope.status_code,
        )
    return data


class AsyncAPIClient:
    """
    Base class for async Koordinates API clients.

    Builds authenticated requests from a KoordinatesConfig and turns the
    service's JSON conventions into Python values and exceptions. The client
    may be used as an async context manager, in which case one
    httpx.AsyncClient is shared by every call until exit. Outside a context
    manager each call opens and closes its own httpx.AsyncClient.

    Usage:
        async with KoordinatesClient(host=..., api_key=...) as client:
            exports = await client.list_exports()

    Attributes:
        config: The KoordinatesConfig instance with all settings.
        _client: The shared httpx.AsyncClient (set inside ``async with``).
        _transport: Optional transport handed to every httpx.AsyncClient.
    """

    def __init__(
        self,
        config: KoordinatesConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the API client with configuration.

        Args:
            config: KoordinatesConfig instance with connection settings.
            transport: httpx transport to use instead of the network one.
        """
        self.config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(host={self.config.host!r})"

    async def __aenter__(self: ClientT) -> ClientT:
        """
        Async context manager entry - creates the shared HTTP client.

        Returns:
            Self for use in async with statements.
        """
        self._client = self._create_client()
        logger.info("Opened Koordinates session for %s", self.config.host)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit - closes the shared HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Closed Koordinates session for %s", self.config.host)

    def _create_client(self) -> httpx.AsyncClient:
        """Create an httpx.AsyncClient with the configured settings."""
        kwargs: dict[str, Any] = {"follow_redirects": True}
        if self.config.timeout is not None:
            kwargs["timeout"] = httpx.Timeout(
                connect=self.config.timeout.connect,
                read=self.config.timeout.read,
                write=self.config.timeout.write,
                pool=self.config.timeout.pool,
            )
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        """Yield the shared client, or a temporary one closed afterwards."""
        if self._client is not None:
            yield self._client
            return
        client = self._create_client()
        try:
            yield client
        finally:
            await client.aclose()

    def _auth_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"key {self.config.api_key.get_secret_value()}",
            "User-Agent": self.config.user_agent,
        }

    def build_headers(
        self, headers: Optional[Mapping[str, str]] = None
    ) -> httpx.Headers:
        """
        Build the headers for an API request.

        Args:
            headers: Caller headers, applied last so they override defaults
                whatever their capitalisation.

        Returns:
            Header mapping with content type, authorization and user agent.
        """
        merged = httpx.Headers({"Content-Type": "application/json", **self._auth_headers()})
        if headers:
            merged.update(headers)
        return merged

    def _classify_http_error(self, response: httpx.Response, url: str) -> Exception:
        """
        Convert a non-2xx response to the appropriate custom exception.

        Args:
            response: The httpx response with an error status.
            url: The URL that was requested.

        Returns:
            Appropriate custom exception for the status code.
        """
        status = response.status_code

        if status == 429:
            return RateLimitError(
                f"Rate limit exceeded for {url}",
                retry_after=parse_retry_after(response.headers.get("Retry-After")),
            )
        elif status in (401, 403):
            return AuthenticationError(
                f"Authentication failed for {url}: {status}",
                status_code=status,
            )
        elif status in (404, 410):
            return NotFoundError(f"Resource not found: {url}", url=url)
        elif status >= 500:
            return ServerError(
                f"Server error {status} for {url}",
                status_code=status,
            )
        else:
            return InvalidResponseError(f"HTTP {status} error for {url}")

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """
        Make an API request and return the decoded JSON body.

        The HTTP status code is not consulted: a body holding an ``errors``
        key is a failure whatever the status, any other body is returned as
        decoded.

        Args:
            method: HTTP method (GET, POST, etc.).
            path: Path below the API root, starting with a slash.
            json: Optional request body, serialized as JSON.
            headers: Extra headers overriding the defaults.

        Returns:
            The decoded JSON value.

        Raises:
            KoordinatesAPIError: If the body is an error envelope.
            InvalidResponseError: If the body is not valid JSON.
        """
        url = f"{self.config.api_url}{path}"
        logger.debug("Request: %s %s", method, url)

        async with self._session() as client:
            response = await client.request(
                method, url, json=json, headers=self.build_headers(headers)
            )

        logger.debug("Response: %s %s -> %d", method, url, response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise InvalidResponseError(
                f"Failed to parse JSON from {url}",
                response_text=response.text,
                cause=e,
            )

        return raise_for_error_envelope(data)
