"""
Async client for the Koordinates geospatial data export API.

Requests exports of Koordinates layers, follows their state and downloads
the finished archives.

Usage:
    from koordinates import KoordinatesClient

    async with KoordinatesClient(host="https://data.linz.govt.nz", api_key=key) as client:
        export = await client.generate_export(50772)
        export = await client.get_export_details(export.id)
        if export.is_complete:
            path = await client.download_export(export.download_url)
"""

from .base_client import AsyncAPIClient
from .client import KoordinatesClient
from .exceptions import (
    AuthenticationError,
    InvalidResponseError,
    KoordinatesAPIError,
    KoordinatesError,
    NotFoundError,
    RateLimitError,
    ServerError,
)
from .models import (
    API_PREFIX,
    CoordinateReferenceSystem,
    ErrorResponse,
    Export,
    ExportDelivery,
    ExportItem,
    ExportOrigin,
    ExportState,
    ExportSummary,
    KoordinatesConfig,
    TimeoutConfig,
    User,
)

__version__ = "0.1.0"

__all__ = [
    # Clients
    "AsyncAPIClient",
    "KoordinatesClient",
    # Exceptions
    "AuthenticationError",
    "InvalidResponseError",
    "KoordinatesAPIError",
    "KoordinatesError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
    # Configuration
    "API_PREFIX",
    "KoordinatesConfig",
    "TimeoutConfig",
    # Models
    "CoordinateReferenceSystem",
    "ErrorResponse",
    "Export",
    "ExportDelivery",
    "ExportItem",
    "ExportOrigin",
    "ExportState",
    "ExportSummary",
    "User",
]
