"""
Pydantic models for Koordinates client configuration and API responses.

The response models mirror the JSON documents returned by the exports
endpoints. They are permissive about extra keys so that fields added by the
service survive validation, and frozen because they are read-only views of
remote state.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

API_PREFIX = "/services/api/v1.x"
DEFAULT_USER_AGENT = "https://npm.im/koordinates-api"


class TimeoutConfig(BaseModel):
    """Configuration for HTTP request timeouts."""

    model_config = ConfigDict(frozen=True)

    connect: float = Field(
        default=10.0,
        gt=0,
        le=60.0,
        description="Timeout for establishing connection in seconds",
    )
    read: float = Field(
        default=60.0,
        gt=0,
        le=600.0,
        description="Timeout for reading response in seconds",
    )
    write: float = Field(
        default=10.0,
        gt=0,
        le=60.0,
        description="Timeout for writing request in seconds",
    )
    pool: float = Field(
        default=30.0,
        gt=0,
        le=60.0,
        description="Timeout for acquiring connection from pool in seconds",
    )


class KoordinatesConfig(BaseModel):
    """
    Connection settings for a Koordinates client.

    Set once when the client is constructed and never mutated afterwards.
    The host is used verbatim, so it should not end with a slash.
    """

    model_config = ConfigDict(frozen=True)

    host: str = Field(
        ...,
        min_length=1,
        description="Base URL of the Koordinates site, e.g. https://data.linz.govt.nz",
    )
    api_key: SecretStr = Field(..., description="API key sent as 'Authorization: key ...'")
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header for requests",
    )
    timeout: Optional[TimeoutConfig] = Field(
        default=None,
        description="Explicit timeouts; None keeps the httpx defaults",
    )
    validate_responses: bool = Field(
        default=True,
        description="Validate successful responses against the response models",
    )

    @property
    def api_url(self) -> str:
        """Root URL of the versioned API."""
        return f"{self.host}{API_PREFIX}"

    def layer_url(self, layer_id: int) -> str:
        """API URL identifying a layer, as expected in export items."""
        return f"{self.api_url}/layers/{layer_id}/"


class ExportState(str, Enum):
    """Lifecycle states of an export job."""

    COMPLETE = "complete"
    PROCESSING = "processing"
    ERROR = "error"
    GONE = "gone"
    CANCELLED = "cancelled"


class _APIModel(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)


class User(_APIModel):
    """Account that requested an export."""

    id: int
    url: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    country: Optional[str] = None
    geotag: Optional[str] = None
    email: Optional[str] = None
    is_locked: Optional[bool] = None
    is_site_admin: Optional[bool] = None
    seat_type: Optional[str] = None
    date_joined: Optional[datetime] = None


class ExportItem(_APIModel):
    """A single exported item and the format it is delivered in."""

    item: str
    color: Optional[str] = None
    title: Optional[str] = None
    format: Optional[str] = None
    short_format: Optional[str] = None
    data_type: Optional[str] = None
    data_type_label: Optional[str] = None


class CoordinateReferenceSystem(_APIModel):
    id: str
    url: Optional[str] = None
    name: Optional[str] = None
    kind: Optional[str] = None
    unit_horizontal: Optional[str] = None
    unit_vertical: Optional[str] = None
    url_external: Optional[str] = None
    component_horizontal: Optional[Any] = None
    component_vertical: Optional[Any] = None
    srid: Optional[int] = None


class ExportOrigin(_APIModel):
    """Provenance of the exported data (the ``from`` block)."""

    name: Optional[str] = None
    domain: Optional[str] = None
    owner: Optional[str] = None
    owner_short: Optional[str] = None
    copyright: Optional[str] = None


class ExportDelivery(_APIModel):
    method: str = "download"


class ExportSummary(_APIModel):
    """Export job as it appears in the export listing."""

    id: int
    name: str
    state: ExportState
    url: str
    download_url: Optional[str] = None
    created_at: Optional[datetime] = None
    created_via: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        """True once the archive can be downloaded."""
        return self.state == ExportState.COMPLETE and bool(self.download_url)


class Export(ExportSummary):
    """
    Full detail of an export job.

    Detail fields are optional because a job that has just been created
    does not carry sizes, timestamps or provenance yet.
    """

    user: Optional[User] = None
    delivery: Optional[ExportDelivery] = None
    items: list[ExportItem] = Field(default_factory=list)
    crs: Optional[CoordinateReferenceSystem] = None
    extent: Optional[Any] = None
    formats: dict[str, str] = Field(default_factory=dict)
    options: Optional[Any] = None
    size_estimate_unzipped: Optional[int] = None
    size_complete_zipped: Optional[int] = None
    size_complete_unzipped: Optional[int] = None
    is_cropped: Optional[bool] = None
    invoice: None = None
    from_: Optional[ExportOrigin] = Field(default=None, alias="from")
    progress: Optional[float] = Field(default=None, ge=0, le=1)
    downloaded_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None


class ErrorResponse(BaseModel):
    """
    The service's error envelope.

    ``errors`` is kept as the raw decoded value because the service does not
    always send an object there.
    """

    errors: Any
    status_code: Optional[int] = None

    @field_validator("status_code", mode="before")
    @classmethod
    def drop_non_integer_status(cls, v: Any) -> Optional[int]:
        """Ignore status codes that are not integers."""
        if isinstance(v, bool) or not isinstance(v, int):
            return None
        return v

    @property
    def detail(self) -> Optional[Any]:
        if isinstance(self.errors, dict):
            return self.errors.get("detail")
        return None

    @property
    def items(self) -> Optional[list[Any]]:
        if isinstance(self.errors, dict) and isinstance(self.errors.get("items"), list):
            return self.errors["items"]
        return None

    @property
    def message(self) -> str:
        """
        Human-readable message for the envelope.

        The ``detail`` string when present, else the ``items`` joined with
        ", ", else the compact JSON encoding of ``errors``.
        """
        if self.detail:
            return str(self.detail)
        if self.items:
            joined = ", ".join(str(item) for item in self.items)
            if joined:
                return joined
        return json.dumps(self.errors, separators=(",", ":"), ensure_ascii=False)
