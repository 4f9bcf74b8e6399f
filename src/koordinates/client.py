"""
Koordinates exports API client.

This module provides the KoordinatesClient for requesting exports of
Koordinates layers, following their progress and downloading the finished
archives to local disk.

Koordinates API reference: https://apidocs.koordinates.com/
"""

import logging
import tempfile
import uuid
from pathlib import Path
from typing import Any, Optional, Union

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from .base_client import AsyncAPIClient
from .exceptions import InvalidResponseError
from .models import Export, ExportSummary, KoordinatesConfig

logger = logging.getLogger(__name__)

DEFAULT_CRS = "EPSG:4326"
DEFAULT_VECTOR_FORMAT = "text/csv"
DOWNLOAD_SUFFIX = ".zip"
DOWNLOAD_CHUNK_SIZE = 64 * 1024
NO_BODY_STATUSES = (204, 205, 304)

_EXPORT_LIST = TypeAdapter(list[ExportSummary])


class KoordinatesClient(AsyncAPIClient):
    """
    Async client for the Koordinates exports API.

    Usage:
        client = KoordinatesClient(host="https://data.linz.govt.nz", api_key=key)

        export = await client.generate_export(50772)
        export = await client.get_export_details(export.id)
        if export.is_complete:
            path = await client.download_export(export.download_url)

    Successful responses are validated into the models from
    ``koordinates.models`` unless the config sets ``validate_responses`` to
    False, in which case the decoded JSON is returned untouched.
    """

    def __init__(
        self,
        config: Optional[KoordinatesConfig] = None,
        *,
        host: Optional[str] = None,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the Koordinates client.

        Args:
            config: Complete client configuration. Mutually exclusive with
                ``host``/``api_key``.
            host: Base URL of the Koordinates site.
            api_key: API key for the site.
            transport: httpx transport to use instead of the network one.
        """
        if config is None:
            if host is None or api_key is None:
                raise TypeError("KoordinatesClient needs either config or host and api_key")
            config = KoordinatesConfig(host=host, api_key=api_key)
        elif host is not None or api_key is not None:
            raise TypeError("Pass either config or host and api_key, not both")
        super().__init__(config, transport=transport)

    def _parse(self, data: Any, model: Union[type[BaseModel], TypeAdapter], url: str) -> Any:
        if not self.config.validate_responses:
            return data
        try:
            if isinstance(model, TypeAdapter):
                return model.validate_python(data)
            return model.model_validate(data)
        except ValidationError as e:
            raise InvalidResponseError(
                f"Unexpected response shape from {url}",
                response_text=repr(data),
                cause=e,
            )

    async def generate_export(
        self,
        layer_id: int,
        *,
        crs: str = DEFAULT_CRS,
        vector_format: str = DEFAULT_VECTOR_FORMAT,
    ) -> Export:
        """
        Request a new export of a layer.

        Args:
            layer_id: ID of the layer to export.
            crs: Coordinate reference system of the exported data.
            vector_format: MIME type for vector data.

        Returns:
            The created export, usually still processing.
        """
        body = {
            "crs": crs,
            "items": [{"item": self.config.layer_url(layer_id)}],
            "formats": {"vector": vector_format},
        }
        data = await self.request("POST", "/exports/", json=body)
        export = self._parse(data, Export, "/exports/")
        logger.info("Requested export of layer %d", layer_id)
        return export

    async def list_exports(self) -> list[ExportSummary]:
        """
        List the exports visible to the API key.

        Only the first page returned by the service is included.
        """
        data = await self.request("GET", "/exports")
        return self._parse(data, _EXPORT_LIST, "/exports")

    async def get_export_details(self, export_id: int) -> Export:
        """Fetch the current state and progress of an export."""
        path = f"/exports/{export_id}"
        data = await self.request("GET", path)
        return self._parse(data, Export, path)

    async def download_export(
        self,
        download_url: str,
        *,
        suffix: str = DOWNLOAD_SUFFIX,
        directory: Optional[Union[str, Path]] = None,
    ) -> Path:
        """
        Save a completed export archive to a new temporary file.

        The file is created exclusively under a fresh random name, so
        concurrent downloads never share a path. It is closed before the
        path is returned. On failure a partial file may remain; removing it
        is up to the caller, as is removing the finished file.

        Args:
            download_url: The ``download_url`` of a complete export.
            suffix: File name suffix.
            directory: Where to create the file. Defaults to the system
                temporary directory.

        Returns:
            Absolute path of the downloaded file.

        Raises:
            FileExistsError: If the generated path already exists.
            InvalidResponseError: If the response has no body.
            KoordinatesError: A classified error for non-2xx responses.
        """
        target_dir = Path(directory) if directory is not None else Path(tempfile.gettempdir())
        path = (target_dir / f"{uuid.uuid4()}{suffix}").absolute()

        logger.debug("Downloading %s", download_url)

        async with self._session() as client:
            async with client.stream(
                "GET", download_url, headers=self._auth_headers()
            ) as response:
                if response.status_code in NO_BODY_STATUSES:
                    raise InvalidResponseError(
                        f"No body in download response from {download_url}"
                    )
                if response.is_error:
                    raise self._classify_http_error(response, download_url)

                size = 0
                with open(path, "xb") as f:
                    async for chunk in response.aiter_bytes(DOWNLOAD_CHUNK_SIZE):
                        f.write(chunk)
                        size += len(chunk)

        logger.info("Downloaded %d bytes to %s", size, path)
        return path
