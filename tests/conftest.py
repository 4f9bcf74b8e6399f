"""Shared fixtures for the Koordinates client tests."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from koordinates import KoordinatesClient

HOST = "https://koordinates.example.com"
API_KEY = "0123456789abcdef"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)


def json_response(payload: Any, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)

    return handler


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content)


@pytest.fixture
def make_client() -> Callable[..., tuple[KoordinatesClient, RecordingTransport]]:
    def factory(handler, **kwargs) -> tuple[KoordinatesClient, RecordingTransport]:
        transport = RecordingTransport(handler)
        client = KoordinatesClient(host=HOST, api_key=API_KEY, transport=transport, **kwargs)
        return client, transport

    return factory


@pytest.fixture
def export_payload() -> dict[str, Any]:
    return {
        "id": 1234,
        "name": "nz-building-outlines",
        "state": "complete",
        "url": f"{HOST}/services/api/v1.x/exports/1234/",
        "download_url": f"{HOST}/services/api/v1.x/exports/1234/download/",
        "created_at": "2024-03-01T02:15:43.123456Z",
        "created_via": "api",
        "user": {
            "id": 77,
            "url": f"{HOST}/services/api/v1.x/users/77/",
            "first_name": "Sam",
            "last_name": "Tester",
            "country": "NZ",
            "geotag": "Wellington",
            "email": "sam@example.com",
            "is_locked": False,
            "is_site_admin": False,
            "seat_type": "editor",
            "date_joined": "2020-01-01T00:00:00Z",
        },
        "delivery": {"method": "download"},
        "items": [
            {
                "item": f"{HOST}/services/api/v1.x/layers/42/",
                "color": "#ff0000",
                "title": "NZ Building Outlines",
                "format": "text/csv",
                "short_format": "CSV",
                "data_type": "vector",
                "data_type_label": "Vector",
            }
        ],
        "crs": {
            "id": "EPSG:4326",
            "url": f"{HOST}/services/api/v1.x/coordinate-systems/EPSG:4326/",
            "name": "WGS 84",
            "kind": "geographic",
            "unit_horizontal": "degree",
            "unit_vertical": "",
            "url_external": "https://epsg.io/4326",
            "component_horizontal": None,
            "component_vertical": None,
            "srid": 4326,
        },
        "extent": None,
        "formats": {"vector": "text/csv"},
        "options": {},
        "size_estimate_unzipped": 1048576,
        "size_complete_zipped": 204800,
        "size_complete_unzipped": 1048000,
        "is_cropped": False,
        "invoice": None,
        "from": {
            "name": "LINZ Data Service",
            "domain": "data.linz.govt.nz",
            "owner": "Land Information New Zealand",
            "owner_short": "LINZ",
            "copyright": "CC BY 4.0",
        },
        "progress": 1.0,
        "downloaded_at": None,
        "finished_at": "2024-03-01T02:17:01Z",
    }
