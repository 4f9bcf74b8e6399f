"""Tests for configuration and response models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from koordinates import (
    ErrorResponse,
    Export,
    ExportState,
    ExportSummary,
    KoordinatesConfig,
)


def test_config_builds_api_and_layer_urls():
    config = KoordinatesConfig(host="https://data.example.com", api_key="secret")

    assert config.api_url == "https://data.example.com/services/api/v1.x"
    assert config.layer_url(42) == "https://data.example.com/services/api/v1.x/layers/42/"


def test_config_is_immutable_and_hides_key():
    config = KoordinatesConfig(host="https://data.example.com", api_key="secret")

    with pytest.raises(ValidationError):
        config.host = "https://other.example.com"
    assert "secret" not in repr(config)
    assert config.api_key.get_secret_value() == "secret"


def test_config_rejects_empty_host():
    with pytest.raises(ValidationError):
        KoordinatesConfig(host="", api_key="secret")


def test_error_message_prefers_detail():
    envelope = ErrorResponse(errors={"detail": "Not found.", "items": ["ignored"]})

    assert envelope.message == "Not found."


def test_error_message_joins_items():
    envelope = ErrorResponse(errors={"items": ["Layer is private", "Quota exceeded"]})

    assert envelope.message == "Layer is private, Quota exceeded"


def test_error_message_falls_back_to_compact_json():
    envelope = ErrorResponse(errors={"crs": ["Unknown CRS"], "items": []})

    assert envelope.message == '{"crs":["Unknown CRS"],"items":[]}'


def test_error_message_ignores_empty_detail():
    envelope = ErrorResponse(errors={"detail": "", "items": ["bad layer"]})

    assert envelope.message == "bad layer"


def test_error_status_code_must_be_integer():
    assert ErrorResponse(errors={}, status_code=404).status_code == 404
    assert ErrorResponse(errors={}, status_code="404").status_code is None


def test_export_parses_full_detail(export_payload):
    export = Export.model_validate(export_payload)

    assert export.state is ExportState.COMPLETE
    assert export.is_complete
    assert export.user.seat_type == "editor"
    assert export.items[0].short_format == "CSV"
    assert export.crs.srid == 4326
    assert export.from_.owner_short == "LINZ"
    assert export.progress == 1.0
    assert export.invoice is None


def test_export_keeps_unknown_fields(export_payload):
    export_payload["region"] = "nz"

    export = Export.model_validate(export_payload)

    assert export.model_dump(by_alias=True)["region"] == "nz"


def test_new_export_without_detail_fields_validates():
    export = Export.model_validate(
        {
            "id": 5,
            "name": "layer-42",
            "state": "processing",
            "url": "https://data.example.com/services/api/v1.x/exports/5/",
            "download_url": None,
        }
    )

    assert not export.is_complete
    assert export.items == []


def test_progress_outside_unit_interval_is_rejected(export_payload):
    export_payload["progress"] = 1.5

    with pytest.raises(ValidationError):
        Export.model_validate(export_payload)


def test_summary_rejects_unknown_state():
    with pytest.raises(ValidationError):
        ExportSummary.model_validate(
            {"id": 1, "name": "x", "state": "queued", "url": "https://example.com/"}
        )
