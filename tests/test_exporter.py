import json

import pytest

from radio_export.services.exporter import (
    EMPTY_EXPORT_MESSAGE,
    ExportService,
    JsonExportWriter,
)
from radio_export.services.materializer import ExportOptions
from radio_export.store import CatalogueStore


def _service(catalogue, output_dir):
    return ExportService(
        CatalogueStore(catalogue),
        ExportOptions(default_network_code="1234567"),
        JsonExportWriter(output_dir),
    )


def test_export_writes_one_file_per_platform(seed_catalogue, tmp_path):
    output_dir = tmp_path / "exports"
    summary = _service(seed_catalogue, output_dir).export("ep-chillout")

    assert summary["profileId"] == "ep-chillout"
    assert summary["stationCount"] == 2
    assert [item["fileName"] for item in summary["files"]] == [
        "chillout-mix-ios.json",
        "chillout-mix-android.json",
        "chillout-mix-homeassistant.json",
    ]

    written = json.loads((output_dir / "chillout-mix-android.json").read_text(encoding="utf-8"))
    assert written["app"] == {"id": "chillout-essentials", "platform": "android", "version": 1}
    assert written["ads"]["mode"] == "vast"
    assert "settings" not in written
    assert written["stations"][1]["adMeta"] == {"section": "chillout"}


def test_empty_export_is_rejected(seed_catalogue, tmp_path):
    store = CatalogueStore(seed_catalogue)
    store.save_profile("ep-empty", {"name": "Empty"})
    service = ExportService(store, ExportOptions(), JsonExportWriter(tmp_path))

    with pytest.raises(ValueError, match=EMPTY_EXPORT_MESSAGE):
        service.export("ep-empty")
    assert list(tmp_path.iterdir()) == []


def test_preview_does_not_write(seed_catalogue, tmp_path):
    output_dir = tmp_path / "exports"
    targets = _service(seed_catalogue, output_dir).preview("ep-news")

    assert [target.platform for target in targets] == ["web"]
    assert not output_dir.exists()
