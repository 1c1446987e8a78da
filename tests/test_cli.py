import json
from pathlib import Path

import pytest

from radio_export.config import Settings
from webradio_exporter import cli

SEED_PATH = Path(__file__).resolve().parents[1] / "data" / "seed.json"


@pytest.fixture
def export_settings(tmp_path, monkeypatch):
    settings = Settings(
        _env_file=None,
        SEED_DATA_PATH=SEED_PATH,
        EXPORT_OUTPUT_DIR=tmp_path / "out",
    )
    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    return settings


def test_export_command_writes_files(export_settings, capsys):
    exit_code = cli.main(["export", "ep-chillout"])

    assert exit_code == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["stationCount"] == 2
    assert (export_settings.export_output_dir / "chillout-mix-ios.json").is_file()


def test_export_command_reports_unknown_profiles(export_settings):
    assert cli.main(["export", "missing", "ep-news"]) == 1
    assert (export_settings.export_output_dir / "news-desk-web.json").is_file()
