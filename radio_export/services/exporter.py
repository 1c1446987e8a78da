"""Export orchestration over the catalogue store."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Sequence

from ..store import CatalogueStore
from .materializer import ExportOptions, ExportTarget, compile_export

logger = logging.getLogger(__name__)

EMPTY_EXPORT_MESSAGE = "This export profile does not include any active stations to export."


class JsonExportWriter:
    """Writes each export target as an indented JSON file."""

    def __init__(self, output_dir: Path) -> None:
        self._output_dir = Path(output_dir)

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def write(self, targets: Sequence[ExportTarget]) -> list[Path]:
        self._output_dir.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []
        for target in targets:
            path = self._output_dir / target.file_name
            path.write_text(
                json.dumps(target.payload.to_wire(), indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
            written.append(path)
        return written


class ExportService:
    """Compiles export profiles from the current catalogue snapshot."""

    def __init__(
        self,
        store: CatalogueStore,
        options: ExportOptions,
        writer: JsonExportWriter,
    ) -> None:
        self._store = store
        self._options = options
        self._writer = writer

    @property
    def options(self) -> ExportOptions:
        return self._options

    def preview(self, profile_id: str) -> list[ExportTarget]:
        """Return the per-platform targets for a profile without writing them."""

        profile = self._store.get_profile(profile_id)
        return compile_export(profile, self._store.snapshot(), self._options)

    def export(self, profile_id: str) -> dict[str, Any]:
        """Compile and write a profile's targets, returning a summary."""

        profile = self._store.get_profile(profile_id)
        targets = compile_export(profile, self._store.snapshot(), self._options)
        station_count = targets[0].station_count if targets else 0
        if station_count == 0:
            raise ValueError(EMPTY_EXPORT_MESSAGE)

        paths = self._writer.write(targets)
        logger.info(
            "Exported profile %s (%d stations) to %d files",
            profile.id,
            station_count,
            len(paths),
        )
        return {
            "profileId": profile.id,
            "profileName": profile.name,
            "stationCount": station_count,
            "outputDirectory": str(self._writer.output_dir),
            "files": [
                {
                    "platform": target.platform,
                    "fileName": target.file_name,
                    "outputPath": str(path),
                    "stationCount": target.station_count,
                }
                for target, path in zip(targets, paths)
            ],
        }
