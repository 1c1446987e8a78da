"""In-memory catalogue store backing the HTTP surface."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from .canonical import (
    normalize_catalogue,
    normalize_genre,
    normalize_player_app,
    normalize_profile,
    normalize_station,
)
from .models import Catalogue, ExportProfile, Genre, PlayerApp, RadioStation
from .services import cascade, ownership

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 255


def load_catalogue(path: Path | None) -> Catalogue:
    """Load and canonicalise a catalogue snapshot from a JSON file.

    A missing path yields an empty catalogue; malformed content raises.
    """

    if path is None:
        return Catalogue()
    if not path.is_file():
        logger.warning("Seed catalogue %s not found; starting empty", path)
        return Catalogue()
    catalogue = Catalogue.model_validate_json(path.read_text(encoding="utf-8"))
    return normalize_catalogue(catalogue)


class CatalogueStore:
    """Holds the current catalogue and applies canonicalised writes to it.

    Reads return the current immutable snapshot; each write swaps in a new one.
    Missing records raise ``KeyError`` and rejected writes raise ``ValueError``.
    """

    def __init__(self, catalogue: Catalogue | None = None) -> None:
        self._catalogue = (
            normalize_catalogue(catalogue) if catalogue is not None else Catalogue()
        )

    def snapshot(self) -> Catalogue:
        return self._catalogue

    def get_profile(self, profile_id: str) -> ExportProfile:
        profile = self._catalogue.profile_by_id(profile_id)
        if profile is None:
            raise KeyError("Export profile not found")
        return profile

    @staticmethod
    def _require_name(name: str, label: str) -> None:
        if not name:
            raise ValueError(f"{label} name is required")
        if len(name) > MAX_NAME_LENGTH:
            raise ValueError(f"{label} name must not exceed {MAX_NAME_LENGTH} characters")

    def save_genre(self, genre_id: str, payload: Mapping[str, Any]) -> Genre:
        genre = normalize_genre({**payload, "id": genre_id})
        self._require_name(genre.name, "Genre")
        self._catalogue = cascade.save_genre(self._catalogue, genre)
        logger.info("Genre %s saved with %d sub-genres", genre.id, len(genre.sub_genres))
        return genre

    def delete_genre(self, genre_id: str) -> None:
        if self._catalogue.genre_by_id(genre_id) is None:
            raise KeyError("Genre not found")
        self._catalogue = cascade.delete_genre(self._catalogue, genre_id)
        logger.info("Genre %s deleted", genre_id)

    def save_station(self, station_id: str, payload: Mapping[str, Any]) -> RadioStation:
        station = normalize_station({**payload, "id": station_id}, self._catalogue.genres)
        self._require_name(station.name, "Station")
        if not station.stream_url:
            raise ValueError("Station streamUrl is required")
        duplicate = next(
            (
                existing
                for existing in self._catalogue.stations
                if existing.stream_url == station.stream_url and existing.id != station.id
            ),
            None,
        )
        if duplicate is not None:
            raise ValueError(
                f"A station with this stream URL already exists ({duplicate.id})"
            )
        self._catalogue = cascade.save_station(self._catalogue, station)
        logger.info("Station %s saved in genre %s", station.id, station.genre_id or "-")
        return station

    def delete_station(self, station_id: str) -> None:
        if not any(station.id == station_id for station in self._catalogue.stations):
            raise KeyError("Station not found")
        self._catalogue = cascade.delete_station(self._catalogue, station_id)
        logger.info("Station %s deleted", station_id)

    def save_player_app(self, player_id: str, payload: Mapping[str, Any]) -> PlayerApp:
        app = normalize_player_app({**payload, "id": player_id})
        self._require_name(app.name, "Player app")
        self._catalogue = ownership.save_player_app(self._catalogue, app)
        logger.info("Player app %s saved for platforms %s", app.id, ", ".join(app.platforms))
        return app

    def delete_player_app(self, player_id: str) -> None:
        if self._catalogue.player_by_id(player_id) is None:
            raise KeyError("Player app not found")
        self._catalogue = ownership.delete_player_app(self._catalogue, player_id)
        logger.info("Player app %s deleted", player_id)

    def save_profile(self, profile_id: str, payload: Mapping[str, Any]) -> ExportProfile:
        profile = normalize_profile({**payload, "id": profile_id})
        self._require_name(profile.name, "Profile")
        if profile.player_id and self._catalogue.player_by_id(profile.player_id) is None:
            raise ValueError("Player app with specified playerId does not exist")
        profiles = ownership.save_profile(profile, self._catalogue.export_profiles)
        self._catalogue = self._catalogue.model_copy(update={"export_profiles": profiles})
        logger.info(
            "Export profile %s saved with %d explicit stations",
            profile.id,
            len(profile.station_ids),
        )
        return profile

    def delete_profile(self, profile_id: str) -> None:
        self.get_profile(profile_id)
        self._catalogue = ownership.delete_profile(self._catalogue, profile_id)
        logger.info("Export profile %s deleted", profile_id)
