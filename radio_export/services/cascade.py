"""Referential cleanup applied when genres and stations change."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Protocol, TypeVar

from ..canonical import normalize_genre, normalize_station, normalize_station_sub_genres
from ..models import Catalogue, Genre, RadioStation

logger = logging.getLogger(__name__)


class _Identified(Protocol):
    id: str


RecordT = TypeVar("RecordT", bound=_Identified)


def upsert_record(records: Iterable[RecordT], record: RecordT) -> list[RecordT]:
    """Replace the record sharing ``record.id`` in place, or append it."""

    result: list[RecordT] = []
    replaced = False
    for existing in records:
        if existing.id == record.id:
            result.append(record)
            replaced = True
        else:
            result.append(existing)
    if not replaced:
        result.append(record)
    return result


def _defined_sub_genres(genres: Iterable[Genre]) -> set[str]:
    return {
        sub.strip().lower()
        for genre in genres
        for sub in genre.sub_genres
        if sub.strip()
    }


def save_genre(catalogue: Catalogue, genre: Genre | Mapping[str, Any]) -> Catalogue:
    """Upsert a genre and re-validate everything that depends on its sub-genres.

    Stations in the genre keep only sub-genres still defined on it; profiles
    keep only sub-genres some genre still defines.
    """

    normalized = normalize_genre(genre)
    genres = upsert_record(catalogue.genres, normalized)
    stations = [
        station.model_copy(
            update={
                "sub_genres": normalize_station_sub_genres(
                    station.sub_genres, normalized.id, genres
                )
            }
        )
        if station.genre_id == normalized.id
        else station
        for station in catalogue.stations
    ]
    allowed = _defined_sub_genres(genres)
    profiles = [
        profile.model_copy(
            update={
                "sub_genres": [
                    sub for sub in profile.sub_genres if sub.lower() in allowed
                ]
            }
        )
        for profile in catalogue.export_profiles
    ]
    return catalogue.model_copy(
        update={"genres": genres, "stations": stations, "export_profiles": profiles}
    )


def delete_genre(catalogue: Catalogue, genre_id: str) -> Catalogue:
    """Remove a genre and detach it from stations and profiles.

    Stations in the genre lose their genre and sub-genres. Profiles drop the
    genre id and any sub-genre no remaining genre defines.
    """

    removed = catalogue.genre_by_id(genre_id)
    genres = [genre for genre in catalogue.genres if genre.id != genre_id]
    stations = [
        station.model_copy(update={"genre_id": "", "sub_genres": []})
        if station.genre_id == genre_id
        else station
        for station in catalogue.stations
    ]

    exclusive: set[str] = set()
    if removed is not None:
        exclusive = {
            sub.lower() for sub in removed.sub_genres
        } - _defined_sub_genres(genres)

    profiles = [
        profile.model_copy(
            update={
                "genre_ids": [gid for gid in profile.genre_ids if gid != genre_id],
                "sub_genres": [
                    sub for sub in profile.sub_genres if sub.lower() not in exclusive
                ],
            }
        )
        for profile in catalogue.export_profiles
    ]
    if removed is None:
        logger.debug("Deleting unknown genre %s", genre_id)
    return catalogue.model_copy(
        update={"genres": genres, "stations": stations, "export_profiles": profiles}
    )


def save_station(
    catalogue: Catalogue, station: RadioStation | Mapping[str, Any]
) -> Catalogue:
    normalized = normalize_station(station, catalogue.genres)
    stations = upsert_record(catalogue.stations, normalized)
    return catalogue.model_copy(update={"stations": stations})


def delete_station(catalogue: Catalogue, station_id: str) -> Catalogue:
    """Remove a station and drop it from explicit profile selections."""

    stations = [station for station in catalogue.stations if station.id != station_id]
    profiles = [
        profile.model_copy(
            update={
                "station_ids": [
                    sid for sid in profile.station_ids if sid != station_id
                ]
            }
        )
        for profile in catalogue.export_profiles
    ]
    return catalogue.model_copy(
        update={"stations": stations, "export_profiles": profiles}
    )
