"""Canonical forms for catalogue records.

Every write to a genre, station, player app or export profile passes through
one of these functions. They are pure: the input is never mutated and a new
record is returned. Raw mappings (as received over the wire) are accepted
wherever a model is.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, TypeVar
from uuid import uuid4

from pydantic import BaseModel

from .models import Catalogue, ExportProfile, Genre, PlayerApp, RadioStation
from .utils import slugify, split_values, unique_strings

DEFAULT_PLATFORM = "web"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _coerce(model: type[ModelT], value: ModelT | Mapping[str, Any]) -> ModelT:
    if isinstance(value, model):
        return value
    return model.model_validate(value)


def normalize_genre(genre: Genre | Mapping[str, Any]) -> Genre:
    """Trim the name and deduplicate sub-genres case-insensitively.

    Sub-genres keep their first-seen casing and order. A missing id is derived
    from the name, falling back to a random identifier.
    """

    record = _coerce(Genre, genre)
    name = record.name.strip()
    genre_id = record.id.strip() or slugify(name, fallback=str(uuid4()))
    return Genre(id=genre_id, name=name, sub_genres=unique_strings(record.sub_genres))


def normalize_genres(genres: Iterable[Genre | Mapping[str, Any]]) -> list[Genre]:
    return [normalize_genre(genre) for genre in genres]


def normalize_station_sub_genres(
    raw: object, genre_id: str | None, genres: Iterable[Genre]
) -> list[str]:
    """Keep only the sub-genres defined on ``genre_id``, in their canonical casing.

    ``raw`` may be a sequence or a comma-separated string. Unknown or empty
    genre ids yield an empty list.
    """

    if not genre_id:
        return []
    allowed: dict[str, str] = {}
    for genre in genres:
        if genre.id != genre_id:
            continue
        for sub in genre.sub_genres:
            canonical = sub.strip()
            if canonical:
                allowed.setdefault(canonical.lower(), canonical)
    if not allowed:
        return []

    seen: set[str] = set()
    result: list[str] = []
    for value in split_values(raw):
        key = value.strip().lower()
        canonical = allowed.get(key)
        if canonical is None or key in seen:
            continue
        seen.add(key)
        result.append(canonical)
    return result


def normalize_station(
    station: RadioStation | Mapping[str, Any], genres: Iterable[Genre]
) -> RadioStation:
    record = _coerce(RadioStation, station)
    genre_id = record.genre_id.strip()
    return record.model_copy(
        update={
            "id": record.id.strip() or str(uuid4()),
            "name": record.name.strip(),
            "stream_url": record.stream_url.strip(),
            "description": record.description.strip(),
            "genre_id": genre_id,
            "sub_genres": normalize_station_sub_genres(
                record.sub_genres, genre_id, list(genres)
            ),
            "logo_url": record.logo_url.strip(),
            "tags": [tag.strip() for tag in record.tags if tag.strip()],
        }
    )


def normalize_stations(
    stations: Iterable[RadioStation | Mapping[str, Any]], genres: Iterable[Genre]
) -> list[RadioStation]:
    genre_list = list(genres)
    return [normalize_station(station, genre_list) for station in stations]


def normalize_player_app(app: PlayerApp | Mapping[str, Any]) -> PlayerApp:
    """Merge the legacy ``platform`` into ``platforms`` and reset the primary platform.

    Platforms are lower-cased and deduplicated preserving order; an app that
    declares nothing targets ``["web"]``.
    """

    record = _coerce(PlayerApp, app)
    declared = [value.strip() for value in record.platforms if value.strip()]
    legacy = (record.platform or "").strip()
    if legacy:
        declared.insert(0, legacy)

    platforms = [value.lower() for value in unique_strings(declared)]
    if not platforms:
        platforms = [DEFAULT_PLATFORM]

    return record.model_copy(
        update={
            "id": record.id.strip() or str(uuid4()),
            "name": record.name.strip(),
            "platforms": platforms,
            "platform": platforms[0],
            "description": record.description.strip(),
            "contact_email": record.contact_email.strip(),
            "notes": record.notes.strip(),
            "network_code": record.network_code.strip(),
        }
    )


def normalize_player_apps(
    apps: Iterable[PlayerApp | Mapping[str, Any]],
) -> list[PlayerApp]:
    return [normalize_player_app(app) for app in apps]


def normalize_profile(profile: ExportProfile | Mapping[str, Any]) -> ExportProfile:
    record = _coerce(ExportProfile, profile)
    return record.model_copy(
        update={
            "id": record.id.strip() or f"ep-{uuid4()}",
            "name": record.name.strip(),
            "genre_ids": unique_strings(record.genre_ids),
            "station_ids": unique_strings(record.station_ids),
            "sub_genres": unique_strings(record.sub_genres),
        }
    )


def normalize_profiles(
    profiles: Iterable[ExportProfile | Mapping[str, Any]],
) -> list[ExportProfile]:
    return [normalize_profile(profile) for profile in profiles]


def normalize_catalogue(catalogue: Catalogue | Mapping[str, Any]) -> Catalogue:
    """Canonicalise a full snapshot; stations are checked against the new genres."""

    record = _coerce(Catalogue, catalogue)
    genres = normalize_genres(record.genres)
    return Catalogue(
        genres=genres,
        stations=normalize_stations(record.stations, genres),
        player_apps=normalize_player_apps(record.player_apps),
        export_profiles=normalize_profiles(record.export_profiles),
    )
