"""Station selection for export profiles."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from ..models import (
    AdMeta,
    Catalogue,
    ExportedStation,
    ExportProfile,
    Genre,
    RadioStation,
)
from ..utils import collation_key, first_token

logger = logging.getLogger(__name__)

LogoResolver = Callable[[str], str]

PLACEHOLDER_LOGO = "/static/webradio_placeholder.png"


class PlaceholderLogoResolver:
    """Default logo resolver substituting a placeholder for missing artwork."""

    def __init__(self, placeholder: str = PLACEHOLDER_LOGO) -> None:
        self._placeholder = placeholder

    def __call__(self, raw_url: str) -> str:
        return (raw_url or "").strip() or self._placeholder


def select_stations(
    profile: ExportProfile, catalogue: Catalogue
) -> list[RadioStation]:
    """Return the stations a profile exports, deduplicated and sorted by name.

    A station qualifies when its genre is selected, when one of its sub-genres
    matches the profile's sub-genres, or when it was picked explicitly. Only
    explicit picks bypass the active flag. Dangling ids simply match nothing.
    """

    genre_ids = set(profile.genre_ids)
    station_ids = set(profile.station_ids)
    sub_genre_filter = {sub.lower() for sub in profile.sub_genres}

    seen: set[str] = set()
    selected: list[RadioStation] = []
    for station in catalogue.stations:
        explicit = station.id in station_ids
        matches_genre = bool(station.genre_id) and station.genre_id in genre_ids
        matches_sub_genre = any(
            sub.lower() in sub_genre_filter for sub in station.sub_genres
        )
        if not (explicit or matches_genre or matches_sub_genre):
            continue
        if not explicit and not station.is_active:
            continue
        if station.id in seen:
            continue
        seen.add(station.id)
        selected.append(station)

    selected.sort(key=lambda station: collation_key(station.name))
    logger.debug(
        "Profile %s selected %d of %d stations",
        profile.id,
        len(selected),
        len(catalogue.stations),
    )
    return selected


def resolve_ad_section(tags: Sequence[str], genre: str | None) -> str | None:
    """Pick the ad section for a station from its tags.

    The first tag mentioning the genre wins, then the first tag, then the genre
    itself. Tags contribute their first alphanumeric token.
    """

    lowered_genre = genre.lower() if genre else None
    if lowered_genre:
        for tag in tags:
            if lowered_genre in tag.lower():
                return first_token(tag) or lowered_genre

    if tags:
        token = first_token(tags[0])
        if token:
            return token

    return lowered_genre


def export_station(
    station: RadioStation,
    genre: Genre | None,
    logo_resolver: LogoResolver,
) -> ExportedStation:
    genre_key = station.genre_id or (genre.name.lower() if genre and genre.name else None)
    section_source = genre.name if genre and genre.name else genre_key
    section = resolve_ad_section(station.tags, section_source)
    return ExportedStation(
        id=station.id,
        name=station.name,
        genre=genre_key,
        genre_name=genre.name if genre else None,
        url=station.stream_url,
        logo=logo_resolver(station.logo_url),
        description=station.description,
        bitrate=station.bitrate,
        language=station.language,
        region=station.region,
        tags=list(station.tags),
        sub_genres=list(station.sub_genres),
        is_playing=False,
        is_favorite=station.is_favorite,
        ima_ad_type=station.ima_ad_type,
        ad_meta=AdMeta(section=section) if section else None,
    )


def build_exported_stations(
    profile: ExportProfile,
    catalogue: Catalogue,
    logo_resolver: LogoResolver | None = None,
) -> list[ExportedStation]:
    resolver = logo_resolver or PlaceholderLogoResolver()
    genres: dict[str, Genre] = {genre.id: genre for genre in catalogue.genres}
    return [
        export_station(station, genres.get(station.genre_id), resolver)
        for station in select_stations(profile, catalogue)
    ]

