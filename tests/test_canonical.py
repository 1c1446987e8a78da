import pytest

from radio_export.canonical import (
    normalize_catalogue,
    normalize_genre,
    normalize_player_app,
    normalize_profile,
    normalize_station,
    normalize_station_sub_genres,
)
from radio_export.models import Genre


GENRES = [
    Genre(id="chillout", name="Chillout", sub_genres=["Downtempo", "Ambient"]),
    Genre(id="jazz", name="Jazz", sub_genres=["Bebop"]),
]


def test_normalize_genre_trims_and_deduplicates():
    genre = normalize_genre(
        {"id": "chillout", "name": "  Chillout ", "subGenres": ["Downtempo", " downtempo", "", "Ambient"]}
    )
    assert genre.name == "Chillout"
    assert genre.sub_genres == ["Downtempo", "Ambient"]


def test_normalize_genre_derives_id_from_name():
    assert normalize_genre({"name": "Deep House"}).id == "deep-house"


@pytest.mark.parametrize(
    "raw",
    [
        {"id": "a", "name": " A ", "subGenres": "x, X, y"},
        {"id": "b", "name": "B", "subGenres": []},
        {"id": "c", "name": "C", "subGenres": ["Lo-Fi", "lo-fi ", "Chillhop"]},
    ],
)
def test_normalize_genre_is_idempotent(raw):
    once = normalize_genre(raw)
    assert normalize_genre(once) == once


def test_station_sub_genres_use_canonical_casing():
    result = normalize_station_sub_genres("ambient, DOWNTEMPO, Bebop, ambient", "chillout", GENRES)
    assert result == ["Ambient", "Downtempo"]


def test_station_sub_genres_empty_for_unknown_genre():
    assert normalize_station_sub_genres(["Ambient"], "unknown", GENRES) == []
    assert normalize_station_sub_genres(["Ambient"], "", GENRES) == []


def test_normalize_station_keeps_sub_genres_within_its_genre():
    station = normalize_station(
        {
            "id": " s1 ",
            "name": " Groove ",
            "streamUrl": " https://example.com/a ",
            "genreId": "chillout",
            "subGenres": ["Bebop", "ambient"],
            "tags": [" chill ", ""],
        },
        GENRES,
    )
    assert station.id == "s1"
    assert station.name == "Groove"
    assert station.stream_url == "https://example.com/a"
    assert station.sub_genres == ["Ambient"]
    assert station.tags == ["chill"]
    assert normalize_station(station, GENRES) == station


def test_normalize_station_assigns_missing_id():
    station = normalize_station({"name": "Nameless"}, GENRES)
    assert station.id


def test_player_app_defaults_to_web():
    app = normalize_player_app({"id": "p1", "name": "Player"})
    assert app.platforms == ["web"]
    assert app.platform == "web"


def test_player_app_merges_legacy_platform_first():
    app = normalize_player_app(
        {"id": "p1", "name": "Player", "platform": "Android", "platforms": ["iOS", "android"]}
    )
    assert app.platforms == ["android", "ios"]
    assert app.platform == "android"
    assert normalize_player_app(app) == app


def test_normalize_profile_generates_prefixed_id():
    profile = normalize_profile({"name": "Mix", "genreIds": ["a", "a", " "]})
    assert profile.id.startswith("ep-")
    assert profile.genre_ids == ["a"]


def test_normalize_catalogue_is_idempotent(seed_catalogue):
    assert normalize_catalogue(seed_catalogue) == seed_catalogue
    apps = {app.id: app for app in seed_catalogue.player_apps}
    assert apps["player-chillout"].platforms == ["ios", "android", "home assistant"]
