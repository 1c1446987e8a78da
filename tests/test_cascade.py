from radio_export.services.cascade import (
    delete_genre,
    delete_station,
    save_genre,
    save_station,
    upsert_record,
)
from radio_export.models import Genre


def test_delete_genre_detaches_stations(seed_catalogue):
    result = delete_genre(seed_catalogue, "chillout")

    assert [genre.id for genre in result.genres] == ["jazz", "news"]
    stations = {station.id: station for station in result.stations}
    assert stations["station-groove-salad"].genre_id == ""
    assert stations["station-groove-salad"].sub_genres == []
    assert stations["station-jazz24"].sub_genres == ["Smooth Jazz", "Lounge"]


def test_delete_genre_prunes_only_exclusive_sub_genres(seed_catalogue):
    catalogue = seed_catalogue.model_copy(
        update={
            "export_profiles": [
                profile.model_copy(
                    update={
                        "genre_ids": ["chillout", "jazz"],
                        "sub_genres": ["Lounge", "Downtempo", "Bebop"],
                    }
                )
                for profile in seed_catalogue.export_profiles
            ]
        }
    )

    result = delete_genre(catalogue, "chillout")

    for profile in result.export_profiles:
        assert profile.genre_ids == ["jazz"]
        assert profile.sub_genres == ["Lounge", "Bebop"]


def test_save_genre_revalidates_stations_and_profiles(seed_catalogue):
    catalogue = seed_catalogue.model_copy(
        update={
            "export_profiles": [
                profile.model_copy(update={"sub_genres": ["Downtempo", "Lounge"]})
                for profile in seed_catalogue.export_profiles
            ]
        }
    )

    result = save_genre(catalogue, {"id": "chillout", "name": "Chillout", "subGenres": ["ambient", "Ambient"]})

    genre = result.genre_by_id("chillout")
    assert genre.sub_genres == ["ambient"]
    stations = {station.id: station for station in result.stations}
    assert stations["station-groove-salad"].sub_genres == []
    assert stations["station-drone-zone"].sub_genres == ["ambient"]
    for profile in result.export_profiles:
        assert profile.sub_genres == ["Lounge"]


def test_save_station_checks_sub_genres_against_genre(seed_catalogue):
    result = save_station(
        seed_catalogue,
        {
            "id": "station-new",
            "name": "New",
            "streamUrl": "https://example.com/new",
            "genreId": "news",
            "subGenres": "talk, Bebop",
        },
    )
    station = result.stations[-1]
    assert station.id == "station-new"
    assert station.sub_genres == ["Talk"]


def test_delete_station_drops_explicit_selection(seed_catalogue):
    result = delete_station(seed_catalogue, "station-bbc-world")

    assert all(station.id != "station-bbc-world" for station in result.stations)
    assert result.profile_by_id("ep-news").station_ids == []


def test_upsert_record_replaces_in_place():
    records = [Genre(id="a", name="A"), Genre(id="b", name="B")]
    result = upsert_record(records, Genre(id="a", name="Alpha"))
    assert [genre.name for genre in result] == ["Alpha", "B"]
