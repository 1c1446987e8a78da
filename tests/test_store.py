import pytest

from radio_export.store import CatalogueStore, load_catalogue


def test_load_catalogue_missing_file_is_empty(tmp_path):
    catalogue = load_catalogue(tmp_path / "absent.json")
    assert catalogue.stations == []
    assert load_catalogue(None).genres == []


def test_store_rejects_unknown_player(seed_catalogue):
    store = CatalogueStore(seed_catalogue)
    with pytest.raises(ValueError, match="playerId"):
        store.save_profile("ep-new", {"name": "New", "playerId": "ghost"})


def test_store_profile_save_transfers_player(seed_catalogue):
    store = CatalogueStore(seed_catalogue)

    store.save_profile("ep-news", {"name": "News Desk", "playerId": "player-chillout"})

    snapshot = store.snapshot()
    assert snapshot.profile_by_id("ep-chillout").player_id is None
    assert snapshot.profile_by_id("ep-news").player_id == "player-chillout"
    assert seed_catalogue.profile_by_id("ep-chillout").player_id == "player-chillout"


def test_store_rejects_duplicate_stream_url(seed_catalogue):
    store = CatalogueStore(seed_catalogue)
    with pytest.raises(ValueError, match="stream URL"):
        store.save_station(
            "station-copy",
            {"name": "Copy", "streamUrl": "https://ice1.somafm.com/groovesalad-256-mp3"},
        )


def test_store_requires_names(seed_catalogue):
    store = CatalogueStore(seed_catalogue)
    with pytest.raises(ValueError, match="name is required"):
        store.save_genre("blank", {"name": "  "})
    with pytest.raises(ValueError, match="must not exceed"):
        store.save_player_app("long", {"name": "x" * 256})


def test_store_missing_records_raise_key_error(seed_catalogue):
    store = CatalogueStore(seed_catalogue)
    with pytest.raises(KeyError):
        store.get_profile("missing")
    with pytest.raises(KeyError):
        store.delete_station("missing")
    with pytest.raises(KeyError):
        store.delete_genre("missing")
