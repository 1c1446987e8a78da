from radio_export.models import Catalogue, ExportProfile, PlayerApp
from radio_export.services.ownership import (
    delete_player_app,
    delete_profile,
    save_player_app,
    save_profile,
)


def _owners(profiles, player_id):
    return [profile.id for profile in profiles if profile.player_id == player_id]


def test_last_writer_takes_the_player():
    profiles = [
        ExportProfile(id="A", name="A", player_id="P"),
        ExportProfile(id="B", name="B"),
    ]

    result = save_profile({"id": "B", "name": "B", "playerId": "P"}, profiles)

    assert [profile.id for profile in result] == ["A", "B"]
    assert result[0].player_id is None
    assert result[1].player_id == "P"
    assert profiles[0].player_id == "P"


def test_each_player_has_at_most_one_owner_after_any_sequence():
    profiles: list[ExportProfile] = []
    writes = [
        ("A", "P"),
        ("B", "P"),
        ("C", "Q"),
        ("A", "Q"),
        ("D", "P"),
        ("B", None),
        ("C", "P"),
    ]
    for profile_id, player_id in writes:
        profiles = save_profile(
            {"id": profile_id, "name": profile_id, "playerId": player_id}, profiles
        )
        for player in ("P", "Q"):
            assert len(_owners(profiles, player)) <= 1

    assert _owners(profiles, "P") == ["C"]
    assert _owners(profiles, "Q") == ["A"]


def test_saving_new_profile_appends_it():
    profiles = [ExportProfile(id="A", name="A")]
    result = save_profile({"id": "Z", "name": "Z"}, profiles)
    assert [profile.id for profile in result] == ["A", "Z"]


def test_delete_player_app_clears_profile_references():
    catalogue = Catalogue(
        player_apps=[PlayerApp(id="P", name="Player"), PlayerApp(id="Q", name="Other")],
        export_profiles=[
            ExportProfile(id="A", name="A", player_id="P"),
            ExportProfile(id="B", name="B", player_id="Q"),
        ],
    )

    result = delete_player_app(catalogue, "P")

    assert [app.id for app in result.player_apps] == ["Q"]
    assert result.export_profiles[0].player_id is None
    assert result.export_profiles[1].player_id == "Q"


def test_save_player_app_normalizes_and_replaces():
    catalogue = Catalogue(player_apps=[PlayerApp(id="P", name="Old")])
    result = save_player_app(catalogue, {"id": "P", "name": " New ", "platforms": ["iOS"]})
    (app,) = result.player_apps
    assert app.name == "New"
    assert app.platforms == ["ios"]


def test_delete_profile_removes_only_that_profile():
    catalogue = Catalogue(
        export_profiles=[ExportProfile(id="A", name="A"), ExportProfile(id="B", name="B")]
    )
    result = delete_profile(catalogue, "A")
    assert [profile.id for profile in result.export_profiles] == ["B"]
