"""Exclusive ownership of player apps by export profiles."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from ..canonical import normalize_player_app, normalize_profile
from ..models import Catalogue, ExportProfile, PlayerApp
from .cascade import upsert_record

logger = logging.getLogger(__name__)


def save_profile(
    profile: ExportProfile | Mapping[str, Any],
    profiles: Iterable[ExportProfile],
) -> list[ExportProfile]:
    """Upsert ``profile`` and release its player from every other profile.

    Last writer wins: the profile being saved keeps the player, all others
    holding the same ``playerId`` are reset to ``None``. Profile order is kept
    and new profiles are appended.
    """

    incoming = normalize_profile(profile)
    result: list[ExportProfile] = []
    replaced = False
    for existing in profiles:
        if existing.id == incoming.id:
            result.append(incoming)
            replaced = True
            continue
        if incoming.player_id and existing.player_id == incoming.player_id:
            logger.info(
                "Player %s reassigned from profile %s to %s",
                incoming.player_id,
                existing.id,
                incoming.id,
            )
            existing = existing.model_copy(update={"player_id": None})
        result.append(existing)
    if not replaced:
        result.append(incoming)
    return result


def delete_profile(catalogue: Catalogue, profile_id: str) -> Catalogue:
    profiles = [
        profile for profile in catalogue.export_profiles if profile.id != profile_id
    ]
    return catalogue.model_copy(update={"export_profiles": profiles})


def save_player_app(
    catalogue: Catalogue, app: PlayerApp | Mapping[str, Any]
) -> Catalogue:
    apps = upsert_record(catalogue.player_apps, normalize_player_app(app))
    return catalogue.model_copy(update={"player_apps": apps})


def delete_player_app(catalogue: Catalogue, player_id: str) -> Catalogue:
    """Remove a player app and clear it from every profile referencing it."""

    apps = [app for app in catalogue.player_apps if app.id != player_id]
    profiles = [
        profile.model_copy(update={"player_id": None})
        if profile.player_id == player_id
        else profile
        for profile in catalogue.export_profiles
    ]
    return catalogue.model_copy(
        update={"player_apps": apps, "export_profiles": profiles}
    )

