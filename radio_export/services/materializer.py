"""Export compilation and per-platform payload materialization."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from ..models import (
    AppInfo,
    Catalogue,
    ExportPayload,
    ExportProfile,
    PlayerApp,
    PlayerSettings,
)
from ..utils import normalize_platform_key, slugify
from .ads import build_ads_payload
from .selection import LogoResolver, build_exported_stations

logger = logging.getLogger(__name__)

DEFAULT_AD_PLATFORMS: tuple[str, ...] = ("ios", "android", "homeassistant")
NATIVE_AD_PLATFORMS: frozenset[str] = frozenset({"ios", "android"})
GENERIC_PLATFORM = "generic"


@dataclass(frozen=True)
class ExportOptions:
    """Engine inputs resolved once at startup."""

    default_network_code: str = ""
    ad_platforms: tuple[str, ...] = DEFAULT_AD_PLATFORMS
    logo_resolver: LogoResolver | None = None


@dataclass
class ExportContext:
    """Payload compiled for a profile's primary platform."""

    profile: ExportProfile
    payload: ExportPayload
    player: PlayerApp | None = None
    platform: str | None = None

    @property
    def station_count(self) -> int:
        return len(self.payload.stations)


@dataclass(slots=True)
class ExportTarget:
    """One payload destined for one platform."""

    platform: str
    file_name: str
    payload: ExportPayload = field(repr=False)

    @property
    def station_count(self) -> int:
        return len(self.payload.stations)


def determine_platforms(player: PlayerApp | None) -> list[str]:
    """Return the distinct export keys a player targets, primary platform first."""

    if player is None:
        return []
    keys: list[str] = []
    for value in (player.platform, *player.platforms):
        key = normalize_platform_key(value)
        if key and key not in keys:
            keys.append(key)
    return keys


def determine_platform(player: PlayerApp | None) -> str | None:
    platforms = determine_platforms(player)
    return platforms[0] if platforms else None


def build_player_settings(player: PlayerApp) -> PlayerSettings:
    return PlayerSettings(ads_enabled=player.ima_enabled)


def app_identifier(player: PlayerApp) -> str:
    return slugify(player.name, fallback=player.id) or player.id


def _player_payload(
    payload: ExportPayload,
    player: PlayerApp,
    platform: str,
    options: ExportOptions,
    *,
    version: int = 1,
) -> ExportPayload:
    ads = None
    if platform in options.ad_platforms:
        ads = build_ads_payload(
            player, platform, default_network_code=options.default_network_code
        )
    settings = None
    if platform not in NATIVE_AD_PLATFORMS:
        settings = build_player_settings(player)
    return payload.model_copy(
        update={
            "app": AppInfo(id=app_identifier(player), platform=platform, version=version),
            "ads": ads,
            "settings": settings,
        }
    )


def build_export_context(
    profile: ExportProfile,
    catalogue: Catalogue,
    options: ExportOptions | None = None,
) -> ExportContext:
    """Select a profile's stations and enrich them for its player's primary platform.

    A profile pointing at an unknown player is exported without app or ads.
    """

    options = options or ExportOptions()
    stations = build_exported_stations(profile, catalogue, options.logo_resolver)
    payload = ExportPayload(stations=stations)

    player = catalogue.player_by_id(profile.player_id)
    if profile.player_id and player is None:
        logger.debug(
            "Profile %s references unknown player %s", profile.id, profile.player_id
        )
    platform = determine_platform(player)
    if player is not None and platform and platform in options.ad_platforms:
        payload = _player_payload(payload, player, platform, options)

    logger.info(
        "Compiled profile %s with %d stations for platform %s",
        profile.id,
        len(stations),
        platform or GENERIC_PLATFORM,
    )
    return ExportContext(
        profile=profile, payload=payload, player=player, platform=platform
    )


def build_payload_for_platform(
    context: ExportContext,
    platform: str,
    options: ExportOptions | None = None,
) -> ExportPayload:
    """Regenerate the context payload for ``platform`` without touching the context."""

    options = options or ExportOptions()
    key = normalize_platform_key(platform) or GENERIC_PLATFORM
    base = context.payload.model_copy(deep=True)
    if context.player is None:
        return base

    version = base.app.version if base.app is not None else 1
    stations_only = base.model_copy(update={"app": None, "ads": None, "settings": None})
    return _player_payload(stations_only, context.player, key, options, version=version)


def materialize(
    context: ExportContext,
    platforms: Iterable[str] | None = None,
    options: ExportOptions | None = None,
) -> list[ExportTarget]:
    """Produce one export target per distinct normalized platform.

    ``platforms`` defaults to every platform the context's player declares.
    Without any, the context platform is used, then ``"generic"``.
    """

    options = options or ExportOptions()
    candidates = determine_platforms(context.player) if platforms is None else platforms
    keys: list[str] = []
    for value in candidates:
        key = normalize_platform_key(value)
        if key and key not in keys:
            keys.append(key)
    if not keys and context.platform:
        keys.append(normalize_platform_key(context.platform))
    if not keys:
        keys.append(GENERIC_PLATFORM)

    slug = slugify(context.profile.name, fallback=context.profile.id)
    return [
        ExportTarget(
            platform=key,
            file_name=f"{slug}-{key}.json",
            payload=build_payload_for_platform(context, key, options),
        )
        for key in keys
    ]


def compile_export(
    profile: ExportProfile,
    catalogue: Catalogue,
    options: ExportOptions | None = None,
) -> list[ExportTarget]:
    """Build the export context for ``profile`` and materialize every platform."""

    context = build_export_context(profile, catalogue, options)
    return materialize(context, options=options)
