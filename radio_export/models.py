"""Pydantic models describing catalogue records and export payloads."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)

from .utils import split_values

ImaAdType = Literal["audio", "video", "no"]
ExportInterval = Literal["daily", "weekly", "monthly"]

IMA_AD_TYPES: tuple[str, ...] = ("audio", "video", "no")
EXPORT_INTERVALS: tuple[str, ...] = ("daily", "weekly", "monthly")
DEFAULT_VIDEO_PREROLL_SIZE = "640x480"


class CatalogueModel(BaseModel):
    """Base model accepting both camelCase wire names and field names."""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def _split_list(value: object) -> list[str]:
    try:
        return split_values(value)
    except TypeError as exc:
        raise ValueError(str(exc)) from exc


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value)


class Genre(CatalogueModel):
    """A top-level genre and the sub-genres stations may carry."""

    id: str = ""
    name: str = ""
    sub_genres: list[str] = Field(default_factory=list, alias="subGenres")

    @field_validator("id", "name", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> str:
        return _text(value)

    @field_validator("sub_genres", mode="before")
    @classmethod
    def _parse_sub_genres(cls, value: object) -> list[str]:
        return _split_list(value)


class RadioStation(CatalogueModel):
    """A curated station record."""

    id: str = ""
    name: str = ""
    stream_url: str = Field(
        default="",
        validation_alias=AliasChoices("streamUrl", "stream_url"),
        serialization_alias="streamUrl",
    )
    description: str = ""
    genre_id: str = Field(default="", alias="genreId")
    sub_genres: list[str] = Field(default_factory=list, alias="subGenres")
    logo_url: str = Field(
        default="",
        validation_alias=AliasChoices("logoUrl", "logo"),
        serialization_alias="logoUrl",
    )
    bitrate: int = 128
    language: str = "en"
    region: str = "Global"
    tags: list[str] = Field(default_factory=list)
    ima_ad_type: ImaAdType = Field(default="no", alias="imaAdType")
    is_active: bool = Field(default=True, alias="isActive")
    is_favorite: bool = Field(default=False, alias="isFavorite")

    @field_validator(
        "id", "name", "stream_url", "description", "genre_id", "logo_url", mode="before"
    )
    @classmethod
    def _coerce_text(cls, value: object) -> str:
        return _text(value)

    @field_validator("sub_genres", "tags", mode="before")
    @classmethod
    def _parse_lists(cls, value: object) -> list[str]:
        return _split_list(value)

    @field_validator("bitrate", mode="before")
    @classmethod
    def _parse_bitrate(cls, value: object) -> int:
        try:
            return int(float(value))  # type: ignore[arg-type]
        except (TypeError, ValueError, OverflowError):
            return 128

    @field_validator("language", "region", mode="before")
    @classmethod
    def _strip_blank(cls, value: object, info: ValidationInfo) -> str:
        text = _text(value).strip()
        if text:
            return text
        return "en" if info.field_name == "language" else "Global"

    @field_validator("ima_ad_type", mode="before")
    @classmethod
    def _parse_ima_ad_type(cls, value: object) -> str:
        lowered = _text(value).strip().lower()
        return lowered if lowered in IMA_AD_TYPES else "no"

    @field_validator("is_active", mode="before")
    @classmethod
    def _parse_active(cls, value: object) -> bool:
        return value is not False

    @field_validator("is_favorite", mode="before")
    @classmethod
    def _parse_favorite(cls, value: object) -> bool:
        return value is True


class Placements(CatalogueModel):
    """Ad-server inventory paths configured for a player app."""

    preroll: str = ""
    midroll: str = ""
    rewarded: str = ""

    @field_validator("preroll", "midroll", "rewarded", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> str:
        return _text(value).strip()


class PlayerApp(CatalogueModel):
    """A downstream player application and its ad-network configuration."""

    id: str = ""
    name: str = ""
    platforms: list[str] = Field(default_factory=list)
    platform: str | None = None
    description: str = ""
    contact_email: str = Field(default="", alias="contactEmail")
    notes: str = ""
    network_code: str = Field(default="", alias="networkCode")
    ima_enabled: bool = Field(default=True, alias="imaEnabled")
    video_preroll_default_size: str = Field(
        default=DEFAULT_VIDEO_PREROLL_SIZE, alias="videoPrerollDefaultSize"
    )
    placements: Placements = Field(default_factory=Placements)

    @field_validator(
        "id", "name", "description", "contact_email", "notes", "network_code", mode="before"
    )
    @classmethod
    def _coerce_text(cls, value: object) -> str:
        return _text(value)

    @field_validator("platforms", mode="before")
    @classmethod
    def _parse_platforms(cls, value: object) -> list[str]:
        return _split_list(value)

    @field_validator("ima_enabled", mode="before")
    @classmethod
    def _parse_ima_enabled(cls, value: object) -> bool:
        return value is not False

    @field_validator("video_preroll_default_size", mode="before")
    @classmethod
    def _parse_video_size(cls, value: object) -> str:
        return _text(value).strip() or DEFAULT_VIDEO_PREROLL_SIZE

    @field_validator("placements", mode="before")
    @classmethod
    def _parse_placements(cls, value: object) -> object:
        return {} if value is None else value


class AutoExportConfig(CatalogueModel):
    """Schedule used by the surrounding system to trigger exports."""

    enabled: bool = False
    interval: ExportInterval = "daily"
    time: str = "09:00"

    @field_validator("enabled", mode="before")
    @classmethod
    def _parse_enabled(cls, value: object) -> bool:
        return bool(value)

    @field_validator("interval", mode="before")
    @classmethod
    def _parse_interval(cls, value: object) -> str:
        lowered = _text(value).strip().lower()
        return lowered if lowered in EXPORT_INTERVALS else "daily"

    @field_validator("time", mode="before")
    @classmethod
    def _parse_time(cls, value: object) -> str:
        return _text(value).strip() or "09:00"


class ExportProfile(CatalogueModel):
    """A named selection of stations bundled for one player app."""

    id: str = ""
    name: str = ""
    genre_ids: list[str] = Field(default_factory=list, alias="genreIds")
    station_ids: list[str] = Field(default_factory=list, alias="stationIds")
    sub_genres: list[str] = Field(default_factory=list, alias="subGenres")
    player_id: str | None = Field(default=None, alias="playerId")
    auto_export: AutoExportConfig = Field(
        default_factory=AutoExportConfig, alias="autoExport"
    )

    @field_validator("id", "name", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> str:
        return _text(value)

    @field_validator("genre_ids", "station_ids", "sub_genres", mode="before")
    @classmethod
    def _parse_lists(cls, value: object) -> list[str]:
        return _split_list(value)

    @field_validator("player_id", mode="before")
    @classmethod
    def _parse_player_id(cls, value: object) -> str | None:
        text = _text(value).strip()
        return text or None

    @field_validator("auto_export", mode="before")
    @classmethod
    def _parse_auto_export(cls, value: object) -> object:
        return {} if value is None else value


class Catalogue(CatalogueModel):
    """Full snapshot of curated state handed to the engine."""

    stations: list[RadioStation] = Field(default_factory=list)
    genres: list[Genre] = Field(default_factory=list)
    player_apps: list[PlayerApp] = Field(default_factory=list, alias="playerApps")
    export_profiles: list[ExportProfile] = Field(
        default_factory=list, alias="exportProfiles"
    )

    def genre_by_id(self, genre_id: str | None) -> Genre | None:
        if not genre_id:
            return None
        return next((genre for genre in self.genres if genre.id == genre_id), None)

    def player_by_id(self, player_id: str | None) -> PlayerApp | None:
        if not player_id:
            return None
        return next((app for app in self.player_apps if app.id == player_id), None)

    def profile_by_id(self, profile_id: str) -> ExportProfile | None:
        return next(
            (profile for profile in self.export_profiles if profile.id == profile_id),
            None,
        )


class AdMeta(CatalogueModel):
    section: str


class ExportedStation(CatalogueModel):
    """Station entry as written into an export bundle."""

    id: str
    name: str
    genre: str | None = None
    genre_name: str | None = Field(default=None, alias="genreName")
    url: str = ""
    logo: str = ""
    description: str = ""
    bitrate: int = 128
    language: str = "en"
    region: str = "Global"
    tags: list[str] = Field(default_factory=list)
    sub_genres: list[str] = Field(default_factory=list, alias="subGenres")
    is_playing: bool = Field(default=False, alias="isPlaying")
    is_favorite: bool = Field(default=False, alias="isFavorite")
    ima_ad_type: ImaAdType = Field(default="no", alias="imaAdType")
    ad_meta: AdMeta | None = Field(default=None, alias="adMeta")

    def to_wire(self) -> dict[str, Any]:
        exclude = {"ad_meta"} if self.ad_meta is None else None
        return self.model_dump(mode="json", by_alias=True, exclude=exclude)


class AppInfo(CatalogueModel):
    id: str
    platform: str
    version: int = 1


class PrivacyDefaults(CatalogueModel):
    npa: int = 0
    tfcd: int = 0
    us_privacy: str = "1YNN"


class AdLock(CatalogueModel):
    enabled: bool = True
    seconds: int = 300
    scope: str = "rolling"
    exempt_placements: list[str] = Field(default_factory=list)


class AdRoute(CatalogueModel):
    """Maps a station's ``imaAdType`` onto a placement key."""

    audio: str | None = None
    video: str | None = None
    no: None = None


class RulesPlacement(CatalogueModel):
    iu: str | None = None
    enabled: bool = False


class PrerollPlacement(CatalogueModel):
    iu: str | None = None
    default_size: str
    enabled: bool = False


class VmapPlacements(CatalogueModel):
    audio_rules: RulesPlacement
    video_rules: RulesPlacement


class VastPlacements(CatalogueModel):
    audio_preroll: PrerollPlacement
    video_preroll: PrerollPlacement


class VmapAdBlock(CatalogueModel):
    """Ad-rules driven configuration for iOS-family players."""

    mode: Literal["vmap"] = "vmap"
    network_code: str = ""
    privacy_defaults: PrivacyDefaults = Field(default_factory=PrivacyDefaults)
    ad_lock: AdLock = Field(default_factory=AdLock)
    vmap_url: str
    placements: VmapPlacements
    route: AdRoute


class VastAdBlock(CatalogueModel):
    """Manual preroll tag configuration for Android-family players."""

    mode: Literal["vast"] = "vast"
    network_code: str = ""
    privacy_defaults: PrivacyDefaults = Field(default_factory=PrivacyDefaults)
    ad_lock: AdLock = Field(default_factory=AdLock)
    ad_tag_template: str
    placements: VastPlacements
    route: AdRoute


AdBlock = VmapAdBlock | VastAdBlock


class PlayerSettings(CatalogueModel):
    """Generic settings block for platforms without a native ad shape."""

    autoplay: bool = False
    volume_default: float = 0.7
    ads_enabled: bool = False
    ui_theme: str = "dark"


class ExportPayload(CatalogueModel):
    """Bundle written for one platform of a profile's player app."""

    stations: list[ExportedStation] = Field(default_factory=list)
    app: AppInfo | None = None
    ads: VmapAdBlock | VastAdBlock | None = Field(default=None, discriminator="mode")
    settings: PlayerSettings | None = None

    def to_wire(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "stations": [station.to_wire() for station in self.stations]
        }
        if self.app is not None:
            payload["app"] = self.app.to_wire()
        if self.ads is not None:
            payload["ads"] = self.ads.to_wire()
        if self.settings is not None:
            payload["settings"] = self.settings.to_wire()
        return payload
