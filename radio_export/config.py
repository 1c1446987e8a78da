"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Iterable, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .services.materializer import DEFAULT_AD_PLATFORMS
from .services.selection import PLACEHOLDER_LOGO
from .utils import normalize_platform_key


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="WebRadio Exporter", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=4000, alias="PORT")

    export_output_dir: Path = Field(default=Path("exports"), alias="EXPORT_OUTPUT_DIR")
    seed_data_path: Path | None = Field(
        default=Path("data/seed.json"), alias="SEED_DATA_PATH"
    )

    default_network_code: str | None = Field(
        default=None, alias="DEFAULT_NETWORK_CODE"
    )
    placeholder_logo: str = Field(default=PLACEHOLDER_LOGO, alias="PLACEHOLDER_LOGO")
    ad_platforms: Annotated[tuple[str, ...], NoDecode] = Field(
        default=DEFAULT_AD_PLATFORMS, alias="AD_PLATFORMS"
    )

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("ad_platforms", mode="before")
    @classmethod
    def _parse_ad_platforms(cls, value: object) -> tuple[str, ...]:
        """Normalise ad-bearing platform keys from environment values."""

        if value is None:
            return DEFAULT_AD_PLATFORMS
        if isinstance(value, str):
            raw_values = value.split(",")
        elif isinstance(value, Iterable):
            raw_values = [str(part) for part in value]
        else:
            raise TypeError("AD_PLATFORMS must be a string or iterable of strings")

        cleaned: list[str] = []
        for entry in raw_values:
            key = normalize_platform_key(entry)
            if key and key not in cleaned:
                cleaned.append(key)
        if not cleaned:
            return DEFAULT_AD_PLATFORMS
        return tuple(cleaned)

    @field_validator("default_network_code", mode="before")
    @classmethod
    def _strip_network_code(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper() or "INFO"
        return value

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
