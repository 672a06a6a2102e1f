"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.constants import (
    AudioConstants,
    LogLevels,
    PlaybackConstants,
    TimeConstants,
)
from ..domain.shared.messages import ErrorMessages


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    command_prefix: str = Field(
        default="$",
        min_length=1,
        max_length=5,
        validation_alias=AliasChoices("command_prefix", "prefix"),
    )
    sync_on_startup: bool = False


class AudioSettings(BaseModel):
    """Audio playback configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    default_volume: float = Field(default=AudioConstants.DEFAULT_VOLUME, ge=0.0, le=2.0)
    ffmpeg_options: dict[str, str] = Field(
        default_factory=lambda: {
            "before_options": AudioConstants.FFMPEG_BEFORE_OPTIONS_DEFAULT,
            "options": AudioConstants.FFMPEG_OPTIONS_DEFAULT,
        }
    )
    ytdlp_format: str = AudioConstants.YTDLP_FORMAT_DEFAULT
    connect_timeout_seconds: float = Field(
        default=AudioConstants.CONNECT_TIMEOUT_SECONDS, gt=0, le=60
    )


class PlaybackSettings(BaseModel):
    """Queue and session lifecycle configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    idle_timeout_seconds: float = Field(
        default=PlaybackConstants.IDLE_TIMEOUT_SECONDS,
        gt=0,
        le=86_400,
        validation_alias=AliasChoices("idle_timeout_seconds", "idle_timeout"),
    )
    max_message_length: int = Field(
        default=PlaybackConstants.MAX_MESSAGE_LENGTH, ge=100, le=4000
    )


class MetadataSettings(BaseModel):
    """Media lookup configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    backend: Literal["ytdlp", "youtube_api"] = "ytdlp"
    youtube_api_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("youtube_api_key", "api_key", "youtube_key"),
    )
    playlists_enabled: bool = True
    request_timeout_seconds: float = Field(
        default=TimeConstants.DEFAULT_REQUEST_TIMEOUT, gt=0, le=120
    )
    cache_ttl_seconds: int = Field(
        default=TimeConstants.DEFAULT_CACHE_TTL,
        ge=0,
        validation_alias=AliasChoices("cache_ttl_seconds", "cache_ttl"),
    )

    @model_validator(mode="after")
    def validate_api_key(self) -> MetadataSettings:
        """The Data API backend cannot work without a key."""
        if self.backend == "youtube_api" and not self.youtube_api_key.get_secret_value():
            raise ValueError(ErrorMessages.YOUTUBE_API_KEY_REQUIRED)
        return self


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD__TOKEN, DISCORD__COMMAND_PREFIX, etc. (nested with ``__``)
    - PLAYBACK__IDLE_TIMEOUT_SECONDS, METADATA__BACKEND, METADATA__YOUTUBE_API_KEY
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)
    metadata: MetadataSettings = Field(default_factory=MetadataSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {
            LogLevels.DEBUG,
            LogLevels.INFO,
            LogLevels.WARNING,
            LogLevels.ERROR,
            LogLevels.CRITICAL,
        }
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
