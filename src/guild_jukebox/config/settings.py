"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import BarWidth, CommandPrefixStr, GlyphStr, QueueDisplayLimit


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    command_prefix: CommandPrefixStr = Field(
        default="!",
        validation_alias=AliasChoices("command_prefix", "prefix"),
    )


class AudioSettings(BaseModel):
    """Audio source and transcoder configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    ytdlp_format: str = "bestaudio/best"
    ffmpeg_executable: str = Field(
        default="ffmpeg", validation_alias=AliasChoices("ffmpeg_executable", "ffmpeg_path")
    )
    ffmpeg_reconnect: bool = True
    ffmpeg_reconnect_delay_max: int = Field(default=5, ge=0, le=60)


class PlaybackSettings(BaseModel):
    """Session timing and display configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    progress_interval_seconds: float = Field(
        default=5.0,
        gt=0.0,
        le=300.0,
        validation_alias=AliasChoices("progress_interval_seconds", "progress_interval"),
    )
    progress_bar_width: BarWidth = 20
    progress_filled_glyph: GlyphStr = "▮"
    progress_empty_glyph: GlyphStr = "▯"
    grace_period_seconds: float = Field(
        default=15.0,
        ge=0.0,
        le=3600.0,
        validation_alias=AliasChoices("grace_period_seconds", "grace_period"),
    )
    queue_display_limit: QueueDisplayLimit = 10
    connect_timeout_seconds: float = Field(default=10.0, gt=0.0, le=120.0)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD__TOKEN, DISCORD__COMMAND_PREFIX (nested with ``__``)
    - AUDIO__YTDLP_FORMAT, AUDIO__FFMPEG_EXECUTABLE, ...
    - PLAYBACK__PROGRESS_INTERVAL_SECONDS, PLAYBACK__GRACE_PERIOD_SECONDS, ...
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

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels))
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
