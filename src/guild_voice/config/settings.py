"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import CommandPrefixStr, ConnectTimeoutS, NonNegativeInt, PositiveInt
from ..domain.voice.value_objects import ChannelLimits


def _validate_snowflake(value: int) -> int:
    if value <= 0:
        raise ValueError(ErrorMessages.INVALID_SNOWFLAKE)
    if value >= 2**64:
        raise ValueError(ErrorMessages.SNOWFLAKE_TOO_LARGE)
    return value


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
    test_guild_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("test_guild_ids", "test_guilds")
    )
    sync_on_startup: bool = False

    @field_validator("test_guild_ids", mode="before")
    @classmethod
    def validate_snowflake_ids(cls, v: tuple[int, ...] | list[int]) -> tuple[int, ...]:
        """Validate Discord snowflake IDs and convert lists to tuples."""
        if isinstance(v, list):
            v = tuple(v)
        for snowflake in v:
            _validate_snowflake(snowflake)
        return v


class VoiceSettings(BaseModel):
    """Voice session configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    enabled: bool = Field(default=True, validation_alias=AliasChoices("enabled", "voice_enabled"))
    connect_timeout_s: ConnectTimeoutS = Field(
        default=10.0,
        validation_alias=AliasChoices("connect_timeout_s", "connect_timeout"),
    )
    self_deaf: bool = True


class ChannelLimitSettings(BaseModel):
    """Platform bounds for voice channel configuration."""

    model_config = SettingsConfigDict(frozen=True)

    min_bitrate: PositiveInt = 8000
    max_bitrate: PositiveInt = Field(default=96000, le=384000)
    max_user_limit: NonNegativeInt = 99

    @model_validator(mode="after")
    def validate_bitrate_bounds(self) -> ChannelLimitSettings:
        if self.min_bitrate > self.max_bitrate:
            raise ValueError(ErrorMessages.INVALID_BITRATE_BOUNDS)
        return self

    def to_limits(self) -> ChannelLimits:
        return ChannelLimits(
            min_bitrate=self.min_bitrate,
            max_bitrate=self.max_bitrate,
            max_user_limit=self.max_user_limit,
        )


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD__TOKEN, DISCORD__COMMAND_PREFIX, etc. (nested with ``__``)
    - VOICE__ENABLED, VOICE__CONNECT_TIMEOUT_S
    - LIMITS__MAX_BITRATE, LIMITS__MAX_USER_LIMIT
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
    voice: VoiceSettings = Field(default_factory=VoiceSettings)
    limits: ChannelLimitSettings = Field(default_factory=ChannelLimitSettings)

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
