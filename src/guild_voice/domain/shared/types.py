"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the package is defined here once,
so models can simply annotate their fields::

    from guild_voice.domain.shared.types import DiscordSnowflake, NonEmptyStr

    class MyModel(BaseModel):
        guild_id: DiscordSnowflake
        name: NonEmptyStr
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import BeforeValidator, Field

# ── Numeric constraints ─────────────────────────────────────────────

DiscordSnowflake = Annotated[int, Field(gt=0, lt=2**64)]
"""Positive integer that fits a Discord snowflake (1 … 2^64-1)."""

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

PositiveInt = Annotated[int, Field(gt=0)]
"""Integer > 0."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

ChannelNameStr = Annotated[str, Field(min_length=1, max_length=100)]
"""Discord channel name: 1-100 characters."""


# ── Channel configuration constraints ───────────────────────────────

BitrateInt = Annotated[int, Field(gt=0)]
"""Voice bitrate in bits per second; the platform ceiling is checked separately."""

UserLimitInt = Annotated[int, Field(ge=0)]
"""Voice channel capacity, 0 meaning unlimited."""


# ── Settings-specific constraints ──────────────────────────────────

CommandPrefixStr = Annotated[str, Field(min_length=1, max_length=5)]
"""Bot command prefix: 1-5 characters."""

ConnectTimeoutS = Annotated[float, Field(gt=0.0, le=120.0)]
"""Voice negotiation timeout in seconds: (0, 120]."""


# ── Datetime constraints ────────────────────────────────────────────

def _ensure_utc(v: datetime) -> datetime:
    """Validate that a datetime is timezone-aware and normalise to UTC."""
    if v.tzinfo is None:
        raise ValueError("datetime must be timezone-aware (UTC)")
    return v.astimezone(UTC)


UtcDatetimeField = Annotated[datetime, BeforeValidator(_ensure_utc)]
"""Timezone-aware datetime, normalised to UTC on input."""


def utcnow() -> datetime:
    return datetime.now(UTC)


# ── Pydantic-compatible ID aliases ──────────────────────────────────

GuildIdField = DiscordSnowflake
"""Alias: guild ID used as a plain Pydantic field."""

UserIdField = DiscordSnowflake
"""Alias: user ID used as a plain Pydantic field."""

ChannelIdField = DiscordSnowflake
"""Alias: channel ID used as a plain Pydantic field."""
