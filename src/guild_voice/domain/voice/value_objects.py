"""Immutable value objects for the voice bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict

from guild_voice.domain.shared.exceptions import InvalidConfigurationError
from guild_voice.domain.shared.messages import ErrorMessages
from guild_voice.domain.shared.types import BitrateInt, UserLimitInt

TransportHandle: TypeAlias = Any
"""Opaque handle returned by a transport negotiator (e.g. a ``discord.VoiceClient``)."""


class ConnectionState(Enum):
    """Lifecycle of a guild's voice session."""

    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTING = "disconnecting"

    def can_transition_to(self, target: ConnectionState) -> bool:
        return target in _TRANSITIONS[self]

    @property
    def is_active(self) -> bool:
        return self in (ConnectionState.CONNECTING, ConnectionState.CONNECTED)


_TRANSITIONS: dict[ConnectionState, frozenset[ConnectionState]] = {
    ConnectionState.IDLE: frozenset({ConnectionState.CONNECTING}),
    # CONNECTING -> IDLE is the negotiation-failure edge.
    ConnectionState.CONNECTING: frozenset({ConnectionState.CONNECTED, ConnectionState.IDLE}),
    ConnectionState.CONNECTED: frozenset({ConnectionState.DISCONNECTING}),
    ConnectionState.DISCONNECTING: frozenset({ConnectionState.IDLE}),
}


class ChannelConfig(BaseModel):
    """The remotely-synced configuration of a voice channel."""

    model_config = ConfigDict(frozen=True, strict=True)

    bitrate: BitrateInt
    user_limit: UserLimitInt = 0


class ChannelConfigUpdate(BaseModel):
    """A partial configuration change; ``None`` fields are left untouched."""

    model_config = ConfigDict(frozen=True, strict=True)

    bitrate: int | None = None
    user_limit: int | None = None

    @property
    def is_empty(self) -> bool:
        return self.bitrate is None and self.user_limit is None

    def to_payload(self) -> dict[str, int]:
        """Only the fields that are actually being changed."""
        return self.model_dump(exclude_none=True)


@dataclass(frozen=True)
class ChannelLimits:
    """Platform bounds for voice channel configuration."""

    min_bitrate: int = 8000
    max_bitrate: int = 96000
    max_user_limit: int = 99

    def __post_init__(self) -> None:
        if self.min_bitrate > self.max_bitrate:
            raise ValueError(ErrorMessages.INVALID_BITRATE_BOUNDS)

    @staticmethod
    def _require_int(field: str, value: object) -> int:
        # bool is an int subclass but never a meaningful bitrate or limit
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidConfigurationError(
                field,
                value,
                ErrorMessages.CONFIG_NOT_INTEGER.format(field=field, value=value),
            )
        return value

    def check_bitrate(self, value: object) -> int:
        bitrate = self._require_int("bitrate", value)
        if not self.min_bitrate <= bitrate <= self.max_bitrate:
            raise InvalidConfigurationError(
                "bitrate",
                bitrate,
                ErrorMessages.BITRATE_OUT_OF_RANGE.format(
                    minimum=self.min_bitrate, maximum=self.max_bitrate, value=bitrate
                ),
            )
        return bitrate

    def check_user_limit(self, value: object) -> int:
        user_limit = self._require_int("user_limit", value)
        if not 0 <= user_limit <= self.max_user_limit:
            raise InvalidConfigurationError(
                "user_limit",
                user_limit,
                ErrorMessages.USER_LIMIT_OUT_OF_RANGE.format(
                    maximum=self.max_user_limit, value=user_limit
                ),
            )
        return user_limit

    def check(self, bitrate: object = None, user_limit: object = None) -> ChannelConfigUpdate:
        """Validate the raw values and build the partial update.

        Raises:
            InvalidConfigurationError: On the first value that is out of bounds.
        """
        return ChannelConfigUpdate(
            bitrate=None if bitrate is None else self.check_bitrate(bitrate),
            user_limit=None if user_limit is None else self.check_user_limit(user_limit),
        )
