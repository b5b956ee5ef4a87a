"""Core domain entities for the voice bounded context."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from guild_voice.domain.shared.exceptions import InvalidOperationError
from guild_voice.domain.shared.types import (
    BitrateInt,
    ChannelIdField,
    ChannelNameStr,
    GuildIdField,
    UserLimitInt,
    UtcDatetimeField,
    utcnow,
)
from guild_voice.domain.voice.value_objects import (
    ChannelConfig,
    ChannelConfigUpdate,
    ChannelLimits,
    ConnectionState,
    TransportHandle,
)

DEFAULT_BITRATE = 64000


class ChannelDescriptor(BaseModel):
    """A voice-capable guild channel: its configuration and who is in it.

    The descriptor never stores a voice connection. Whether the client is
    connected here is always answered by the connection registry.
    """

    model_config = ConfigDict(strict=True, validate_assignment=True)

    id: ChannelIdField
    guild_id: GuildIdField
    name: ChannelNameStr
    bitrate: BitrateInt = DEFAULT_BITRATE
    user_limit: UserLimitInt = 0
    members: set[int] = Field(default_factory=set)
    type: Literal["voice"] = "voice"

    @classmethod
    def from_payload(cls, guild_id: int, data: Mapping[str, Any]) -> ChannelDescriptor:
        """Build a descriptor from a raw gateway channel payload."""
        return cls(
            id=int(data["id"]),
            guild_id=guild_id,
            name=data["name"],
            bitrate=data.get("bitrate", DEFAULT_BITRATE),
            user_limit=data.get("user_limit", 0),
            members={int(m) for m in data.get("members", ())},
        )

    def update_from_payload(self, data: Mapping[str, Any]) -> None:
        """Refresh from a gateway payload.

        A ``members`` key replaces the membership outright; without one the
        tracked membership is kept.
        """
        if "name" in data:
            self.name = data["name"]
        if "bitrate" in data:
            self.bitrate = data["bitrate"]
        if "user_limit" in data:
            self.user_limit = data["user_limit"]
        if "members" in data:
            self.members = {int(m) for m in data["members"]}

    # ── Configuration ────────────────────────────────────────────────

    def snapshot(self) -> ChannelConfig:
        return ChannelConfig(bitrate=self.bitrate, user_limit=self.user_limit)

    def apply(self, config: ChannelConfig | ChannelConfigUpdate) -> None:
        """Overwrite configuration fields without bounds checks (rollback / canonical values)."""
        if config.bitrate is not None:
            self.bitrate = config.bitrate
        if config.user_limit is not None:
            self.user_limit = config.user_limit

    def configure(
        self,
        bitrate: int | None = None,
        user_limit: int | None = None,
        *,
        limits: ChannelLimits | None = None,
    ) -> ChannelDescriptor:
        """Validate and apply a configuration change.

        Both values are checked before either is written, so a rejected
        change leaves the descriptor exactly as it was.

        Raises:
            InvalidConfigurationError: If a value is not an integer or is
                outside the platform bounds.
        """
        update = (limits or ChannelLimits()).check(bitrate=bitrate, user_limit=user_limit)
        self.apply(update)
        return self

    # ── Membership ───────────────────────────────────────────────────

    def add_member(self, member_id: int) -> None:
        self.members.add(member_id)

    def remove_member(self, member_id: int) -> None:
        self.members.discard(member_id)

    def has_member(self, member_id: int) -> bool:
        return member_id in self.members

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def is_full(self) -> bool:
        return self.user_limit > 0 and self.member_count >= self.user_limit


class VoiceConnection(BaseModel):
    """A live voice session binding one guild to one channel.

    Owned by the connection registry entry for its guild; ``channel_id`` is
    a reference, the channel itself may be deleted while this drains.
    """

    model_config = ConfigDict(strict=True, arbitrary_types_allowed=True)

    guild_id: GuildIdField
    channel_id: ChannelIdField
    handle: TransportHandle = None
    state: ConnectionState = ConnectionState.IDLE
    connected_at: UtcDatetimeField | None = None

    @property
    def key(self) -> tuple[int, int]:
        return (self.guild_id, self.channel_id)

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    def transition_to(self, target: ConnectionState) -> ConnectionState:
        """Move to *target*, returning the previous state.

        Raises:
            InvalidOperationError: If the lifecycle does not allow the move.
        """
        previous = self.state
        if not previous.can_transition_to(target):
            raise InvalidOperationError(
                operation=f"transition to {target.value}",
                current_state=previous.value,
            )
        self.state = target
        if target is ConnectionState.CONNECTED:
            self.connected_at = utcnow()
        return previous
