"""In-memory directory of voice channel descriptors observed from guilds.

Descriptors are created the first time a channel is synced, refreshed on
later syncs, and dropped when the channel is deleted upstream. This is
intentionally in-memory; it is rebuilt from the gateway on restart.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from guild_voice.domain.shared.messages import LogTemplates
from guild_voice.domain.voice.entities import ChannelDescriptor

logger = logging.getLogger(__name__)


class ChannelDirectory:
    def __init__(self) -> None:
        self._channels: dict[int, ChannelDescriptor] = {}

    def sync(self, guild_id: int, data: Mapping[str, Any]) -> ChannelDescriptor:
        """Create or refresh the descriptor for the channel in *data*."""
        channel_id = int(data["id"])
        descriptor = self._channels.get(channel_id)
        if descriptor is None:
            descriptor = ChannelDescriptor.from_payload(guild_id, data)
            self._channels[channel_id] = descriptor
        else:
            descriptor.update_from_payload(data)

        logger.debug(LogTemplates.DIRECTORY_SYNCED, descriptor.name, channel_id, guild_id)
        return descriptor

    def remove(self, channel_id: int) -> ChannelDescriptor | None:
        descriptor = self._channels.pop(channel_id, None)
        if descriptor is not None:
            logger.debug(LogTemplates.DIRECTORY_REMOVED, channel_id)
        return descriptor

    def get(self, channel_id: int) -> ChannelDescriptor | None:
        return self._channels.get(channel_id)

    def in_guild(self, guild_id: int) -> list[ChannelDescriptor]:
        return [c for c in self._channels.values() if c.guild_id == guild_id]

    def member_joined(self, channel_id: int, member_id: int) -> bool:
        """Record *member_id* in the channel; False if the channel is unknown."""
        descriptor = self._channels.get(channel_id)
        if descriptor is None:
            return False
        descriptor.add_member(member_id)
        logger.debug(LogTemplates.DIRECTORY_MEMBER_JOINED, member_id, channel_id)
        return True

    def member_left(self, channel_id: int, member_id: int) -> bool:
        descriptor = self._channels.get(channel_id)
        if descriptor is None:
            return False
        descriptor.remove_member(member_id)
        logger.debug(LogTemplates.DIRECTORY_MEMBER_LEFT, member_id, channel_id)
        return True

    def forget_guild(self, guild_id: int) -> int:
        """Drop every descriptor belonging to *guild_id*; returns how many."""
        stale = [cid for cid, c in self._channels.items() if c.guild_id == guild_id]
        for channel_id in stale:
            del self._channels[channel_id]
        return len(stale)

    def clear(self) -> None:
        self._channels.clear()

    def __len__(self) -> int:
        return len(self._channels)

    def __contains__(self, channel_id: object) -> bool:
        return channel_id in self._channels
