"""Process-wide table of live voice connections, one per guild."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from guild_voice.domain.shared.exceptions import RegistryConflictError
from guild_voice.domain.shared.messages import LogTemplates
from guild_voice.domain.voice.entities import VoiceConnection

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """Single source of truth for "is there a live connection for guild G".

    Holds at most one :class:`VoiceConnection` per guild. The registry never
    overwrites an entry: the previous connection has to be removed first,
    otherwise its transport handle would leak.

    Only the voice session manager writes here; everything else reads.
    """

    def __init__(self) -> None:
        self._connections: dict[int, VoiceConnection] = {}

    def get(self, guild_id: int) -> VoiceConnection | None:
        return self._connections.get(guild_id)

    def lookup(self, guild_id: int, channel_id: int) -> VoiceConnection | None:
        """Return the guild's connection only if it is bound to *channel_id*."""
        connection = self._connections.get(guild_id)
        if connection is not None and connection.channel_id == channel_id:
            return connection
        return None

    def put(self, guild_id: int, connection: VoiceConnection) -> None:
        """Publish *connection* for *guild_id*.

        Raises:
            RegistryConflictError: If the guild already holds a different connection.
        """
        existing = self._connections.get(guild_id)
        if existing is connection:
            return
        if existing is not None:
            raise RegistryConflictError(guild_id)

        self._connections[guild_id] = connection
        logger.debug(LogTemplates.REGISTRY_PUT, guild_id, connection.channel_id)

    def remove(self, guild_id: int) -> VoiceConnection | None:
        connection = self._connections.pop(guild_id, None)
        if connection is not None:
            logger.debug(LogTemplates.REGISTRY_REMOVED, guild_id)
        return connection

    def connections(self) -> list[VoiceConnection]:
        return list(self._connections.values())

    def clear(self) -> None:
        count = len(self._connections)
        self._connections.clear()
        logger.debug(LogTemplates.REGISTRY_CLEARED, count)

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._connections

    def __len__(self) -> int:
        return len(self._connections)

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._connections))
