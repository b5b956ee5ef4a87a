"""Voice Session Manager - owns the per-guild voice connection lifecycle."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ...domain.shared.events import DomainEvent, VoiceConnectionClosed, VoiceConnectionEstablished
from ...domain.shared.exceptions import (
    ConnectionFailedError,
    EnvironmentUnsupportedError,
    PermissionDeniedError,
)
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ...domain.voice.entities import VoiceConnection
from ...domain.voice.value_objects import ConnectionState, TransportHandle

if TYPE_CHECKING:
    from ...domain.shared.events import EventBus
    from ...domain.shared.types import UserIdField
    from ...domain.voice.entities import ChannelDescriptor
    from ...domain.voice.registry import ConnectionRegistry
    from ..interfaces.permission_gate import PermissionGate
    from ..interfaces.transport_negotiator import TransportNegotiator
    from ..interfaces.voice_environment import VoiceEnvironment

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT: float = 10.0


class VoiceSessionManager:
    """Drives join/leave through the connection state machine.

    Every join and leave for a guild runs under that guild's lock, so
    operations on the same guild apply one at a time and each observes the
    completed effects of the previous one. A join that arrives while another
    is negotiating waits for it and then reuses its connection.

    Events are published after the guild lock is released, so handlers may
    safely call back into the manager.
    """

    def __init__(
        self,
        *,
        registry: ConnectionRegistry,
        negotiator: TransportNegotiator,
        permission_gate: PermissionGate,
        environment: VoiceEnvironment,
        event_bus: EventBus | None = None,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    ) -> None:
        self._registry = registry
        self._negotiator = negotiator
        self._permission_gate = permission_gate
        self._environment = environment
        self._event_bus = event_bus
        self._connect_timeout = connect_timeout

        self._locks: dict[int, asyncio.Lock] = {}
        # Connections still negotiating; never visible through the registry.
        self._pending: dict[int, VoiceConnection] = {}

    def _lock_for(self, guild_id: int) -> asyncio.Lock:
        lock = self._locks.get(guild_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[guild_id] = lock
        return lock

    def state(self, guild_id: int) -> ConnectionState:
        """Current lifecycle state for *guild_id*, including in-flight negotiation."""
        pending = self._pending.get(guild_id)
        if pending is not None:
            return pending.state
        connection = self._registry.get(guild_id)
        return connection.state if connection is not None else ConnectionState.IDLE

    # ─────────────────────────────────────────────────────────────────
    # Join
    # ─────────────────────────────────────────────────────────────────

    async def join(self, channel: ChannelDescriptor, actor_id: UserIdField) -> VoiceConnection:
        """Connect to *channel*, moving off any other channel in the same guild.

        Joining the channel that is already connected returns the existing
        connection without renegotiating.

        Raises:
            EnvironmentUnsupportedError: The runtime cannot host voice.
            PermissionDeniedError: *actor_id* may not connect to *channel*.
            ConnectionFailedError: Transport negotiation failed or timed out.
        """
        if not self._environment.is_supported():
            logger.warning(LogTemplates.SESSION_ENVIRONMENT_UNSUPPORTED)
            raise EnvironmentUnsupportedError()

        if not self._permission_gate.can_connect(actor_id, channel):
            logger.info(LogTemplates.SESSION_PERMISSION_DENIED, actor_id, channel.id)
            raise PermissionDeniedError("CONNECT", channel.id)

        guild_id = channel.guild_id
        logger.debug(LogTemplates.SESSION_JOIN_REQUESTED, channel.id, guild_id, actor_id)

        events: list[DomainEvent] = []
        try:
            async with self._lock_for(guild_id):
                existing = self._registry.get(guild_id)
                if existing is not None:
                    if existing.channel_id == channel.id and existing.is_connected:
                        logger.debug(LogTemplates.SESSION_ALREADY_CONNECTED, channel.id, guild_id)
                        return existing

                    logger.info(
                        LogTemplates.SESSION_SWITCHING_CHANNEL,
                        guild_id,
                        existing.channel_id,
                        channel.id,
                    )
                    await self._teardown(existing)
                    events.append(
                        VoiceConnectionClosed(
                            guild_id=guild_id,
                            channel_id=existing.channel_id,
                            reason="moved",
                        )
                    )

                connection = await self._establish(channel)
                events.append(
                    VoiceConnectionEstablished(guild_id=guild_id, channel_id=channel.id)
                )
                return connection
        finally:
            await self._publish(events)

    async def _establish(self, channel: ChannelDescriptor) -> VoiceConnection:
        """Negotiate a new connection. Caller holds the guild lock."""
        guild_id = channel.guild_id
        connection = VoiceConnection(guild_id=guild_id, channel_id=channel.id)
        self._transition(connection, ConnectionState.CONNECTING)
        self._pending[guild_id] = connection

        negotiation = asyncio.ensure_future(self._negotiate(channel))
        try:
            handle = await asyncio.shield(negotiation)
        except asyncio.CancelledError:
            logger.info(LogTemplates.SESSION_JOIN_CANCELLED, channel.id, guild_id)
            await self._discard(guild_id, negotiation)
            self._transition(connection, ConnectionState.IDLE)
            raise
        except TimeoutError as exc:
            logger.error(LogTemplates.SESSION_CONNECT_TIMEOUT, channel.id, guild_id)
            self._transition(connection, ConnectionState.IDLE)
            raise ConnectionFailedError(
                guild_id,
                channel.id,
                ErrorMessages.CONNECTION_TIMEOUT.format(guild_id=guild_id, channel_id=channel.id),
            ) from exc
        except Exception as exc:
            logger.error(LogTemplates.SESSION_CONNECT_FAILED, channel.id, guild_id, exc)
            self._transition(connection, ConnectionState.IDLE)
            raise ConnectionFailedError(guild_id, channel.id) from exc
        finally:
            self._pending.pop(guild_id, None)

        connection.handle = handle
        self._transition(connection, ConnectionState.CONNECTED)
        self._registry.put(guild_id, connection)
        logger.info(LogTemplates.SESSION_CONNECTED, channel.id, guild_id)
        return connection

    async def _negotiate(self, channel: ChannelDescriptor) -> TransportHandle:
        return await asyncio.wait_for(self._negotiator.connect(channel), self._connect_timeout)

    async def _discard(self, guild_id: int, negotiation: asyncio.Future[TransportHandle]) -> None:
        """Let a superseded negotiation finish, then release whatever it produced."""
        try:
            handle = await negotiation
        except (Exception, asyncio.CancelledError):
            return
        await self._disconnect_handle(guild_id, handle)

    # ─────────────────────────────────────────────────────────────────
    # Leave
    # ─────────────────────────────────────────────────────────────────

    async def leave(self, guild_id: int, channel_id: int) -> bool:
        """Disconnect *guild_id* from *channel_id*.

        A no-op when the guild has no connection or is connected to a
        different channel. Never raises for transport errors.

        Returns:
            True if a connection was torn down.
        """
        async with self._lock_for(guild_id):
            existing = self._registry.get(guild_id)
            if existing is None or existing.channel_id != channel_id:
                logger.debug(
                    LogTemplates.SESSION_LEAVE_NOOP,
                    channel_id,
                    guild_id,
                    existing.channel_id if existing is not None else None,
                )
                return False

            await self._teardown(existing)

        await self._publish(
            [VoiceConnectionClosed(guild_id=guild_id, channel_id=channel_id, reason="left")]
        )
        return True

    async def rebind(self, guild_id: int, channel_id: int) -> bool:
        """Follow a move the platform made on its own, e.g. a moderator dragging the bot.

        The transport already sits in *channel_id*, so the handle is carried
        over to a fresh connection for that channel without renegotiating.
        Only a CONNECTED entry on another channel is rebound.

        Returns:
            True if the registry entry now points at *channel_id*.
        """
        async with self._lock_for(guild_id):
            existing = self._registry.get(guild_id)
            if existing is None or not existing.is_connected or existing.channel_id == channel_id:
                return False

            logger.info(
                LogTemplates.SESSION_MOVED_EXTERNALLY, guild_id, existing.channel_id, channel_id
            )
            moved = VoiceConnection(guild_id=guild_id, channel_id=channel_id, handle=existing.handle)
            self._transition(moved, ConnectionState.CONNECTING)
            self._transition(moved, ConnectionState.CONNECTED)

            self._transition(existing, ConnectionState.DISCONNECTING)
            self._transition(existing, ConnectionState.IDLE)
            self._registry.remove(guild_id)
            self._registry.put(guild_id, moved)

        await self._publish(
            [
                VoiceConnectionClosed(
                    guild_id=guild_id, channel_id=existing.channel_id, reason="moved"
                ),
                VoiceConnectionEstablished(guild_id=guild_id, channel_id=channel_id),
            ]
        )
        return True

    async def disconnect_all(self) -> int:
        """Tear down every registered connection; returns how many were closed."""
        closed = 0
        for guild_id in self._registry:
            connection = self._registry.get(guild_id)
            if connection is not None and await self.leave(guild_id, connection.channel_id):
                closed += 1

        logger.info(LogTemplates.SESSION_SHUTDOWN, closed)
        return closed

    async def _teardown(self, connection: VoiceConnection) -> None:
        """CONNECTED -> DISCONNECTING -> IDLE and drop the registry entry. Caller holds the lock."""
        self._transition(connection, ConnectionState.DISCONNECTING)
        try:
            await self._disconnect_handle(connection.guild_id, connection.handle)
        finally:
            self._transition(connection, ConnectionState.IDLE)
            self._registry.remove(connection.guild_id)
            logger.info(LogTemplates.SESSION_DISCONNECTED, connection.channel_id, connection.guild_id)

    async def _disconnect_handle(self, guild_id: int, handle: TransportHandle) -> None:
        try:
            await self._negotiator.disconnect(handle)
        except Exception:
            logger.exception(LogTemplates.SESSION_DISCONNECT_ERROR, guild_id)

    # ─────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def _transition(connection: VoiceConnection, target: ConnectionState) -> None:
        previous = connection.transition_to(target)
        logger.debug(
            LogTemplates.SESSION_STATE_CHANGED, connection.guild_id, previous.value, target.value
        )

    async def _publish(self, events: list[DomainEvent]) -> None:
        if self._event_bus is None:
            return
        for event in events:
            await self._event_bus.publish(event)
