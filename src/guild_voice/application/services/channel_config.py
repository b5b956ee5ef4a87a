"""Channel Config Service - optimistic bitrate / user-limit changes with rollback."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ...domain.shared.events import ChannelConfigRolledBack, ChannelConfigured
from ...domain.shared.exceptions import RemoteRejectedError
from ...domain.shared.messages import LogTemplates
from ...domain.voice.value_objects import ChannelConfigUpdate, ChannelLimits

if TYPE_CHECKING:
    from ...domain.shared.events import EventBus
    from ...domain.voice.entities import ChannelDescriptor
    from ..interfaces.config_sync import ChannelConfigSync

logger = logging.getLogger(__name__)


class ChannelConfigService:
    """Applies configuration changes locally first, then syncs them remotely.

    The descriptor reflects the requested values as soon as validation
    passes. If the remote authority rejects the change the previous values
    are restored before the error reaches the caller; if it accepts, the
    canonical values it returns replace the requested ones.
    """

    def __init__(
        self,
        *,
        config_sync: ChannelConfigSync,
        limits: ChannelLimits | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self._config_sync = config_sync
        self._limits = limits or ChannelLimits()
        self._event_bus = event_bus
        self._locks: dict[int, asyncio.Lock] = {}

    @property
    def limits(self) -> ChannelLimits:
        return self._limits

    def _lock_for(self, channel_id: int) -> asyncio.Lock:
        lock = self._locks.get(channel_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[channel_id] = lock
        return lock

    async def configure(
        self,
        channel: ChannelDescriptor,
        *,
        bitrate: int | None = None,
        user_limit: int | None = None,
    ) -> ChannelDescriptor:
        """Change *channel*'s bitrate and/or user limit.

        Raises:
            InvalidConfigurationError: A value is out of bounds; nothing is sent.
            RemoteRejectedError: The remote refused; local values are rolled back.
        """
        async with self._lock_for(channel.id):
            previous = channel.snapshot()
            channel.configure(bitrate, user_limit, limits=self._limits)

            update = ChannelConfigUpdate(bitrate=bitrate, user_limit=user_limit)
            if update.is_empty:
                return channel

            try:
                canonical = await self._config_sync.push(channel, update)
            except BaseException as exc:
                channel.apply(previous)
                logger.warning(LogTemplates.CONFIG_ROLLED_BACK, channel.id, exc)
                if isinstance(exc, RemoteRejectedError):
                    await self._publish_rollback(channel, exc)
                raise

            channel.apply(canonical)

        logger.info(LogTemplates.CONFIG_APPLIED, channel.id, channel.bitrate, channel.user_limit)
        if self._event_bus is not None:
            await self._event_bus.publish(
                ChannelConfigured(
                    guild_id=channel.guild_id,
                    channel_id=channel.id,
                    bitrate=channel.bitrate,
                    user_limit=channel.user_limit,
                )
            )
        return channel

    async def _publish_rollback(self, channel: ChannelDescriptor, exc: RemoteRejectedError) -> None:
        if self._event_bus is None:
            return
        await self._event_bus.publish(
            ChannelConfigRolledBack(
                guild_id=channel.guild_id,
                channel_id=channel.id,
                reason=exc.reason or exc.message,
            )
        )
