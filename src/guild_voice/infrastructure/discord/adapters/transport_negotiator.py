"""Discord transport negotiator backed by discord.py voice clients."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from guild_voice.application.interfaces.transport_negotiator import TransportNegotiator
from guild_voice.config.settings import VoiceSettings
from guild_voice.domain.shared.exceptions import NegotiationError
from guild_voice.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ....domain.voice.entities import ChannelDescriptor

logger = logging.getLogger(__name__)


class DiscordTransportNegotiator(TransportNegotiator):
    def __init__(self, bot: discord.Client, settings: VoiceSettings | None = None) -> None:
        self._bot = bot
        self._settings = settings or VoiceSettings()

    def _get_voice_channel(
        self, guild_id: int, channel_id: int
    ) -> tuple[discord.Guild, discord.VoiceChannel | discord.StageChannel]:
        guild = self._bot.get_guild(guild_id)
        if guild is None:
            logger.warning(LogTemplates.GUILD_NOT_FOUND, guild_id)
            raise NegotiationError(ErrorMessages.GUILD_NOT_FOUND.format(guild_id=guild_id))

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            logger.warning(LogTemplates.CHANNEL_NOT_VOICE, channel_id)
            raise NegotiationError(ErrorMessages.CHANNEL_NOT_VOICE.format(channel_id=channel_id))

        return guild, channel

    async def connect(self, channel: ChannelDescriptor) -> discord.VoiceClient:
        guild, voice_channel = self._get_voice_channel(channel.guild_id, channel.id)

        # discord.py refuses to connect while it still tracks a client for the guild
        stale = guild.voice_client
        if stale is not None:
            await stale.disconnect(force=True)

        try:
            return await voice_channel.connect(
                timeout=self._settings.connect_timeout_s,
                self_deaf=self._settings.self_deaf,
            )
        except discord.Forbidden as e:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, channel.id)
            raise NegotiationError(str(e)) from e
        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            raise NegotiationError(str(e)) from e

    async def disconnect(self, handle: discord.VoiceProtocol | None) -> None:
        if handle is None:
            return
        guild = getattr(handle, "guild", None)
        await handle.disconnect(force=True)
        logger.debug(LogTemplates.VOICE_DISCONNECTED, getattr(guild, "id", None))
