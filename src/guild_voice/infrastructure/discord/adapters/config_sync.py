"""Remote configuration sync pushing bitrate / user-limit edits to Discord."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from guild_voice.application.interfaces.config_sync import ChannelConfigSync
from guild_voice.domain.shared.exceptions import RemoteRejectedError
from guild_voice.domain.shared.messages import LogTemplates
from guild_voice.domain.voice.value_objects import ChannelConfig

if TYPE_CHECKING:
    from ....domain.voice.entities import ChannelDescriptor
    from ....domain.voice.value_objects import ChannelConfigUpdate

logger = logging.getLogger(__name__)


class DiscordChannelConfigSync(ChannelConfigSync):
    def __init__(self, bot: discord.Client) -> None:
        self._bot = bot

    async def push(self, channel: ChannelDescriptor, update: ChannelConfigUpdate) -> ChannelConfig:
        guild = self._bot.get_guild(channel.guild_id)
        voice_channel = guild.get_channel(channel.id) if guild is not None else None
        if not isinstance(voice_channel, discord.VoiceChannel | discord.StageChannel):
            logger.warning(LogTemplates.CHANNEL_NOT_VOICE, channel.id)
            raise RemoteRejectedError(channel.id, "channel not found")

        try:
            edited = await voice_channel.edit(**update.to_payload())
        except discord.Forbidden as e:
            logger.warning(LogTemplates.CONFIG_SYNC_FAILED, channel.id, e)
            raise RemoteRejectedError(channel.id, "missing permissions") from e
        except discord.HTTPException as e:
            logger.warning(LogTemplates.CONFIG_SYNC_FAILED, channel.id, e)
            raise RemoteRejectedError(channel.id, e.text or str(e)) from e

        # edit() may return None; the gateway update then carries the new values
        if edited is None:
            return channel.snapshot()
        return ChannelConfig(bitrate=edited.bitrate, user_limit=edited.user_limit)
