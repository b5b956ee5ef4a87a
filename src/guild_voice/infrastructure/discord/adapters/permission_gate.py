"""Permission gate answering voice capability checks from discord.py's cache."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from guild_voice.application.interfaces.permission_gate import PermissionGate
from guild_voice.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ....domain.voice.entities import ChannelDescriptor

logger = logging.getLogger(__name__)


class DiscordPermissionGate(PermissionGate):
    """Evaluates CONNECT / SPEAK through ``channel.permissions_for(member)``.

    Unknown guilds, channels or members resolve to "not permitted". A full
    channel only admits members who may also move members.
    """

    def __init__(self, bot: discord.Client) -> None:
        self._bot = bot

    def _permissions(self, actor_id: int, channel: ChannelDescriptor) -> discord.Permissions | None:
        guild = self._bot.get_guild(channel.guild_id)
        if guild is None:
            logger.debug(LogTemplates.GUILD_NOT_FOUND, channel.guild_id)
            return None

        voice_channel = guild.get_channel(channel.id)
        if not isinstance(voice_channel, discord.VoiceChannel | discord.StageChannel):
            logger.debug(LogTemplates.CHANNEL_NOT_VOICE, channel.id)
            return None

        member = guild.me if guild.me is not None and guild.me.id == actor_id else None
        if member is None:
            member = guild.get_member(actor_id)
        if member is None:
            logger.debug(LogTemplates.MEMBER_NOT_FOUND, actor_id, channel.guild_id)
            return None

        return voice_channel.permissions_for(member)

    def can_connect(self, actor_id: int, channel: ChannelDescriptor) -> bool:
        permissions = self._permissions(actor_id, channel)
        if permissions is None or not permissions.connect:
            return False
        if channel.is_full and not channel.has_member(actor_id):
            return permissions.move_members
        return True

    def can_speak(self, actor_id: int, channel: ChannelDescriptor) -> bool:
        permissions = self._permissions(actor_id, channel)
        return permissions is not None and permissions.speak
