"""Gateway listeners keeping the channel directory in step with Discord."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import discord
from discord.ext import commands

from guild_voice.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ....config.container import Container
    from ....domain.voice.directory import ChannelDirectory

logger = logging.getLogger(__name__)

VoiceLike = discord.VoiceChannel | discord.StageChannel


def channel_payload(channel: VoiceLike) -> dict[str, Any]:
    """Project a discord.py voice channel onto the directory's payload shape."""
    return {
        "id": channel.id,
        "name": channel.name,
        "bitrate": channel.bitrate,
        "user_limit": channel.user_limit,
        "members": list(channel.voice_states),
    }


def sync_guild(directory: ChannelDirectory, guild: discord.Guild) -> int:
    """Reconcile every voice and stage channel of *guild*; returns how many were synced."""
    channels = [*guild.voice_channels, *guild.stage_channels]
    for channel in channels:
        directory.sync(guild.id, channel_payload(channel))
    return len(channels)


class ChannelSyncCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    def _sync_channel(self, channel: VoiceLike) -> None:
        self.container.directory.sync(channel.guild.id, channel_payload(channel))

    def _sync_guild(self, guild: discord.Guild) -> None:
        sync_guild(self.container.directory, guild)

    # ─────────────────────────────────────────────────────────────────
    # Guild Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_guild_available(self, guild: discord.Guild) -> None:
        self._sync_guild(guild)

    @commands.Cog.listener()
    async def on_guild_join(self, guild: discord.Guild) -> None:
        logger.info(LogTemplates.DIRECTORY_GUILD_JOINED, guild.name, guild.id)
        self._sync_guild(guild)

    @commands.Cog.listener()
    async def on_guild_remove(self, guild: discord.Guild) -> None:
        forgotten = self.container.directory.forget_guild(guild.id)
        logger.info(LogTemplates.DIRECTORY_GUILD_FORGOTTEN, guild.id, forgotten)

        connection = self.container.registry.get(guild.id)
        if connection is not None:
            await self.container.session_manager.leave(guild.id, connection.channel_id)

    # ─────────────────────────────────────────────────────────────────
    # Channel Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_guild_channel_create(self, channel: discord.abc.GuildChannel) -> None:
        if isinstance(channel, VoiceLike):
            self._sync_channel(channel)

    @commands.Cog.listener()
    async def on_guild_channel_update(
        self, before: discord.abc.GuildChannel, after: discord.abc.GuildChannel
    ) -> None:
        if isinstance(after, VoiceLike):
            self._sync_channel(after)

    @commands.Cog.listener()
    async def on_guild_channel_delete(self, channel: discord.abc.GuildChannel) -> None:
        if not isinstance(channel, VoiceLike):
            return
        self.container.directory.remove(channel.id)
        await self.container.session_manager.leave(channel.guild.id, channel.id)

    # ─────────────────────────────────────────────────────────────────
    # Voice Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ) -> None:
        before_id = before.channel.id if before.channel else None
        after_id = after.channel.id if after.channel else None
        if before_id == after_id:
            return

        directory = self.container.directory
        if before_id is not None:
            directory.member_left(before_id, member.id)
        if after_id is not None:
            directory.member_joined(after_id, member.id)

        bot_user = self.bot.user
        if bot_user is None or member.id != bot_user.id or before_id is None:
            return

        # Kicked or dragged by someone else
        session_manager = self.container.session_manager
        if after_id is None:
            await session_manager.leave(member.guild.id, before_id)
        else:
            await session_manager.rebind(member.guild.id, after_id)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(ChannelSyncCog(bot, container))
