"""Slash-command cog for voice sessions and channel configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from guild_voice.domain.shared.exceptions import (
    ConnectionFailedError,
    EnvironmentUnsupportedError,
    InvalidConfigurationError,
    PermissionDeniedError,
    RemoteRejectedError,
)
from guild_voice.domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates
from guild_voice.infrastructure.discord.cogs.channel_sync_cog import channel_payload
from guild_voice.infrastructure.discord.guards.voice_guards import (
    get_member_voice_channel,
    send_ephemeral,
)

if TYPE_CHECKING:
    from ....application.services.voice_channel import VoiceChannel
    from ....config.container import Container

logger = logging.getLogger(__name__)


class VoiceCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    def _facade_for(self, channel: discord.VoiceChannel | discord.StageChannel) -> VoiceChannel:
        directory = self.container.directory
        descriptor = directory.get(channel.id)
        if descriptor is None:
            descriptor = directory.sync(channel.guild.id, channel_payload(channel))
        return self.container.voice_channel(descriptor)

    # ─────────────────────────────────────────────────────────────────
    # Sessions
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="join", description="Join your current voice channel.")
    @app_commands.guild_only()
    async def join(self, interaction: discord.Interaction) -> None:
        channel = await get_member_voice_channel(interaction)
        if channel is None:
            return

        await interaction.response.defer(ephemeral=True)
        voice_channel = self._facade_for(channel)

        try:
            await voice_channel.join()
        except EnvironmentUnsupportedError:
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_VOICE_UNSUPPORTED)
            return
        except PermissionDeniedError:
            await send_ephemeral(
                interaction, DiscordUIMessages.ERROR_PERMISSION_DENIED.format(channel=channel.name)
            )
            return
        except ConnectionFailedError as e:
            logger.warning(LogTemplates.VOICE_JOIN_FAILED, channel.id, e.message)
            await send_ephemeral(
                interaction,
                DiscordUIMessages.ERROR_COULD_NOT_JOIN_VOICE.format(channel=channel.name),
            )
            return

        await send_ephemeral(interaction, DiscordUIMessages.SUCCESS_JOINED.format(channel=channel.name))

    @app_commands.command(name="leave", description="Disconnect from voice in this server.")
    @app_commands.guild_only()
    async def leave(self, interaction: discord.Interaction) -> None:
        if not interaction.guild:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
            return

        guild_id = interaction.guild.id
        connection = self.container.registry.get(guild_id)
        if connection is None:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_NOT_CONNECTED_TO_VOICE)
            return

        await interaction.response.defer(ephemeral=True)

        descriptor = self.container.directory.get(connection.channel_id)
        if descriptor is not None:
            await self.container.voice_channel(descriptor).leave()
            name = descriptor.name
        else:
            # Channel vanished from the directory (deleted while connected)
            await self.container.session_manager.leave(guild_id, connection.channel_id)
            name = str(connection.channel_id)

        await send_ephemeral(interaction, DiscordUIMessages.SUCCESS_LEFT.format(channel=name))

    # ─────────────────────────────────────────────────────────────────
    # Configuration
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="bitrate", description="Set the bitrate of your voice channel.")
    @app_commands.describe(bitrate="Bitrate in bits per second (e.g. 64000)")
    @app_commands.guild_only()
    @app_commands.default_permissions(manage_channels=True)
    async def bitrate(self, interaction: discord.Interaction, bitrate: int) -> None:
        voice_channel = await self._configure(interaction, bitrate=bitrate)
        if voice_channel is None:
            return

        await send_ephemeral(
            interaction,
            DiscordUIMessages.SUCCESS_BITRATE_SET.format(
                channel=voice_channel.name, bitrate=voice_channel.bitrate
            ),
        )

    @app_commands.command(name="userlimit", description="Set the user limit of your voice channel.")
    @app_commands.describe(limit="Maximum members, 0 removes the limit")
    @app_commands.guild_only()
    @app_commands.default_permissions(manage_channels=True)
    async def userlimit(self, interaction: discord.Interaction, limit: int) -> None:
        voice_channel = await self._configure(interaction, user_limit=limit)
        if voice_channel is None:
            return

        if voice_channel.user_limit == 0:
            message = DiscordUIMessages.SUCCESS_USER_LIMIT_CLEARED.format(channel=voice_channel.name)
        else:
            message = DiscordUIMessages.SUCCESS_USER_LIMIT_SET.format(
                channel=voice_channel.name, user_limit=voice_channel.user_limit
            )
        await send_ephemeral(interaction, message)

    async def _configure(
        self,
        interaction: discord.Interaction,
        *,
        bitrate: int | None = None,
        user_limit: int | None = None,
    ) -> VoiceChannel | None:
        """Apply a configuration change to the member's channel; None if it was refused."""
        channel = await get_member_voice_channel(interaction)
        if channel is None:
            return None

        await interaction.response.defer(ephemeral=True)
        voice_channel = self._facade_for(channel)

        try:
            return await voice_channel.edit(bitrate=bitrate, user_limit=user_limit)
        except InvalidConfigurationError as e:
            await send_ephemeral(
                interaction, DiscordUIMessages.ERROR_INVALID_CONFIGURATION.format(detail=e.message)
            )
        except RemoteRejectedError:
            await send_ephemeral(
                interaction, DiscordUIMessages.ERROR_REMOTE_REJECTED.format(channel=channel.name)
            )
        return None


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(VoiceCog(bot, container))
