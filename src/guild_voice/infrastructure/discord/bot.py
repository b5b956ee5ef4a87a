"""Discord client hosting the voice cogs on top of the DI container."""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from guild_voice.domain.shared.exceptions import DomainError
from guild_voice.domain.shared.messages import DiscordUIMessages, LogTemplates
from guild_voice.infrastructure.discord.cogs.channel_sync_cog import sync_guild

if TYPE_CHECKING:
    from ...config.container import Container
    from ...config.settings import Settings

logger = logging.getLogger(__name__)

COGS: tuple[str, ...] = (
    "guild_voice.infrastructure.discord.cogs.channel_sync_cog",
    "guild_voice.infrastructure.discord.cogs.voice_cog",
)


class VoiceBot(commands.Bot):
    """Gateway client for voice sessions.

    Only the voice-state, guild and member intents are requested: the
    directory is built from guild channels and voice states, and permission
    checks resolve members from the guild cache.
    """

    def __init__(self, container: Container, settings: Settings, **kwargs) -> None:
        intents = discord.Intents.none()
        intents.guilds = True
        intents.voice_states = True
        intents.members = True

        super().__init__(
            command_prefix=settings.discord.command_prefix,
            intents=intents,
            help_command=None,
            **kwargs,
        )

        self.container = container
        self.settings = settings
        self._closing: asyncio.Future[None] | None = None
        container.set_bot(self)

    async def setup_hook(self) -> None:
        logger.info(LogTemplates.BOT_SETUP)

        try:
            await self.container.initialize()
        except Exception as e:
            logger.exception(LogTemplates.BOT_CONTAINER_INIT_FAILED, e)
            raise
        logger.info(LogTemplates.BOT_CONTAINER_INITIALIZED)

        failed = await self._load_cogs()
        logger.info(LogTemplates.BOT_COGS_LOADED_SUMMARY, len(COGS) - len(failed), len(failed))

        self.tree.on_error = self._on_app_command_error
        if self.settings.discord.sync_on_startup:
            await self._sync_commands()

        logger.info(LogTemplates.BOT_SETUP_COMPLETE)

    async def _load_cogs(self) -> list[str]:
        """Load every voice extension, returning the ones that failed."""
        failed: list[str] = []
        for extension in COGS:
            try:
                await self.load_extension(extension)
            except Exception as e:
                logger.exception(LogTemplates.BOT_COG_LOAD_FAILED, extension, e)
                failed.append(extension)
            else:
                logger.info(LogTemplates.BOT_COG_LOADED, extension)
        return failed

    async def _sync_commands(self) -> None:
        # Test guilds receive the global commands immediately
        for guild_id in self.settings.discord.test_guild_ids:
            guild = discord.Object(id=guild_id)
            self.tree.copy_global_to(guild=guild)
            try:
                synced = await self.tree.sync(guild=guild)
            except discord.HTTPException as e:
                logger.warning(LogTemplates.BOT_SYNC_GUILD_FAILED, guild_id, e)
            else:
                logger.info(LogTemplates.BOT_SYNCED_GUILD, len(synced), guild_id)

        try:
            synced = await self.tree.sync()
        except discord.HTTPException as e:
            logger.warning(LogTemplates.BOT_SYNC_GLOBAL_FAILED, e)
        else:
            logger.info(LogTemplates.BOT_SYNCED_GLOBAL, len(synced))

    async def _on_app_command_error(
        self, interaction: discord.Interaction, error: Exception
    ) -> None:
        """Last-resort reply for errors the voice cog did not translate itself."""
        original = getattr(error, "original", error)
        logger.error(
            LogTemplates.BOT_SLASH_COMMAND_ERROR,
            getattr(interaction.command, "name", "<unknown>"),
            original,
        )

        detail = original.message if isinstance(original, DomainError) else original
        message = DiscordUIMessages.ERROR_GENERIC.format(error=detail)
        try:
            if interaction.response.is_done():
                await interaction.followup.send(message, ephemeral=True)
            else:
                await interaction.response.send_message(message, ephemeral=True)
        except discord.HTTPException:
            logger.warning(LogTemplates.BOT_ERROR_MESSAGE_SEND_FAILED)

    async def on_ready(self) -> None:
        """Rebuild the channel directory from the guild cache once the gateway is ready."""
        directory = self.container.directory
        for guild in self.guilds:
            sync_guild(directory, guild)

        logger.info(LogTemplates.BOT_READY, self.user, getattr(self.user, "id", None))
        logger.info(
            LogTemplates.BOT_DIRECTORY_SYNCED,
            len(directory),
            len(self.guilds),
            len(self.container.registry),
        )

    async def close(self) -> None:
        """Drop every voice session before the gateway connection goes away."""
        logger.info(LogTemplates.BOT_SHUTTING_DOWN)
        try:
            closed = await self.container.shutdown()
        except Exception as e:
            logger.warning(LogTemplates.BOT_CONTAINER_SHUTDOWN_ERROR, e)
        else:
            logger.info(LogTemplates.BOT_VOICE_SESSIONS_CLOSED, closed)

        await super().close()
        logger.info(LogTemplates.BOT_SHUTDOWN_COMPLETE)

    def request_close(self, timeout: float) -> None:
        """Schedule a bounded close; repeated signals reuse the pending one."""
        if self._closing is None or self._closing.done():
            self._closing = asyncio.ensure_future(self._close_within(timeout))

    async def _close_within(self, timeout: float) -> None:
        try:
            await asyncio.wait_for(self.close(), timeout=timeout)
        except TimeoutError:
            logger.warning(LogTemplates.BOT_SHUTDOWN_TIMEOUT, timeout)

    async def _serve(self, token: str, shutdown_timeout: float) -> None:
        async with self:
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(sig, self.request_close, shutdown_timeout)
            await self.start(token)

    def run_with_graceful_shutdown(self, token: str, *, shutdown_timeout: float = 30.0) -> None:
        """Run until SIGINT/SIGTERM, then close voice sessions within *shutdown_timeout*."""
        asyncio.run(self._serve(token, shutdown_timeout))


def create_bot(container: Container, settings: Settings) -> VoiceBot:
    return VoiceBot(container=container, settings=settings)
