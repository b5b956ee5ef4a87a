"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the registry, services and adapters.
Components are created on-demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.interfaces.config_sync import ChannelConfigSync
    from ..application.interfaces.permission_gate import PermissionGate
    from ..application.interfaces.transport_negotiator import TransportNegotiator
    from ..application.interfaces.voice_environment import VoiceEnvironment
    from ..application.services.channel_config import ChannelConfigService
    from ..application.services.session_manager import VoiceSessionManager
    from ..application.services.voice_channel import VoiceChannel
    from ..domain.shared.events import EventBus
    from ..domain.voice.directory import ChannelDirectory
    from ..domain.voice.entities import ChannelDescriptor
    from ..domain.voice.registry import ConnectionRegistry
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    This container manages all application dependencies and their lifecycle.
    Components are lazily initialized when first accessed. The connection
    registry lives exactly as long as the container: created on first use,
    cleared on :meth:`shutdown`.
    """

    settings: Settings
    _bot: Bot | None = None

    # Process-wide state
    _registry: ConnectionRegistry | None = None
    _directory: ChannelDirectory | None = None
    _event_bus: EventBus | None = None

    # Infrastructure adapters
    _transport_negotiator: TransportNegotiator | None = None
    _permission_gate: PermissionGate | None = None
    _voice_environment: VoiceEnvironment | None = None
    _config_sync: ChannelConfigSync | None = None

    # Application services
    _session_manager: VoiceSessionManager | None = None
    _config_service: ChannelConfigService | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Process-wide State ===

    @property
    def registry(self) -> ConnectionRegistry:
        """Get the voice connection registry."""
        if self._registry is None:
            from ..domain.voice.registry import ConnectionRegistry

            self._registry = ConnectionRegistry()
        return self._registry

    @property
    def directory(self) -> ChannelDirectory:
        """Get the voice channel directory."""
        if self._directory is None:
            from ..domain.voice.directory import ChannelDirectory

            self._directory = ChannelDirectory()
        return self._directory

    @property
    def event_bus(self) -> EventBus:
        """Get the domain event bus."""
        if self._event_bus is None:
            from ..domain.shared.events import EventBus

            self._event_bus = EventBus()
        return self._event_bus

    # === Infrastructure Adapters ===

    @property
    def transport_negotiator(self) -> TransportNegotiator:
        """Get the voice transport negotiator."""
        if self._transport_negotiator is None:
            from ..infrastructure.discord.adapters.transport_negotiator import (
                DiscordTransportNegotiator,
            )

            self._transport_negotiator = DiscordTransportNegotiator(self.bot, self.settings.voice)
        return self._transport_negotiator

    @property
    def permission_gate(self) -> PermissionGate:
        """Get the permission gate."""
        if self._permission_gate is None:
            from ..infrastructure.discord.adapters.permission_gate import DiscordPermissionGate

            self._permission_gate = DiscordPermissionGate(self.bot)
        return self._permission_gate

    @property
    def voice_environment(self) -> VoiceEnvironment:
        """Get the runtime voice environment check."""
        if self._voice_environment is None:
            from ..infrastructure.runtime import RuntimeVoiceEnvironment

            self._voice_environment = RuntimeVoiceEnvironment(self.settings.voice)
        return self._voice_environment

    @property
    def config_sync(self) -> ChannelConfigSync:
        """Get the remote channel configuration sync."""
        if self._config_sync is None:
            from ..infrastructure.discord.adapters.config_sync import DiscordChannelConfigSync

            self._config_sync = DiscordChannelConfigSync(self.bot)
        return self._config_sync

    # === Application Services ===

    @property
    def session_manager(self) -> VoiceSessionManager:
        """Get the voice session manager."""
        if self._session_manager is None:
            from ..application.services.session_manager import VoiceSessionManager

            self._session_manager = VoiceSessionManager(
                registry=self.registry,
                negotiator=self.transport_negotiator,
                permission_gate=self.permission_gate,
                environment=self.voice_environment,
                event_bus=self.event_bus,
                connect_timeout=self.settings.voice.connect_timeout_s,
            )
        return self._session_manager

    @property
    def config_service(self) -> ChannelConfigService:
        """Get the channel configuration service."""
        if self._config_service is None:
            from ..application.services.channel_config import ChannelConfigService

            self._config_service = ChannelConfigService(
                config_sync=self.config_sync,
                limits=self.settings.limits.to_limits(),
                event_bus=self.event_bus,
            )
        return self._config_service

    def voice_channel(
        self, descriptor: ChannelDescriptor, *, actor_id: int | None = None
    ) -> VoiceChannel:
        """Build a facade for *descriptor*, acting as the bot user by default."""
        from ..application.services.voice_channel import VoiceChannel

        if actor_id is None:
            actor_id = self.bot.user.id  # type: ignore[union-attr]

        return VoiceChannel(
            descriptor,
            actor_id=actor_id,
            session_manager=self.session_manager,
            config_service=self.config_service,
            registry=self.registry,
            permission_gate=self.permission_gate,
            environment=self.voice_environment,
        )

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Create the process-wide state before the gateway starts delivering events."""
        _ = self.registry
        _ = self.directory
        _ = self.event_bus

    async def shutdown(self) -> int:
        """Disconnect every voice session and clear process-wide state.

        Returns:
            How many voice sessions were closed.
        """
        closed = 0
        if self._session_manager is not None:
            try:
                closed = await self._session_manager.disconnect_all()
            except Exception as exc:
                logger.warning(LogTemplates.SESSION_SHUTDOWN_FAILED, exc)

        if self._registry is not None:
            self._registry.clear()
        if self._directory is not None:
            self._directory.clear()
        if self._event_bus is not None:
            self._event_bus.clear()
        return closed


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
