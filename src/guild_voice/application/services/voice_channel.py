"""Per-channel voice facade composing the session manager, registry and gates."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.shared.types import UserIdField
    from ...domain.voice.entities import ChannelDescriptor, VoiceConnection
    from ...domain.voice.registry import ConnectionRegistry
    from ..interfaces.permission_gate import PermissionGate
    from ..interfaces.voice_environment import VoiceEnvironment
    from .channel_config import ChannelConfigService
    from .session_manager import VoiceSessionManager


class VoiceChannel:
    """A guild voice channel as seen by the client acting as *actor_id*.

    Example::

        channel = container.voice_channel(descriptor)
        if channel.joinable:
            connection = await channel.join()
        await channel.set_bitrate(48000)
        await channel.leave()
    """

    def __init__(
        self,
        descriptor: ChannelDescriptor,
        *,
        actor_id: UserIdField,
        session_manager: VoiceSessionManager,
        config_service: ChannelConfigService,
        registry: ConnectionRegistry,
        permission_gate: PermissionGate,
        environment: VoiceEnvironment,
    ) -> None:
        self._descriptor = descriptor
        self._actor_id = actor_id
        self._session_manager = session_manager
        self._config_service = config_service
        self._registry = registry
        self._permission_gate = permission_gate
        self._environment = environment

    # ── Descriptor passthroughs ──────────────────────────────────────

    @property
    def descriptor(self) -> ChannelDescriptor:
        return self._descriptor

    @property
    def id(self) -> int:
        return self._descriptor.id

    @property
    def guild_id(self) -> int:
        return self._descriptor.guild_id

    @property
    def name(self) -> str:
        return self._descriptor.name

    @property
    def bitrate(self) -> int:
        return self._descriptor.bitrate

    @property
    def user_limit(self) -> int:
        """Maximum number of members, 0 meaning unlimited."""
        return self._descriptor.user_limit

    @property
    def members(self) -> frozenset[int]:
        return frozenset(self._descriptor.members)

    # ── Derived state ────────────────────────────────────────────────

    @property
    def connection(self) -> VoiceConnection | None:
        """The client's voice connection for this channel, if connected here.

        Resolved through the registry on every access, never cached.
        """
        return self._registry.lookup(self.guild_id, self.id)

    @property
    def joinable(self) -> bool:
        if not self._environment.is_supported():
            return False
        return self._permission_gate.can_connect(self._actor_id, self._descriptor)

    @property
    def speakable(self) -> bool:
        return self._permission_gate.can_speak(self._actor_id, self._descriptor)

    # ── Operations ───────────────────────────────────────────────────

    async def join(self) -> VoiceConnection:
        """Join this channel, leaving any other channel in the guild first."""
        return await self._session_manager.join(self._descriptor, self._actor_id)

    async def leave(self) -> None:
        """Leave this channel; does nothing unless connected to it."""
        if not self._environment.is_supported():
            return
        await self._session_manager.leave(self.guild_id, self.id)

    async def edit(
        self, *, bitrate: int | None = None, user_limit: int | None = None
    ) -> VoiceChannel:
        await self._config_service.configure(
            self._descriptor, bitrate=bitrate, user_limit=user_limit
        )
        return self

    async def set_bitrate(self, bitrate: int) -> VoiceChannel:
        return await self.edit(bitrate=bitrate)

    async def set_user_limit(self, user_limit: int) -> VoiceChannel:
        return await self.edit(user_limit=user_limit)

    def __repr__(self) -> str:
        return f"<VoiceChannel id={self.id} guild_id={self.guild_id} name={self.name!r}>"
