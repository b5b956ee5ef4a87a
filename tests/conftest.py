import asyncio
import itertools

import pytest

from guild_voice.application.interfaces.config_sync import ChannelConfigSync
from guild_voice.application.interfaces.permission_gate import PermissionGate
from guild_voice.application.interfaces.transport_negotiator import TransportNegotiator
from guild_voice.application.interfaces.voice_environment import VoiceEnvironment
from guild_voice.domain.voice.value_objects import ChannelConfig

GUILD_ID = 111111111111111111
OTHER_GUILD_ID = 222222222222222222
CHANNEL_A = 333333333333333333
CHANNEL_B = 444444444444444444
BOT_USER_ID = 999999999999999999


# ============================================================================
# Port Fakes
# ============================================================================


class FakeHandle:
    """Stand-in for a discord.py voice client."""

    _ids = itertools.count(1)

    def __init__(self, channel_id: int) -> None:
        self.id = next(self._ids)
        self.channel_id = channel_id
        self.disconnected = False

    def __repr__(self) -> str:
        return f"<FakeHandle #{self.id} channel={self.channel_id}>"


class FakeNegotiator(TransportNegotiator):
    """Records every negotiation; can be told to fail, hang or wait on a gate."""

    def __init__(self) -> None:
        self.connect_calls: list[int] = []
        self.calls: list[tuple[str, int]] = []
        self.disconnected: list[FakeHandle] = []
        self.fail_with: BaseException | None = None
        self.disconnect_error: BaseException | None = None
        self.gate: asyncio.Event | None = None
        self.started = asyncio.Event()

    async def connect(self, channel):
        self.connect_calls.append(channel.id)
        self.calls.append(("connect", channel.id))
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with
        return FakeHandle(channel.id)

    async def disconnect(self, handle):
        if handle is None:
            return
        handle.disconnected = True
        self.calls.append(("disconnect", handle.channel_id))
        self.disconnected.append(handle)
        if self.disconnect_error is not None:
            raise self.disconnect_error


class FakePermissionGate(PermissionGate):
    def __init__(self, *, connect: bool = True, speak: bool = True) -> None:
        self.connect = connect
        self.speak = speak
        self.denied_channels: set[int] = set()

    def can_connect(self, actor_id, channel) -> bool:
        return self.connect and channel.id not in self.denied_channels

    def can_speak(self, actor_id, channel) -> bool:
        return self.speak


class FakeEnvironment(VoiceEnvironment):
    def __init__(self, supported: bool = True) -> None:
        self.supported = supported

    def is_supported(self) -> bool:
        return self.supported


class FakeConfigSync(ChannelConfigSync):
    """Echoes the merged values back unless told to reject or to canonicalize."""

    def __init__(self) -> None:
        self.pushes: list[dict[str, int]] = []
        self.fail_with: BaseException | None = None
        self.canonical: ChannelConfig | None = None
        self.seen_during_push: ChannelConfig | None = None

    async def push(self, channel, update):
        self.pushes.append(update.to_payload())
        self.seen_during_push = channel.snapshot()
        if self.fail_with is not None:
            raise self.fail_with
        if self.canonical is not None:
            return self.canonical
        return channel.snapshot()


# ============================================================================
# Domain Fixtures
# ============================================================================


@pytest.fixture
def make_descriptor():
    """Factory for channel descriptors in the test guild."""
    from guild_voice.domain.voice.entities import ChannelDescriptor

    def _make(channel_id: int = CHANNEL_A, guild_id: int = GUILD_ID, **overrides):
        fields = {"name": f"voice-{channel_id % 1000}", "bitrate": 64000, "user_limit": 0}
        fields.update(overrides)
        return ChannelDescriptor(id=channel_id, guild_id=guild_id, **fields)

    return _make


@pytest.fixture
def channel_a(make_descriptor):
    return make_descriptor(CHANNEL_A, name="General")


@pytest.fixture
def channel_b(make_descriptor):
    return make_descriptor(CHANNEL_B, name="Gaming")


@pytest.fixture
def registry():
    from guild_voice.domain.voice.registry import ConnectionRegistry

    return ConnectionRegistry()


@pytest.fixture
def event_bus():
    from guild_voice.domain.shared.events import EventBus

    return EventBus()


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def negotiator():
    return FakeNegotiator()


@pytest.fixture
def permission_gate():
    return FakePermissionGate()


@pytest.fixture
def environment():
    return FakeEnvironment()


@pytest.fixture
def config_sync():
    return FakeConfigSync()


@pytest.fixture
def session_manager(registry, negotiator, permission_gate, environment, event_bus):
    from guild_voice.application.services.session_manager import VoiceSessionManager

    return VoiceSessionManager(
        registry=registry,
        negotiator=negotiator,
        permission_gate=permission_gate,
        environment=environment,
        event_bus=event_bus,
        connect_timeout=1.0,
    )


@pytest.fixture
def config_service(config_sync, event_bus):
    from guild_voice.application.services.channel_config import ChannelConfigService

    return ChannelConfigService(config_sync=config_sync, event_bus=event_bus)


@pytest.fixture
def make_voice_channel(session_manager, config_service, registry, permission_gate, environment):
    """Factory wrapping a descriptor in the VoiceChannel facade."""
    from guild_voice.application.services.voice_channel import VoiceChannel

    def _make(descriptor, actor_id: int = BOT_USER_ID):
        return VoiceChannel(
            descriptor,
            actor_id=actor_id,
            session_manager=session_manager,
            config_service=config_service,
            registry=registry,
            permission_gate=permission_gate,
            environment=environment,
        )

    return _make


@pytest.fixture
def recorded_events(event_bus):
    """Subscribe to every voice event and collect what gets published."""
    from guild_voice.domain.shared.events import (
        ChannelConfigRolledBack,
        ChannelConfigured,
        VoiceConnectionClosed,
        VoiceConnectionEstablished,
    )

    events = []

    async def _record(event):
        events.append(event)

    for event_type in (
        VoiceConnectionEstablished,
        VoiceConnectionClosed,
        ChannelConfigured,
        ChannelConfigRolledBack,
    ):
        event_bus.subscribe(event_type, _record)
    return events
