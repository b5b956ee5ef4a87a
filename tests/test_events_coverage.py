"""
Events and Exceptions Tests

Tests the in-memory event bus, the voice domain events and the domain
exception hierarchy.
"""

import pytest
from pydantic import ValidationError

from conftest import CHANNEL_A, GUILD_ID
from guild_voice.domain.shared.events import (
    ChannelConfigured,
    DomainEvent,
    EventBus,
    VoiceConnectionClosed,
    VoiceConnectionEstablished,
)
from guild_voice.domain.shared.exceptions import (
    ConnectionFailedError,
    DomainError,
    EnvironmentUnsupportedError,
    InvalidConfigurationError,
    PermissionDeniedError,
    RemoteRejectedError,
)


class TestDomainEvents:
    def test_unique_event_ids(self):
        assert DomainEvent().event_id != DomainEvent().event_id

    def test_occurred_at_is_utc(self):
        assert DomainEvent().occurred_at.tzinfo is not None

    def test_events_are_frozen(self):
        event = VoiceConnectionEstablished(guild_id=GUILD_ID, channel_id=CHANNEL_A)

        with pytest.raises(ValidationError):
            event.channel_id = 1  # type: ignore[misc]

    def test_closed_event_reason_defaults_empty(self):
        event = VoiceConnectionClosed(guild_id=GUILD_ID, channel_id=CHANNEL_A)

        assert event.reason == ""


class TestEventBus:
    async def test_publish_with_no_handlers(self):
        await EventBus().publish(VoiceConnectionEstablished(guild_id=GUILD_ID, channel_id=CHANNEL_A))

    async def test_handlers_receive_only_their_event_type(self):
        bus = EventBus()
        established, closed = [], []

        async def on_established(event):
            established.append(event)

        async def on_closed(event):
            closed.append(event)

        bus.subscribe(VoiceConnectionEstablished, on_established)
        bus.subscribe(VoiceConnectionClosed, on_closed)

        await bus.publish(VoiceConnectionEstablished(guild_id=GUILD_ID, channel_id=CHANNEL_A))

        assert len(established) == 1
        assert closed == []

    async def test_unsubscribe(self):
        bus = EventBus()
        calls = []

        async def handler(event):
            calls.append(event)

        bus.subscribe(ChannelConfigured, handler)
        bus.unsubscribe(ChannelConfigured, handler)
        bus.unsubscribe(ChannelConfigured, handler)

        await bus.publish(
            ChannelConfigured(guild_id=GUILD_ID, channel_id=CHANNEL_A, bitrate=64000, user_limit=0)
        )

        assert calls == []

    async def test_failing_handler_does_not_block_others(self):
        bus = EventBus()
        calls = []

        async def broken(event):
            raise RuntimeError("boom")

        async def healthy(event):
            calls.append(event)

        bus.subscribe(VoiceConnectionClosed, broken)
        bus.subscribe(VoiceConnectionClosed, healthy)

        await bus.publish(VoiceConnectionClosed(guild_id=GUILD_ID, channel_id=CHANNEL_A))

        assert len(calls) == 1

    async def test_clear(self):
        bus = EventBus()
        calls = []

        async def handler(event):
            calls.append(event)

        bus.subscribe(VoiceConnectionClosed, handler)
        bus.clear()
        await bus.publish(VoiceConnectionClosed(guild_id=GUILD_ID, channel_id=CHANNEL_A))

        assert calls == []


class TestDomainExceptions:
    def test_domain_error_defaults_code_to_class_name(self):
        error = DomainError("Something went wrong")

        assert str(error) == "Something went wrong"
        assert error.code == "DomainError"

    def test_invalid_configuration(self):
        error = InvalidConfigurationError("bitrate", 1)

        assert error.code == "INVALID_CONFIGURATION"
        assert "bitrate" in error.message
        assert isinstance(error, DomainError)

    def test_permission_denied(self):
        error = PermissionDeniedError("CONNECT", CHANNEL_A)

        assert error.permission == "CONNECT"
        assert str(CHANNEL_A) in error.message

    def test_environment_unsupported_default_message(self):
        assert "not available" in EnvironmentUnsupportedError().message

    def test_connection_failed(self):
        error = ConnectionFailedError(GUILD_ID, CHANNEL_A)

        assert error.code == "CONNECTION_FAILED"
        assert error.guild_id == GUILD_ID
        assert error.channel_id == CHANNEL_A

    def test_remote_rejected_carries_reason(self):
        error = RemoteRejectedError(CHANNEL_A, "missing permissions")

        assert error.reason == "missing permissions"
        assert error.message.endswith("missing permissions")

    def test_remote_rejected_without_reason(self):
        assert RemoteRejectedError(CHANNEL_A).reason is None
