"""
Unit Tests for the Voice Domain Layer

Tests for:
- ConnectionState transitions
- ChannelLimits bounds checking
- ChannelConfig / ChannelConfigUpdate value objects
- ChannelDescriptor payload handling, configuration and membership
- VoiceConnection lifecycle
"""

import pytest
from pydantic import ValidationError

from conftest import CHANNEL_A, GUILD_ID
from guild_voice.domain.shared.exceptions import InvalidConfigurationError, InvalidOperationError
from guild_voice.domain.voice.entities import DEFAULT_BITRATE, ChannelDescriptor, VoiceConnection
from guild_voice.domain.voice.value_objects import (
    ChannelConfig,
    ChannelConfigUpdate,
    ChannelLimits,
    ConnectionState,
)

# =============================================================================
# ConnectionState
# =============================================================================


class TestConnectionState:
    @pytest.mark.parametrize(
        "source,target",
        [
            (ConnectionState.IDLE, ConnectionState.CONNECTING),
            (ConnectionState.CONNECTING, ConnectionState.CONNECTED),
            (ConnectionState.CONNECTING, ConnectionState.IDLE),
            (ConnectionState.CONNECTED, ConnectionState.DISCONNECTING),
            (ConnectionState.DISCONNECTING, ConnectionState.IDLE),
        ],
    )
    def test_allowed_transitions(self, source, target):
        assert source.can_transition_to(target)

    @pytest.mark.parametrize(
        "source,target",
        [
            (ConnectionState.IDLE, ConnectionState.CONNECTED),
            (ConnectionState.IDLE, ConnectionState.DISCONNECTING),
            (ConnectionState.CONNECTED, ConnectionState.IDLE),
            (ConnectionState.CONNECTED, ConnectionState.CONNECTING),
            (ConnectionState.DISCONNECTING, ConnectionState.CONNECTED),
        ],
    )
    def test_forbidden_transitions(self, source, target):
        assert not source.can_transition_to(target)

    def test_is_active(self):
        assert ConnectionState.CONNECTING.is_active
        assert ConnectionState.CONNECTED.is_active
        assert not ConnectionState.IDLE.is_active
        assert not ConnectionState.DISCONNECTING.is_active


# =============================================================================
# ChannelLimits
# =============================================================================


class TestChannelLimits:
    def test_defaults_match_platform_bounds(self):
        limits = ChannelLimits()

        assert limits.min_bitrate == 8000
        assert limits.max_bitrate == 96000
        assert limits.max_user_limit == 99

    def test_inverted_bitrate_bounds_rejected(self):
        with pytest.raises(ValueError, match="min_bitrate"):
            ChannelLimits(min_bitrate=96000, max_bitrate=8000)

    @pytest.mark.parametrize("bitrate", [8000, 64000, 96000])
    def test_bitrate_within_bounds(self, bitrate):
        assert ChannelLimits().check_bitrate(bitrate) == bitrate

    @pytest.mark.parametrize("bitrate", [7999, 96001, 0, -1])
    def test_bitrate_out_of_bounds(self, bitrate):
        with pytest.raises(InvalidConfigurationError) as exc_info:
            ChannelLimits().check_bitrate(bitrate)

        assert exc_info.value.field == "bitrate"
        assert exc_info.value.value == bitrate

    @pytest.mark.parametrize("user_limit", [0, 1, 99])
    def test_user_limit_within_bounds(self, user_limit):
        assert ChannelLimits().check_user_limit(user_limit) == user_limit

    @pytest.mark.parametrize("user_limit", [-1, 100])
    def test_user_limit_out_of_bounds(self, user_limit):
        with pytest.raises(InvalidConfigurationError, match="User limit"):
            ChannelLimits().check_user_limit(user_limit)

    @pytest.mark.parametrize("value", ["64000", 64000.0, True, None])
    def test_non_integer_bitrate_rejected(self, value):
        with pytest.raises(InvalidConfigurationError, match="must be an integer"):
            ChannelLimits().check_bitrate(value)

    def test_custom_bounds(self):
        limits = ChannelLimits(min_bitrate=8000, max_bitrate=384000, max_user_limit=10)

        assert limits.check_bitrate(384000) == 384000
        with pytest.raises(InvalidConfigurationError):
            limits.check_user_limit(11)

    def test_check_builds_partial_update(self):
        update = ChannelLimits().check(bitrate=48000)

        assert update == ChannelConfigUpdate(bitrate=48000)
        assert update.user_limit is None

    def test_check_rejects_before_building(self):
        with pytest.raises(InvalidConfigurationError):
            ChannelLimits().check(bitrate=48000, user_limit=500)


# =============================================================================
# ChannelConfig / ChannelConfigUpdate
# =============================================================================


class TestChannelConfig:
    def test_frozen(self):
        config = ChannelConfig(bitrate=64000, user_limit=5)

        with pytest.raises(ValidationError):
            config.bitrate = 32000  # type: ignore[misc]

    def test_strict_rejects_strings(self):
        with pytest.raises(ValidationError):
            ChannelConfig(bitrate="64000")  # type: ignore[arg-type]

    def test_user_limit_defaults_to_unlimited(self):
        assert ChannelConfig(bitrate=64000).user_limit == 0


class TestChannelConfigUpdate:
    def test_empty_update(self):
        assert ChannelConfigUpdate().is_empty

    def test_payload_only_includes_changed_fields(self):
        assert ChannelConfigUpdate(user_limit=0).to_payload() == {"user_limit": 0}
        assert ChannelConfigUpdate(bitrate=32000, user_limit=4).to_payload() == {
            "bitrate": 32000,
            "user_limit": 4,
        }


# =============================================================================
# ChannelDescriptor
# =============================================================================


class TestChannelDescriptor:
    def test_from_payload(self):
        descriptor = ChannelDescriptor.from_payload(
            GUILD_ID,
            {"id": str(CHANNEL_A), "name": "General", "bitrate": 32000, "user_limit": 5},
        )

        assert descriptor.id == CHANNEL_A
        assert descriptor.guild_id == GUILD_ID
        assert descriptor.name == "General"
        assert descriptor.bitrate == 32000
        assert descriptor.user_limit == 5
        assert descriptor.type == "voice"
        assert descriptor.members == set()

    def test_from_payload_defaults(self):
        descriptor = ChannelDescriptor.from_payload(GUILD_ID, {"id": CHANNEL_A, "name": "General"})

        assert descriptor.bitrate == DEFAULT_BITRATE
        assert descriptor.user_limit == 0

    def test_update_from_payload_keeps_members(self, channel_a):
        channel_a.add_member(42)

        channel_a.update_from_payload({"id": CHANNEL_A, "name": "Renamed", "user_limit": 3})

        assert channel_a.name == "Renamed"
        assert channel_a.user_limit == 3
        assert channel_a.bitrate == 64000
        assert channel_a.has_member(42)

    def test_update_from_payload_replaces_members(self, channel_a):
        channel_a.add_member(42)

        channel_a.update_from_payload({"id": CHANNEL_A, "members": [7, 8]})

        assert channel_a.members == {7, 8}

    def test_from_payload_members(self):
        descriptor = ChannelDescriptor.from_payload(
            GUILD_ID, {"id": CHANNEL_A, "name": "General", "members": [7]}
        )

        assert descriptor.members == {7}

    def test_configure_applies_both_fields(self, channel_a):
        result = channel_a.configure(bitrate=48000, user_limit=10)

        assert result is channel_a
        assert channel_a.snapshot() == ChannelConfig(bitrate=48000, user_limit=10)

    def test_configure_is_atomic_on_invalid_value(self, channel_a):
        before = channel_a.snapshot()

        with pytest.raises(InvalidConfigurationError):
            channel_a.configure(bitrate=48000, user_limit=100)

        assert channel_a.snapshot() == before

    def test_configure_uses_custom_limits(self, channel_a):
        channel_a.configure(bitrate=128000, limits=ChannelLimits(max_bitrate=384000))

        assert channel_a.bitrate == 128000

    def test_configure_zero_user_limit_means_unlimited(self, channel_a):
        channel_a.configure(user_limit=0)

        assert channel_a.user_limit == 0
        assert not channel_a.is_full

    def test_assignment_is_validated(self, channel_a):
        with pytest.raises(ValidationError):
            channel_a.user_limit = -1

    def test_membership(self, channel_a):
        channel_a.add_member(1)
        channel_a.add_member(2)
        channel_a.add_member(2)
        channel_a.remove_member(1)
        channel_a.remove_member(404)

        assert channel_a.members == {2}
        assert channel_a.member_count == 1

    def test_is_full(self, make_descriptor):
        descriptor = make_descriptor(user_limit=2)
        descriptor.add_member(1)
        assert not descriptor.is_full

        descriptor.add_member(2)
        assert descriptor.is_full


# =============================================================================
# VoiceConnection
# =============================================================================


class TestVoiceConnection:
    def test_starts_idle(self):
        connection = VoiceConnection(guild_id=GUILD_ID, channel_id=CHANNEL_A)

        assert connection.state is ConnectionState.IDLE
        assert connection.key == (GUILD_ID, CHANNEL_A)
        assert connection.connected_at is None
        assert not connection.is_connected

    def test_full_lifecycle(self):
        connection = VoiceConnection(guild_id=GUILD_ID, channel_id=CHANNEL_A)

        assert connection.transition_to(ConnectionState.CONNECTING) is ConnectionState.IDLE
        connection.transition_to(ConnectionState.CONNECTED)
        assert connection.is_connected
        assert connection.connected_at is not None

        connection.transition_to(ConnectionState.DISCONNECTING)
        connection.transition_to(ConnectionState.IDLE)
        assert connection.state is ConnectionState.IDLE

    def test_illegal_transition_raises(self):
        connection = VoiceConnection(guild_id=GUILD_ID, channel_id=CHANNEL_A)

        with pytest.raises(InvalidOperationError, match="connected"):
            connection.transition_to(ConnectionState.CONNECTED)

        assert connection.state is ConnectionState.IDLE

    def test_rejects_invalid_snowflake(self):
        with pytest.raises(ValidationError):
            VoiceConnection(guild_id=0, channel_id=CHANNEL_A)
