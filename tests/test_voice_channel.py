"""
Unit Tests for the VoiceChannel Facade

Tests for:
- Descriptor passthroughs
- Connection resolved through the registry on every access
- joinable / speakable capability checks
- join / leave / edit delegation
"""

import pytest

from conftest import CHANNEL_A, CHANNEL_B, GUILD_ID
from guild_voice.domain.shared.exceptions import InvalidConfigurationError


class TestProperties:
    def test_passthroughs(self, make_voice_channel, channel_a):
        channel_a.add_member(42)
        voice_channel = make_voice_channel(channel_a)

        assert voice_channel.id == CHANNEL_A
        assert voice_channel.guild_id == GUILD_ID
        assert voice_channel.name == "General"
        assert voice_channel.bitrate == 64000
        assert voice_channel.user_limit == 0
        assert voice_channel.members == frozenset({42})
        assert voice_channel.descriptor is channel_a

    def test_members_is_a_snapshot(self, make_voice_channel, channel_a):
        voice_channel = make_voice_channel(channel_a)
        members = voice_channel.members

        channel_a.add_member(7)

        assert 7 not in members
        assert 7 in voice_channel.members

    def test_repr(self, make_voice_channel, channel_a):
        assert "General" in repr(make_voice_channel(channel_a))


class TestCapabilities:
    def test_joinable(self, make_voice_channel, channel_a, permission_gate, environment):
        voice_channel = make_voice_channel(channel_a)
        assert voice_channel.joinable

        permission_gate.connect = False
        assert not voice_channel.joinable

        permission_gate.connect = True
        environment.supported = False
        assert not voice_channel.joinable

    def test_speakable(self, make_voice_channel, channel_a, permission_gate):
        voice_channel = make_voice_channel(channel_a)
        assert voice_channel.speakable

        permission_gate.speak = False
        assert not voice_channel.speakable


class TestConnection:
    async def test_connection_tracks_registry(self, make_voice_channel, channel_a, channel_b):
        a = make_voice_channel(channel_a)
        b = make_voice_channel(channel_b)
        assert a.connection is None

        connection = await a.join()
        assert a.connection is connection
        assert b.connection is None

        await b.join()
        assert a.connection is None
        assert b.connection.channel_id == CHANNEL_B

    async def test_leave_only_affects_own_channel(self, make_voice_channel, channel_a, channel_b):
        a = make_voice_channel(channel_a)
        b = make_voice_channel(channel_b)
        await a.join()

        await b.leave()
        assert a.connection is not None

        await a.leave()
        assert a.connection is None

    async def test_leave_is_noop_when_environment_unsupported(
        self, make_voice_channel, channel_a, environment, negotiator
    ):
        voice_channel = make_voice_channel(channel_a)
        await voice_channel.join()
        environment.supported = False

        await voice_channel.leave()

        assert negotiator.disconnected == []
        assert voice_channel.connection is not None


class TestConfiguration:
    async def test_set_bitrate(self, make_voice_channel, channel_a, config_sync):
        voice_channel = make_voice_channel(channel_a)

        result = await voice_channel.set_bitrate(48000)

        assert result is voice_channel
        assert voice_channel.bitrate == 48000
        assert config_sync.pushes == [{"bitrate": 48000}]

    async def test_set_user_limit(self, make_voice_channel, channel_a):
        voice_channel = make_voice_channel(channel_a)

        await voice_channel.set_user_limit(12)

        assert voice_channel.user_limit == 12

    async def test_edit_rejects_out_of_bounds(self, make_voice_channel, channel_a):
        voice_channel = make_voice_channel(channel_a)

        with pytest.raises(InvalidConfigurationError):
            await voice_channel.edit(bitrate=1000, user_limit=5)

        assert voice_channel.user_limit == 0
