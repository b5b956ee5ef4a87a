"""
Voice Bounded Context

Channel descriptors, voice connections and the per-guild connection registry.
"""

from guild_voice.domain.voice.directory import ChannelDirectory
from guild_voice.domain.voice.entities import ChannelDescriptor, VoiceConnection
from guild_voice.domain.voice.registry import ConnectionRegistry
from guild_voice.domain.voice.value_objects import (
    ChannelConfig,
    ChannelConfigUpdate,
    ChannelLimits,
    ConnectionState,
)

__all__ = [
    "ChannelDescriptor",
    "ChannelDirectory",
    "ChannelConfig",
    "ChannelConfigUpdate",
    "ChannelLimits",
    "ConnectionRegistry",
    "ConnectionState",
    "VoiceConnection",
]
