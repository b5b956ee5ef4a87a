# ruff: noqa: N999
"""
Domain Layer

Contains pure voice-session logic organized by bounded contexts:
- shared/: Cross-cutting types, events and exceptions
- voice/: Channel descriptors, connections and the connection registry
"""

from guild_voice.domain.shared.exceptions import DomainError
from guild_voice.domain.voice import ChannelDescriptor, ConnectionRegistry, VoiceConnection

__all__ = [
    "ChannelDescriptor",
    "ConnectionRegistry",
    "VoiceConnection",
    "DomainError",
]
