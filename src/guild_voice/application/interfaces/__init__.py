"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from guild_voice.application.interfaces.config_sync import ChannelConfigSync
from guild_voice.application.interfaces.permission_gate import PermissionGate
from guild_voice.application.interfaces.transport_negotiator import TransportNegotiator
from guild_voice.application.interfaces.voice_environment import VoiceEnvironment

__all__ = [
    "ChannelConfigSync",
    "PermissionGate",
    "TransportNegotiator",
    "VoiceEnvironment",
]
