"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Discord (bot, cogs, voice / permission / config-sync adapters)
- Runtime environment probing
"""

from guild_voice.infrastructure.discord.adapters.config_sync import DiscordChannelConfigSync
from guild_voice.infrastructure.discord.adapters.permission_gate import DiscordPermissionGate
from guild_voice.infrastructure.discord.adapters.transport_negotiator import (
    DiscordTransportNegotiator,
)
from guild_voice.infrastructure.discord.bot import create_bot
from guild_voice.infrastructure.runtime import RuntimeVoiceEnvironment

__all__ = [
    "create_bot",
    "DiscordChannelConfigSync",
    "DiscordPermissionGate",
    "DiscordTransportNegotiator",
    "RuntimeVoiceEnvironment",
]
