"""Voice channel guard functions for Discord cogs."""

from guild_voice.infrastructure.discord.guards.voice_guards import (
    get_member,
    get_member_voice_channel,
    send_ephemeral,
)

__all__ = [
    "get_member",
    "get_member_voice_channel",
    "send_ephemeral",
]
