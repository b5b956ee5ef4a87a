"""Discord cogs - command handlers and gateway listeners."""

from guild_voice.infrastructure.discord.cogs.channel_sync_cog import ChannelSyncCog
from guild_voice.infrastructure.discord.cogs.voice_cog import VoiceCog

__all__ = [
    "ChannelSyncCog",
    "VoiceCog",
]
