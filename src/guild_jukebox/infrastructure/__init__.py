"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Discord (bot, voice transport and text output adapters)
- Audio (yt-dlp resolver, FFmpeg transcoder)
"""

from guild_jukebox.infrastructure.discord.adapters.text_output import DiscordTextOutput
from guild_jukebox.infrastructure.discord.adapters.voice_transport import DiscordVoiceTransport
from guild_jukebox.infrastructure.discord.bot import create_bot

__all__ = [
    "create_bot",
    "DiscordTextOutput",
    "DiscordVoiceTransport",
]
