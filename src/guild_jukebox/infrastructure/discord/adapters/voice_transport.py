"""Discord voice transport implementing VoiceTransport on top of discord.py voice clients."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import discord

from guild_jukebox.application.interfaces.voice_transport import (
    StreamEndCallback,
    VoiceConnection,
    VoiceTransport,
)
from guild_jukebox.domain.shared.exceptions import TransportError
from guild_jukebox.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT: float = 10.0


class DiscordVoiceTransport(VoiceTransport):
    def __init__(self, bot: discord.Client, *, connect_timeout: float = CONNECT_TIMEOUT) -> None:
        self._bot = bot
        self._connect_timeout = connect_timeout

    def _get_voice_client(self, guild_id: int) -> discord.VoiceClient | None:
        guild = self._bot.get_guild(guild_id)
        if not guild:
            return None

        vc = guild.voice_client
        return vc if isinstance(vc, discord.VoiceClient) else None

    def _require_voice_client(self, connection: VoiceConnection) -> discord.VoiceClient:
        vc = self._get_voice_client(connection.guild_id)
        if vc is None or not vc.is_connected():
            raise TransportError(connection.guild_id, ErrorMessages.VOICE_NOT_CONNECTED)
        return vc

    async def join(self, guild_id: int, channel_id: int) -> VoiceConnection:
        guild = self._bot.get_guild(guild_id)
        if not guild:
            raise TransportError(guild_id, ErrorMessages.GUILD_NOT_FOUND)

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            raise TransportError(
                guild_id, ErrorMessages.CHANNEL_NOT_VOICE.format(channel_id=channel_id)
            )

        vc = self._get_voice_client(guild_id)
        if vc is not None and not vc.is_connected():
            logger.warning(LogTemplates.VOICE_STALE_CLEANUP, guild_id)
            await vc.disconnect(force=True)
            vc = None

        try:
            async with asyncio.timeout(self._connect_timeout):
                if vc is None:
                    await channel.connect(self_deaf=True)
                    logger.info(LogTemplates.VOICE_CONNECTED, channel.name, guild.name)
                elif vc.channel is None or vc.channel.id != channel_id:
                    await vc.move_to(channel)
                    logger.info(LogTemplates.VOICE_MOVED, channel.name)
                else:
                    logger.info(LogTemplates.VOICE_REUSED, channel.name, guild_id)
            await self._ensure_self_deaf(guild, channel)
        except TimeoutError as exc:
            raise TransportError(
                guild_id, ErrorMessages.VOICE_CONNECT_TIMEOUT.format(channel_id=channel_id)
            ) from exc
        except discord.Forbidden as exc:
            raise TransportError(
                guild_id, ErrorMessages.VOICE_NO_PERMISSION.format(channel_id=channel_id)
            ) from exc
        except discord.ClientException as exc:
            raise TransportError(
                guild_id, ErrorMessages.VOICE_CLIENT_ERROR.format(error=exc)
            ) from exc

        return VoiceConnection(guild_id=guild_id, channel_id=channel.id)

    async def _ensure_self_deaf(
        self,
        guild: discord.Guild,
        channel: discord.VoiceChannel | discord.StageChannel,
    ) -> None:
        """Ensure the bot is self-deafened in the guild's current voice connection."""
        try:
            await guild.change_voice_state(channel=channel, self_deaf=True)
        except Exception as exc:
            logger.debug(LogTemplates.VOICE_SELF_DEAFEN_FAILED, guild.id, exc)

    async def subscribe(
        self, connection: VoiceConnection, source: Any, after: StreamEndCallback
    ) -> None:
        vc = self._require_voice_client(connection)
        loop = asyncio.get_running_loop()
        guild_id = connection.guild_id

        # Runs on discord.py's audio thread
        def after_callback(error: Exception | None = None) -> None:
            logger.debug(LogTemplates.VOICE_STREAM_END, guild_id, error)
            asyncio.run_coroutine_threadsafe(after(error), loop)

        if vc.is_playing() or vc.is_paused():
            vc.stop()

        try:
            vc.play(source, after=after_callback)
        except discord.ClientException as exc:
            raise TransportError(
                guild_id, ErrorMessages.VOICE_CLIENT_ERROR.format(error=exc)
            ) from exc

    async def stop(self, connection: VoiceConnection) -> None:
        vc = self._get_voice_client(connection.guild_id)
        if vc is not None and (vc.is_playing() or vc.is_paused()):
            vc.stop()

    async def disconnect(self, connection: VoiceConnection) -> None:
        vc = self._get_voice_client(connection.guild_id)
        if vc is None:
            return

        try:
            await vc.disconnect(force=True)
        except Exception as exc:
            raise TransportError(connection.guild_id, str(exc)) from exc
        logger.info(LogTemplates.VOICE_DISCONNECTED, connection.guild_id)

    async def listeners(self, connection: VoiceConnection) -> list[str]:
        """Return user IDs of non-bot members in the connected channel."""
        vc = self._get_voice_client(connection.guild_id)
        if vc is None or vc.channel is None:
            return []

        return [str(member.id) for member in vc.channel.members if not member.bot]
