"""
FFmpeg Transcoder

Turns a raw audio stream into 16-bit little-endian, 48 kHz, stereo PCM
through discord.py's FFmpegPCMAudio.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass

import discord

from guild_jukebox.application.interfaces.source_resolver import AudioStream
from guild_jukebox.application.interfaces.transcoder import Transcoder
from guild_jukebox.config.settings import AudioSettings
from guild_jukebox.domain.shared.exceptions import ResolutionError
from guild_jukebox.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)


@dataclass
class FFmpegConfig:
    """Configuration for FFmpeg audio processing.

    FFmpegPCMAudio itself fixes the output to ``-f s16le -ar 48000 -ac 2``.
    """

    # Reconnection settings for streaming
    reconnect: bool = True
    reconnect_streamed: bool = True
    reconnect_delay_max: int = 5

    # Start producing audio immediately instead of probing the input
    analyze_duration: int = 0

    # Audio processing
    disable_video: bool = True
    quiet: bool = True

    @classmethod
    def from_settings(cls, settings: AudioSettings) -> FFmpegConfig:
        return cls(
            reconnect=settings.ffmpeg_reconnect,
            reconnect_delay_max=settings.ffmpeg_reconnect_delay_max,
        )

    def get_before_options(self, headers: dict[str, str] | None = None) -> str:
        """Get FFmpeg input options, including HTTP headers for the stream."""
        opts = []
        if self.reconnect:
            opts.append("-reconnect 1")
            if self.reconnect_streamed:
                opts.append("-reconnect_streamed 1")
            if self.reconnect_delay_max:
                opts.append(f"-reconnect_delay_max {self.reconnect_delay_max}")
        opts.append(f"-analyzeduration {self.analyze_duration}")
        if headers:
            header_blob = "".join(f"{name}: {value}\r\n" for name, value in headers.items())
            opts.append(f"-headers {shlex.quote(header_blob)}")
        return " ".join(opts)

    def get_options(self) -> str:
        """Get FFmpeg output options."""
        opts = []
        if self.disable_video:
            opts.append("-vn")
        if self.quiet:
            opts.append("-loglevel 0")
        return " ".join(opts)


class FFmpegTranscoder(Transcoder):
    """Spawns one FFmpeg process per track."""

    def __init__(
        self, settings: AudioSettings | None = None, config: FFmpegConfig | None = None
    ) -> None:
        self._settings = settings or AudioSettings()
        self._config = config or FFmpegConfig.from_settings(self._settings)

    @property
    def config(self) -> FFmpegConfig:
        return self._config

    async def transcode(self, stream: AudioStream) -> discord.FFmpegPCMAudio:
        try:
            source = discord.FFmpegPCMAudio(
                stream.url,
                executable=self._settings.ffmpeg_executable,
                before_options=self._config.get_before_options(stream.headers),
                options=self._config.get_options(),
            )
        except discord.ClientException as exc:
            raise ResolutionError(
                stream.url, ErrorMessages.TRANSCODER_FAILED.format(error=exc)
            ) from exc

        logger.debug(LogTemplates.FFMPEG_SOURCE_CREATED, stream.url[:60])
        return source
