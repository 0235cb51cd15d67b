"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the session services and their adapters.
Components are created on-demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.interfaces.source_resolver import SourceResolver
    from ..application.interfaces.transcoder import Transcoder
    from ..application.interfaces.voice_transport import VoiceTransport
    from ..application.services.occupancy_monitor import OccupancyMonitor
    from ..application.services.playback_service import PlaybackApplicationService
    from ..application.services.progress_reporter import ProgressReporter
    from ..application.services.queue_service import QueueManager
    from ..application.services.session_registry import SessionRegistry
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed. The voice
    transport needs the bot, so ``set_bot`` must be called before the
    playback service is built.
    """

    settings: Settings
    clock: Callable[[], float] = time.monotonic
    _bot: Bot | None = None

    # Session state
    _session_registry: SessionRegistry | None = None
    _queue_manager: QueueManager | None = None

    # Infrastructure adapters
    _source_resolver: SourceResolver | None = None
    _transcoder: Transcoder | None = None
    _voice_transport: VoiceTransport | None = None

    # Application services
    _progress_reporter: ProgressReporter | None = None
    _occupancy_monitor: OccupancyMonitor | None = None
    _playback_service: PlaybackApplicationService | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Session State ===

    @property
    def session_registry(self) -> SessionRegistry:
        if self._session_registry is None:
            from ..application.services.session_registry import SessionRegistry

            self._session_registry = SessionRegistry()
        return self._session_registry

    @property
    def queue_manager(self) -> QueueManager:
        if self._queue_manager is None:
            from ..application.services.queue_service import QueueManager

            self._queue_manager = QueueManager(
                self.session_registry,
                display_limit=self.settings.playback.queue_display_limit,
            )
        return self._queue_manager

    # === Adapters ===

    @property
    def source_resolver(self) -> SourceResolver:
        """Get the audio source resolver."""
        if self._source_resolver is None:
            from ..infrastructure.audio.ytdlp_resolver import YtDlpResolver

            self._source_resolver = YtDlpResolver(self.settings.audio)
        return self._source_resolver

    @property
    def transcoder(self) -> Transcoder:
        if self._transcoder is None:
            from ..infrastructure.audio.ffmpeg_transcoder import FFmpegTranscoder

            self._transcoder = FFmpegTranscoder(self.settings.audio)
        return self._transcoder

    @property
    def voice_transport(self) -> VoiceTransport:
        """Get the voice transport."""
        if self._voice_transport is None:
            from ..infrastructure.discord.adapters.voice_transport import (
                DiscordVoiceTransport,
            )

            self._voice_transport = DiscordVoiceTransport(
                self.bot, connect_timeout=self.settings.playback.connect_timeout_seconds
            )
        return self._voice_transport

    # === Application Services ===

    @property
    def progress_reporter(self) -> ProgressReporter:
        if self._progress_reporter is None:
            from ..application.services.progress_reporter import ProgressReporter

            playback = self.settings.playback
            self._progress_reporter = ProgressReporter(
                interval=playback.progress_interval_seconds,
                bar_width=playback.progress_bar_width,
                filled_glyph=playback.progress_filled_glyph,
                empty_glyph=playback.progress_empty_glyph,
                clock=self.clock,
            )
        return self._progress_reporter

    @property
    def occupancy_monitor(self) -> OccupancyMonitor:
        if self._occupancy_monitor is None:
            from ..application.services.occupancy_monitor import OccupancyMonitor

            self._occupancy_monitor = OccupancyMonitor(
                self.session_registry,
                self.voice_transport,
                grace_period=self.settings.playback.grace_period_seconds,
            )
        return self._occupancy_monitor

    @property
    def playback_service(self) -> PlaybackApplicationService:
        """Get the playback application service."""
        if self._playback_service is None:
            from ..application.services.playback_service import (
                PlaybackApplicationService,
            )

            self._playback_service = PlaybackApplicationService(
                registry=self.session_registry,
                queue_manager=self.queue_manager,
                source_resolver=self.source_resolver,
                transcoder=self.transcoder,
                voice_transport=self.voice_transport,
                progress_reporter=self.progress_reporter,
                occupancy_monitor=self.occupancy_monitor,
                clock=self.clock,
            )
        return self._playback_service

    # === Lifecycle ===

    async def shutdown(self) -> None:
        """Stop every live session."""
        if self._playback_service is not None:
            await self._playback_service.shutdown()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
