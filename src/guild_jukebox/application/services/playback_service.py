"""Playback Application Service - drives each guild's session state machine."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from ...domain.music.entities import GuildPlaybackSession, Track
from ...domain.music.value_objects import DisconnectReason
from ...domain.shared.exceptions import (
    DomainError,
    InvalidTrackError,
    ResolutionError,
)
from ...domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake
from .session_models import EnqueueContext, GuildSession, send_notice

if TYPE_CHECKING:
    from ..interfaces.source_resolver import SourceResolver
    from ..interfaces.transcoder import Transcoder
    from ..interfaces.voice_transport import StreamEndCallback, VoiceConnection, VoiceTransport
    from .occupancy_monitor import OccupancyMonitor
    from .progress_reporter import ProgressReporter
    from .queue_service import QueueManager
    from .session_registry import SessionRegistry

logger = logging.getLogger(__name__)


def _reason(error: BaseException) -> str:
    if isinstance(error, DomainError):
        return getattr(error, "reason", None) or error.message
    return str(error) or error.__class__.__name__


class PlaybackApplicationService:
    """Orchestrates queueing, voice playback, progress, and auto-disconnect per guild.

    Per session: Idle -> Connecting -> Playing -> Idle ... -> Stopped.
    Voice join, stream lookup, and transcoding run with the session lock
    released; every other state change happens under it.
    """

    def __init__(
        self,
        *,
        registry: SessionRegistry,
        queue_manager: QueueManager,
        source_resolver: SourceResolver,
        transcoder: Transcoder,
        voice_transport: VoiceTransport,
        progress_reporter: ProgressReporter,
        occupancy_monitor: OccupancyMonitor,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._registry = registry
        self._queue = queue_manager
        self._resolver = source_resolver
        self._transcoder = transcoder
        self._transport = voice_transport
        self._progress = progress_reporter
        self._occupancy = occupancy_monitor
        self._clock = clock

        self._occupancy.set_disconnect_callback(self._on_auto_disconnect)

    # ── Exposed operations ──────────────────────────────────────────

    async def enqueue(self, guild_id: DiscordSnowflake, url: str, context: EnqueueContext) -> int:
        """Validate ``url``, queue it, and start playback if the guild is idle.

        Returns:
            The track's 1-based queue position.

        Raises:
            InvalidTrackError: The URL is unsupported or its metadata could not be read.
        """
        url = url.strip()
        if not self._resolver.validate(url):
            logger.info(LogTemplates.TRACK_REJECTED, url, guild_id, ErrorMessages.UNSUPPORTED_URL)
            await send_notice(
                context.text_output, DiscordUIMessages.ERROR_INVALID_URL, guild_id=guild_id
            )
            raise InvalidTrackError(url, ErrorMessages.UNSUPPORTED_URL)

        try:
            metadata = await self._resolver.fetch_metadata(url)
        except ResolutionError as exc:
            logger.warning(LogTemplates.TRACK_REJECTED, url, guild_id, exc.reason)
            await send_notice(
                context.text_output,
                DiscordUIMessages.ERROR_METADATA_FAILED.format(reason=exc.reason),
                guild_id=guild_id,
            )
            raise InvalidTrackError(url, exc.reason) from exc

        track = Track(
            url=url,
            title=metadata.title,
            duration_seconds=metadata.duration_seconds,
            requested_by=context.requester,
        )

        while True:
            session, _ = self._registry.get_or_create(
                guild_id, lambda: self._new_session(guild_id, context)
            )
            async with session.lock:
                if session.is_stopped:
                    logger.debug(LogTemplates.SESSION_RETRY_STOPPED, guild_id)
                    continue
                position = self._queue.enqueue(guild_id, track)
                should_start = session.playback.is_idle
            break

        await session.notify(
            DiscordUIMessages.ACTION_TRACK_QUEUED.format(
                title=track.title, duration=track.duration_formatted, position=position
            )
        )

        if should_start:
            await self._start_next(session)
        return position

    async def skip(self, guild_id: DiscordSnowflake) -> bool:
        """Force the active track to end; no-op unless the guild is playing."""
        session = self._registry.get(guild_id)
        if session is None:
            return False

        async with session.lock:
            connection = session.connection
            track = session.playback.current_track
            if not session.playback.is_playing or connection is None or track is None:
                return False
            try:
                await self._transport.stop(connection)
            except DomainError as exc:
                logger.warning(LogTemplates.PLAYBACK_TRANSPORT_ERROR, track.title, guild_id, exc)
                return False

        logger.info(LogTemplates.TRACK_SKIPPED, track.title, guild_id)
        return True

    async def stop(self, guild_id: DiscordSnowflake) -> bool:
        """Tear the guild's session down. Returns False if there was nothing to stop."""
        session = self._registry.get(guild_id)
        if session is None:
            return False

        async with session.lock:
            if session.is_stopped:
                return False
            await self._teardown_locked(session)
        return True

    def now_playing(self, guild_id: DiscordSnowflake) -> str:
        session = self._registry.get(guild_id)
        if session is None or not session.playback.is_playing:
            return DiscordUIMessages.STATE_NOTHING_PLAYING
        return self._progress.render_now_playing(session.playback, self._clock())

    def queue_text(self, guild_id: DiscordSnowflake) -> str:
        """Numbered listing of upcoming tracks, truncated to the display limit."""
        tracks = self._queue.snapshot(guild_id)
        if not tracks:
            return DiscordUIMessages.STATE_QUEUE_EMPTY
        return "\n".join(
            DiscordUIMessages.STATE_QUEUE_LINE.format(
                index=index, title=track.title, duration=track.duration_formatted
            )
            for index, track in enumerate(tracks, start=1)
        )

    async def on_membership_changed(
        self, guild_id: DiscordSnowflake, channel_id: DiscordSnowflake | None = None
    ) -> None:
        await self._occupancy.on_membership_changed(guild_id, channel_id)

    async def shutdown(self) -> None:
        """Stop every live session."""
        for session in self._registry.sessions():
            try:
                await self.stop(session.guild_id)
            except Exception:
                logger.exception(LogTemplates.PLAYBACK_SHUTDOWN_FAILED, session.guild_id)

    # ── State machine ───────────────────────────────────────────────

    def _new_session(self, guild_id: DiscordSnowflake, context: EnqueueContext) -> GuildSession:
        return GuildSession(
            guild_id=guild_id,
            text_output=context.text_output,
            voice_channel_id=context.voice_channel_id,
            playback=GuildPlaybackSession(guild_id=guild_id),
        )

    async def _start_next(self, session: GuildSession) -> None:
        """Play queued tracks until one starts or the queue runs dry.

        Only one attempt runs per session: an attempt that finds the session
        anywhere but IDLE returns immediately.
        """
        while True:
            async with session.lock:
                if not session.playback.is_idle:
                    logger.debug(
                        LogTemplates.PLAYBACK_START_SUPPRESSED,
                        session.guild_id,
                        session.playback.state.value,
                    )
                    return

                track = self._queue.dequeue_next(session.guild_id)
                if track is None:
                    logger.info(LogTemplates.QUEUE_EMPTY, session.guild_id)
                    self._occupancy.arm(session, DisconnectReason.QUEUE_DRAINED)
                    await session.notify(
                        DiscordUIMessages.STATE_QUEUE_DRAINED.format(
                            seconds=self._occupancy.grace_seconds_display
                        )
                    )
                    return

                session.playback.begin_connecting()
                epoch = session.bump_epoch()
                connection = session.connection
                logger.info(LogTemplates.PLAYBACK_CONNECTING, track.title, session.guild_id, epoch)

            joined: VoiceConnection | None = None
            source: Any = None
            error: BaseException | None = None
            try:
                if connection is None:
                    joined = connection = await self._transport.join(
                        session.guild_id, session.voice_channel_id
                    )
                stream = await self._resolver.open_stream(track.url)
                source = await self._transcoder.transcode(stream)
            except DomainError as exc:
                error = exc
            except Exception as exc:
                logger.exception(LogTemplates.PLAYBACK_UNEXPECTED_ERROR, session.guild_id)
                error = exc

            async with session.lock:
                if session.is_stopped or session.epoch != epoch:
                    logger.info(LogTemplates.PLAYBACK_RESULT_DISCARDED, session.guild_id, epoch)
                    if joined is not None:
                        await self._safe_disconnect(joined)
                    return

                if joined is not None:
                    session.connection = joined

                if error is None:
                    try:
                        await self._transport.subscribe(
                            connection, source, self._stream_end_callback(session, epoch)
                        )
                    except DomainError as exc:
                        error = exc
                    except Exception as exc:
                        logger.exception(LogTemplates.PLAYBACK_UNEXPECTED_ERROR, session.guild_id)
                        error = exc

                    if error is not None:
                        # Rejoin on the next track rather than reuse a connection that can't play
                        session.connection = None
                        await self._safe_disconnect(connection)

                if error is None:
                    self._commit_playing(session, track)
                    await session.notify(
                        DiscordUIMessages.ACTION_NOW_PLAYING.format(
                            title=track.title, duration=track.duration_formatted
                        )
                    )
                    return

                session.playback.abort_connecting()
                reason = _reason(error)
                logger.warning(
                    LogTemplates.PLAYBACK_TRACK_FAILED, track.title, session.guild_id, reason
                )
                await session.notify(
                    DiscordUIMessages.ERROR_TRACK_FAILED.format(title=track.title, reason=reason)
                )

    def _commit_playing(self, session: GuildSession, track: Track) -> None:
        session.playback.start_playback(track, self._clock())
        self._progress.start(session)
        timer = session.disconnect_timer
        if timer is not None and timer.reason is DisconnectReason.QUEUE_DRAINED:
            self._occupancy.disarm(session)
        logger.info(LogTemplates.PLAYBACK_STARTED, track.title, session.guild_id)

    def _stream_end_callback(self, session: GuildSession, epoch: int) -> StreamEndCallback:
        async def after(error: Exception | None) -> None:
            await self._on_stream_end(session, epoch, error)

        return after

    async def _on_stream_end(
        self, session: GuildSession, epoch: int, error: Exception | None
    ) -> None:
        async with session.lock:
            if session.is_stopped or session.epoch != epoch or not session.playback.is_playing:
                logger.debug(
                    LogTemplates.PLAYBACK_IGNORING_STREAM_END, session.guild_id, epoch, session.epoch
                )
                return

            track = session.playback.current_track
            title = track.title if track else ""
            if error is not None:
                logger.error(LogTemplates.PLAYBACK_TRANSPORT_ERROR, title, session.guild_id, error)
                await session.notify(
                    DiscordUIMessages.ERROR_TRACK_FAILED.format(title=title, reason=_reason(error))
                )

            await self._progress.stop(
                session, final_text=DiscordUIMessages.STATE_PLAYBACK_ENDED.format(title=title)
            )
            session.playback.finish_track()
            session.bump_epoch()
            logger.info(LogTemplates.TRACK_FINISHED, title, session.guild_id)

        await self._start_next(session)

    # ── Teardown ────────────────────────────────────────────────────

    async def _teardown_locked(self, session: GuildSession) -> None:
        """Release everything the session owns and drop it from the registry (lock held)."""
        self._occupancy.disarm(session)

        track = session.playback.current_track
        final_text = (
            DiscordUIMessages.STATE_PLAYBACK_ENDED.format(title=track.title) if track else None
        )
        await self._progress.stop(session, final_text=final_text)

        connection = session.connection
        session.connection = None
        if connection is not None:
            await self._safe_disconnect(connection)

        cleared = self._queue.clear(session.guild_id)
        session.playback.stop()
        session.bump_epoch()
        self._registry.discard(session.guild_id, session)
        logger.info(LogTemplates.PLAYBACK_STOPPED, session.guild_id, cleared)

    async def _on_auto_disconnect(self, session: GuildSession, reason: DisconnectReason) -> None:
        # Called by the occupancy monitor with the session lock held
        await self._teardown_locked(session)
        await session.notify(DiscordUIMessages.ACTION_DISCONNECTED_EMPTY)

    async def _safe_disconnect(self, connection: VoiceConnection) -> None:
        try:
            await self._transport.disconnect(connection)
        except Exception as exc:
            logger.warning(LogTemplates.VOICE_DISCONNECT_FAILED, connection.guild_id, exc)
