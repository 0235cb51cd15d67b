"""Progress Reporter - keeps one live status message per playing session."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from ...domain.music.entities import GuildPlaybackSession
from ...domain.music.progress import (
    DEFAULT_BAR_WIDTH,
    EMPTY_GLYPH,
    FILLED_GLYPH,
    ProgressSnapshot,
    render_bar,
)
from ...domain.shared.exceptions import MessageGoneError
from ...domain.shared.messages import DiscordUIMessages, LogTemplates
from .session_models import GuildSession, ProgressHandle

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 5.0


class ProgressReporter:
    """Periodically posts, then edits in place, the elapsed/total status of the active track.

    ``start`` and ``stop`` are called with the session lock held. Each tick
    takes the lock itself so create-or-edit never races a track change.
    """

    def __init__(
        self,
        *,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        bar_width: int = DEFAULT_BAR_WIDTH,
        filled_glyph: str = FILLED_GLYPH,
        empty_glyph: str = EMPTY_GLYPH,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._interval = interval
        self._bar_width = bar_width
        self._filled_glyph = filled_glyph
        self._empty_glyph = empty_glyph
        self._clock = clock

    # ── Rendering ───────────────────────────────────────────────────

    def _bar(self, progress: ProgressSnapshot) -> str:
        return render_bar(progress.percent, self._bar_width, self._filled_glyph, self._empty_glyph)

    def render_status(self, playback: GuildPlaybackSession, now: float) -> str | None:
        """Text of the periodically edited status message."""
        track = playback.current_track
        progress = playback.progress(now)
        if track is None or progress is None:
            return None
        return DiscordUIMessages.STATE_PROGRESS.format(
            title=track.title,
            bar=self._bar(progress),
            percent=progress.percent_display,
            elapsed=progress.elapsed_clock,
            total=progress.total_clock,
        )

    def render_now_playing(self, playback: GuildPlaybackSession, now: float) -> str:
        """Text of an on-demand "now playing" reply."""
        track = playback.current_track
        progress = playback.progress(now)
        if track is None or progress is None:
            return DiscordUIMessages.STATE_NOTHING_PLAYING
        return DiscordUIMessages.STATE_NOW_PLAYING.format(
            title=track.title,
            elapsed=progress.elapsed_clock,
            total=progress.total_clock,
            bar=self._bar(progress),
            percent=progress.percent_display,
        )

    # ── Lifecycle ───────────────────────────────────────────────────

    def start(self, session: GuildSession) -> None:
        """Begin reporting for the session's active track (caller holds the lock)."""
        track = session.playback.current_track
        if track is None:
            return

        previous = session.progress
        if previous is not None and previous.task is not None:
            previous.task.cancel()

        handle = ProgressHandle(track=track)
        handle.task = asyncio.create_task(self._run(session, session.epoch))
        session.progress = handle
        logger.debug(LogTemplates.PROGRESS_STARTED, session.guild_id, self._interval)

    async def stop(self, session: GuildSession, *, final_text: str | None = None) -> None:
        """Cancel the interval and turn the status message into ``final_text``.

        Safe to call repeatedly; the caller holds the lock.
        """
        handle = session.progress
        session.progress = None
        if handle is None:
            return

        if handle.task is not None and not handle.task.done():
            handle.task.cancel()

        if handle.message is None or final_text is None:
            return

        try:
            await session.text_output.edit(handle.message, final_text)
        except Exception as exc:
            logger.warning(LogTemplates.PROGRESS_FINAL_EDIT_FAILED, session.guild_id, exc)

    # ── Ticking ─────────────────────────────────────────────────────

    async def _run(self, session: GuildSession, epoch: int) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                if not await self.tick(session, epoch):
                    return
            except Exception:
                logger.exception(LogTemplates.PROGRESS_TICK_FAILED, session.guild_id)

    async def tick(self, session: GuildSession, epoch: int) -> bool:
        """Publish one progress update.

        Returns:
            False once the session has moved past ``epoch`` and reporting should end.
        """
        async with session.lock:
            handle = session.progress
            if session.epoch != epoch or handle is None or not session.playback.is_playing:
                return False

            text = self.render_status(session.playback, self._clock())
            if text is None:
                return False

            if handle.message is None:
                handle.message = await session.text_output.send(text)
                return True

            try:
                await session.text_output.edit(handle.message, text)
            except MessageGoneError:
                logger.info(LogTemplates.PROGRESS_MESSAGE_GONE, session.guild_id)
                handle.message = None
            return True
