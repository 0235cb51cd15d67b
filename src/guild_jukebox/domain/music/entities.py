"""Core domain entities for the music bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from guild_jukebox.domain.music.progress import ProgressSnapshot, compute_progress, format_clock
from guild_jukebox.domain.music.value_objects import PlaybackState, QueuePosition
from guild_jukebox.domain.shared.exceptions import InvalidOperationError
from guild_jukebox.domain.shared.types import (
    DiscordSnowflake,
    HttpUrlStr,
    NonEmptyStr,
    NonNegativeInt,
    PositiveInt,
    TrackTitleStr,
)


class Track(BaseModel):
    """Immutable value object representing a queued playback item."""

    model_config = ConfigDict(frozen=True, strict=True)

    url: HttpUrlStr
    title: TrackTitleStr
    # 0 means the source did not report a duration
    duration_seconds: NonNegativeInt = 0
    requested_by: NonEmptyStr

    @property
    def duration_formatted(self) -> str:
        return format_clock(self.duration_seconds)

    @property
    def has_known_duration(self) -> bool:
        return self.duration_seconds > 0


class GuildPlaybackSession(BaseModel):
    """Aggregate root holding the queue and playback state for a single guild.

    The aggregate has an active track if and only if it is PLAYING. The track
    being prepared while CONNECTING is held by the caller, not here.
    """

    model_config = ConfigDict(strict=True)

    guild_id: DiscordSnowflake
    queue: list[Track] = Field(default_factory=list)
    current_track: Track | None = None
    state: PlaybackState = PlaybackState.IDLE
    # monotonic clock reading taken when the current track started
    started_at: float | None = None

    @property
    def queue_length(self) -> int:
        return len(self.queue)

    @property
    def is_idle(self) -> bool:
        return self.state == PlaybackState.IDLE

    @property
    def is_connecting(self) -> bool:
        return self.state == PlaybackState.CONNECTING

    @property
    def is_playing(self) -> bool:
        return self.state == PlaybackState.PLAYING

    @property
    def is_stopped(self) -> bool:
        return self.state == PlaybackState.STOPPED

    @property
    def has_tracks(self) -> bool:
        return self.current_track is not None or bool(self.queue)

    def _require_not_stopped(self, operation: str) -> None:
        if self.is_stopped:
            raise InvalidOperationError(operation=operation, current_state=self.state.value)

    def enqueue(self, track: Track) -> QueuePosition:
        """Add a track to the end of the queue and return its 1-based position."""
        self._require_not_stopped("enqueue")
        self.queue.append(track)
        return QueuePosition(len(self.queue))

    def dequeue(self) -> Track | None:
        """Remove and return the head of the queue."""
        if not self.queue:
            return None
        return self.queue.pop(0)

    def snapshot(self, limit: PositiveInt) -> list[Track]:
        """Return up to ``limit`` queued tracks in play order without mutating the queue."""
        return list(self.queue[:limit])

    def clear_queue(self) -> int:
        """Clear all tracks from the queue and return the count removed."""
        count = len(self.queue)
        self.queue.clear()
        return count

    def transition_to(self, new_state: PlaybackState) -> None:
        """Transition to a new playback state."""
        if not self.state.can_transition_to(new_state):
            raise InvalidOperationError(
                operation=f"transition to {new_state.value}",
                current_state=self.state.value,
                message=f"Cannot transition from {self.state.value} to {new_state.value}",
            )

        self.state = new_state

    def begin_connecting(self) -> None:
        self.transition_to(PlaybackState.CONNECTING)

    def abort_connecting(self) -> None:
        """Return to IDLE after the pending track could not be started."""
        self.transition_to(PlaybackState.IDLE)

    def start_playback(self, track: Track, started_at: float) -> None:
        """Commit the pending track as the active one."""
        self.transition_to(PlaybackState.PLAYING)
        self.current_track = track
        self.started_at = started_at

    def finish_track(self) -> Track | None:
        """Clear the active track and return to IDLE, returning the finished track."""
        self.transition_to(PlaybackState.IDLE)
        finished = self.current_track
        self.current_track = None
        self.started_at = None
        return finished

    def stop(self) -> int:
        """Enter the terminal STOPPED state, dropping the active track and the queue.

        Stopping an already stopped session is a no-op.
        """
        if self.is_stopped:
            return 0
        self.transition_to(PlaybackState.STOPPED)
        self.current_track = None
        self.started_at = None
        return self.clear_queue()

    def elapsed(self, now: float) -> float:
        """Seconds since the active track started, never negative."""
        if self.started_at is None:
            return 0.0
        return max(0.0, now - self.started_at)

    def progress(self, now: float) -> ProgressSnapshot | None:
        if self.current_track is None:
            return None
        return compute_progress(self.elapsed(now), self.current_track.duration_seconds)
