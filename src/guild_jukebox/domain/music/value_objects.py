"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from guild_jukebox.domain.shared.messages import ErrorMessages


@dataclass(frozen=True)
class QueuePosition:
    """1-based position of a track in a guild queue."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 1:
            raise ValueError(ErrorMessages.INVALID_QUEUE_POSITION)

    def __str__(self) -> str:
        return str(self.value)

    def __int__(self) -> int:
        return self.value


class PlaybackState(Enum):
    """Playback state with enforced transitions.

    State transitions:
    - IDLE -> CONNECTING (a queued track is being prepared)
    - CONNECTING -> PLAYING (voice joined and stream subscribed)
    - CONNECTING -> IDLE (preparation failed, track dropped)
    - PLAYING -> IDLE (track ended, skipped, or errored)
    - Any non-terminal -> STOPPED (explicit stop or confirmed auto-disconnect)
    """

    IDLE = "idle"
    CONNECTING = "connecting"
    PLAYING = "playing"
    STOPPED = "stopped"

    def can_transition_to(self, target: PlaybackState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            PlaybackState.IDLE: {PlaybackState.CONNECTING, PlaybackState.STOPPED},
            PlaybackState.CONNECTING: {
                PlaybackState.PLAYING,
                PlaybackState.IDLE,
                PlaybackState.STOPPED,
            },
            PlaybackState.PLAYING: {PlaybackState.IDLE, PlaybackState.STOPPED},
            PlaybackState.STOPPED: set(),
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_active(self) -> bool:
        return self in {PlaybackState.CONNECTING, PlaybackState.PLAYING}

    @property
    def is_terminal(self) -> bool:
        return self == PlaybackState.STOPPED


class DisconnectReason(Enum):
    """Why a disconnect grace timer was armed."""

    CHANNEL_EMPTY = "channel_empty"
    QUEUE_DRAINED = "queue_drained"
