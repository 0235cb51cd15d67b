"""
Music Bounded Context

Domain logic for tracks, per-guild queues, playback state, and progress.
"""

from guild_jukebox.domain.music.entities import GuildPlaybackSession, Track
from guild_jukebox.domain.music.progress import (
    ProgressSnapshot,
    compute_progress,
    format_clock,
    render_bar,
)
from guild_jukebox.domain.music.value_objects import (
    DisconnectReason,
    PlaybackState,
    QueuePosition,
)

__all__ = [
    # Entities
    "Track",
    "GuildPlaybackSession",
    # Value Objects
    "QueuePosition",
    "PlaybackState",
    "DisconnectReason",
    # Progress
    "ProgressSnapshot",
    "compute_progress",
    "format_clock",
    "render_bar",
]
