"""Queue Manager - guild-keyed FIFO operations on registered sessions."""

from __future__ import annotations

import logging

from ...domain.music.entities import Track
from ...domain.shared.exceptions import EntityNotFoundError
from ...domain.shared.messages import LogTemplates
from ...domain.shared.types import DiscordSnowflake
from .session_registry import SessionRegistry

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_LIMIT = 10


class QueueManager:
    """Ordered per-guild track list.

    The queue itself is unbounded; only ``snapshot`` truncates. Mutating
    calls are expected to run while the caller holds the session lock.
    """

    def __init__(
        self, registry: SessionRegistry, *, display_limit: int = DEFAULT_DISPLAY_LIMIT
    ) -> None:
        self._registry = registry
        self._display_limit = display_limit

    @property
    def display_limit(self) -> int:
        return self._display_limit

    def enqueue(self, guild_id: DiscordSnowflake, track: Track) -> int:
        """Append ``track`` and return its 1-based position.

        Raises:
            EntityNotFoundError: The guild has no session.
        """
        session = self._registry.get(guild_id)
        if session is None:
            raise EntityNotFoundError("GuildSession", guild_id)

        position = session.playback.enqueue(track)
        logger.info(LogTemplates.QUEUE_ENQUEUED, track.title, position, guild_id)
        return int(position)

    def dequeue_next(self, guild_id: DiscordSnowflake) -> Track | None:
        session = self._registry.get(guild_id)
        if session is None:
            return None
        return session.playback.dequeue()

    def snapshot(self, guild_id: DiscordSnowflake, limit: int | None = None) -> list[Track]:
        """Return up to ``limit`` upcoming tracks (default: the display limit) in order."""
        session = self._registry.get(guild_id)
        if session is None:
            return []
        return session.playback.snapshot(limit or self._display_limit)

    def clear(self, guild_id: DiscordSnowflake) -> int:
        session = self._registry.get(guild_id)
        if session is None:
            return 0

        count = session.playback.clear_queue()
        if count:
            logger.info(LogTemplates.QUEUE_CLEARED, count, guild_id)
        return count
