"""Guild-keyed registry that owns every live playback session."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator

from ...domain.shared.messages import LogTemplates
from ...domain.shared.types import DiscordSnowflake
from .session_models import GuildSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Single point of creation and destruction for guild sessions.

    Methods here never await, so each one runs atomically on the event loop;
    two concurrent first enqueues for a guild therefore share one session.
    """

    def __init__(self) -> None:
        self._sessions: dict[DiscordSnowflake, GuildSession] = {}

    def get(self, guild_id: DiscordSnowflake) -> GuildSession | None:
        return self._sessions.get(guild_id)

    def get_or_create(
        self, guild_id: DiscordSnowflake, factory: Callable[[], GuildSession]
    ) -> tuple[GuildSession, bool]:
        """Return the guild's session, creating it with ``factory`` if absent.

        Returns:
            The session and whether it was created by this call.
        """
        session = self._sessions.get(guild_id)
        if session is not None:
            return session, False

        session = factory()
        self._sessions[guild_id] = session
        logger.info(LogTemplates.SESSION_CREATED, guild_id)
        return session, True

    def discard(self, guild_id: DiscordSnowflake, session: GuildSession) -> bool:
        """Remove ``session`` if it is still the one registered for the guild."""
        if self._sessions.get(guild_id) is not session:
            return False
        del self._sessions[guild_id]
        logger.info(LogTemplates.SESSION_DISCARDED, guild_id)
        return True

    def sessions(self) -> list[GuildSession]:
        return list(self._sessions.values())

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._sessions

    def __iter__(self) -> Iterator[GuildSession]:
        return iter(self.sessions())
