"""Occupancy Monitor - arms and cancels the empty-channel disconnect timer."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from ...domain.music.value_objects import DisconnectReason
from ...domain.shared.messages import DiscordUIMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake
from ..interfaces.voice_transport import VoiceTransport
from .session_models import DisconnectTimer, GuildSession
from .session_registry import SessionRegistry

logger = logging.getLogger(__name__)

DEFAULT_GRACE_PERIOD_SECONDS = 15.0

DisconnectCallback = Callable[[GuildSession, DisconnectReason], Awaitable[None]]


class OccupancyMonitor:
    """Watches voice membership and force-stops sessions left alone past the grace period.

    At most one timer is armed per session. When a timer fires it re-counts
    listeners under the session lock; the disconnect callback is invoked
    with that lock still held.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        voice_transport: VoiceTransport,
        *,
        grace_period: float = DEFAULT_GRACE_PERIOD_SECONDS,
    ) -> None:
        self._registry = registry
        self._transport = voice_transport
        self._grace_period = grace_period
        self._on_disconnect: DisconnectCallback | None = None

    @property
    def grace_period(self) -> float:
        return self._grace_period

    @property
    def grace_seconds_display(self) -> int:
        return round(self._grace_period)

    def set_disconnect_callback(self, callback: DisconnectCallback) -> None:
        self._on_disconnect = callback

    def arm(self, session: GuildSession, reason: DisconnectReason) -> bool:
        """Start a countdown unless one is already armed (caller holds the lock)."""
        if session.disconnect_timer is not None:
            return False

        timer = DisconnectTimer(reason=reason)
        timer.task = asyncio.create_task(self._countdown(session, timer))
        session.disconnect_timer = timer
        logger.info(
            LogTemplates.OCCUPANCY_TIMER_ARMED, session.guild_id, reason.value, self._grace_period
        )
        return True

    def disarm(self, session: GuildSession) -> DisconnectTimer | None:
        """Cancel the armed countdown, if any (caller holds the lock)."""
        timer = session.disconnect_timer
        session.disconnect_timer = None
        if timer is None:
            return None

        if timer.task is not None and not timer.task.done():
            timer.task.cancel()
        logger.debug(LogTemplates.OCCUPANCY_TIMER_DISARMED, session.guild_id, timer.reason.value)
        return timer

    async def on_membership_changed(
        self, guild_id: DiscordSnowflake, channel_id: DiscordSnowflake | None = None
    ) -> None:
        """React to someone joining or leaving ``channel_id`` in ``guild_id``."""
        session = self._registry.get(guild_id)
        if session is None:
            return

        async with session.lock:
            connection = session.connection
            if session.is_stopped or connection is None:
                return
            if channel_id is not None and channel_id != connection.channel_id:
                return

            listeners = await self._transport.listeners(connection)
            timer = session.disconnect_timer

            if not listeners:
                if timer is not None:
                    return
                self.arm(session, DisconnectReason.CHANNEL_EMPTY)
                await session.notify(
                    DiscordUIMessages.WARNING_CHANNEL_EMPTY.format(
                        seconds=self.grace_seconds_display
                    )
                )
            elif timer is not None and timer.reason is DisconnectReason.CHANNEL_EMPTY:
                self.disarm(session)
                await session.notify(DiscordUIMessages.ACTION_DISCONNECT_CANCELLED)

    async def _countdown(self, session: GuildSession, timer: DisconnectTimer) -> None:
        try:
            await asyncio.sleep(self._grace_period)
        except asyncio.CancelledError:
            return

        try:
            async with session.lock:
                if session.disconnect_timer is not timer or session.is_stopped:
                    return
                session.disconnect_timer = None

                connection = session.connection
                listeners = await self._transport.listeners(connection) if connection else []
                logger.info(LogTemplates.OCCUPANCY_TIMER_FIRED, session.guild_id, len(listeners))

                if listeners:
                    if timer.reason is DisconnectReason.CHANNEL_EMPTY:
                        await session.notify(DiscordUIMessages.ACTION_DISCONNECT_CANCELLED)
                    else:
                        await session.notify(DiscordUIMessages.STATE_STAYING_CONNECTED)
                    return

                if self._on_disconnect is None:
                    logger.warning(LogTemplates.OCCUPANCY_NO_DISCONNECT_CALLBACK, session.guild_id)
                    return
                await self._on_disconnect(session, timer.reason)
        except Exception:
            logger.exception(LogTemplates.OCCUPANCY_TIMER_FAILED, session.guild_id)
