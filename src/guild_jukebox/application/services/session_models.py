"""Runtime state for a guild's playback session."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from ...domain.music.entities import GuildPlaybackSession, Track
from ...domain.music.value_objects import DisconnectReason
from ...domain.shared.messages import LogTemplates
from ...domain.shared.types import DiscordSnowflake
from ..interfaces.text_output import TextOutput
from ..interfaces.voice_transport import VoiceConnection

logger = logging.getLogger(__name__)


async def send_notice(
    output: TextOutput, text: str, *, guild_id: DiscordSnowflake | None = None
) -> Any | None:
    """Send ``text`` to ``output``, logging instead of raising on failure."""
    try:
        return await output.send(text)
    except Exception as exc:
        logger.warning(LogTemplates.NOTIFY_FAILED, exc, extra={"guild_id": guild_id})
        return None


@dataclass
class EnqueueContext:
    """Where an enqueue request came from."""

    text_output: TextOutput
    voice_channel_id: DiscordSnowflake
    requester: str


@dataclass
class ProgressHandle:
    """The live progress interval and the status message it edits."""

    track: Track
    task: asyncio.Task[None] | None = None
    message: Any = None


@dataclass
class DisconnectTimer:
    """An armed grace-period countdown and why it was armed."""

    reason: DisconnectReason
    task: asyncio.Task[None] | None = None


@dataclass(eq=False)
class GuildSession:
    """Everything one guild's playback owns.

    All mutation goes through ``lock``. ``epoch`` is bumped on every playback
    start, track end, and stop; asynchronous callbacks capture it when they are
    created and do nothing once it has moved on.
    """

    guild_id: DiscordSnowflake
    text_output: TextOutput
    voice_channel_id: DiscordSnowflake
    playback: GuildPlaybackSession
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    connection: VoiceConnection | None = None
    progress: ProgressHandle | None = None
    disconnect_timer: DisconnectTimer | None = None
    epoch: int = 0

    @property
    def is_stopped(self) -> bool:
        return self.playback.is_stopped

    def bump_epoch(self) -> int:
        self.epoch += 1
        return self.epoch

    async def notify(self, text: str) -> Any | None:
        return await send_notice(self.text_output, text, guild_id=self.guild_id)
