"""Port interface for voice channel connections and audio delivery."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import Any

from guild_jukebox.domain.shared.types import DiscordSnowflake

StreamEndCallback = Callable[[Exception | None], Coroutine[Any, Any, None]]
"""Awaited once per subscription when the stream ends; the argument is the transport error, if any."""


@dataclass(frozen=True)
class VoiceConnection:
    """Handle to a joined voice channel, owned by exactly one session."""

    guild_id: DiscordSnowflake
    channel_id: DiscordSnowflake


class VoiceTransport(ABC):
    """Interface for joining, streaming to, and leaving voice channels."""

    @abstractmethod
    async def join(self, guild_id: DiscordSnowflake, channel_id: DiscordSnowflake) -> VoiceConnection:
        """Join (or move to) a voice channel.

        Raises:
            TransportError: The channel could not be joined.
        """
        ...

    @abstractmethod
    async def subscribe(
        self, connection: VoiceConnection, source: Any, after: StreamEndCallback
    ) -> None:
        """Start streaming ``source``; ``after`` is awaited on the event loop when it ends.

        Raises:
            TransportError: Playback could not be started.
        """
        ...

    @abstractmethod
    async def stop(self, connection: VoiceConnection) -> None:
        """Force the current stream to end, which fires its ``after`` callback."""
        ...

    @abstractmethod
    async def disconnect(self, connection: VoiceConnection) -> None:
        ...

    @abstractmethod
    async def listeners(self, connection: VoiceConnection) -> list[str]:
        """Return identifiers of non-bot members in the connection's channel."""
        ...
