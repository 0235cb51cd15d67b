"""Port interface for turning a raw audio stream into playable PCM."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .source_resolver import AudioStream

# Output format every transcoder must produce
PCM_SAMPLE_FORMAT = "s16le"
PCM_SAMPLE_RATE = 48_000
PCM_CHANNELS = 2


class Transcoder(ABC):
    """Interface for converting a raw stream to 16-bit LE, 48 kHz, stereo PCM."""

    @abstractmethod
    async def transcode(self, stream: AudioStream) -> Any:
        """Return a playable source accepted by the voice transport.

        Raises:
            ResolutionError: The transcoder could not be started.
        """
        ...
