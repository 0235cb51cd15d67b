"""Port interface for validating URLs and resolving them to metadata and audio streams."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, Field

from guild_jukebox.domain.shared.types import NonEmptyStr, NonNegativeInt, TrackTitleStr


class TrackMetadata(BaseModel):
    """Title and duration reported by the source for a URL."""

    model_config = ConfigDict(frozen=True)

    title: TrackTitleStr
    duration_seconds: NonNegativeInt = 0


class AudioStream(BaseModel):
    """Location of a raw, audio-only stream plus the HTTP headers needed to read it."""

    model_config = ConfigDict(frozen=True)

    url: NonEmptyStr
    headers: dict[str, str] = Field(default_factory=dict)


class SourceResolver(ABC):
    """Interface for the audio source (URL validation, metadata, raw stream)."""

    @abstractmethod
    def validate(self, url: str) -> bool:
        """Return True if the URL points at a supported source."""
        ...

    @abstractmethod
    async def fetch_metadata(self, url: str) -> TrackMetadata:
        """Look up the title and duration for a URL.

        Raises:
            ResolutionError: The source is invalid or unreachable.
        """
        ...

    @abstractmethod
    async def open_stream(self, url: str) -> AudioStream:
        """Locate the audio-only stream for a URL.

        Raises:
            ResolutionError: No playable stream could be found.
        """
        ...
