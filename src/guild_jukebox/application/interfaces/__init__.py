"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from guild_jukebox.application.interfaces.source_resolver import (
    AudioStream,
    SourceResolver,
    TrackMetadata,
)
from guild_jukebox.application.interfaces.text_output import TextOutput
from guild_jukebox.application.interfaces.transcoder import Transcoder
from guild_jukebox.application.interfaces.voice_transport import (
    StreamEndCallback,
    VoiceConnection,
    VoiceTransport,
)

__all__ = [
    "AudioStream",
    "SourceResolver",
    "StreamEndCallback",
    "TextOutput",
    "TrackMetadata",
    "Transcoder",
    "VoiceConnection",
    "VoiceTransport",
]
