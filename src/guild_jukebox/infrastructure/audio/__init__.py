"""Audio infrastructure - yt-dlp resolver and FFmpeg transcoder."""

from guild_jukebox.infrastructure.audio.ffmpeg_transcoder import FFmpegConfig, FFmpegTranscoder
from guild_jukebox.infrastructure.audio.models import (
    AudioFormatInfo,
    CacheEntry,
    YtDlpOpts,
    YtDlpTrackInfo,
)
from guild_jukebox.infrastructure.audio.ytdlp_resolver import YtDlpResolver

__all__ = [
    "AudioFormatInfo",
    "CacheEntry",
    "FFmpegConfig",
    "FFmpegTranscoder",
    "YtDlpOpts",
    "YtDlpResolver",
    "YtDlpTrackInfo",
]
