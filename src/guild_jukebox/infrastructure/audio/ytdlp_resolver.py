"""SourceResolver implementation using yt-dlp for YouTube URLs."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from typing import Any, Final, cast

from pydantic import ValidationError
from yt_dlp import YoutubeDL
from yt_dlp.utils import DownloadError

from guild_jukebox.application.interfaces.source_resolver import (
    AudioStream,
    SourceResolver,
    TrackMetadata,
)
from guild_jukebox.config.settings import AudioSettings
from guild_jukebox.domain.shared.exceptions import ResolutionError
from guild_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from guild_jukebox.infrastructure.audio.models import CacheEntry, YtDlpOpts, YtDlpTrackInfo

logger = logging.getLogger(__name__)

CACHE_TTL: Final[int] = 3600
CACHE_MAX_SIZE: Final[int] = 500
LOG_URL_TRUNCATE: Final[int] = 60

# Matches yt-dlp's Android client user-agent to avoid YouTube 403 responses
ANDROID_USER_AGENT = "com.google.android.youtube/19.44.38 (Linux; U; Android 14) gzip"

_info_cache: dict[str, CacheEntry] = {}

YOUTUBE_URL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^https?://(?:(?:www|m|music)\.)?"
    r"(?:youtube\.com/(?:watch\?(?:.*&)?v=|embed/|shorts/|live/)|youtu\.be/)"
    r"([a-zA-Z0-9_-]{11})(?:[?&#/].*)?$"
)


def clear_info_cache() -> None:
    _info_cache.clear()


class YtDlpResolver(SourceResolver):

    def __init__(self, settings: AudioSettings | None = None) -> None:
        self._settings = settings or AudioSettings()
        self._base_opts = YtDlpOpts(format=self._settings.ytdlp_format)

    def _get_opts(self, **overrides: Any) -> YtDlpOpts:
        if overrides:
            return self._base_opts.model_copy(update=overrides)
        return self._base_opts

    def validate(self, url: str) -> bool:
        return YOUTUBE_URL_PATTERN.match(url.strip()) is not None

    @staticmethod
    def _parse_info(data: dict[str, Any]) -> YtDlpTrackInfo:
        return YtDlpTrackInfo.model_validate(data)

    def _extract_info_sync(self, url: str) -> YtDlpTrackInfo:
        now = time.time()
        cached = _info_cache.get(url)
        if cached is not None:
            if now - cached.cached_at < CACHE_TTL and cached.info is not None:
                logger.debug(LogTemplates.CACHE_HIT_URL, url[:LOG_URL_TRUNCATE])
                return cached.info
            _info_cache.pop(url, None)

        try:
            with YoutubeDL(params=cast(Any, self._get_opts().model_dump())) as ydl:
                data = ydl.extract_info(url, download=False)
        except DownloadError as exc:
            logger.warning(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, url)
            raise ResolutionError(url, str(exc)) from exc
        except Exception as exc:
            logger.exception(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, url)
            raise ResolutionError(url, str(exc)) from exc

        if not isinstance(data, dict):
            raise ResolutionError(url, ErrorMessages.NO_INFO_FOR_URL)

        try:
            info = self._parse_info(dict(data))
        except ValidationError as exc:
            logger.warning(LogTemplates.YTDLP_INVALID_INFO, url, exc.error_count())
            raise ResolutionError(url, ErrorMessages.INVALID_INFO_FOR_URL) from exc

        _info_cache[url] = CacheEntry(info=info, cached_at=now)
        self._prune_cache(now)
        return info

    @staticmethod
    def _prune_cache(now: float) -> None:
        if len(_info_cache) <= CACHE_MAX_SIZE:
            return
        expired = [k for k, entry in _info_cache.items() if now - entry.cached_at >= CACHE_TTL]
        for k in expired:
            _info_cache.pop(k, None)
        if expired:
            logger.debug(LogTemplates.CACHE_EXPIRED_CLEANED, len(expired))

    async def _extract_info(self, url: str) -> YtDlpTrackInfo:
        return await asyncio.to_thread(self._extract_info_sync, url)

    async def fetch_metadata(self, url: str) -> TrackMetadata:
        info = await self._extract_info(url)
        return TrackMetadata(title=info.title, duration_seconds=info.duration_seconds)

    async def open_stream(self, url: str) -> AudioStream:
        info = await self._extract_info(url)
        stream_url = info.stream_url()
        if not stream_url:
            logger.warning(LogTemplates.YTDLP_NO_STREAM_URL, info.title)
            raise ResolutionError(url, ErrorMessages.NO_STREAM_URL)

        headers = dict(info.http_headers) or {"User-Agent": ANDROID_USER_AGENT}
        return AudioStream(url=stream_url, headers=headers)
