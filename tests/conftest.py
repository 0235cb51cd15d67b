import asyncio
from typing import Any

import pytest
import pytest_asyncio

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
from guild_jukebox.domain.music.entities import GuildPlaybackSession, Track
from guild_jukebox.domain.shared.exceptions import MessageGoneError, ResolutionError

GUILD_ID = 111111111111111111
VOICE_CHANNEL_ID = 222222222222222222
OTHER_CHANNEL_ID = 333333333333333333


# ============================================================================
# Fake collaborators
# ============================================================================


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTextOutput(TextOutput):
    """Records sent and edited messages; handles are 1-based send indexes."""

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.edits: list[tuple[int, str]] = []
        self.gone: set[int] = set()

    async def send(self, text: str) -> int:
        self.sent.append(text)
        return len(self.sent)

    async def edit(self, handle: int, text: str) -> None:
        if handle in self.gone:
            raise MessageGoneError()
        self.edits.append((handle, text))


class FakeResolver(SourceResolver):
    """Accepts https URLs; titles and durations come from ``catalog``."""

    def __init__(self) -> None:
        self.catalog: dict[str, TrackMetadata] = {}
        self.metadata_errors: dict[str, str] = {}
        self.stream_errors: dict[str, str] = {}
        self.opened: list[str] = []

    def add(self, url: str, title: str, duration: int = 180) -> str:
        self.catalog[url] = TrackMetadata(title=title, duration_seconds=duration)
        return url

    def validate(self, url: str) -> bool:
        return url.startswith("https://")

    async def fetch_metadata(self, url: str) -> TrackMetadata:
        if url in self.metadata_errors:
            raise ResolutionError(url, self.metadata_errors[url])
        return self.catalog.get(url) or TrackMetadata(title=url.rsplit("/", 1)[-1])

    async def open_stream(self, url: str) -> AudioStream:
        if url in self.stream_errors:
            raise ResolutionError(url, self.stream_errors[url])
        self.opened.append(url)
        return AudioStream(url=f"{url}#audio")


class FakeTranscoder(Transcoder):
    async def transcode(self, stream: AudioStream) -> Any:
        return {"pcm": stream.url}


class FakeVoiceTransport(VoiceTransport):
    """In-memory voice transport.

    ``join_gate`` holds joins until it is set; ``join_entered`` is set as soon
    as a join starts waiting on it.
    """

    def __init__(self) -> None:
        self.joined: list[VoiceConnection] = []
        self.subscriptions: list[tuple[VoiceConnection, Any, StreamEndCallback]] = []
        self.stopped: list[VoiceConnection] = []
        self.disconnected: list[VoiceConnection] = []
        self.members: list[str] = ["555"]
        self.join_error: Exception | None = None
        self.subscribe_error: Exception | None = None
        self.join_gate: asyncio.Event | None = None
        self.join_entered = asyncio.Event()

    async def join(self, guild_id: int, channel_id: int) -> VoiceConnection:
        self.join_entered.set()
        if self.join_gate is not None:
            await self.join_gate.wait()
        if self.join_error is not None:
            raise self.join_error
        connection = VoiceConnection(guild_id=guild_id, channel_id=channel_id)
        self.joined.append(connection)
        return connection

    async def subscribe(
        self, connection: VoiceConnection, source: Any, after: StreamEndCallback
    ) -> None:
        if self.subscribe_error is not None:
            raise self.subscribe_error
        self.subscriptions.append((connection, source, after))

    async def stop(self, connection: VoiceConnection) -> None:
        self.stopped.append(connection)

    async def disconnect(self, connection: VoiceConnection) -> None:
        self.disconnected.append(connection)

    async def listeners(self, connection: VoiceConnection) -> list[str]:
        return list(self.members)

    async def finish(self, error: Exception | None = None) -> None:
        """End the most recent stream the way the voice client would."""
        _, _, after = self.subscriptions[-1]
        await after(error)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def text_output():
    return FakeTextOutput()


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def transcoder():
    return FakeTranscoder()


@pytest_asyncio.fixture
async def transport():
    return FakeVoiceTransport()


@pytest.fixture
def registry():
    from guild_jukebox.application.services.session_registry import SessionRegistry

    return SessionRegistry()


@pytest.fixture
def queue_manager(registry):
    from guild_jukebox.application.services.queue_service import QueueManager

    return QueueManager(registry)


@pytest.fixture
def reporter(clock):
    from guild_jukebox.application.services.progress_reporter import ProgressReporter

    # Long interval: tests drive ticks by hand
    return ProgressReporter(interval=3600.0, clock=clock)


@pytest.fixture
def grace_period():
    return 3600.0


@pytest.fixture
def monitor(registry, transport, grace_period):
    from guild_jukebox.application.services.occupancy_monitor import OccupancyMonitor

    return OccupancyMonitor(registry, transport, grace_period=grace_period)


@pytest_asyncio.fixture
async def service(registry, queue_manager, resolver, transcoder, transport, reporter, monitor, clock):
    from guild_jukebox.application.services.playback_service import PlaybackApplicationService

    svc = PlaybackApplicationService(
        registry=registry,
        queue_manager=queue_manager,
        source_resolver=resolver,
        transcoder=transcoder,
        voice_transport=transport,
        progress_reporter=reporter,
        occupancy_monitor=monitor,
        clock=clock,
    )
    yield svc
    await svc.shutdown()


@pytest.fixture
def context(text_output):
    from guild_jukebox.application.services.session_models import EnqueueContext

    return EnqueueContext(
        text_output=text_output, voice_channel_id=VOICE_CHANNEL_ID, requester="alice"
    )


@pytest.fixture
def sample_track():
    return Track(
        url="https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        title="Test Song",
        duration_seconds=200,
        requested_by="alice",
    )


def make_track(n: int, duration: int = 180) -> Track:
    return Track(
        url=f"https://youtu.be/track{n:06d}",
        title=f"Track {n}",
        duration_seconds=duration,
        requested_by="alice",
    )


@pytest.fixture
def guild_session(text_output):
    """A registered-nowhere session in IDLE."""
    from guild_jukebox.application.services.session_models import GuildSession

    return GuildSession(
        guild_id=GUILD_ID,
        text_output=text_output,
        voice_channel_id=VOICE_CHANNEL_ID,
        playback=GuildPlaybackSession(guild_id=GUILD_ID),
    )


@pytest.fixture
def playing_session(guild_session, sample_track, clock):
    """A session playing ``sample_track`` since the clock's current reading."""
    guild_session.connection = VoiceConnection(guild_id=GUILD_ID, channel_id=VOICE_CHANNEL_ID)
    guild_session.playback.begin_connecting()
    guild_session.playback.start_playback(sample_track, clock())
    guild_session.bump_epoch()
    return guild_session
