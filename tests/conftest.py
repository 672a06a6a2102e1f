from __future__ import annotations

from collections.abc import Callable

import pytest

from guild_jukebox.application.interfaces.metadata_service import (
    CollectionInfo,
    MediaInfo,
    MetadataService,
    SearchMatch,
)
from guild_jukebox.application.interfaces.transport import (
    AudioTransport,
    PresencePublisher,
    StreamHandle,
    TransportConnection,
)
from guild_jukebox.domain.music.duration import Duration
from guild_jukebox.domain.music.entities import QueueItem
from guild_jukebox.domain.music.value_objects import ItemKind
from guild_jukebox.domain.shared.exceptions import MetadataLookupError, TransportError
from guild_jukebox.infrastructure.audio.references import playlist_id_of, video_id_of

GUILD_ID = 111111111111111111
CALLER_ID = 222222222222222222
VOICE_CHANNEL_ID = 333333333333333333


# ============================================================================
# Port Fakes
# ============================================================================


class FakeReplyChannel:
    """Collects every reply instead of sending it."""

    def __init__(self) -> None:
        self.sent: list[str] = []

    async def send(self, content: str) -> None:
        self.sent.append(content)


class FakeStreamHandle(StreamHandle):
    def __init__(self, locator: str, start_offset_ms: int) -> None:
        self.locator = locator
        self.start_offset_ms = start_offset_ms
        self.paused = False
        self.forced = False
        self.done = False
        self._finish: Callable[[], None] | None = None
        self._error: Callable[[TransportError], None] | None = None

    def on_finish(self, callback: Callable[[], None]) -> None:
        self._finish = callback

    def on_error(self, callback: Callable[[TransportError], None]) -> None:
        self._error = callback

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def force_end(self) -> None:
        self.forced = True
        self.finish()

    def finish(self) -> None:
        """Simulate the stream reaching its end."""
        if self.done:
            return
        self.done = True
        if self._finish is not None:
            self._finish()

    def fail(self, error: TransportError) -> None:
        if self._error is not None:
            self._error(error)


class FakeConnection(TransportConnection):
    def __init__(self) -> None:
        self.connected = True
        self.streams: list[FakeStreamHandle] = []
        self.failing_locators: set[str] = set()
        self.disconnect_calls = 0

    @property
    def is_connected(self) -> bool:
        return self.connected

    def play_stream(self, locator: str, *, start_offset_ms: int = 0) -> StreamHandle:
        if locator in self.failing_locators:
            raise TransportError(f"cannot stream {locator}")
        stream = FakeStreamHandle(locator, start_offset_ms)
        self.streams.append(stream)
        return stream

    def disconnect(self) -> None:
        self.connected = False
        self.disconnect_calls += 1

    @property
    def current(self) -> FakeStreamHandle:
        return self.streams[-1]


class FakeTransport(AudioTransport):
    """Joins instantly unless told to fail or to wait on ``gate``."""

    def __init__(self) -> None:
        self.joins: list[tuple[int, int]] = []
        self.connections: list[FakeConnection] = []
        self.fail_with: TransportError | None = None
        self.gate = None

    async def join(self, guild_id: int, channel_id: int) -> TransportConnection:
        self.joins.append((guild_id, channel_id))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with
        connection = FakeConnection()
        self.connections.append(connection)
        return connection

    @property
    def connection(self) -> FakeConnection:
        return self.connections[-1]


class FakePresence(PresencePublisher):
    def __init__(self) -> None:
        self.history: list[str | None] = []

    def set_presence(self, text: str | None) -> None:
        self.history.append(text)

    @property
    def current(self) -> str | None:
        return self.history[-1] if self.history else None


class FakeMetadataService(MetadataService):
    """Serves canned lookups keyed by locator or query."""

    def __init__(self) -> None:
        self.media: dict[str, MediaInfo] = {}
        self.collections: dict[str, CollectionInfo] = {}
        self.searches: dict[str, SearchMatch] = {}
        self.failing: set[str] = set()

    def is_direct_media_reference(self, locator: str) -> bool:
        return video_id_of(locator) is not None

    def is_collection_reference(self, locator: str) -> bool:
        return playlist_id_of(locator) is not None

    def member_id_of(self, locator: str) -> str | None:
        return video_id_of(locator)

    async def fetch_media_info(self, locator: str) -> MediaInfo:
        if locator in self.failing or locator not in self.media:
            raise MetadataLookupError(locator)
        return self.media[locator]

    async def fetch_collection_info(self, locator: str) -> CollectionInfo:
        if locator in self.failing or locator not in self.collections:
            raise MetadataLookupError(locator)
        return self.collections[locator]

    async def search(self, query: str) -> SearchMatch | None:
        if query in self.failing:
            raise MetadataLookupError(query)
        return self.searches.get(query)


class ManualClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ============================================================================
# Domain Fixtures
# ============================================================================


@pytest.fixture
def make_item():
    """Factory for queue items; ``seconds=None`` makes an unbounded item."""

    def _make(
        title: str = "Test Item",
        seconds: int | None = 180,
        *,
        kind: ItemKind = ItemKind.RESOLVED_MEDIA,
        collection_title: str | None = None,
        start_offset_ms: int = 0,
        locator: str | None = None,
    ) -> QueueItem:
        if collection_title is not None:
            kind = ItemKind.PLAYLIST_MEMBER
        return QueueItem(
            title=title,
            duration=Duration(seconds),
            locator=locator or f"https://media.example/{title.replace(' ', '_')}",
            kind=kind,
            collection_title=collection_title,
            start_offset_ms=start_offset_ms,
        )

    return _make


# ============================================================================
# Port Fixtures
# ============================================================================


@pytest.fixture
def reply_channel() -> FakeReplyChannel:
    return FakeReplyChannel()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def presence() -> FakePresence:
    return FakePresence()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def metadata_service() -> FakeMetadataService:
    return FakeMetadataService()


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def session_repository():
    from guild_jukebox.infrastructure.persistence.repositories.session_repository import (
        InMemorySessionRepository,
    )

    return InMemorySessionRepository()


@pytest.fixture
def session_service(session_repository, transport, presence, clock):
    from guild_jukebox.application.services.session_service import PlaybackSessionService

    return PlaybackSessionService(
        session_repository=session_repository,
        transport=transport,
        presence=presence,
        idle_timeout_seconds=300.0,
        clock=clock,
    )


@pytest.fixture
def item_resolver(metadata_service):
    from guild_jukebox.application.services.item_resolver import ItemResolver

    return ItemResolver(metadata_service)


@pytest.fixture
def queue_renderer():
    from guild_jukebox.application.services.queue_renderer import QueueRenderer

    return QueueRenderer()


@pytest.fixture
def command_facade(session_service, item_resolver, queue_renderer):
    from guild_jukebox.application.commands.facade import MusicCommandFacade

    return MusicCommandFacade(
        session_service=session_service,
        item_resolver=item_resolver,
        queue_renderer=queue_renderer,
        command_prefix="$",
    )
