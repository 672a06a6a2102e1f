"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the session service, resolver, metadata
backends and Discord adapters. Components are created on first access and
cached for the lifetime of the bot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import DiscordUIMessages

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.commands.facade import MusicCommandFacade
    from ..application.interfaces.metadata_service import MetadataService
    from ..application.interfaces.transport import AudioTransport, PresencePublisher
    from ..application.services.item_resolver import ItemResolver
    from ..application.services.queue_renderer import QueueRenderer
    from ..application.services.session_service import PlaybackSessionService
    from ..domain.music.repository import SessionRepository
    from ..infrastructure.audio.ytdlp_metadata import YtDlpMetadataService
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed. Discord adapters
    need the bot, so ``set_bot`` must be called before they are requested.
    """

    settings: Settings
    _bot: Bot | None = None

    # Persistence layer
    _session_repository: SessionRepository | None = None

    # Infrastructure adapters
    _ytdlp_service: YtDlpMetadataService | None = None
    _metadata_service: MetadataService | None = None
    _audio_transport: AudioTransport | None = None
    _presence_publisher: PresencePublisher | None = None

    # Application services
    _item_resolver: ItemResolver | None = None
    _queue_renderer: QueueRenderer | None = None
    _session_service: PlaybackSessionService | None = None
    _command_facade: MusicCommandFacade | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError("Bot not initialized. Call set_bot() first.")
        return self._bot

    # === Repositories ===

    @property
    def session_repository(self) -> SessionRepository:
        if self._session_repository is None:
            from ..infrastructure.persistence.repositories.session_repository import (
                InMemorySessionRepository,
            )

            self._session_repository = InMemorySessionRepository()
        return self._session_repository

    # === Infrastructure Adapters ===

    @property
    def ytdlp_service(self) -> YtDlpMetadataService:
        """yt-dlp backend; always present because it resolves stream URLs."""
        if self._ytdlp_service is None:
            from ..infrastructure.audio.ytdlp_metadata import YtDlpMetadataService

            self._ytdlp_service = YtDlpMetadataService(
                self.settings.audio, cache_ttl=self.settings.metadata.cache_ttl_seconds
            )
        return self._ytdlp_service

    @property
    def metadata_service(self) -> MetadataService:
        """Metadata backend selected by ``metadata.backend``."""
        if self._metadata_service is None:
            metadata = self.settings.metadata
            if metadata.backend == "youtube_api":
                from ..infrastructure.audio.youtube_api_metadata import (
                    YouTubeApiMetadataService,
                )

                self._metadata_service = YouTubeApiMetadataService(
                    metadata.youtube_api_key.get_secret_value(),
                    timeout=metadata.request_timeout_seconds,
                )
            else:
                self._metadata_service = self.ytdlp_service
        return self._metadata_service

    @property
    def audio_transport(self) -> AudioTransport:
        if self._audio_transport is None:
            from ..infrastructure.discord.adapters.voice_transport import (
                DiscordAudioTransport,
            )

            self._audio_transport = DiscordAudioTransport(
                self.bot,
                self.ytdlp_service.resolve_stream_url,
                self.settings.audio,
            )
        return self._audio_transport

    @property
    def presence_publisher(self) -> PresencePublisher:
        if self._presence_publisher is None:
            from ..infrastructure.discord.adapters.presence import DiscordPresencePublisher

            self._presence_publisher = DiscordPresencePublisher(
                self.bot,
                idle_text=DiscordUIMessages.PRESENCE_IDLE.format(
                    prefix=self.settings.discord.command_prefix
                ),
            )
        return self._presence_publisher

    # === Application Services ===

    @property
    def item_resolver(self) -> ItemResolver:
        if self._item_resolver is None:
            from ..application.services.item_resolver import ItemResolver

            self._item_resolver = ItemResolver(
                self.metadata_service,
                playlists_enabled=self.settings.metadata.playlists_enabled,
            )
        return self._item_resolver

    @property
    def queue_renderer(self) -> QueueRenderer:
        if self._queue_renderer is None:
            from ..application.services.queue_renderer import QueueRenderer

            self._queue_renderer = QueueRenderer(
                max_length=self.settings.playback.max_message_length
            )
        return self._queue_renderer

    @property
    def session_service(self) -> PlaybackSessionService:
        """Get the per-guild playback state machine."""
        if self._session_service is None:
            from ..application.services.session_service import PlaybackSessionService

            self._session_service = PlaybackSessionService(
                session_repository=self.session_repository,
                transport=self.audio_transport,
                presence=self.presence_publisher,
                idle_timeout_seconds=self.settings.playback.idle_timeout_seconds,
            )
        return self._session_service

    @property
    def command_facade(self) -> MusicCommandFacade:
        if self._command_facade is None:
            from ..application.commands.facade import MusicCommandFacade

            self._command_facade = MusicCommandFacade(
                session_service=self.session_service,
                item_resolver=self.item_resolver,
                queue_renderer=self.queue_renderer,
                command_prefix=self.settings.discord.command_prefix,
            )
        return self._command_facade

    # === Lifecycle ===

    async def shutdown(self) -> None:
        """Tear down every guild session and close network clients."""
        if self._session_service is not None:
            await self._session_service.shutdown()

        if self._metadata_service is not None:
            await self._metadata_service.close()
        if self._ytdlp_service is not None and self._ytdlp_service is not self._metadata_service:
            await self._ytdlp_service.close()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
