"""MetadataService implementation using yt-dlp for lookups, search and stream URLs."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, cast
from urllib.parse import quote_plus

from yt_dlp import YoutubeDL
from yt_dlp.utils import DownloadError

from guild_jukebox.application.interfaces.metadata_service import (
    CollectionInfo,
    CollectionMember,
    MediaInfo,
    MetadataService,
    SearchMatch,
)
from guild_jukebox.config.settings import AudioSettings
from guild_jukebox.domain.music.duration import Duration
from guild_jukebox.domain.shared.constants import YouTubeConstants
from guild_jukebox.domain.shared.exceptions import MetadataLookupError
from guild_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from guild_jukebox.infrastructure.audio.models import (
    CACHE_MAX_SIZE,
    CACHE_TTL,
    LOG_URL_TRUNCATE,
    CacheEntry,
    YtDlpMediaInfo,
    YtDlpOpts,
    YtDlpPlaylistInfo,
)
from guild_jukebox.infrastructure.audio.references import (
    playlist_id_of,
    playlist_url,
    video_id_of,
    watch_url,
)

logger = logging.getLogger(__name__)


def _duration_of(info: YtDlpMediaInfo) -> Duration:
    if info.is_live or info.duration is None:
        return Duration.UNBOUNDED
    return Duration.finite(info.duration)


def _search_match(entry: YtDlpMediaInfo) -> SearchMatch | None:
    """Map a flat results-page entry to a video or playlist locator.

    Channel URLs carry neither a video nor a playlist id and are skipped.
    """
    url = entry.url or ""
    video_id = video_id_of(url)
    if video_id:
        return SearchMatch(locator=watch_url(video_id), title=entry.title)
    playlist_id = playlist_id_of(url)
    if playlist_id:
        return SearchMatch(locator=playlist_url(playlist_id), title=entry.title)
    return None


class YtDlpMetadataService(MetadataService):
    """Looks up YouTube media and playlists through yt-dlp.

    yt-dlp is blocking, so every extraction runs in a worker thread.
    Single-media extractions are cached for ``cache_ttl`` seconds.
    """

    def __init__(
        self, settings: AudioSettings | None = None, *, cache_ttl: int = CACHE_TTL
    ) -> None:
        self._settings = settings or AudioSettings()
        self._cache_ttl = cache_ttl
        self._cache: dict[str, CacheEntry] = {}
        self._base_opts = YtDlpOpts(format=self._settings.ytdlp_format)

    def _get_opts(self, **overrides: Any) -> YtDlpOpts:
        if overrides:
            return self._base_opts.model_copy(update=overrides)
        return self._base_opts

    def _get_playlist_opts(self) -> YtDlpOpts:
        return self._get_opts(noplaylist=False, extract_flat="in_playlist")

    # ── Reference recognition ──────────────────────────────────────────

    def is_direct_media_reference(self, locator: str) -> bool:
        return video_id_of(locator) is not None

    def is_collection_reference(self, locator: str) -> bool:
        return playlist_id_of(locator) is not None

    def member_id_of(self, locator: str) -> str | None:
        return video_id_of(locator)

    # ── Blocking extraction (worker thread) ────────────────────────────

    def _extract(self, url: str, opts: YtDlpOpts) -> dict[str, Any]:
        try:
            with YoutubeDL(params=cast(Any, opts.model_dump())) as ydl:
                data = ydl.extract_info(url, download=False)
        except DownloadError as exc:
            raise MetadataLookupError(url, str(exc)) from exc

        if not isinstance(data, dict):
            raise MetadataLookupError(url, ErrorMessages.EMPTY_API_RESPONSE)
        return dict(data)

    def _extract_info_sync(self, url: str) -> YtDlpMediaInfo:
        now = time.time()
        cached = self._cache.get(url)
        if cached is not None:
            if now - cached.cached_at < self._cache_ttl:
                logger.debug(LogTemplates.CACHE_HIT, url[:LOG_URL_TRUNCATE])
                return cached.info
            self._cache.pop(url, None)

        try:
            info = YtDlpMediaInfo.model_validate(self._extract(url, self._get_opts()))
        except MetadataLookupError:
            logger.warning(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, url)
            raise

        if info.is_restricted:
            raise MetadataLookupError(url, ErrorMessages.MEDIA_UNAVAILABLE.format(locator=url))

        self._cache[url] = CacheEntry(info=info, cached_at=now)
        if len(self._cache) > CACHE_MAX_SIZE:
            expired = [
                k for k, entry in self._cache.items() if now - entry.cached_at >= self._cache_ttl
            ]
            for k in expired:
                self._cache.pop(k, None)
        return info

    def _extract_playlist_sync(self, url: str) -> YtDlpPlaylistInfo:
        try:
            return YtDlpPlaylistInfo.model_validate(self._extract(url, self._get_playlist_opts()))
        except MetadataLookupError:
            logger.warning(LogTemplates.YTDLP_FAILED_EXTRACT_PLAYLIST, url)
            raise

    def _search_sync(self, query: str) -> YtDlpPlaylistInfo:
        search_url = YouTubeConstants.SEARCH_RESULTS_URL.format(query=quote_plus(query))
        opts = self._get_opts(
            noplaylist=False,
            extract_flat="in_playlist",
            playlistend=YouTubeConstants.SEARCH_RESULT_LIMIT,
        )
        try:
            return YtDlpPlaylistInfo.model_validate(self._extract(search_url, opts))
        except MetadataLookupError:
            logger.warning(LogTemplates.YTDLP_FAILED_SEARCH, query)
            raise

    # ── MetadataService ────────────────────────────────────────────────

    async def fetch_media_info(self, locator: str) -> MediaInfo:
        video_id = video_id_of(locator)
        url = watch_url(video_id) if video_id else locator
        info = await asyncio.to_thread(self._extract_info_sync, url)
        return MediaInfo(title=info.title, duration=_duration_of(info))

    async def fetch_collection_info(self, locator: str) -> CollectionInfo:
        playlist_id = playlist_id_of(locator)
        url = playlist_url(playlist_id) if playlist_id else locator
        playlist = await asyncio.to_thread(self._extract_playlist_sync, url)

        members = tuple(
            CollectionMember(
                member_id=entry.id,
                title=entry.title,
                duration=_duration_of(entry),
                locator=watch_url(entry.id),
            )
            for entry in playlist.entries
            if entry.id
        )
        return CollectionInfo(title=playlist.title, members=members)

    async def search(self, query: str) -> SearchMatch | None:
        """First video or playlist on the YouTube results page for ``query``."""
        results = await asyncio.to_thread(self._search_sync, query)
        for entry in results.entries:
            match = _search_match(entry)
            if match is not None:
                return match
        return None

    async def resolve_stream_url(self, locator: str) -> str:
        """Direct media URL for FFmpeg; non-YouTube locators are streamed as given."""
        if not self.is_direct_media_reference(locator):
            return locator

        video_id = video_id_of(locator)
        url = watch_url(video_id) if video_id else locator
        info = await asyncio.to_thread(self._extract_info_sync, url)
        stream_url = info.stream_url
        if not stream_url:
            logger.warning(LogTemplates.YTDLP_NO_STREAM_URL, url)
            raise MetadataLookupError(
                locator, ErrorMessages.NO_STREAM_URL_FOR_ITEM.format(locator=locator)
            )
        return stream_url

    async def close(self) -> None:
        """Drop cached extractions."""
        self._cache.clear()
