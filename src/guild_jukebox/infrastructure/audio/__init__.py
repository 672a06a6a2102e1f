"""Audio infrastructure - metadata backends and yt-dlp stream resolution."""

from guild_jukebox.infrastructure.audio.models import (
    AudioFormatInfo,
    CacheEntry,
    YtDlpMediaInfo,
    YtDlpOpts,
    YtDlpPlaylistInfo,
)
from guild_jukebox.infrastructure.audio.youtube_api_metadata import YouTubeApiMetadataService
from guild_jukebox.infrastructure.audio.ytdlp_metadata import YtDlpMetadataService

__all__ = [
    "AudioFormatInfo",
    "CacheEntry",
    "YouTubeApiMetadataService",
    "YtDlpMediaInfo",
    "YtDlpMetadataService",
    "YtDlpOpts",
    "YtDlpPlaylistInfo",
]
