"""Centralized constants for audio, playback and YouTube lookups.

This module provides reusable constants that reduce magic strings and improve maintainability.
"""

from __future__ import annotations


class AudioConstants:
    """Audio and FFmpeg configuration constants."""

    # FFmpeg Options
    FFMPEG_BEFORE_OPTIONS_DEFAULT = "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5"
    FFMPEG_OPTIONS_DEFAULT = "-vn"  # No video
    FFMPEG_SEEK_OPTION = "-ss {seconds:.3f}"

    # yt-dlp Options
    YTDLP_FORMAT_DEFAULT = "bestaudio/best"

    # Audio Settings
    DEFAULT_VOLUME = 1.0
    CONNECT_TIMEOUT_SECONDS = 10.0


class PlaybackConstants:
    """Queue and session limits."""

    # Sanity ceiling for timestamps and media lengths (24 hours)
    MAX_MEDIA_SECONDS = 86_400

    # Discord message ceiling
    MAX_MESSAGE_LENGTH = 2000

    # Delay before an idle voice connection is released
    IDLE_TIMEOUT_SECONDS = 300.0

    # Shown for media without a known end
    UNBOUNDED_GLYPH = "∞"


class YouTubeConstants:
    """YouTube URL and Data API constants."""

    API_BASE_URL = "https://www.googleapis.com/youtube/v3"
    WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
    PLAYLIST_URL = "https://www.youtube.com/playlist?list={playlist_id}"
    MAX_PAGE_SIZE = 50
    SEARCH_RESULTS_URL = "https://www.youtube.com/results?search_query={query}"
    # Results scanned for the first playable video or playlist
    SEARCH_RESULT_LIMIT = 5


class LogLevels:
    """Valid logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class TimeConstants:
    """Time-related constants in seconds."""

    DEFAULT_CACHE_TTL = 3600  # 1 hour
    DEFAULT_REQUEST_TIMEOUT = 10.0
