"""YouTube URL recognition shared by the metadata backends."""

from __future__ import annotations

import re
from typing import Final

from guild_jukebox.domain.shared.constants import YouTubeConstants

YOUTUBE_ID_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?:youtube\.com/(?:watch\?(?:[^#]*&)?v=|embed/|shorts/|live/)|youtu\.be/)"
    r"([a-zA-Z0-9_-]{11})"
)

PLAYLIST_ID_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?:youtube\.com|youtu\.be)/[^#]*[?&]list=([a-zA-Z0-9_-]+)"
)


def video_id_of(locator: str) -> str | None:
    match = YOUTUBE_ID_PATTERN.search(locator)
    return match.group(1) if match else None


def playlist_id_of(locator: str) -> str | None:
    match = PLAYLIST_ID_PATTERN.search(locator)
    return match.group(1) if match else None


def watch_url(video_id: str) -> str:
    return YouTubeConstants.WATCH_URL.format(video_id=video_id)


def playlist_url(playlist_id: str) -> str:
    return YouTubeConstants.PLAYLIST_URL.format(playlist_id=playlist_id)
