"""MetadataService implementation backed by the YouTube Data API v3."""

from __future__ import annotations

import logging
import re
from typing import Any, Final

import httpx

from guild_jukebox.application.interfaces.metadata_service import (
    CollectionInfo,
    CollectionMember,
    MediaInfo,
    MetadataService,
    SearchMatch,
)
from guild_jukebox.domain.music.duration import Duration
from guild_jukebox.domain.shared.constants import TimeConstants, YouTubeConstants
from guild_jukebox.domain.shared.exceptions import MetadataLookupError
from guild_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from guild_jukebox.infrastructure.audio.models import UNKNOWN_TITLE
from guild_jukebox.infrastructure.audio.references import (
    playlist_id_of,
    playlist_url,
    video_id_of,
    watch_url,
)

logger = logging.getLogger(__name__)

ISO_DURATION_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^P(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$"
)

VIDEO_PARTS: Final[str] = "snippet,contentDetails,status"
LIVE_CONTENT: Final[str] = "live"
PRIVATE_STATUS: Final[str] = "private"


def parse_iso_duration(text: str | None) -> Duration:
    """Convert an ISO 8601 duration such as ``PT1H2M3S``.

    Missing or malformed values are treated as unbounded.
    """
    if not text:
        return Duration.UNBOUNDED
    match = ISO_DURATION_PATTERN.match(text)
    if match is None:
        return Duration.UNBOUNDED
    parts = {k: int(v) if v else 0 for k, v in match.groupdict().items()}
    return Duration.finite(
        parts["days"] * 86_400 + parts["hours"] * 3600 + parts["minutes"] * 60 + parts["seconds"]
    )


def _video_duration(video: dict[str, Any]) -> Duration:
    snippet = video.get("snippet") or {}
    if snippet.get("liveBroadcastContent") == LIVE_CONTENT:
        return Duration.UNBOUNDED
    details = video.get("contentDetails") or {}
    return parse_iso_duration(details.get("duration"))


def _is_playable(video: dict[str, Any]) -> bool:
    status = video.get("status") or {}
    if status.get("privacyStatus") == PRIVATE_STATUS:
        return False
    return status.get("embeddable", True) is not False


def _title_of(resource: dict[str, Any]) -> str:
    title = (resource.get("snippet") or {}).get("title")
    if not isinstance(title, str) or not title.strip():
        return UNKNOWN_TITLE
    return title


class YouTubeApiMetadataService(MetadataService):
    """Looks up YouTube media and playlists through the Data API.

    Playlist listings are paginated and member durations are fetched in
    batches of ``MAX_PAGE_SIZE`` ids. Stream URLs still come from yt-dlp.
    """

    def __init__(
        self,
        api_key: str,
        *,
        timeout: float = TimeConstants.DEFAULT_REQUEST_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(
            base_url=YouTubeConstants.API_BASE_URL, timeout=timeout
        )

    # ── Reference recognition ──────────────────────────────────────────

    def is_direct_media_reference(self, locator: str) -> bool:
        return video_id_of(locator) is not None

    def is_collection_reference(self, locator: str) -> bool:
        return playlist_id_of(locator) is not None

    def member_id_of(self, locator: str) -> str | None:
        return video_id_of(locator)

    # ── HTTP ───────────────────────────────────────────────────────────

    async def _get(self, endpoint: str, locator: str, **params: Any) -> dict[str, Any]:
        logger.debug(LogTemplates.YOUTUBE_API_REQUEST, endpoint, params)
        try:
            response = await self._client.get(endpoint, params={**params, "key": self._api_key})
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(LogTemplates.YOUTUBE_API_FAILED, endpoint, exc)
            raise MetadataLookupError(
                locator, ErrorMessages.API_REQUEST_FAILED.format(error=exc)
            ) from exc

        if not isinstance(data, dict):
            raise MetadataLookupError(locator, ErrorMessages.EMPTY_API_RESPONSE)
        return data

    async def _fetch_videos(self, video_ids: list[str], locator: str) -> dict[str, dict[str, Any]]:
        videos: dict[str, dict[str, Any]] = {}
        step = YouTubeConstants.MAX_PAGE_SIZE
        for start in range(0, len(video_ids), step):
            batch = video_ids[start : start + step]
            data = await self._get(
                "/videos", locator, part=VIDEO_PARTS, id=",".join(batch), maxResults=step
            )
            for item in data.get("items") or []:
                if isinstance(item, dict) and item.get("id"):
                    videos[item["id"]] = item
        return videos

    # ── MetadataService ────────────────────────────────────────────────

    async def fetch_media_info(self, locator: str) -> MediaInfo:
        video_id = video_id_of(locator)
        if video_id is None:
            raise MetadataLookupError(locator)

        videos = await self._fetch_videos([video_id], locator)
        video = videos.get(video_id)
        if video is None or not _is_playable(video):
            raise MetadataLookupError(
                locator, ErrorMessages.MEDIA_UNAVAILABLE.format(locator=locator)
            )
        return MediaInfo(title=_title_of(video), duration=_video_duration(video))

    async def fetch_collection_info(self, locator: str) -> CollectionInfo:
        playlist_id = playlist_id_of(locator)
        if playlist_id is None:
            raise MetadataLookupError(locator)

        data = await self._get("/playlists", locator, part="snippet", id=playlist_id)
        playlists = data.get("items") or []
        if not playlists:
            raise MetadataLookupError(
                locator, ErrorMessages.COLLECTION_NOT_FOUND.format(collection_id=playlist_id)
            )
        title = _title_of(playlists[0])

        video_ids: list[str] = []
        page_token: str | None = None
        page = 0
        while True:
            params: dict[str, Any] = {
                "part": "contentDetails",
                "playlistId": playlist_id,
                "maxResults": YouTubeConstants.MAX_PAGE_SIZE,
            }
            if page_token:
                params["pageToken"] = page_token
            data = await self._get("/playlistItems", locator, **params)
            items = data.get("items") or []
            page += 1
            logger.debug(LogTemplates.YOUTUBE_API_PAGE, page, playlist_id, len(items))
            for item in items:
                video_id = ((item or {}).get("contentDetails") or {}).get("videoId")
                if video_id:
                    video_ids.append(video_id)
            page_token = data.get("nextPageToken")
            if not page_token:
                break

        videos = await self._fetch_videos(video_ids, locator)
        members = tuple(
            CollectionMember(
                member_id=video_id,
                title=_title_of(videos[video_id]),
                duration=_video_duration(videos[video_id]),
                locator=watch_url(video_id),
            )
            for video_id in video_ids
            if video_id in videos and _is_playable(videos[video_id])
        )
        return CollectionInfo(title=title, members=members)

    async def search(self, query: str) -> SearchMatch | None:
        data = await self._get(
            "/search", query, part="snippet", q=query, type="video,playlist", maxResults=1
        )
        for item in data.get("items") or []:
            resource = (item or {}).get("id") or {}
            if resource.get("videoId"):
                return SearchMatch(locator=watch_url(resource["videoId"]), title=_title_of(item))
            if resource.get("playlistId"):
                return SearchMatch(
                    locator=playlist_url(resource["playlistId"]), title=_title_of(item)
                )
        return None

    async def close(self) -> None:
        await self._client.aclose()
