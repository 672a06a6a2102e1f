"""
Unit Tests for YouTubeApiMetadataService

Tests for:
- ISO 8601 duration parsing
- Video lookups (live, private, missing)
- Paginated playlist listing with batched video details
- Search for videos and playlists
- HTTP failures mapped to MetadataLookupError
"""

import httpx
import pytest

from guild_jukebox.domain.music.duration import Duration
from guild_jukebox.domain.shared.constants import YouTubeConstants
from guild_jukebox.domain.shared.exceptions import MetadataLookupError
from guild_jukebox.infrastructure.audio.youtube_api_metadata import (
    YouTubeApiMetadataService,
    parse_iso_duration,
)

API_KEY = "test-key"
VIDEO_ID = "dQw4w9WgXcQ"
VIDEO_URL = f"https://www.youtube.com/watch?v={VIDEO_ID}"
PLAYLIST_URL = "https://www.youtube.com/playlist?list=PLmix"


def _video(video_id, title="Song", duration="PT3M", *, live=False, privacy="public"):
    return {
        "id": video_id,
        "snippet": {"title": title, "liveBroadcastContent": "live" if live else "none"},
        "contentDetails": {"duration": duration},
        "status": {"privacyStatus": privacy, "embeddable": True},
    }


class FakeYouTubeApi:
    """Routes requests to canned responses and records what was asked."""

    def __init__(self):
        self.videos = {}
        self.playlists = {}
        self.playlist_pages = {}
        self.search_items = []
        self.requests = []
        self.fail_status = None

    def __call__(self, request):
        self.requests.append(request)
        if self.fail_status is not None:
            return httpx.Response(self.fail_status, json={"error": "nope"})

        params = request.url.params
        assert params["key"] == API_KEY
        endpoint = request.url.path.rsplit("/", 1)[-1]

        if endpoint == "videos":
            ids = params["id"].split(",")
            items = [self.videos[i] for i in ids if i in self.videos]
            return httpx.Response(200, json={"items": items})
        if endpoint == "playlists":
            items = [self.playlists[params["id"]]] if params["id"] in self.playlists else []
            return httpx.Response(200, json={"items": items})
        if endpoint == "playlistItems":
            pages = self.playlist_pages[params["playlistId"]]
            index = int(params.get("pageToken", "0"))
            body = {"items": [{"contentDetails": {"videoId": v}} for v in pages[index]]}
            if index + 1 < len(pages):
                body["nextPageToken"] = str(index + 1)
            return httpx.Response(200, json=body)
        if endpoint == "search":
            return httpx.Response(200, json={"items": self.search_items})
        return httpx.Response(404)


@pytest.fixture
def api():
    return FakeYouTubeApi()


@pytest.fixture
def service(api):
    client = httpx.AsyncClient(
        base_url=YouTubeConstants.API_BASE_URL, transport=httpx.MockTransport(api)
    )
    return YouTubeApiMetadataService(API_KEY, client=client)


# =============================================================================
# Duration Parsing
# =============================================================================


class TestParseIsoDuration:
    """Tests for ISO 8601 durations returned by the API."""

    @pytest.mark.parametrize(
        ("text", "seconds"),
        [
            ("PT3M", 180),
            ("PT1H2M3S", 3723),
            ("PT45S", 45),
            ("P1DT1S", 86_401),
            ("P0D", 0),
        ],
    )
    def test_parse(self, text, seconds):
        assert parse_iso_duration(text) == Duration(seconds)

    @pytest.mark.parametrize("text", [None, "", "3:00", "PTXM"])
    def test_unparseable_is_unbounded(self, text):
        assert parse_iso_duration(text).is_unbounded


# =============================================================================
# Videos
# =============================================================================


class TestFetchMediaInfo:
    """Tests for single video lookups."""

    @pytest.mark.asyncio
    async def test_video(self, service, api):
        api.videos[VIDEO_ID] = _video(VIDEO_ID, "Never Gonna", "PT3M33S")

        info = await service.fetch_media_info(VIDEO_URL)

        assert info.title == "Never Gonna"
        assert info.duration == Duration(213)
        assert api.requests[0].url.path.endswith("/youtube/v3/videos")

    @pytest.mark.asyncio
    async def test_live_video_is_unbounded(self, service, api):
        api.videos[VIDEO_ID] = _video(VIDEO_ID, "Radio", "P0D", live=True)

        info = await service.fetch_media_info(VIDEO_URL)

        assert info.duration.is_unbounded

    @pytest.mark.asyncio
    async def test_private_video_rejected(self, service, api):
        api.videos[VIDEO_ID] = _video(VIDEO_ID, privacy="private")

        with pytest.raises(MetadataLookupError):
            await service.fetch_media_info(VIDEO_URL)

    @pytest.mark.asyncio
    async def test_missing_video_rejected(self, service):
        with pytest.raises(MetadataLookupError):
            await service.fetch_media_info(VIDEO_URL)

    @pytest.mark.asyncio
    async def test_non_youtube_locator_rejected(self, service, api):
        with pytest.raises(MetadataLookupError):
            await service.fetch_media_info("https://radio.example/live")
        assert api.requests == []

    @pytest.mark.asyncio
    async def test_http_error_becomes_lookup_error(self, service, api):
        api.fail_status = 403

        with pytest.raises(MetadataLookupError, match="YouTube API request failed"):
            await service.fetch_media_info(VIDEO_URL)


# =============================================================================
# Playlists
# =============================================================================


class TestFetchCollectionInfo:
    """Tests for playlist listing."""

    @pytest.mark.asyncio
    async def test_paginated_playlist(self, service, api):
        api.playlists["PLmix"] = {"snippet": {"title": "Road Trip"}}
        api.playlist_pages["PLmix"] = [["aaaaaaaaaaa", "bbbbbbbbbbb"], ["ccccccccccc"]]
        for vid in ("aaaaaaaaaaa", "bbbbbbbbbbb", "ccccccccccc"):
            api.videos[vid] = _video(vid, title=vid[:1].upper(), duration="PT1M")

        info = await service.fetch_collection_info(PLAYLIST_URL)

        assert info.title == "Road Trip"
        assert [m.title for m in info.members] == ["A", "B", "C"]
        assert all(m.duration == Duration(60) for m in info.members)
        assert info.members[2].locator == "https://www.youtube.com/watch?v=ccccccccccc"

    @pytest.mark.asyncio
    async def test_unplayable_members_dropped(self, service, api):
        api.playlists["PLmix"] = {"snippet": {"title": "Mix"}}
        api.playlist_pages["PLmix"] = [["aaaaaaaaaaa", "bbbbbbbbbbb", "ccccccccccc"]]
        api.videos["aaaaaaaaaaa"] = _video("aaaaaaaaaaa")
        api.videos["bbbbbbbbbbb"] = _video("bbbbbbbbbbb", privacy="private")

        info = await service.fetch_collection_info(PLAYLIST_URL)

        assert [m.member_id for m in info.members] == ["aaaaaaaaaaa"]

    @pytest.mark.asyncio
    async def test_video_details_fetched_in_batches(self, service, api):
        ids = [f"v{i:010d}" for i in range(120)]
        api.playlists["PLmix"] = {"snippet": {"title": "Big"}}
        api.playlist_pages["PLmix"] = [ids[:50], ids[50:100], ids[100:]]
        for vid in ids:
            api.videos[vid] = _video(vid)

        info = await service.fetch_collection_info(PLAYLIST_URL)

        video_requests = [r for r in api.requests if r.url.path.endswith("/videos")]
        assert len(info.members) == 120
        assert len(video_requests) == 3

    @pytest.mark.asyncio
    async def test_unknown_playlist(self, service):
        with pytest.raises(MetadataLookupError, match="PLmix"):
            await service.fetch_collection_info(PLAYLIST_URL)


# =============================================================================
# Search
# =============================================================================


class TestSearch:
    """Tests for the search endpoint."""

    @pytest.mark.asyncio
    async def test_video_hit(self, service, api):
        api.search_items = [{"id": {"videoId": VIDEO_ID}, "snippet": {"title": "Never Gonna"}}]

        match = await service.search("rick astley")

        assert match.locator == VIDEO_URL
        assert match.title == "Never Gonna"
        assert api.requests[0].url.params["q"] == "rick astley"

    @pytest.mark.asyncio
    async def test_playlist_hit(self, service, api):
        api.search_items = [{"id": {"playlistId": "PLmix"}, "snippet": {"title": "Mix"}}]

        match = await service.search("mix")

        assert match.locator == PLAYLIST_URL

    @pytest.mark.asyncio
    async def test_no_hit(self, service):
        assert await service.search("nothing") is None
