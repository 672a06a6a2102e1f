"""Item Resolver - turns raw play input into queue items."""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from ...domain.music.duration import Duration
from ...domain.music.entities import QueueItem
from ...domain.music.value_objects import ItemKind
from ...domain.shared.constants import PlaybackConstants
from ...domain.shared.exceptions import MetadataLookupError
from ...domain.shared.messages import DiscordUIMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ..interfaces.metadata_service import CollectionInfo, MetadataService
    from ..interfaces.transport import ReplyChannel

logger = logging.getLogger(__name__)

AppendCallback = Callable[[QueueItem], Awaitable[None]]

_URI_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:\S+$")
_TIMESTAMP_PATTERN = re.compile(r"[?&#](?:t|start)=([^&#]*)")
_INDEX_PATTERN = re.compile(r"[?&#]index=([^&#]*)")


def is_uri(text: str) -> bool:
    return bool(_URI_PATTERN.match(text))


def parse_timestamp(locator: str) -> int:
    """Start offset in seconds carried by ``t=`` or ``start=``, else 0.

    Accepts ``90`` and ``90s``; anything non-numeric or above a day is 0.
    """
    match = _TIMESTAMP_PATTERN.search(locator)
    if match is None:
        return 0

    value = match.group(1)
    if value.endswith("s"):
        value = value[:-1]
    if not value.isdecimal():
        return 0

    seconds = int(value)
    if seconds > PlaybackConstants.MAX_MEDIA_SECONDS:
        return 0
    return seconds


def parse_index(locator: str) -> int | None:
    """Zero-based playlist start index from ``index=``, if present and numeric."""
    match = _INDEX_PATTERN.search(locator)
    if match is None or not match.group(1).isdecimal():
        return None
    return int(match.group(1))


class ItemResolver:
    """Normalizes a URL, playlist link or search query into queue items.

    Items are handed to the ``append`` callback one by one, in playback
    order. Lookup failures are reported to the reply channel and never
    escape ``resolve``.
    """

    def __init__(self, metadata_service: MetadataService, *, playlists_enabled: bool = True) -> None:
        self._metadata = metadata_service
        self._playlists_enabled = playlists_enabled

    async def resolve(
        self,
        raw_input: str,
        guild_id: DiscordSnowflake,
        reply_channel: ReplyChannel,
        append: AppendCallback,
    ) -> int:
        """Resolve ``raw_input`` and return how many items were appended."""
        text = raw_input.strip()
        logger.debug(LogTemplates.RESOLVE_STARTED, text, guild_id)

        try:
            if is_uri(text):
                count = await self._resolve_locator(text, reply_channel, append)
            else:
                count = await self._resolve_search(text, reply_channel, append)
        except MetadataLookupError as exc:
            logger.warning(LogTemplates.RESOLVE_LOOKUP_FAILED, text, exc.message)
            await reply_channel.send(DiscordUIMessages.RESOLVE_LOOKUP_FAILED.format(locator=exc.locator))
            return 0

        logger.info(LogTemplates.RESOLVE_EMITTED, text, count, guild_id)
        return count

    async def _resolve_search(
        self, query: str, reply_channel: ReplyChannel, append: AppendCallback
    ) -> int:
        match = await self._metadata.search(query)
        if match is None:
            logger.info(LogTemplates.RESOLVE_NO_RESULT, query)
            await reply_channel.send(DiscordUIMessages.RESOLVE_NO_RESULT)
            return 0

        # Only one level of search; a match must already be a locator.
        if not is_uri(match.locator):
            logger.info(LogTemplates.RESOLVE_NON_URI_MATCH, match.locator, query)
            await reply_channel.send(DiscordUIMessages.RESOLVE_NO_RESULT)
            return 0

        return await self._resolve_locator(match.locator, reply_channel, append)

    async def _resolve_locator(
        self, locator: str, reply_channel: ReplyChannel, append: AppendCallback
    ) -> int:
        is_collection = self._metadata.is_collection_reference(locator)

        if self._metadata.is_direct_media_reference(locator) and not is_collection:
            return await self._emit_media(locator, append)

        if is_collection:
            if self._playlists_enabled:
                return await self._emit_collection(locator, reply_channel, append)
            if self._metadata.member_id_of(locator):
                return await self._emit_media(locator, append)
            await reply_channel.send(DiscordUIMessages.RESOLVE_PLAYLISTS_DISABLED)
            return 0

        await append(
            QueueItem(
                title=locator,
                duration=Duration.UNBOUNDED,
                locator=locator,
                kind=ItemKind.DIRECT_STREAM,
            )
        )
        return 1

    async def _emit_media(self, locator: str, append: AppendCallback) -> int:
        info = await self._metadata.fetch_media_info(locator)
        await append(
            QueueItem(
                title=info.title,
                duration=info.duration,
                locator=locator,
                kind=ItemKind.RESOLVED_MEDIA,
                start_offset_ms=parse_timestamp(locator) * 1000,
            )
        )
        return 1

    async def _emit_collection(
        self, locator: str, reply_channel: ReplyChannel, append: AppendCallback
    ) -> int:
        collection = await self._metadata.fetch_collection_info(locator)
        if not collection.members:
            await reply_channel.send(DiscordUIMessages.RESOLVE_NO_RESULT)
            return 0

        start = self._start_index(locator, collection)
        offset_ms = parse_timestamp(locator) * 1000

        count = 0
        for member in collection.members[start:]:
            await append(
                QueueItem(
                    title=member.title,
                    duration=member.duration,
                    locator=member.locator,
                    kind=ItemKind.PLAYLIST_MEMBER,
                    collection_title=collection.title,
                    start_offset_ms=offset_ms if count == 0 else 0,
                )
            )
            count += 1

        await reply_channel.send(
            DiscordUIMessages.QUEUE_ADDED_PLAYLIST.format(collection_title=collection.title)
        )
        return count

    def _start_index(self, locator: str, collection: CollectionInfo) -> int:
        start = parse_index(locator)
        if start is None:
            member_id = self._metadata.member_id_of(locator)
            start = collection.index_of(member_id) if member_id else None
        if start is None or not 0 <= start < len(collection.members):
            return 0
        return start
