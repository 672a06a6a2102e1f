"""Port interface for looking up media, playlists, and search results."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict

from guild_jukebox.domain.music.duration import DurationField
from guild_jukebox.domain.shared.types import NonEmptyStr


class MediaInfo(BaseModel):
    """Title and length of a single media item."""

    model_config = ConfigDict(frozen=True)

    title: NonEmptyStr
    duration: DurationField


class CollectionMember(BaseModel):
    """One entry of a playlist listing."""

    model_config = ConfigDict(frozen=True)

    member_id: NonEmptyStr
    title: NonEmptyStr
    duration: DurationField
    locator: NonEmptyStr


class CollectionInfo(BaseModel):
    """A fully materialized playlist."""

    model_config = ConfigDict(frozen=True)

    title: NonEmptyStr
    members: tuple[CollectionMember, ...] = ()

    def index_of(self, member_id: str) -> int | None:
        for index, member in enumerate(self.members):
            if member.member_id == member_id:
                return index
        return None


class SearchMatch(BaseModel):
    """Best single search hit."""

    model_config = ConfigDict(frozen=True)

    locator: NonEmptyStr
    title: str | None = None


class MetadataService(ABC):
    """Interface for media metadata lookups.

    Every async lookup raises ``MetadataLookupError`` on network or parse
    failures and for access-restricted media.
    """

    @abstractmethod
    def is_direct_media_reference(self, locator: str) -> bool:
        """True when ``locator`` names a single media item of a known platform."""
        ...

    @abstractmethod
    def is_collection_reference(self, locator: str) -> bool:
        """True when ``locator`` carries a playlist id."""
        ...

    @abstractmethod
    def member_id_of(self, locator: str) -> str | None:
        """The media id carried by ``locator``, if any."""
        ...

    @abstractmethod
    async def fetch_media_info(self, locator: str) -> MediaInfo: ...

    @abstractmethod
    async def fetch_collection_info(self, locator: str) -> CollectionInfo:
        """Fetch the playlist named by ``locator`` with every member resolved."""
        ...

    @abstractmethod
    async def search(self, query: str) -> SearchMatch | None:
        """Return the best match for ``query``, or None."""
        ...

    async def close(self) -> None:
        """Release any held network resources."""
        return None
