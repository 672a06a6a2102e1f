"""In-memory implementation of the session repository."""

from __future__ import annotations

import logging

from guild_jukebox.domain.music.entities import PlaybackSession
from guild_jukebox.domain.music.repository import SessionRepository

logger = logging.getLogger(__name__)


class InMemorySessionRepository(SessionRepository):
    def __init__(self) -> None:
        self._sessions: dict[int, PlaybackSession] = {}

    def get(self, guild_id: int) -> PlaybackSession | None:
        return self._sessions.get(guild_id)

    def get_or_create(self, guild_id: int) -> PlaybackSession:
        session = self._sessions.get(guild_id)
        if session is None:
            session = PlaybackSession(guild_id=guild_id)
            self._sessions[guild_id] = session
            logger.debug("Created session for guild %s", guild_id)
        return session

    def delete(self, guild_id: int) -> bool:
        return self._sessions.pop(guild_id, None) is not None

    def all(self) -> list[PlaybackSession]:
        return list(self._sessions.values())
