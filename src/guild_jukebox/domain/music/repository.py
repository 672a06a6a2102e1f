"""
Music Domain Repository Interfaces

Abstract base classes defining the contracts for session storage.
Implementations live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from guild_jukebox.domain.music.entities import PlaybackSession


class SessionRepository(ABC):
    """Abstract repository for guild playback sessions.

    Sessions live for the lifetime of the process only; the contract is
    synchronous so state transitions never suspend on storage.
    """

    @abstractmethod
    def get(self, guild_id: int) -> PlaybackSession | None:
        """Retrieve a session by guild ID.

        Args:
            guild_id: The Discord guild ID.

        Returns:
            The session if found, None otherwise.
        """
        ...

    @abstractmethod
    def get_or_create(self, guild_id: int) -> PlaybackSession:
        """Get an existing session or create a new idle one.

        Args:
            guild_id: The Discord guild ID.

        Returns:
            The existing or newly created session.
        """
        ...

    @abstractmethod
    def delete(self, guild_id: int) -> bool:
        """Delete a session by guild ID.

        Returns:
            True if the session was deleted, False if it didn't exist.
        """
        ...

    @abstractmethod
    def all(self) -> list[PlaybackSession]:
        """Return every stored session."""
        ...
