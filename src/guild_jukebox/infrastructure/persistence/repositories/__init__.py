"""In-memory repository implementations."""

from guild_jukebox.infrastructure.persistence.repositories.session_repository import (
    InMemorySessionRepository,
)

__all__ = [
    "InMemorySessionRepository",
]
