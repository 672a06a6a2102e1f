"""
Music Bounded Context

Queue items, the per-guild queue store, and the playback session state machine.
"""

from guild_jukebox.domain.music.duration import Duration, display_to_seconds, seconds_to_display
from guild_jukebox.domain.music.entities import (
    LastPlayedSnapshot,
    PlaybackSession,
    QueueItem,
    QueueStore,
)
from guild_jukebox.domain.music.repository import SessionRepository
from guild_jukebox.domain.music.value_objects import ItemKind, SessionState, TrackFinishReason

__all__ = [
    # Values
    "Duration",
    "ItemKind",
    "SessionState",
    "TrackFinishReason",
    "display_to_seconds",
    "seconds_to_display",
    # Entities
    "QueueItem",
    "QueueStore",
    "LastPlayedSnapshot",
    "PlaybackSession",
    # Repository
    "SessionRepository",
]
