"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from enum import Enum


class ItemKind(Enum):
    """How a queue item was produced by the resolver."""

    DIRECT_STREAM = "direct_stream"  # raw URL streamed as-is
    RESOLVED_MEDIA = "resolved_media"  # single video with fetched metadata
    PLAYLIST_MEMBER = "playlist_member"  # one entry of an expanded playlist


class SessionState(Enum):
    """Per-guild playback lifecycle with enforced transitions.

    State transitions:
    - IDLE -> CONNECTING (play with an empty queue, or resume from snapshot)
    - CONNECTING -> PLAYING (channel joined)
    - CONNECTING -> IDLE (join failed or queue emptied while joining)
    - PLAYING -> PLAYING (advance to the next item)
    - PLAYING -> PAUSED (pause)
    - PAUSED -> PLAYING (resume)
    - PLAYING/PAUSED -> DRAINING (last item finished, idle timer armed)
    - PLAYING/PAUSED -> IDLE (stop)
    - DRAINING -> PLAYING (new item before the idle timeout)
    - DRAINING -> IDLE (idle timeout or stop)
    """

    IDLE = "idle"
    CONNECTING = "connecting"
    PLAYING = "playing"
    PAUSED = "paused"
    DRAINING = "draining"

    def can_transition_to(self, target: SessionState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            SessionState.IDLE: {SessionState.CONNECTING},
            SessionState.CONNECTING: {SessionState.PLAYING, SessionState.IDLE},
            SessionState.PLAYING: {
                SessionState.PLAYING,
                SessionState.PAUSED,
                SessionState.DRAINING,
                SessionState.IDLE,
            },
            SessionState.PAUSED: {
                SessionState.PLAYING,
                SessionState.DRAINING,
                SessionState.IDLE,
            },
            SessionState.DRAINING: {SessionState.PLAYING, SessionState.IDLE},
        }
        return target in valid_transitions.get(self, set())

    @property
    def has_stream(self) -> bool:
        return self in {SessionState.PLAYING, SessionState.PAUSED}

    @property
    def holds_connection(self) -> bool:
        return self in {SessionState.PLAYING, SessionState.PAUSED, SessionState.DRAINING}


class TrackFinishReason(Enum):
    """Reasons the current item can finish."""

    COMPLETED = "completed"
    SKIPPED = "skipped"
    STOPPED = "stopped"
    ERROR = "error"
