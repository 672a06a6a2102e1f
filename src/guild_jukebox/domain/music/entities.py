"""Core domain entities for the music bounded context."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator

from guild_jukebox.domain.music.duration import Duration, DurationField
from guild_jukebox.domain.music.value_objects import ItemKind, SessionState
from guild_jukebox.domain.shared.exceptions import InvalidOperationError
from guild_jukebox.domain.shared.messages import ErrorMessages
from guild_jukebox.domain.shared.types import (
    DiscordSnowflake,
    NonEmptyStr,
    StartOffsetMs,
)


class QueueItem(BaseModel):
    """Immutable value object representing one playable entry of a guild queue."""

    model_config = ConfigDict(frozen=True, strict=True)

    title: NonEmptyStr
    duration: DurationField
    locator: NonEmptyStr
    kind: ItemKind
    collection_title: NonEmptyStr | None = None
    start_offset_ms: StartOffsetMs = 0

    @model_validator(mode="after")
    def _check_collection_title(self) -> QueueItem:
        if self.kind is ItemKind.PLAYLIST_MEMBER and self.collection_title is None:
            raise ValueError(ErrorMessages.COLLECTION_TITLE_REQUIRED)
        if self.kind is not ItemKind.PLAYLIST_MEMBER and self.collection_title is not None:
            raise ValueError(ErrorMessages.COLLECTION_TITLE_FORBIDDEN)
        return self

    @property
    def is_playlist_member(self) -> bool:
        return self.kind is ItemKind.PLAYLIST_MEMBER

    @property
    def start_offset_seconds(self) -> int:
        return self.start_offset_ms // 1000

    @property
    def remaining(self) -> Duration:
        """Length left to play when starting from the item's own offset."""
        return self.duration - self.start_offset_seconds

    def with_start_offset(self, start_offset_ms: int) -> QueueItem:
        """Return a copy of this item that starts playing at ``start_offset_ms``."""
        if start_offset_ms < 0:
            raise ValueError(ErrorMessages.NEGATIVE_START_OFFSET)
        return self.model_copy(update={"start_offset_ms": int(start_offset_ms)})


class QueueStore:
    """Ordered per-guild sequence of queue items; the head is the current item."""

    def __init__(self, items: Sequence[QueueItem] = ()) -> None:
        self._items: list[QueueItem] = list(items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[QueueItem]:
        return iter(tuple(self._items))

    def __repr__(self) -> str:
        return f"QueueStore({len(self._items)} items)"

    def is_empty(self) -> bool:
        return not self._items

    def items(self) -> tuple[QueueItem, ...]:
        return tuple(self._items)

    def append(self, item: QueueItem) -> int:
        """Add an item to the tail and return its position."""
        self._items.append(item)
        return len(self._items) - 1

    def peek_head(self) -> QueueItem | None:
        return self._items[0] if self._items else None

    def pop_head(self) -> QueueItem | None:
        """Remove and return the head; an empty store is left untouched."""
        if not self._items:
            return None
        return self._items.pop(0)

    def clear(self) -> int:
        """Remove every item and return how many were dropped."""
        count = len(self._items)
        self._items.clear()
        return count

    def snapshot(self) -> tuple[QueueItem, ...]:
        return tuple(self._items)

    def restore(self, snapshot: Sequence[QueueItem]) -> None:
        self._items = list(snapshot)


class LastPlayedSnapshot(BaseModel):
    """Frozen copy of a guild queue taken when playback was stopped."""

    model_config = ConfigDict(frozen=True)

    items: tuple[QueueItem, ...]
    taken_at: float

    def __len__(self) -> int:
        return len(self.items)


class PlaybackSession(BaseModel):
    """Aggregate root holding queue, lifecycle state and playback clock for one guild.

    Clock values are plain monotonic seconds supplied by the caller, which
    keeps the aggregate free of any time source.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    guild_id: DiscordSnowflake
    queue: QueueStore = Field(default_factory=QueueStore)
    state: SessionState = SessionState.IDLE
    last_played: LastPlayedSnapshot | None = None

    item_started_at: float | None = None
    paused_at: float | None = None
    paused_total: float = 0.0

    @property
    def current_item(self) -> QueueItem | None:
        return self.queue.peek_head()

    @property
    def is_paused(self) -> bool:
        return self.state == SessionState.PAUSED

    @property
    def has_snapshot(self) -> bool:
        return self.last_played is not None

    # ── State transitions ──────────────────────────────────────────────

    def transition_to(self, target: SessionState) -> SessionState:
        """Move to ``target`` and return the previous state."""
        if not self.state.can_transition_to(target):
            raise InvalidOperationError(
                operation=f"transition to {target.value}",
                current_state=self.state.value,
                message=ErrorMessages.INVALID_TRANSITION.format(
                    current=self.state.value, target=target.value
                ),
            )
        previous = self.state
        self.state = target
        return previous

    # ── Playback clock ─────────────────────────────────────────────────

    def begin_item(self, now: float) -> None:
        self.item_started_at = now
        self.paused_at = None
        self.paused_total = 0.0

    def reset_clock(self) -> None:
        self.item_started_at = None
        self.paused_at = None
        self.paused_total = 0.0

    def pause(self, now: float) -> None:
        if self.paused_at is None:
            self.paused_at = now

    def resume(self, now: float) -> None:
        if self.paused_at is not None:
            self.paused_total += now - self.paused_at
            self.paused_at = None

    def elapsed_ms(self, now: float) -> int:
        """Position inside the head item, including its start offset.

        Time spent paused does not count.
        """
        head = self.queue.peek_head()
        if head is None:
            return 0
        if self.item_started_at is None:
            return head.start_offset_ms

        reference = self.paused_at if self.paused_at is not None else now
        played = max(0.0, reference - self.item_started_at - self.paused_total)
        return int(played * 1000) + head.start_offset_ms

    # ── Snapshot ───────────────────────────────────────────────────────

    def take_snapshot(self, now: float) -> LastPlayedSnapshot | None:
        """Copy the queue with the head advanced to where playback is now.

        An empty queue leaves any previous snapshot in place.
        """
        items = self.queue.snapshot()
        if not items:
            return None

        head = items[0].with_start_offset(self.elapsed_ms(now))
        self.last_played = LastPlayedSnapshot(items=(head, *items[1:]), taken_at=now)
        return self.last_played

    def consume_snapshot(self) -> LastPlayedSnapshot | None:
        snapshot, self.last_played = self.last_played, None
        return snapshot

    def clear_snapshot(self) -> None:
        self.last_played = None
