"""Duration value object and the ``H:MM:SS`` display codec.

A :class:`Duration` is either a finite, non-negative number of seconds or
:data:`Duration.UNBOUNDED` (live streams, radio links, anything without a
known end). ``UNBOUNDED`` is absorbing: adding or subtracting anything to it
yields ``UNBOUNDED`` again, so running totals that cross an unbounded item
stay unbounded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, ClassVar

from pydantic import PlainSerializer, PlainValidator

from guild_jukebox.domain.shared.constants import PlaybackConstants
from guild_jukebox.domain.shared.messages import ErrorMessages

UNBOUNDED_GLYPH = PlaybackConstants.UNBOUNDED_GLYPH


@dataclass(frozen=True)
class Duration:
    """Length of a media item in whole seconds, or unbounded."""

    seconds: int | None

    UNBOUNDED: ClassVar[Duration]

    def __post_init__(self) -> None:
        if self.seconds is not None and self.seconds < 0:
            raise ValueError(ErrorMessages.NEGATIVE_DURATION)

    @classmethod
    def finite(cls, seconds: int) -> Duration:
        return cls(int(seconds))

    @property
    def is_unbounded(self) -> bool:
        return self.seconds is None

    @property
    def milliseconds(self) -> int | None:
        return None if self.seconds is None else self.seconds * 1000

    def __add__(self, other: Duration | int) -> Duration:
        other_seconds = _seconds_of(other)
        if self.seconds is None or other_seconds is None:
            return Duration.UNBOUNDED
        return Duration(max(0, self.seconds + other_seconds))

    __radd__ = __add__

    def __sub__(self, other: Duration | int) -> Duration:
        other_seconds = _seconds_of(other)
        if self.seconds is None or other_seconds is None:
            return Duration.UNBOUNDED
        return Duration(max(0, self.seconds - other_seconds))

    def __str__(self) -> str:
        return seconds_to_display(self)


Duration.UNBOUNDED = Duration(None)


def _seconds_of(value: Duration | int) -> int | None:
    if isinstance(value, Duration):
        return value.seconds
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(ErrorMessages.INVALID_DURATION_TYPE.format(value=value))
    return value


def seconds_to_display(value: Duration | int) -> str:
    """Format seconds as ``MM:SS`` or ``HH:MM:SS``; unbounded prints the glyph.

    >>> seconds_to_display(0)
    '00:00'
    >>> seconds_to_display(3661)
    '01:01:01'
    """
    seconds = _seconds_of(value)
    if seconds is None:
        return UNBOUNDED_GLYPH
    seconds = max(0, seconds)

    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def display_to_seconds(text: str | Duration) -> Duration:
    """Parse ``[[H:]M:]S`` text back into a :class:`Duration`.

    Fields are positional from the right: the last one is seconds, the one
    before it minutes, then hours. Raises ``ValueError`` for anything else.
    """
    if isinstance(text, Duration):
        return text

    stripped = text.strip()
    if stripped == UNBOUNDED_GLYPH:
        return Duration.UNBOUNDED

    fields = stripped.split(":")
    if not stripped or len(fields) > 3 or not all(f.isdecimal() for f in fields):
        raise ValueError(ErrorMessages.MALFORMED_DURATION.format(text=text))

    total = 0
    for position, field in enumerate(reversed(fields)):
        total += int(field) * 60**position
    return Duration.finite(total)


def _coerce_duration(value: Any) -> Duration:
    if isinstance(value, Duration):
        return value
    if value is None:
        return Duration.UNBOUNDED
    if isinstance(value, str):
        return display_to_seconds(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return Duration.finite(value)
    if isinstance(value, float) and value >= 0:
        return Duration.finite(int(value))
    raise ValueError(ErrorMessages.INVALID_DURATION_TYPE.format(value=value))


# Pydantic-compatible field type: accepts Duration, int seconds, display text,
# or None (unbounded); serializes as int seconds or None.
DurationField = Annotated[
    Duration,
    PlainValidator(_coerce_duration),
    PlainSerializer(lambda v: v.seconds, return_type=int | None),
]
