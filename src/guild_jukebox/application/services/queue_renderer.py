"""Queue Renderer - builds the text listing shown by the queue command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...domain.music.duration import seconds_to_display
from ...domain.shared.constants import PlaybackConstants
from ...domain.shared.messages import DiscordUIMessages

if TYPE_CHECKING:
    from ...domain.music.entities import PlaybackSession


class QueueRenderer:
    """Renders a guild queue as a single chat message.

    The head line shows elapsed and total time of the current item. Every
    following line shows how long until that item starts; once an unbounded
    item is passed, every later position shows the unbounded glyph.
    Contiguous playlist members are grouped under one bold heading.
    """

    def __init__(self, max_length: int = PlaybackConstants.MAX_MESSAGE_LENGTH) -> None:
        self._max_length = max_length

    def render(self, session: PlaybackSession, now: float) -> str:
        items = session.queue.items()
        if not items:
            return DiscordUIMessages.QUEUE_EMPTY

        head = items[0]
        elapsed = session.elapsed_ms(now) // 1000
        if not head.duration.is_unbounded:
            elapsed = min(elapsed, head.duration.seconds)

        lines = [
            DiscordUIMessages.QUEUE_HEAD_LINE.format(
                title=head.title,
                elapsed=seconds_to_display(elapsed),
                total=seconds_to_display(head.duration),
            ),
            "",
        ]

        starts_in = head.duration - elapsed
        current_group: str | None = None
        for index, item in enumerate(items[1:], start=1):
            line = DiscordUIMessages.QUEUE_ITEM_LINE.format(
                index=index,
                starts_in=seconds_to_display(starts_in),
                title=item.title,
            )

            if item.collection_title is not None:
                if item.collection_title != current_group:
                    lines.append(
                        DiscordUIMessages.QUEUE_GROUP_HEADING.format(
                            collection_title=item.collection_title
                        )
                    )
                line = DiscordUIMessages.QUEUE_GROUP_PREFIX + line
            current_group = item.collection_title

            lines.append(line)
            starts_in = starts_in + item.remaining

        return self._truncate("\n".join(lines))

    def _truncate(self, message: str) -> str:
        if len(message) <= self._max_length:
            return message

        suffix = DiscordUIMessages.QUEUE_TOO_LONG_SUFFIX
        cut = message[: self._max_length - len(suffix) - 1].rstrip("\n")
        return cut + suffix
