"""Port interfaces for chat replies, voice transport, and bot presence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from guild_jukebox.domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.shared.exceptions import TransportError


@runtime_checkable
class ReplyChannel(Protocol):
    """Anything that can receive a text reply (a Discord channel or context)."""

    async def send(self, content: str) -> Any: ...


class StreamHandle(ABC):
    """A single playing stream on a voice connection.

    Callbacks are always invoked on the event loop, at most once per handle.
    """

    @abstractmethod
    def on_finish(self, callback: Callable[[], None]) -> None:
        """Register the callback for natural or forced end of the stream."""
        ...

    @abstractmethod
    def on_error(self, callback: Callable[["TransportError"], None]) -> None:
        """Register the callback for stream failures."""
        ...

    @abstractmethod
    def pause(self) -> None: ...

    @abstractmethod
    def resume(self) -> None: ...

    @abstractmethod
    def force_end(self) -> None:
        """End the stream early; the finish callback still fires."""
        ...


class TransportConnection(ABC):
    """A joined voice channel that can carry one stream at a time."""

    @property
    @abstractmethod
    def is_connected(self) -> bool: ...

    @abstractmethod
    def play_stream(self, locator: str, *, start_offset_ms: int = 0) -> StreamHandle:
        """Start streaming ``locator`` from ``start_offset_ms`` and return its handle."""
        ...

    @abstractmethod
    def disconnect(self) -> None:
        """Release the connection; any active stream ends without callbacks."""
        ...


class AudioTransport(ABC):
    """Interface for joining guild voice channels."""

    @abstractmethod
    async def join(
        self, guild_id: DiscordSnowflake, channel_id: DiscordSnowflake
    ) -> TransportConnection:
        """Join a voice channel.

        Raises:
            TransportError: If the channel cannot be joined.
        """
        ...


class PresencePublisher(ABC):
    """Interface for the bot's global activity line."""

    @abstractmethod
    def set_presence(self, text: str | None) -> None:
        """Show ``text`` as the current activity, or clear it with ``None``."""
        ...
