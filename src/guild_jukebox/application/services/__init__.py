"""Application services: resolution, rendering and the session state machine."""

from guild_jukebox.application.services.item_resolver import ItemResolver
from guild_jukebox.application.services.queue_renderer import QueueRenderer
from guild_jukebox.application.services.session_models import (
    ControlResult,
    ControlStatus,
    GuildRuntime,
)
from guild_jukebox.application.services.session_service import PlaybackSessionService

__all__ = [
    "ControlResult",
    "ControlStatus",
    "GuildRuntime",
    "ItemResolver",
    "PlaybackSessionService",
    "QueueRenderer",
]
