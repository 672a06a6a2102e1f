"""Discord implementations of the voice transport and presence ports."""

from guild_jukebox.infrastructure.discord.adapters.presence import DiscordPresencePublisher
from guild_jukebox.infrastructure.discord.adapters.voice_transport import (
    DiscordAudioTransport,
    DiscordStreamHandle,
    DiscordTransportConnection,
)

__all__ = [
    "DiscordAudioTransport",
    "DiscordPresencePublisher",
    "DiscordStreamHandle",
    "DiscordTransportConnection",
]
