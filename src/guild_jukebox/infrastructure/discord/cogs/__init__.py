"""Discord cogs - command handlers."""

from guild_jukebox.infrastructure.discord.cogs.music_cog import MusicCog

__all__ = [
    "MusicCog",
]
