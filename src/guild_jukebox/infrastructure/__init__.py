"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (in-memory session repository)
- Discord (bot, cogs, voice transport, presence)
- Audio (yt-dlp and YouTube Data API metadata backends)
"""
