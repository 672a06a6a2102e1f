"""Bot activity line showing the title being played."""

from __future__ import annotations

import asyncio
import logging

import discord
from discord.ext import commands

from guild_jukebox.application.interfaces.transport import PresencePublisher
from guild_jukebox.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class DiscordPresencePublisher(PresencePublisher):
    """Publishes presence changes without blocking the caller.

    ``None`` falls back to ``idle_text`` (the play usage hint).
    """

    def __init__(self, bot: commands.Bot, idle_text: str | None = None) -> None:
        self._bot = bot
        self._idle_text = idle_text
        self._pending: set[asyncio.Task[None]] = set()

    def activity_for(self, text: str | None) -> discord.BaseActivity | None:
        name = text or self._idle_text
        if not name:
            return None
        return discord.Game(name=name)

    def set_presence(self, text: str | None) -> None:
        if not self._bot.is_ready():
            return
        task = asyncio.get_running_loop().create_task(self._publish(self.activity_for(text)))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _publish(self, activity: discord.BaseActivity | None) -> None:
        try:
            await self._bot.change_presence(activity=activity)
        except (discord.DiscordException, ConnectionError) as exc:
            logger.warning(LogTemplates.PRESENCE_UPDATE_FAILED, exc)
