"""Hybrid (prefix and slash) music commands delegating to the command facade."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from discord import app_commands
from discord.ext import commands

from guild_jukebox.application.commands.envelope import CommandEnvelope, CommandVerb
from guild_jukebox.domain.shared.messages import DiscordUIMessages, ErrorMessages

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


def caller_voice_channel_id(ctx: commands.Context) -> int | None:
    """Voice channel the invoking member sits in, if any."""
    voice = getattr(ctx.author, "voice", None)
    if voice is None or voice.channel is None:
        return None
    return voice.channel.id


class MusicCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    def build_envelope(
        self, ctx: commands.Context, verb: CommandVerb, argument_text: str = ""
    ) -> CommandEnvelope | None:
        if ctx.guild is None:
            return None
        return CommandEnvelope(
            guild_id=ctx.guild.id,
            caller_id=ctx.author.id,
            caller_voice_channel_id=caller_voice_channel_id(ctx),
            reply_channel=ctx,
            verb=verb,
            argument_text=argument_text,
        )

    async def _dispatch(
        self, ctx: commands.Context, verb: CommandVerb, argument_text: str = ""
    ) -> None:
        envelope = self.build_envelope(ctx, verb, argument_text)
        if envelope is None:
            await ctx.send(DiscordUIMessages.STATE_SERVER_ONLY)
            return
        await self.container.command_facade.dispatch(envelope)

    @commands.hybrid_command(name="play", description="Queue a URL, playlist, or search.")
    @app_commands.describe(query="URL or search terms")
    async def play(self, ctx: commands.Context, *, query: str = "") -> None:
        # Lookups can outlast the slash-command response window.
        await ctx.defer()
        await self._dispatch(ctx, CommandVerb.PLAY, query)

    @commands.hybrid_command(name="stop", description="Stop playback and clear the queue.")
    async def stop(self, ctx: commands.Context) -> None:
        await self._dispatch(ctx, CommandVerb.STOP)

    @commands.hybrid_command(name="skip", description="Skip the item that is playing.")
    async def skip(self, ctx: commands.Context) -> None:
        await self._dispatch(ctx, CommandVerb.SKIP)

    @commands.hybrid_command(name="queue", description="Show the queue with start times.")
    async def queue(self, ctx: commands.Context) -> None:
        await self._dispatch(ctx, CommandVerb.QUEUE)

    @commands.hybrid_command(name="pause", description="Pause playback.")
    async def pause(self, ctx: commands.Context) -> None:
        await self._dispatch(ctx, CommandVerb.PAUSE)

    @commands.hybrid_command(
        name="resume", description="Resume playback, or restore the queue from the last stop."
    )
    async def resume(self, ctx: commands.Context) -> None:
        await self._dispatch(ctx, CommandVerb.RESUME)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(MusicCog(bot, container))
