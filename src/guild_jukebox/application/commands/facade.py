"""Command facade routing music verbs to the resolver and session service."""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING

from guild_jukebox.application.commands.envelope import CommandEnvelope, CommandVerb
from guild_jukebox.domain.shared.exceptions import UserInputError
from guild_jukebox.domain.shared.messages import DiscordUIMessages, LogTemplates

if TYPE_CHECKING:
    from ..services.item_resolver import ItemResolver
    from ..services.queue_renderer import QueueRenderer
    from ..services.session_models import ControlResult
    from ..services.session_service import PlaybackSessionService

logger = logging.getLogger(__name__)


class MusicCommandFacade:
    """Entry point for play / stop / skip / queue / pause / resume.

    Guards are checked here before anything is mutated; a failed guard
    becomes a reply, never an exception for the caller.
    """

    def __init__(
        self,
        *,
        session_service: PlaybackSessionService,
        item_resolver: ItemResolver,
        queue_renderer: QueueRenderer,
        command_prefix: str = "$",
    ) -> None:
        self._sessions = session_service
        self._resolver = item_resolver
        self._renderer = queue_renderer
        self._prefix = command_prefix
        self._handlers = {
            CommandVerb.PLAY: self.play,
            CommandVerb.STOP: self.stop,
            CommandVerb.SKIP: self.skip,
            CommandVerb.QUEUE: self.queue,
            CommandVerb.PAUSE: self.pause,
            CommandVerb.RESUME: self.resume,
        }

    async def dispatch(self, envelope: CommandEnvelope) -> None:
        logger.debug(
            LogTemplates.COMMAND_RECEIVED,
            envelope.verb.value,
            envelope.caller_id,
            envelope.guild_id,
        )
        try:
            await self._handlers[envelope.verb](envelope)
        except UserInputError as exc:
            logger.debug(
                LogTemplates.COMMAND_REJECTED, envelope.verb.value, envelope.guild_id, exc.message
            )
            await envelope.reply_channel.send(exc.message)

    async def play(self, envelope: CommandEnvelope) -> int:
        """Resolve the argument text into queue items and start playback if idle."""
        if not envelope.argument_text:
            raise UserInputError(DiscordUIMessages.USAGE_PLAY.format(prefix=self._prefix))
        if envelope.caller_voice_channel_id is None:
            raise UserInputError(DiscordUIMessages.STATE_NOT_IN_VOICE)

        append = partial(
            self._sessions.append, envelope.guild_id, reply_channel=envelope.reply_channel
        )
        count = await self._resolver.resolve(
            envelope.argument_text, envelope.guild_id, envelope.reply_channel, append
        )
        await self._sessions.start_if_needed(
            envelope.guild_id, envelope.caller_voice_channel_id, envelope.reply_channel
        )
        return count

    async def stop(self, envelope: CommandEnvelope) -> ControlResult:
        result = self._sessions.stop(envelope.guild_id)
        await self._reply(envelope, result)
        return result

    async def skip(self, envelope: CommandEnvelope) -> ControlResult:
        result = self._sessions.skip(envelope.guild_id)
        await self._reply(envelope, result)
        return result

    async def pause(self, envelope: CommandEnvelope) -> ControlResult:
        result = self._sessions.pause(envelope.guild_id)
        await self._reply(envelope, result)
        return result

    async def resume(self, envelope: CommandEnvelope) -> ControlResult:
        result = await self._sessions.resume(
            envelope.guild_id, envelope.caller_voice_channel_id, envelope.reply_channel
        )
        await self._reply(envelope, result)
        return result

    async def queue(self, envelope: CommandEnvelope) -> str:
        session = self._sessions.get_session(envelope.guild_id)
        text = self._renderer.render(session, self._sessions.now())
        await envelope.reply_channel.send(text)
        return text

    async def _reply(self, envelope: CommandEnvelope, result: ControlResult) -> None:
        if result.message:
            await envelope.reply_channel.send(result.message)
