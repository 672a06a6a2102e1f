"""Playback Session Service - the per-guild playback state machine.

This service is the only writer of queue-head advancement. Natural stream
completion, skip, stop and restricted-media errors all end the current item
through :meth:`PlaybackSessionService._finish_current`, so there is exactly
one place that pops the head and decides what happens next.

Transitions are synchronous. The only suspension points are the channel
join in :meth:`start_if_needed` and reply sends, and every branch that
follows a suspension re-reads the session before acting on it.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from ...domain.music.value_objects import SessionState, TrackFinishReason
from ...domain.shared.exceptions import TransportError
from ...domain.shared.messages import DiscordUIMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake
from .session_models import ControlResult, GuildRuntime

if TYPE_CHECKING:
    from ...domain.music.entities import PlaybackSession, QueueItem
    from ...domain.music.repository import SessionRepository
    from ..interfaces.transport import (
        AudioTransport,
        PresencePublisher,
        ReplyChannel,
        StreamHandle,
    )

logger = logging.getLogger(__name__)


class PlaybackSessionService:
    """Owns every guild's queue lifecycle and the platform handles it borrows."""

    def __init__(
        self,
        *,
        session_repository: SessionRepository,
        transport: AudioTransport,
        presence: PresencePublisher,
        idle_timeout_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._session_repo = session_repository
        self._transport = transport
        self._presence = presence
        self._idle_timeout = idle_timeout_seconds
        self._clock = clock
        self._runtime: dict[DiscordSnowflake, GuildRuntime] = {}

    # ── Accessors ──────────────────────────────────────────────────────

    def now(self) -> float:
        return self._clock()

    def get_session(self, guild_id: DiscordSnowflake) -> PlaybackSession:
        return self._session_repo.get_or_create(guild_id)

    def get_runtime(self, guild_id: DiscordSnowflake) -> GuildRuntime:
        runtime = self._runtime.get(guild_id)
        if runtime is None:
            runtime = GuildRuntime()
            self._runtime[guild_id] = runtime
        return runtime

    # ── Queue intake ───────────────────────────────────────────────────

    async def append(
        self, guild_id: DiscordSnowflake, item: QueueItem, reply_channel: ReplyChannel
    ) -> None:
        """Append ``item`` and announce it unless it opens the queue.

        Playlist members are never announced one by one.
        """
        session = self.get_session(guild_id)
        was_empty = session.queue.is_empty()
        session.queue.append(item)
        logger.info(
            LogTemplates.QUEUE_APPENDED, item.title, item.kind.value, guild_id, len(session.queue)
        )

        if not was_empty and not item.is_playlist_member:
            await reply_channel.send(DiscordUIMessages.QUEUE_ADDED.format(title=item.title))

    async def start_if_needed(
        self,
        guild_id: DiscordSnowflake,
        voice_channel_id: DiscordSnowflake | None,
        reply_channel: ReplyChannel,
    ) -> None:
        """Begin playback if the guild has queued items and nothing is streaming."""
        session = self.get_session(guild_id)
        runtime = self.get_runtime(guild_id)

        if session.queue.is_empty():
            return

        if session.state == SessionState.DRAINING:
            runtime.cancel_idle_timer()
            if runtime.connection is not None and runtime.connection.is_connected:
                self._play_head(guild_id)
                return
            # The platform dropped us while draining; rejoin from scratch.
            self._teardown(guild_id)

        if session.state != SessionState.IDLE or voice_channel_id is None:
            return

        self._transition(session, SessionState.CONNECTING)
        try:
            connection = await self._transport.join(guild_id, voice_channel_id)
        except TransportError as exc:
            logger.warning(LogTemplates.VOICE_JOIN_FAILED, voice_channel_id, guild_id, exc.message)
            if session.state == SessionState.CONNECTING:
                session.queue.clear()
                self._transition(session, SessionState.IDLE)
            await reply_channel.send(DiscordUIMessages.ERROR_COULD_NOT_JOIN_VOICE)
            return

        if session.state != SessionState.CONNECTING or session.queue.is_empty():
            logger.info(LogTemplates.SESSION_JOIN_ABANDONED, guild_id)
            connection.disconnect()
            if session.state == SessionState.CONNECTING:
                self._transition(session, SessionState.IDLE)
            return

        runtime.connection = connection
        self._play_head(guild_id)

    # ── Transport controls ─────────────────────────────────────────────

    def skip(self, guild_id: DiscordSnowflake) -> ControlResult:
        session = self.get_session(guild_id)
        runtime = self.get_runtime(guild_id)

        head = session.current_item
        if runtime.stream is None or head is None or not session.state.has_stream:
            return ControlResult.noop(DiscordUIMessages.STATE_NOTHING_TO_SKIP)

        stream = runtime.detach_stream()
        stream.force_end()
        self._finish_current(guild_id, TrackFinishReason.SKIPPED)
        return ControlResult.success(DiscordUIMessages.ACTION_SKIPPING.format(title=head.title))

    def stop(self, guild_id: DiscordSnowflake) -> ControlResult:
        session = self.get_session(guild_id)
        runtime = self.get_runtime(guild_id)

        if session.state.has_stream:
            snapshot = session.take_snapshot(self.now())
            count = session.queue.clear()
            logger.info(LogTemplates.QUEUE_CLEARED, count, guild_id)
            stream = runtime.detach_stream()
            if stream is not None:
                stream.force_end()
            self._finish_current(guild_id, TrackFinishReason.STOPPED)
            logger.info(
                LogTemplates.SESSION_STOPPED, guild_id, len(snapshot) if snapshot else 0
            )
            return ControlResult.success(DiscordUIMessages.ACTION_STOPPED)

        if session.state == SessionState.DRAINING:
            self._teardown(guild_id)
            logger.info(LogTemplates.SESSION_STOPPED, guild_id, 0)
            return ControlResult.success(DiscordUIMessages.ACTION_STOPPED)

        if session.state == SessionState.CONNECTING:
            # The pending join sees the empty queue, disconnects and goes idle.
            count = session.queue.clear()
            logger.info(LogTemplates.QUEUE_CLEARED, count, guild_id)
            return ControlResult.success(DiscordUIMessages.ACTION_STOPPED)

        return ControlResult.noop(DiscordUIMessages.STATE_NOTHING_TO_STOP)

    def pause(self, guild_id: DiscordSnowflake) -> ControlResult:
        session = self.get_session(guild_id)
        runtime = self.get_runtime(guild_id)

        if session.state == SessionState.PAUSED:
            return ControlResult.noop(DiscordUIMessages.STATE_ALREADY_PAUSED)
        if session.state != SessionState.PLAYING or runtime.stream is None:
            return ControlResult.noop(DiscordUIMessages.STATE_NOTHING_TO_PAUSE)

        runtime.stream.pause()
        session.pause(self.now())
        self._transition(session, SessionState.PAUSED)
        logger.info(LogTemplates.SESSION_PAUSED, guild_id)
        return ControlResult.success(DiscordUIMessages.ACTION_PAUSED)

    async def resume(
        self,
        guild_id: DiscordSnowflake,
        voice_channel_id: DiscordSnowflake | None,
        reply_channel: ReplyChannel,
    ) -> ControlResult:
        """Resume a paused stream, or restart the queue saved by the last stop."""
        session = self.get_session(guild_id)
        runtime = self.get_runtime(guild_id)

        if session.state == SessionState.PAUSED and runtime.stream is not None:
            runtime.stream.resume()
            session.resume(self.now())
            self._transition(session, SessionState.PLAYING)
            logger.info(LogTemplates.SESSION_RESUMED, guild_id)
            return ControlResult.success(DiscordUIMessages.ACTION_RESUMED)

        if session.state == SessionState.PLAYING:
            return ControlResult.noop(DiscordUIMessages.STATE_NOT_PAUSED)

        if session.state in (SessionState.IDLE, SessionState.DRAINING) and session.has_snapshot:
            if session.state == SessionState.IDLE and voice_channel_id is None:
                return ControlResult.noop(DiscordUIMessages.STATE_NOT_IN_VOICE)

            snapshot = session.consume_snapshot()
            session.queue.restore((*snapshot.items, *session.queue.items()))
            logger.info(LogTemplates.SESSION_RESTORED, len(snapshot), guild_id)

            await self.start_if_needed(guild_id, voice_channel_id, reply_channel)
            if session.state != SessionState.PLAYING:
                return ControlResult.error()
            return ControlResult.success(
                DiscordUIMessages.ACTION_RESTORED.format(count=len(snapshot))
            )

        return ControlResult.noop(DiscordUIMessages.STATE_NOTHING_TO_RESUME)

    def clear_snapshot(self, guild_id: DiscordSnowflake) -> None:
        self.get_session(guild_id).clear_snapshot()

    async def shutdown(self) -> None:
        """Release every guild's connection and timer."""
        sessions = self._session_repo.all()
        logger.info(LogTemplates.SESSION_SHUTDOWN, len(sessions))
        for session in sessions:
            session.queue.clear()
            self._teardown(session.guild_id)

    # ── Internals ──────────────────────────────────────────────────────

    def _transition(self, session: PlaybackSession, target: SessionState) -> None:
        previous = session.transition_to(target)
        logger.debug(
            LogTemplates.SESSION_TRANSITION, session.guild_id, previous.value, target.value
        )

    def _play_head(self, guild_id: DiscordSnowflake) -> None:
        """Start the head item, dropping items whose stream cannot be started.

        A connection that is gone keeps the queue for ``resume`` instead.
        """
        session = self.get_session(guild_id)
        runtime = self.get_runtime(guild_id)

        while True:
            head = session.current_item
            if head is None:
                break
            connection = runtime.connection
            if connection is None:
                return
            if not connection.is_connected:
                self._connection_lost(guild_id)
                return

            self._transition(session, SessionState.PLAYING)
            session.begin_item(self.now())
            self._presence.set_presence(head.title)

            try:
                stream = connection.play_stream(head.locator, start_offset_ms=head.start_offset_ms)
            except TransportError as exc:
                logger.error(LogTemplates.STREAM_START_FAILED, head.locator, exc)
                session.reset_clock()
                if not connection.is_connected:
                    self._connection_lost(guild_id)
                    return
                session.queue.pop_head()
                logger.info(
                    LogTemplates.SESSION_ITEM_FINISHED,
                    head.title,
                    guild_id,
                    TrackFinishReason.ERROR.value,
                )
                continue

            runtime.stream = stream
            stream.on_finish(lambda: self._on_stream_end(guild_id, stream))
            stream.on_error(lambda error: self._on_stream_error(guild_id, stream, error))
            logger.info(LogTemplates.SESSION_ITEM_STARTED, head.title, guild_id)
            return

        self._drain(guild_id)

    def _finish_current(self, guild_id: DiscordSnowflake, reason: TrackFinishReason) -> None:
        """Pop the head and continue, drain, or tear down depending on ``reason``."""
        session = self.get_session(guild_id)
        runtime = self.get_runtime(guild_id)
        runtime.stream = None

        connection = runtime.connection
        if (
            reason is TrackFinishReason.COMPLETED
            and connection is not None
            and not connection.is_connected
        ):
            # Cut off by the disconnect, so the head resumes where it stopped.
            self._connection_lost(guild_id)
            return

        finished = session.queue.pop_head()
        session.reset_clock()
        if finished is not None:
            logger.info(LogTemplates.SESSION_ITEM_FINISHED, finished.title, guild_id, reason.value)

        if reason is TrackFinishReason.STOPPED:
            self._teardown(guild_id)
            return

        if session.queue.is_empty():
            self._drain(guild_id)
        else:
            self._play_head(guild_id)

    def _drain(self, guild_id: DiscordSnowflake) -> None:
        session = self.get_session(guild_id)
        runtime = self.get_runtime(guild_id)

        self._transition(session, SessionState.DRAINING)
        self._presence.set_presence(None)
        loop = asyncio.get_running_loop()
        runtime.cancel_idle_timer()
        runtime.idle_timer = loop.call_later(self._idle_timeout, self._on_idle_timeout, guild_id)
        logger.info(LogTemplates.SESSION_DRAINED, guild_id, self._idle_timeout)

    def _connection_lost(self, guild_id: DiscordSnowflake) -> None:
        session = self.get_session(guild_id)
        snapshot = session.take_snapshot(self.now())
        session.queue.clear()
        logger.warning(
            LogTemplates.SESSION_CONNECTION_LOST, guild_id, len(snapshot) if snapshot else 0
        )
        self._teardown(guild_id)

    def _teardown(self, guild_id: DiscordSnowflake) -> None:
        session = self.get_session(guild_id)
        runtime = self.get_runtime(guild_id)

        runtime.cancel_idle_timer()
        stream = runtime.detach_stream()
        if stream is not None:
            stream.force_end()
        connection, runtime.connection = runtime.connection, None
        if connection is not None:
            connection.disconnect()

        session.reset_clock()
        if session.state != SessionState.IDLE:
            self._transition(session, SessionState.IDLE)
        self._presence.set_presence(None)
        logger.debug(LogTemplates.SESSION_TEARDOWN, guild_id)

    def _on_stream_end(self, guild_id: DiscordSnowflake, stream: StreamHandle) -> None:
        runtime = self._runtime.get(guild_id)
        if runtime is None or runtime.stream is not stream:
            logger.debug(LogTemplates.STREAM_IGNORING_STALE, guild_id)
            return
        self._finish_current(guild_id, TrackFinishReason.COMPLETED)

    def _on_stream_error(
        self, guild_id: DiscordSnowflake, stream: StreamHandle, error: TransportError
    ) -> None:
        runtime = self._runtime.get(guild_id)
        if runtime is None or runtime.stream is not stream:
            logger.debug(LogTemplates.STREAM_IGNORING_STALE, guild_id)
            return

        if not error.access_restricted:
            logger.error(LogTemplates.STREAM_ERROR, guild_id, error.message)
            return

        logger.warning(LogTemplates.STREAM_ERROR_RESTRICTED, guild_id, error.message)
        runtime.detach_stream()
        stream.force_end()
        self._finish_current(guild_id, TrackFinishReason.ERROR)

    def _on_idle_timeout(self, guild_id: DiscordSnowflake) -> None:
        session = self.get_session(guild_id)
        runtime = self.get_runtime(guild_id)
        if runtime.idle_timer is None or session.state != SessionState.DRAINING:
            logger.debug(LogTemplates.SESSION_IDLE_TIMEOUT_STALE, guild_id)
            return

        logger.info(LogTemplates.SESSION_IDLE_TIMEOUT, guild_id)
        runtime.idle_timer = None
        session.clear_snapshot()
        self._teardown(guild_id)
