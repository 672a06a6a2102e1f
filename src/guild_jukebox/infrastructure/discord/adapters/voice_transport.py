"""Discord voice transport implementing AudioTransport on top of VoiceClient."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

import discord

from guild_jukebox.application.interfaces.transport import (
    AudioTransport,
    StreamHandle,
    TransportConnection,
)
from guild_jukebox.config.settings import AudioSettings
from guild_jukebox.domain.shared.constants import AudioConstants
from guild_jukebox.domain.shared.exceptions import MetadataLookupError, TransportError
from guild_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from guild_jukebox.domain.shared.types import DiscordSnowflake

logger = logging.getLogger(__name__)

StreamResolver = Callable[[str], Awaitable[str]]


def build_ffmpeg_options(settings: AudioSettings, start_offset_ms: int) -> dict[str, str]:
    """FFmpeg arguments for one stream, seeking on input when an offset is set."""
    before_options = settings.ffmpeg_options.get("before_options", "")
    options = settings.ffmpeg_options.get("options", "")
    if start_offset_ms > 0:
        seek = AudioConstants.FFMPEG_SEEK_OPTION.format(seconds=start_offset_ms / 1000)
        before_options = f"{before_options} {seek}".strip()
    return {"before_options": before_options, "options": options}


class DiscordStreamHandle(StreamHandle):
    """One FFmpeg stream on a voice client.

    The stream URL is resolved in a task, so ``play_stream`` never blocks.
    discord.py calls ``after`` from its player thread; the result is handed
    back to the loop with ``call_soon_threadsafe``.
    """

    def __init__(
        self,
        voice_client: discord.VoiceClient,
        locator: str,
        *,
        start_offset_ms: int,
        settings: AudioSettings,
        resolve_stream_url: StreamResolver,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        self._vc = voice_client
        self._locator = locator
        self._start_offset_ms = start_offset_ms
        self._settings = settings
        self._resolve_stream_url = resolve_stream_url
        self._loop = loop

        self._finish_callback: Callable[[], None] | None = None
        self._error_callback: Callable[[TransportError], None] | None = None
        self._finished = False
        self._silenced = False
        self._started = False
        self._paused = False
        self._task = loop.create_task(self._start())

    def on_finish(self, callback: Callable[[], None]) -> None:
        self._finish_callback = callback

    def on_error(self, callback: Callable[[TransportError], None]) -> None:
        self._error_callback = callback

    def pause(self) -> None:
        self._paused = True
        if self._started and self._vc.is_playing():
            self._vc.pause()

    def resume(self) -> None:
        self._paused = False
        if self._started and self._vc.is_paused():
            self._vc.resume()

    def force_end(self) -> None:
        if not self._started:
            self._task.cancel()
            self._loop.call_soon(self._report_finish)
            return
        if self._vc.is_playing() or self._vc.is_paused():
            self._vc.stop()

    def silence(self) -> None:
        """Drop both callbacks and cancel a pending start."""
        self._silenced = True
        if not self._started:
            self._task.cancel()

    async def _start(self) -> None:
        try:
            url = await self._resolve_stream_url(self._locator)
        except MetadataLookupError as exc:
            self._report_error(TransportError(exc.message, access_restricted=True))
            self._report_finish()
            return

        if self._silenced or not self._vc.is_connected():
            return

        if self._vc.is_playing() or self._vc.is_paused():
            self._vc.stop()

        try:
            source = discord.FFmpegPCMAudio(
                url, **build_ffmpeg_options(self._settings, self._start_offset_ms)
            )
            volume_source = discord.PCMVolumeTransformer(
                source, volume=self._settings.default_volume
            )
            self._vc.play(volume_source, after=self._after)
        except discord.ClientException as exc:
            logger.error(LogTemplates.STREAM_START_FAILED, self._locator, exc)
            self._report_error(TransportError(str(exc)))
            self._report_finish()
            return

        self._started = True
        if self._paused:
            self._vc.pause()
        logger.info(
            LogTemplates.STREAM_STARTED, self._locator, self._vc.guild.id, self._start_offset_ms
        )

    def _after(self, error: Exception | None = None) -> None:
        # Runs on the player thread.
        self._loop.call_soon_threadsafe(self._on_stream_done, error)

    def _on_stream_done(self, error: Exception | None) -> None:
        logger.debug(LogTemplates.STREAM_ENDED, self._vc.guild.id, error)
        if error is not None:
            self._report_error(TransportError(str(error)))
        self._report_finish()

    def _report_error(self, error: TransportError) -> None:
        if self._finished or self._silenced or self._error_callback is None:
            return
        self._error_callback(error)

    def _report_finish(self) -> None:
        if self._finished or self._silenced:
            return
        self._finished = True
        if self._finish_callback is not None:
            self._finish_callback()


class DiscordTransportConnection(TransportConnection):
    """A guild's voice client; carries at most one live stream handle."""

    def __init__(
        self,
        voice_client: discord.VoiceClient,
        *,
        settings: AudioSettings,
        resolve_stream_url: StreamResolver,
    ) -> None:
        self._vc = voice_client
        self._settings = settings
        self._resolve_stream_url = resolve_stream_url
        self._stream: DiscordStreamHandle | None = None
        self._closed = False

    @property
    def voice_client(self) -> discord.VoiceClient:
        return self._vc

    @property
    def is_connected(self) -> bool:
        return not self._closed and self._vc.is_connected()

    def play_stream(self, locator: str, *, start_offset_ms: int = 0) -> StreamHandle:
        if not self.is_connected:
            raise TransportError(ErrorMessages.VOICE_NOT_CONNECTED)

        self._stream = DiscordStreamHandle(
            self._vc,
            locator,
            start_offset_ms=start_offset_ms,
            settings=self._settings,
            resolve_stream_url=self._resolve_stream_url,
            loop=asyncio.get_running_loop(),
        )
        return self._stream

    def disconnect(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._stream is not None:
            self._stream.silence()
            self._stream = None
        asyncio.get_running_loop().create_task(self._disconnect())

    async def _disconnect(self) -> None:
        guild_id = self._vc.guild.id
        try:
            await self._vc.disconnect(force=True)
            logger.info(LogTemplates.VOICE_DISCONNECTED, guild_id)
        except (discord.ClientException, discord.HTTPException) as exc:
            logger.warning(LogTemplates.VOICE_DISCONNECT_ERROR, guild_id, exc)


class DiscordAudioTransport(AudioTransport):
    def __init__(
        self,
        bot: discord.Client,
        resolve_stream_url: StreamResolver,
        settings: AudioSettings | None = None,
    ) -> None:
        self._bot = bot
        self._resolve_stream_url = resolve_stream_url
        self._settings = settings or AudioSettings()

    async def join(
        self, guild_id: DiscordSnowflake, channel_id: DiscordSnowflake
    ) -> TransportConnection:
        guild = self._bot.get_guild(guild_id)
        if guild is None:
            raise TransportError(ErrorMessages.GUILD_NOT_AVAILABLE.format(guild_id=guild_id))

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            raise TransportError(ErrorMessages.CHANNEL_NOT_VOICE.format(channel_id=channel_id))

        try:
            async with asyncio.timeout(self._settings.connect_timeout_seconds):
                voice_client = await self._connect_or_move(guild, channel)
        except TimeoutError as exc:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, channel_id)
            raise TransportError(
                ErrorMessages.VOICE_JOIN_TIMEOUT.format(channel_id=channel_id)
            ) from exc
        except discord.Forbidden as exc:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, channel_id)
            raise TransportError(
                ErrorMessages.VOICE_JOIN_FORBIDDEN.format(channel_id=channel_id)
            ) from exc
        except discord.ClientException as exc:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, exc)
            raise TransportError(str(exc)) from exc

        logger.info(LogTemplates.VOICE_CONNECTED, channel.name, guild.name)
        return DiscordTransportConnection(
            voice_client,
            settings=self._settings,
            resolve_stream_url=self._resolve_stream_url,
        )

    async def _connect_or_move(
        self,
        guild: discord.Guild,
        channel: discord.VoiceChannel | discord.StageChannel,
    ) -> discord.VoiceClient:
        existing = guild.voice_client
        if isinstance(existing, discord.VoiceClient) and existing.is_connected():
            if existing.channel is None or existing.channel.id != channel.id:
                await existing.move_to(channel)
                logger.info(LogTemplates.VOICE_MOVED, channel.name)
            return existing
        return await channel.connect(self_deaf=True)
