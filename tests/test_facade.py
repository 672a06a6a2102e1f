"""
Unit Tests for MusicCommandFacade

Tests for:
- CommandEnvelope argument normalisation
- play guards (usage, caller not in voice)
- play resolving, appending and starting playback
- Control verbs replying with the session service's messages
- queue rendering through the facade
"""

import pytest
from pydantic import ValidationError

from guild_jukebox.application.commands.envelope import CommandEnvelope, CommandVerb
from guild_jukebox.application.interfaces.metadata_service import MediaInfo, SearchMatch
from guild_jukebox.domain.music.duration import Duration
from guild_jukebox.domain.music.value_objects import SessionState

GUILD_ID = 111111111
CALLER_ID = 222222222
VOICE_ID = 333333333
VIDEO_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


@pytest.fixture
def envelope(reply_channel):
    def _make(verb, argument_text="", voice_channel_id=VOICE_ID):
        return CommandEnvelope(
            guild_id=GUILD_ID,
            caller_id=CALLER_ID,
            caller_voice_channel_id=voice_channel_id,
            reply_channel=reply_channel,
            verb=verb,
            argument_text=argument_text,
        )

    return _make


# =============================================================================
# Envelope
# =============================================================================


class TestCommandEnvelope:
    """Tests for the command envelope model."""

    def test_argument_is_stripped(self, envelope):
        assert envelope(CommandVerb.PLAY, "  lofi beats \n").argument_text == "lofi beats"

    def test_none_argument_is_empty(self, reply_channel):
        env = CommandEnvelope(
            guild_id=GUILD_ID,
            caller_id=CALLER_ID,
            reply_channel=reply_channel,
            verb=CommandVerb.QUEUE,
            argument_text=None,
        )
        assert env.argument_text == ""
        assert env.caller_voice_channel_id is None

    def test_invalid_guild_id_rejected(self, reply_channel):
        with pytest.raises(ValidationError):
            CommandEnvelope(
                guild_id=0,
                caller_id=CALLER_ID,
                reply_channel=reply_channel,
                verb=CommandVerb.STOP,
            )

    def test_reply_channel_must_have_send(self):
        with pytest.raises(ValidationError):
            CommandEnvelope(
                guild_id=GUILD_ID,
                caller_id=CALLER_ID,
                reply_channel=object(),
                verb=CommandVerb.STOP,
            )


# =============================================================================
# Play
# =============================================================================


class TestPlay:
    """Tests for the play verb."""

    @pytest.mark.asyncio
    async def test_empty_argument_replies_usage(
        self, command_facade, envelope, reply_channel, transport
    ):
        await command_facade.dispatch(envelope(CommandVerb.PLAY, "   "))

        assert reply_channel.sent == ["Usage: $play <url or search terms>"]
        assert transport.joins == []

    @pytest.mark.asyncio
    async def test_caller_not_in_voice(
        self, command_facade, envelope, reply_channel, session_service
    ):
        await command_facade.dispatch(
            envelope(CommandVerb.PLAY, VIDEO_URL, voice_channel_id=None)
        )

        assert reply_channel.sent == ["Not connected to voice channel"]
        assert session_service.get_session(GUILD_ID).queue.is_empty()

    @pytest.mark.asyncio
    async def test_play_url_starts_playback(
        self, command_facade, envelope, metadata_service, session_service, transport
    ):
        metadata_service.media[VIDEO_URL] = MediaInfo(title="Never Gonna", duration=Duration(213))

        await command_facade.dispatch(envelope(CommandVerb.PLAY, VIDEO_URL))

        session = session_service.get_session(GUILD_ID)
        assert session.state == SessionState.PLAYING
        assert session.current_item.title == "Never Gonna"
        assert transport.joins == [(GUILD_ID, VOICE_ID)]

    @pytest.mark.asyncio
    async def test_second_play_is_announced(
        self, command_facade, envelope, metadata_service, reply_channel
    ):
        metadata_service.searches["first"] = SearchMatch(locator="https://radio.example/one")
        metadata_service.searches["second"] = SearchMatch(locator="https://radio.example/two")

        await command_facade.dispatch(envelope(CommandVerb.PLAY, "first"))
        await command_facade.dispatch(envelope(CommandVerb.PLAY, "second"))

        assert reply_channel.sent == ["Added to queue: https://radio.example/two"]

    @pytest.mark.asyncio
    async def test_no_result_leaves_session_idle(
        self, command_facade, envelope, reply_channel, session_service, transport
    ):
        await command_facade.dispatch(envelope(CommandVerb.PLAY, "nothing matches"))

        assert reply_channel.sent == ["No result found!"]
        assert session_service.get_session(GUILD_ID).state == SessionState.IDLE
        assert transport.joins == []


# =============================================================================
# Controls
# =============================================================================


class TestControls:
    """Tests for stop, skip, pause and resume through the facade."""

    @pytest.mark.asyncio
    async def test_skip_with_nothing(self, command_facade, envelope, reply_channel):
        await command_facade.dispatch(envelope(CommandVerb.SKIP))

        assert reply_channel.sent == ["There is nothing to skip!"]

    @pytest.mark.asyncio
    async def test_stop_with_nothing(self, command_facade, envelope, reply_channel):
        await command_facade.dispatch(envelope(CommandVerb.STOP))

        assert reply_channel.sent == ["There is nothing to stop!"]

    @pytest.mark.asyncio
    async def test_pause_and_resume(
        self, command_facade, envelope, reply_channel, session_service
    ):
        await command_facade.dispatch(envelope(CommandVerb.PLAY, "https://radio.example/live"))

        await command_facade.dispatch(envelope(CommandVerb.PAUSE))
        assert session_service.get_session(GUILD_ID).state == SessionState.PAUSED

        await command_facade.dispatch(envelope(CommandVerb.RESUME))
        assert session_service.get_session(GUILD_ID).state == SessionState.PLAYING
        assert reply_channel.sent == ["Paused.", "Resumed."]

    @pytest.mark.asyncio
    async def test_stop_then_resume_restores(
        self, command_facade, envelope, reply_channel, clock, transport
    ):
        await command_facade.dispatch(envelope(CommandVerb.PLAY, "https://radio.example/live"))
        clock.advance(30)

        await command_facade.dispatch(envelope(CommandVerb.STOP))
        await command_facade.dispatch(envelope(CommandVerb.RESUME))

        assert reply_channel.sent == [
            "Stopped playback.",
            "Resuming 1 items from where playback stopped.",
        ]
        assert transport.connection.current.start_offset_ms == 30_000

    @pytest.mark.asyncio
    async def test_skip_reports_title(self, command_facade, envelope, reply_channel):
        await command_facade.dispatch(envelope(CommandVerb.PLAY, "https://radio.example/a"))

        await command_facade.dispatch(envelope(CommandVerb.SKIP))

        assert reply_channel.sent == ["Skipping https://radio.example/a"]


# =============================================================================
# Queue
# =============================================================================


class TestQueue:
    """Tests for the queue listing verb."""

    @pytest.mark.asyncio
    async def test_empty_queue(self, command_facade, envelope, reply_channel):
        await command_facade.dispatch(envelope(CommandVerb.QUEUE))

        assert reply_channel.sent == ["Queue is empty"]

    @pytest.mark.asyncio
    async def test_queue_uses_service_clock(
        self, command_facade, envelope, reply_channel, metadata_service, clock
    ):
        metadata_service.media[VIDEO_URL] = MediaInfo(title="Never Gonna", duration=Duration(213))
        await command_facade.dispatch(envelope(CommandVerb.PLAY, VIDEO_URL))
        clock.advance(65)

        text = await command_facade.queue(envelope(CommandVerb.QUEUE))

        assert text.splitlines()[0] == "Currently playing: Never Gonna || 01:05 / 03:33 ||"
        assert reply_channel.sent[-1] == text
