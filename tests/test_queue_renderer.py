"""
Unit Tests for QueueRenderer

Tests for:
- Empty queue message
- Head line with elapsed / total time
- Cumulative "starts in" times, including unbounded items
- Playlist grouping headings and prefixes
- Truncation to the message length ceiling
"""

import pytest

from guild_jukebox.application.services.queue_renderer import QueueRenderer
from guild_jukebox.domain.music.entities import PlaybackSession

GUILD_ID = 555555555


@pytest.fixture
def session():
    return PlaybackSession(guild_id=GUILD_ID)


class TestQueueRenderer:
    """Tests for rendering a guild queue as text."""

    def test_empty_queue(self, queue_renderer, session):
        assert queue_renderer.render(session, now=0.0) == "Queue is empty"

    def test_head_only(self, queue_renderer, session, make_item):
        session.queue.append(make_item("A", 180))
        session.begin_item(0.0)

        text = queue_renderer.render(session, now=0.0)

        assert text.splitlines()[0] == "Currently playing: A || 00:00 / 03:00 ||"

    def test_elapsed_advances_with_clock(self, queue_renderer, session, make_item):
        session.queue.append(make_item("A", 180))
        session.begin_item(0.0)

        text = queue_renderer.render(session, now=75.0)

        assert text.startswith("Currently playing: A || 01:15 / 03:00 ||")

    def test_elapsed_clamped_to_duration(self, queue_renderer, session, make_item):
        session.queue.append(make_item("A", 60))
        session.begin_item(0.0)

        text = queue_renderer.render(session, now=500.0)

        assert text.startswith("Currently playing: A || 01:00 / 01:00 ||")

    def test_start_times_accumulate(self, queue_renderer, session, make_item):
        session.queue.append(make_item("A", 180))
        session.queue.append(make_item("B", 60))
        session.queue.append(make_item("C", 30))
        session.begin_item(0.0)

        text = queue_renderer.render(session, now=30.0)

        assert text.splitlines() == [
            "Currently playing: A || 00:30 / 03:00 ||",
            "",
            "1. || 02:30 || B",
            "2. || 03:30 || C",
        ]

    def test_start_offset_shortens_later_start_times(self, queue_renderer, session, make_item):
        session.queue.append(make_item("A", 100))
        session.queue.append(make_item("B", 120, start_offset_ms=60_000))
        session.queue.append(make_item("C", 30))
        session.begin_item(0.0)

        lines = queue_renderer.render(session, now=0.0).splitlines()

        assert lines[2] == "1. || 01:40 || B"
        assert lines[3] == "2. || 02:40 || C"

    def test_unbounded_item_then_finish(self, queue_renderer, session, make_item):
        session.queue.append(make_item("A", 180))
        session.queue.append(make_item("B", None))
        session.queue.append(make_item("C", 60))
        session.begin_item(0.0)

        before = queue_renderer.render(session, now=0.0)
        assert before.splitlines() == [
            "Currently playing: A || 00:00 / 03:00 ||",
            "",
            "1. || 03:00 || B",
            "2. || ∞ || C",
        ]

        session.queue.pop_head()
        session.begin_item(200.0)

        after = queue_renderer.render(session, now=200.0)
        assert after.splitlines() == [
            "Currently playing: B || 00:00 / ∞ ||",
            "",
            "1. || ∞ || C",
        ]

    def test_playlist_members_grouped_under_one_heading(
        self, queue_renderer, session, make_item
    ):
        session.queue.append(make_item("Intro", 60))
        for i in range(3):
            session.queue.append(make_item(f"Track {i}", 100, collection_title="Road Trip"))
        session.queue.append(make_item("Outro", 60))
        session.begin_item(0.0)

        lines = queue_renderer.render(session, now=0.0).splitlines()

        assert lines[2:] == [
            "**Road Trip**",
            "> 1. || 01:00 || Track 0",
            "> 2. || 02:40 || Track 1",
            "> 3. || 04:20 || Track 2",
            "4. || 06:00 || Outro",
        ]
        assert lines.count("**Road Trip**") == 1

    def test_adjacent_playlists_get_separate_headings(self, queue_renderer, session, make_item):
        session.queue.append(make_item("Head", 10))
        session.queue.append(make_item("A1", 10, collection_title="Alpha"))
        session.queue.append(make_item("B1", 10, collection_title="Beta"))
        session.queue.append(make_item("A2", 10, collection_title="Alpha"))
        session.begin_item(0.0)

        lines = queue_renderer.render(session, now=0.0).splitlines()

        assert [line for line in lines if line.startswith("**")] == [
            "**Alpha**",
            "**Beta**",
            "**Alpha**",
        ]

    def test_long_queue_truncated(self, queue_renderer, session, make_item):
        for i in range(200):
            session.queue.append(make_item(f"A fairly long item title number {i}", 240))
        session.begin_item(0.0)

        text = queue_renderer.render(session, now=0.0)

        assert len(text) <= 2000
        assert text.endswith("...\n**Queue too long to display!**")
        assert "\n...\n**Queue too long" not in text

    def test_cut_on_line_boundary_leaves_no_bare_newline(self, session, make_item):
        for i in range(40):
            session.queue.append(make_item(f"Item {i}", 60))
        session.begin_item(0.0)
        full = QueueRenderer(max_length=100_000).render(session, now=0.0)
        suffix = "...\n**Queue too long to display!**"
        boundary = [i for i, ch in enumerate(full) if ch == "\n"][10]
        renderer = QueueRenderer(max_length=boundary + 2 + len(suffix))

        text = renderer.render(session, now=0.0)

        assert text == full[:boundary] + suffix
        assert "\n...\n**Queue too long" not in text

    def test_custom_ceiling(self, session, make_item):
        renderer = QueueRenderer(max_length=200)
        for i in range(20):
            session.queue.append(make_item(f"Item {i}", 60))
        session.begin_item(0.0)

        text = renderer.render(session, now=0.0)

        assert len(text) <= 200
        assert text.endswith("**Queue too long to display!**")
