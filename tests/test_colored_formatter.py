"""Tests for ColoredFormatter and the console handler factory."""

import logging
from io import StringIO
from unittest.mock import patch

import pytest

from guild_jukebox.utils.logging import ColoredFormatter, build_console_handler

RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}


def _make_record(level: int, message: str = "test") -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


def _tty_stream() -> StringIO:
    stream = StringIO()
    stream.isatty = lambda: True  # type: ignore[method-assign]
    return stream


class TestColoredFormatter:
    """Tests for ANSI color formatting."""

    def _tty_formatter(self) -> ColoredFormatter:
        return ColoredFormatter("%(levelname)s | %(message)s", stream=_tty_stream())

    @pytest.mark.parametrize(
        "level",
        [logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL],
    )
    def test_color_applied_per_level(self, level: int):
        """Should apply the correct ANSI color code for each level."""
        output = self._tty_formatter().format(_make_record(level))

        assert LEVEL_COLORS[level] in output
        assert RESET in output

    def test_no_color_when_no_color_env_set(self):
        """NO_COLOR wins even over a forced colour."""
        fmt = ColoredFormatter("%(levelname)s", stream=_tty_stream(), use_color=True)

        with patch.dict("os.environ", {"NO_COLOR": "1"}):
            output = fmt.format(_make_record(logging.INFO))

        assert "\033[" not in output

    def test_no_color_when_stream_not_tty(self):
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=StringIO())

        output = fmt.format(_make_record(logging.ERROR))

        assert "\033[" not in output

    def test_use_color_forces_color_on_plain_stream(self):
        fmt = ColoredFormatter("%(levelname)s", stream=StringIO(), use_color=True)

        with patch.dict("os.environ", {}, clear=True):
            output = fmt.format(_make_record(logging.WARNING))

        assert output == f"{LEVEL_COLORS[logging.WARNING]}WARNING{RESET}"

    def test_use_color_false_disables_on_tty(self):
        fmt = ColoredFormatter("%(levelname)s", stream=_tty_stream(), use_color=False)

        assert fmt.format(_make_record(logging.INFO)) == "INFO"

    def test_default_format_includes_logger_name(self):
        fmt = ColoredFormatter(stream=StringIO())

        output = fmt.format(_make_record(logging.INFO, "hello world"))

        assert "| INFO     | test.logger | hello world" in output

    def test_original_record_not_mutated(self):
        """Should not mutate the original LogRecord."""
        record = _make_record(logging.WARNING)

        self._tty_formatter().format(record)

        assert record.levelname == "WARNING"


class TestBuildConsoleHandler:
    """Tests for the console handler factory."""

    def test_handler_writes_to_stream(self):
        stream = StringIO()
        handler = build_console_handler(logging.DEBUG, stream)

        handler.handle(_make_record(logging.INFO, "queued"))

        assert handler.level == logging.DEBUG
        assert isinstance(handler.formatter, ColoredFormatter)
        assert "queued" in stream.getvalue()
        assert "\033[" not in stream.getvalue()
