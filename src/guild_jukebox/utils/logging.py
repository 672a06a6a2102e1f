"""Console logging helpers: a level-colouring formatter and a handler factory."""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Any

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Formatter that wraps ``levelname`` in ANSI colour codes.

    Colour is off when ``NO_COLOR`` is set, when ``use_color=False`` is
    passed, or when the target stream is not a TTY (e.g. redirected to a
    file). ``use_color=True`` forces it on.
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",  # cyan
        logging.INFO: "\033[32m",  # green
        logging.WARNING: "\033[33m",  # yellow
        logging.ERROR: "\033[31m",  # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str | None = DEFAULT_FORMAT,
        datefmt: str | None = DEFAULT_DATEFMT,
        *,
        stream: IO[str] | None = None,
        use_color: bool | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(fmt, datefmt, **kwargs)
        self._stream = stream
        self._force_color = use_color

    def _use_color(self) -> bool:
        if os.environ.get("NO_COLOR") is not None:
            return False
        if self._force_color is not None:
            return self._force_color
        stream = self._stream or sys.stdout
        return hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if self._use_color():
            color = self.COLORS.get(record.levelno, "")
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def build_console_handler(
    level: int = logging.INFO, stream: IO[str] | None = None
) -> logging.Handler:
    """Stream handler using :class:`ColoredFormatter` for the given stream."""
    target = stream or sys.stdout
    handler = logging.StreamHandler(target)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(stream=target))
    return handler
