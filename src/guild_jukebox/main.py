#!/usr/bin/env python3
"""Main entry point for the guild jukebox bot."""

from __future__ import annotations

import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from guild_jukebox.domain.shared.exceptions import ConfigError
from guild_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from guild_jukebox.utils.logging import build_console_handler

if TYPE_CHECKING:
    from guild_jukebox.config.settings import Settings

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.basicConfig(level=resolved_level, handlers=[build_console_handler(resolved_level)])
        logging.warning("Could not load %s, falling back to basic config", _LOGGING_CONFIG_PATH)

    logging.getLogger().setLevel(resolved_level)


def load_settings() -> Settings:
    """Load settings, turning validation failures into :class:`ConfigError`."""
    from guild_jukebox.config.settings import get_settings

    try:
        settings = get_settings()
    except ValidationError as exc:
        raise ConfigError(ErrorMessages.INVALID_SETTINGS.format(error=exc)) from exc

    if not settings.discord.token.get_secret_value():
        raise ConfigError(ErrorMessages.DISCORD_TOKEN_REQUIRED)
    return settings


def main() -> int:
    logger = logging.getLogger(__name__)

    try:
        settings = load_settings()
    except ConfigError as exc:
        setup_logging()
        logger.error(LogTemplates.BOT_CONFIG_ERROR, exc.message)
        return 1

    setup_logging(settings.log_level)
    logger.info(LogTemplates.BOT_STARTING.format(environment=settings.environment))

    from guild_jukebox.config.container import create_container
    from guild_jukebox.infrastructure.discord.bot import create_bot

    container = create_container(settings)
    bot = create_bot(container, settings)

    try:
        logger.info(LogTemplates.BOT_STARTING_RUN)
        bot.run_with_graceful_shutdown(settings.discord.token.get_secret_value())
        logger.info(LogTemplates.BOT_STOPPED)
        return 0
    except KeyboardInterrupt:
        logger.info(LogTemplates.BOT_KEYBOARD_INTERRUPT)
        return 0
    except Exception as e:
        logger.exception(LogTemplates.BOT_FATAL_ERROR, e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
