#!/usr/bin/env python3
"""Command-line entry point: configure logging, check settings, run the bot."""

from __future__ import annotations

import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from guild_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from guild_jukebox.utils.logging import ColoredFormatter

if TYPE_CHECKING:
    from guild_jukebox.config.settings import Settings

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"
_FALLBACK_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_FALLBACK_DATEFMT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO", config_path: Path = _LOGGING_CONFIG_PATH) -> None:
    """Apply the dictConfig file at ``config_path``.

    If the file is missing or invalid, a colored stderr handler is installed
    instead. ``log_level`` overrides the root level either way.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    try:
        config = json.loads(config_path.read_text(encoding="utf-8"))
        logging.config.dictConfig(config)
    except (OSError, ValueError) as exc:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            ColoredFormatter(_FALLBACK_FORMAT, _FALLBACK_DATEFMT, stream=sys.stderr)
        )
        logging.basicConfig(level=level, handlers=[handler])
        logger.warning(LogTemplates.LOGGING_CONFIG_FALLBACK, config_path, exc)

    logging.getLogger().setLevel(level)


def _log_startup(settings: Settings) -> None:
    playback = settings.playback
    logger.info(LogTemplates.BOT_STARTING, settings.environment)
    logger.info(
        LogTemplates.BOT_PLAYBACK_CONFIG,
        playback.progress_interval_seconds,
        playback.grace_period_seconds,
        playback.queue_display_limit,
    )


def main() -> int:
    """Run the bot until it exits. Returns the process exit code."""
    from guild_jukebox.config.settings import get_settings

    settings = get_settings()
    setup_logging(settings.log_level)

    token = settings.discord.token.get_secret_value().strip()
    if not token:
        logger.error(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return 1

    _log_startup(settings)

    from guild_jukebox.config.container import create_container
    from guild_jukebox.infrastructure.discord.bot import create_bot

    bot = create_bot(create_container(settings), settings)
    try:
        bot.run_with_graceful_shutdown(token)
    except KeyboardInterrupt:
        logger.info(LogTemplates.BOT_KEYBOARD_INTERRUPT)
    except Exception:
        logger.exception(LogTemplates.BOT_FATAL_ERROR)
        return 1
    else:
        logger.info(LogTemplates.BOT_STOPPED)
    return 0


def cli() -> None:
    """``guild-jukebox`` console script."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
