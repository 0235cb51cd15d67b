"""Console logging helpers."""

from __future__ import annotations

import logging
import os
import sys


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the levelname and tags records with their guild.

    Records logged with ``extra={"guild_id": ...}`` get a ``[guild <id>]``
    prefix on the message. Colors are disabled when ``NO_COLOR`` is set or
    the output stream is not a TTY.
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",  # cyan
        logging.INFO: "\033[32m",  # green
        logging.WARNING: "\033[33m",  # yellow
        logging.ERROR: "\033[31m",  # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }
    RESET = "\033[0m"

    def __init__(self, *args, stream=None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._stream = stream

    def _use_color(self) -> bool:
        if os.environ.get("NO_COLOR") is not None:
            return False
        stream = self._stream or sys.stdout
        return hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        guild_id = getattr(record, "guild_id", None)
        color = self.COLORS.get(record.levelno, "") if self._use_color() else ""
        if guild_id is None and not color:
            return super().format(record)

        # Copy so other handlers see the untouched record
        record = logging.makeLogRecord(record.__dict__)
        if guild_id is not None:
            record.msg = f"[guild {guild_id}] {record.msg}"
        if color:
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)
