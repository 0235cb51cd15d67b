"""Tests for ColoredFormatter."""

import logging
from io import StringIO
from unittest.mock import patch

import pytest

from guild_jukebox.utils.logging import ColoredFormatter

RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}


def _make_record(level: int, message: str = "test", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def _tty() -> StringIO:
    stream = StringIO()
    stream.isatty = lambda: True  # type: ignore[method-assign]
    return stream


class TestColoredFormatter:
    """Tests for ANSI color formatting."""

    @pytest.mark.parametrize(
        "level",
        [logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL],
    )
    def test_color_applied_per_level(self, level: int):
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_tty())

        output = fmt.format(_make_record(level))

        assert LEVEL_COLORS[level] in output
        assert RESET in output

    def test_no_color_when_no_color_env_set(self):
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_tty())

        with patch.dict("os.environ", {"NO_COLOR": "1"}):
            output = fmt.format(_make_record(logging.INFO))

        assert "\033[" not in output

    def test_no_color_when_stream_not_tty(self):
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=StringIO())

        output = fmt.format(_make_record(logging.ERROR))

        assert output == "ERROR | test"

    def test_original_record_not_mutated(self):
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_tty())
        record = _make_record(logging.WARNING, guild_id=42)

        fmt.format(record)

        assert record.levelname == "WARNING"
        assert record.msg == "test"


class TestGuildTag:
    def test_guild_id_prefixes_message(self):
        fmt = ColoredFormatter("%(message)s", stream=StringIO())

        output = fmt.format(_make_record(logging.INFO, "queued", guild_id=1234))

        assert output == "[guild 1234] queued"

    def test_guild_tag_keeps_args(self):
        fmt = ColoredFormatter("%(message)s", stream=StringIO())
        record = _make_record(logging.INFO, "playing %s")
        record.args = ("Song A",)
        record.guild_id = 99

        assert fmt.format(record) == "[guild 99] playing Song A"

    def test_no_guild_leaves_message(self):
        fmt = ColoredFormatter("%(message)s", stream=StringIO())

        assert fmt.format(_make_record(logging.INFO, "ready")) == "ready"
