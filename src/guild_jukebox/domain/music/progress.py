"""Progress arithmetic and text rendering for the active track.

Elapsed and total time stay floating-point seconds until they are shown.
Percent is clamped to ``[0, 1]`` at display time, and an unknown duration
(``0``) is treated as one second so the bar simply fills up.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

FILLED_GLYPH = "▮"
EMPTY_GLYPH = "▯"
DEFAULT_BAR_WIDTH = 20


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves going up (``round`` rounds to even)."""
    return math.floor(value + 0.5)


def format_clock(seconds: float | None) -> str:
    """Format seconds as ``m:ss``; minutes are never folded into hours."""
    if not seconds or math.isnan(seconds) or seconds < 0:
        return "0:00"
    minutes, secs = divmod(math.floor(seconds), 60)
    return f"{minutes}:{secs:02d}"


def render_bar(
    percent: float,
    width: int = DEFAULT_BAR_WIDTH,
    filled: str = FILLED_GLYPH,
    empty: str = EMPTY_GLYPH,
) -> str:
    percent = min(1.0, max(0.0, percent))
    filled_count = min(width, round_half_up(percent * width))
    return filled * filled_count + empty * (width - filled_count)


@dataclass(frozen=True)
class ProgressSnapshot:
    """Point-in-time progress of a track."""

    elapsed: float
    duration: int
    percent: float

    @property
    def percent_display(self) -> int:
        return round_half_up(self.percent * 100)

    @property
    def elapsed_clock(self) -> str:
        return format_clock(self.elapsed)

    @property
    def total_clock(self) -> str:
        return format_clock(self.duration)


def compute_progress(elapsed: float, duration: int) -> ProgressSnapshot:
    """Compute clamped progress for ``elapsed`` seconds into a track of ``duration`` seconds."""
    elapsed = max(0.0, float(elapsed))
    percent = min(1.0, elapsed / max(1, duration))
    return ProgressSnapshot(elapsed=elapsed, duration=duration, percent=percent)
