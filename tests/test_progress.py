"""Tests for progress arithmetic and text rendering."""

import math

import pytest

from guild_jukebox.domain.music.progress import (
    EMPTY_GLYPH,
    FILLED_GLYPH,
    compute_progress,
    format_clock,
    render_bar,
    round_half_up,
)


class TestFormatClock:
    @pytest.mark.parametrize(
        "seconds,expected",
        [
            (0, "0:00"),
            (None, "0:00"),
            (math.nan, "0:00"),
            (-5, "0:00"),
            (7, "0:07"),
            (59.9, "0:59"),
            (60, "1:00"),
            (212, "3:32"),
            # minutes are never folded into hours
            (3725, "62:05"),
        ],
    )
    def test_format(self, seconds, expected):
        assert format_clock(seconds) == expected


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        "value,expected", [(0.5, 1), (1.5, 2), (2.5, 3), (2.49, 2), (0.0, 0)]
    )
    def test_halves_round_up(self, value, expected):
        assert round_half_up(value) == expected


class TestRenderBar:
    def test_empty_bar(self):
        assert render_bar(0.0) == EMPTY_GLYPH * 20

    def test_full_bar(self):
        assert render_bar(1.0) == FILLED_GLYPH * 20

    def test_half_bar(self):
        assert render_bar(0.5, width=10) == FILLED_GLYPH * 5 + EMPTY_GLYPH * 5

    def test_filled_count_rounds_half_up(self):
        # 0.025 * 20 == 0.5
        assert render_bar(0.025).count(FILLED_GLYPH) == 1

    @pytest.mark.parametrize("percent", [-0.5, 1.7])
    def test_out_of_range_is_clamped(self, percent):
        bar = render_bar(percent, width=8)

        assert len(bar) == 8
        assert bar in (FILLED_GLYPH * 8, EMPTY_GLYPH * 8)

    def test_custom_glyphs(self):
        assert render_bar(0.5, width=4, filled="#", empty="-") == "##--"


class TestComputeProgress:
    def test_regular_track(self):
        progress = compute_progress(50.0, 200)

        assert progress.percent == pytest.approx(0.25)
        assert progress.percent_display == 25
        assert progress.elapsed_clock == "0:50"
        assert progress.total_clock == "3:20"

    def test_overrun_is_clamped(self):
        progress = compute_progress(500.0, 200)

        assert progress.percent == 1.0
        assert progress.percent_display == 100
        assert progress.elapsed_clock == "8:20"

    def test_unknown_duration_fills_immediately(self):
        progress = compute_progress(30.0, 0)

        assert progress.percent == 1.0
        assert progress.total_clock == "0:00"

    def test_negative_elapsed_treated_as_zero(self):
        progress = compute_progress(-3.0, 60)

        assert progress.elapsed == 0.0
        assert progress.percent == 0.0
