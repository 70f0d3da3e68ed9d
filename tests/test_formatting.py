"""
Tests for display formatting helpers.
"""
from datetime import datetime

import pytest

from app.services.formatting import (
    format_clock,
    format_recording_time,
    format_time_of_day,
    maturity_description,
)


class TestClock:
    @pytest.mark.parametrize("seconds,expected", [
        (0, "00:00"), (5, "00:05"), (65, "01:05"), (600, "10:00"), (59.9, "00:59"),
    ])
    def test_mm_ss(self, seconds, expected):
        assert format_clock(seconds) == expected

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf"), None])
    def test_non_finite(self, bad):
        assert format_clock(bad) == "00:00"

    def test_negative_clamped(self):
        assert format_clock(-3) == "00:00"


class TestRecordingTime:
    def test_m_ss(self):
        assert format_recording_time(65) == "1:05"
        assert format_recording_time(7) == "0:07"

    def test_non_finite(self):
        assert format_recording_time(float("nan")) == "0:00"


class TestTimeOfDay:
    @pytest.mark.parametrize("hour,minute,expected", [
        (0, 5, "12:05 AM"), (9, 30, "9:30 AM"), (12, 0, "12:00 PM"), (23, 59, "11:59 PM"),
    ])
    def test_twelve_hour_clock(self, hour, minute, expected):
        assert format_time_of_day(datetime(2026, 3, 15, hour, minute)) == expected


class TestMaturity:
    @pytest.mark.parametrize("score,expected", [
        (1, "Developing"), (3, "Developing"), (4, "Growing"), (6, "Growing"),
        (7, "Mature"), (8, "Mature"), (9, "Highly Mature"), (10, "Highly Mature"),
        (0, "Developing"), (11, "Developing"),
    ])
    def test_bands(self, score, expected):
        assert maturity_description(score) == expected
