"""
Tests for display formatters.
"""

import pytest

from workout_tracker.shared.formatters import (
    format_calories,
    format_distance,
    format_duration,
    format_pace,
)


class TestFormatDistance:
    """Tests for format_distance function."""

    def test_sub_km_in_meters(self):
        assert format_distance(500) == "500 m"

    def test_over_km_in_km(self):
        assert format_distance(1500) == "1.50 km"

    def test_zero(self):
        assert format_distance(0) == "0 m"

    def test_exactly_one_km(self):
        """1000 m switches to km."""
        assert format_distance(1000) == "1.00 km"

    def test_meters_rounded(self):
        assert format_distance(11.1195) == "11 m"
        assert format_distance(999.4) == "999 m"

    def test_long_distance(self):
        assert format_distance(12340) == "12.34 km"


class TestFormatPace:
    """Tests for format_pace function."""

    def test_zero_speed(self):
        assert format_pace(0) == "0:00 /km"

    def test_negative_speed(self):
        assert format_pace(-1.5) == "0:00 /km"

    def test_typical_run(self):
        """2.78 m/s ≈ 5.99 min/km, seconds truncated."""
        assert format_pace(2.78) == "5:59 /km"

    @pytest.mark.parametrize("speed, expected", [
        (2.5, "6:40 /km"),
        (4.0, "4:10 /km"),
        (5.0, "3:20 /km"),
        (1.0, "16:40 /km"),
        (10.0, "1:40 /km"),
    ])
    def test_known_paces(self, speed, expected):
        assert format_pace(speed) == expected

    def test_seconds_zero_padded(self):
        """6:05 /km = 365 s/km."""
        assert format_pace(1000 / 365.5) == "6:05 /km"


class TestFormatDuration:
    """Tests for format_duration function."""

    def test_over_an_hour(self):
        assert format_duration(3_725_000) == "1:02:05"

    def test_under_an_hour(self):
        assert format_duration(65_000) == "1:05"

    def test_zero(self):
        assert format_duration(0) == "0:00"

    def test_floors_to_seconds(self):
        assert format_duration(59_999) == "0:59"

    def test_exactly_one_hour(self):
        assert format_duration(3_600_000) == "1:00:00"

    def test_just_under_an_hour(self):
        assert format_duration(3_599_999) == "59:59"

    def test_negative_reads_as_zero(self):
        assert format_duration(-5_000) == "0:00"


class TestFormatCalories:
    def test_format(self):
        assert format_calories(0) == "0 kcal"
        assert format_calories(123) == "123 kcal"
