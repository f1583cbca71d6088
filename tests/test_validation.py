"""
Tests for tool argument normalisation.
"""

import json
from datetime import date

import pytest

from salon_schedule.domain.validation import ToolLimits, clamp_or_default, clamp_to, parse_date_arg

TODAY = date(2024, 6, 10)


class TestClampOrDefault:
    """Tests for clamp_or_default."""

    def test_duration_bounds(self):
        assert clamp_to(1, ToolLimits.DURATION) == 5
        assert clamp_to(10000, ToolLimits.DURATION) == 360
        assert clamp_to(45, ToolLimits.DURATION) == 45

    def test_negative_limit_clamped_to_one(self):
        assert clamp_to(-5, ToolLimits.SLOT_LIMIT) == 1

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("45", 45),
            (" 12.9 ", 12),
            (7.9, 7),
            (-0.5, 5),
        ],
    )
    def test_numeric_values_are_floored(self, value, expected):
        assert clamp_or_default(value, 5, 360, 30) == expected

    @pytest.mark.parametrize("value", [None, "abc", "", True, float("nan"), float("inf"), [60], {"n": 1}])
    def test_unusable_values_fall_back(self, value):
        assert clamp_or_default(value, 5, 360, 30) == 30

    def test_explicit_fallback_overrides_bounds_default(self):
        assert clamp_to(None, ToolLimits.MIN_GAP, fallback=45) == 45


class TestParseDateArg:
    """Tests for parse_date_arg."""

    def test_valid_date(self):
        assert parse_date_arg("2024-06-11", TODAY) == date(2024, 6, 11)

    @pytest.mark.parametrize("value", [None, "", "2024-6-11", "11.06.2024", "2024-02-30", 20240611, "tomorrow"])
    def test_malformed_dates_default_to_today(self, value):
        assert parse_date_arg(value, TODAY) == TODAY


class TestLenientNumbers:
    """Oversized and decorated numbers are clamped rather than rejected."""

    def test_huge_integer_is_clamped(self):
        huge = json.loads("1" + "0" * 400)

        assert clamp_to(huge, ToolLimits.DURATION) == 360
        assert clamp_to(-huge, ToolLimits.SLOT_LIMIT) == 1

    def test_huge_numeric_string_is_clamped(self):
        assert clamp_to("9" * 5000, ToolLimits.DURATION) == 360
        assert clamp_to("-" + "9" * 5000, ToolLimits.GAP_LIMIT) == 1

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("60min", 60),
            ("  90 minutes", 90),
            ("+45", 45),
            ("-3", 5),
        ],
    )
    def test_leading_digits_are_used(self, value, expected):
        assert clamp_or_default(value, 5, 360, 30) == expected

    @pytest.mark.parametrize("value", ["min60", ".5", "- 3"])
    def test_strings_without_leading_digits_fall_back(self, value):
        assert clamp_or_default(value, 5, 360, 30) == 30
