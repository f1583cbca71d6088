"""
Tests for schedule blob parsing.
"""

import json

from salon_schedule.domain.models import DaySchedule
from salon_schedule.domain.schedule_parser import (
    parse_blocked_periods,
    parse_date_overrides,
    parse_weekly_schedule,
)


class TestParseWeeklySchedule:
    """Tests for workingHours parsing."""

    def test_parses_json_text(self):
        raw = json.dumps({
            "monday": {"enabled": True, "start": "09:00", "end": "18:00"},
            "sunday": {"enabled": False, "start": "10:00", "end": "14:00"},
        })

        result = parse_weekly_schedule(raw)

        assert result.ok
        assert result.value["monday"] == DaySchedule(enabled=True, start="09:00", end="18:00")
        assert result.value["sunday"].enabled is False
        assert "tuesday" not in result.value

    def test_accepts_decoded_mapping_with_any_key_case(self):
        result = parse_weekly_schedule({"Monday": {"enabled": True, "start": "10:00", "end": "16:00"}})

        assert result.value["monday"].start == "10:00"

    def test_enabled_must_be_literal_true(self):
        result = parse_weekly_schedule({"monday": {"enabled": "true", "start": "09:00", "end": "18:00"}})

        assert result.value["monday"].enabled is False

    def test_entries_without_enabled_are_ignored(self):
        result = parse_weekly_schedule({
            "monday": {"start": "09:00", "end": "18:00"},
            "tuesday": {"enabled": True},
        })

        assert "monday" not in result.value
        assert result.value["tuesday"] == DaySchedule(enabled=True, start="09:00", end="18:00")

    def test_invalid_json_collapses_to_none(self):
        result = parse_weekly_schedule("{not json")

        assert not result.ok
        assert result.error.reason == "invalid_json"
        assert result.or_none() is None

    def test_empty_and_non_object_inputs(self):
        assert parse_weekly_schedule(None).error.reason == "empty"
        assert parse_weekly_schedule("   ").error.reason == "empty"
        assert parse_weekly_schedule("[1, 2]").error.reason == "not_an_object"
        assert parse_weekly_schedule({"holiday": {"enabled": True}}).error.reason == "no_days"


class TestParseDateOverrides:
    """Tests for scheduleDateOverrides parsing."""

    def test_parses_overrides_with_breaks(self):
        raw = json.dumps({
            "2024-06-11": {"enabled": False},
            "2024-06-12": {
                "enabled": True,
                "start": "10:00",
                "end": "19:00",
                "breakStart": "13:00",
                "breakEnd": "14:00",
            },
        })

        result = parse_date_overrides(raw)

        assert result.value["2024-06-11"].enabled is False
        assert result.value["2024-06-12"].break_start == "13:00"
        assert result.value["2024-06-12"].break_end == "14:00"

    def test_malformed_date_keys_are_dropped(self):
        result = parse_date_overrides({"2024-6-1": {"enabled": False}, "tomorrow": {"enabled": True}})

        assert result.ok
        assert result.value == {}

    def test_missing_overrides(self):
        assert parse_date_overrides(None).or_none() is None


class TestParseBlockedPeriods:
    """Tests for blockedPeriods parsing."""

    def test_valid_and_invalid_items(self):
        raw = json.dumps([
            {"start": "2024-06-10T12:00:00", "end": "2024-06-10T13:00:00"},
            {"start": "2024-06-10T15:00:00"},
            {"start": "2024-06-10T17:00:00", "end": "2024-06-10T16:00:00"},
            "garbage",
        ])

        periods = parse_blocked_periods(raw, "Europe/Kyiv")

        assert len(periods) == 1
        assert periods[0].start.hour == 12
        assert periods[0].end.hour == 13

    def test_durations_are_skipped(self):
        """Items that parse to something other than a datetime are dropped."""
        raw = [
            {"start": "PT1H", "end": "PT2H"},
            {"start": "2024-06-10T09:00:00", "end": "2024-06-10T10:00:00"},
        ]

        periods = parse_blocked_periods(raw, "Europe/Kyiv")

        assert len(periods) == 1
        assert periods[0].start.hour == 9

    def test_unparsable_blob(self):
        assert parse_blocked_periods("nope", "Europe/Kyiv") == []
        assert parse_blocked_periods(None, "Europe/Kyiv") == []
        assert parse_blocked_periods({"start": "x"}, "Europe/Kyiv") == []
