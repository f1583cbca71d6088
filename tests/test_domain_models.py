"""
Tests for domain models.
"""

import pendulum
import pytest

from salon_schedule.domain.models import Appointment, AvailabilityWindow, Gap, TimeRange


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        """Test creating a valid time range."""
        start = pendulum.parse("2024-06-10 09:00", tz="Europe/Kyiv")
        end = pendulum.parse("2024-06-10 18:00", tz="Europe/Kyiv")

        tr = TimeRange(start=start, end=end)

        assert tr.start == start
        assert tr.end == end

    def test_invalid_time_range_raises_error(self):
        """Test that creating an invalid time range raises ValueError."""
        start = pendulum.parse("2024-06-10 18:00", tz="Europe/Kyiv")
        end = pendulum.parse("2024-06-10 09:00", tz="Europe/Kyiv")

        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            TimeRange(start=start, end=end)

    def test_zero_length_range_rejected(self):
        """A range must have positive length."""
        moment = pendulum.parse("2024-06-10 09:00", tz="Europe/Kyiv")

        with pytest.raises(ValueError):
            TimeRange(start=moment, end=moment)


class TestAvailabilityWindow:
    """Tests for AvailabilityWindow."""

    def test_minutes_from_fractional_hours(self):
        window = AvailabilityWindow(start_hour=9.5, end_hour=18.25)

        assert window.start_minute == 570
        assert window.end_minute == 1095
        assert window.format_display() == "09:30-18:15"

    def test_empty_window_rejected(self):
        with pytest.raises(ValueError):
            AvailabilityWindow(start_hour=18, end_hour=9)


class TestGapAndAppointment:
    """Tests for Gap and Appointment helpers."""

    def test_gap_to_dict(self):
        gap = Gap(start_minute=660, end_minute=780)

        assert gap.minutes == 120
        assert gap.to_dict() == {"start": "11:00", "end": "13:00", "minutes": 120}

    def test_cancelled_status(self):
        start = pendulum.parse("2024-06-10 10:00", tz="Europe/Kyiv")
        apt = Appointment(id="a", master_id="m", start_time=start, end_time=start.add(hours=1), status="Cancelled")

        assert apt.is_cancelled
        apt.status = "Confirmed"
        assert not apt.is_cancelled
