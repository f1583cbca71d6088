"""
Helpers for the compact time encodings used in stored schedules.

Schedules keep times as "HH:MM" strings and dates as "YYYY-MM-DD" keys;
the calculators work in fractional hours and minute-of-day integers.
"""

import re
from datetime import date

DAY_KEYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2})?\s*$")


def date_key(day: date) -> str:
    """Format a date as the override map key (YYYY-MM-DD)."""
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def weekday_from_sunday_index(index: int) -> int:
    """Rotate a Sunday=0 weekday number to the Monday=0 convention."""
    return (index + 6) % 7


def weekday_key(day: date) -> str:
    """Return the weekly schedule key (monday...sunday) for a date."""
    return DAY_KEYS[day.weekday()]


def hhmm_to_hours(value) -> float | None:
    """
    Convert "HH:MM" to fractional hours.

    Returns None for anything that is not a valid time of day. "24:00" is
    accepted as the end of the day.
    """
    if not isinstance(value, str):
        return None

    match = _TIME_RE.match(value)
    if not match:
        return None

    hours = int(match.group(1))
    minutes = int(match.group(2))

    if minutes > 59 or hours > 24 or (hours == 24 and minutes != 0):
        return None

    return hours + minutes / 60


def hours_to_minutes(hours: float) -> int:
    """Convert fractional hours to whole minutes of the day."""
    return int(round(hours * 60))


def minutes_to_hhmm(minutes: int) -> str:
    """Format a minute-of-day offset as HH:MM."""
    hours, mins = divmod(int(minutes), 60)
    return f"{hours:02d}:{mins:02d}"


def slot_timestamp(day: date, minutes: int) -> str:
    """Format a slot start as YYYY-MM-DDTHH:MM."""
    return f"{date_key(day)}T{minutes_to_hhmm(minutes)}"
