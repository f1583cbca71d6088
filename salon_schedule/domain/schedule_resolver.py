"""
Resolution of a master's effective working window for a single date.
"""

import logging
from datetime import date
from typing import List, Optional

from .models import AvailabilityWindow, DateOverrides, DayAvailability, DaySchedule, WeeklySchedule
from .time_encoding import date_key, hhmm_to_hours, weekday_key

logger = logging.getLogger(__name__)

SOURCE_OVERRIDE = "override"
SOURCE_WEEKLY = "weekly"
SOURCE_NONE = "none"


def day_windows(day: DaySchedule) -> List[AvailabilityWindow]:
    """
    Turn one enabled day entry into its working windows.

    Returns an empty list when the times are unparsable or start >= end. A
    break lying fully inside the day splits it into two windows; a malformed
    break is ignored.
    """
    start = hhmm_to_hours(day.start)
    end = hhmm_to_hours(day.end)

    if start is None or end is None or start >= end:
        logger.debug("Rejecting day with invalid hours %s-%s", day.start, day.end)
        return []

    break_start = hhmm_to_hours(day.break_start)
    break_end = hhmm_to_hours(day.break_end)

    if (
        break_start is None
        or break_end is None
        or not start <= break_start < break_end <= end
    ):
        return [AvailabilityWindow(start_hour=start, end_hour=end)]

    windows: List[AvailabilityWindow] = []
    if start < break_start:
        windows.append(AvailabilityWindow(start_hour=start, end_hour=break_start))
    if break_end < end:
        windows.append(AvailabilityWindow(start_hour=break_end, end_hour=end))
    return windows


def resolve_day(
    weekly: Optional[WeeklySchedule],
    overrides: Optional[DateOverrides],
    day: date,
) -> DayAvailability:
    """
    Decide whether, and when, a master works on ``day``.

    An override for the exact date wins outright, even when it disables the
    day. Otherwise the weekly entry for the weekday applies.
    """
    override = (overrides or {}).get(date_key(day))

    if override is not None:
        return _availability_from(override, SOURCE_OVERRIDE)

    entry = (weekly or {}).get(weekday_key(day))
    if entry is None:
        return DayAvailability(enabled=False, source=SOURCE_NONE)

    return _availability_from(entry, SOURCE_WEEKLY)


def _availability_from(entry: DaySchedule, source: str) -> DayAvailability:
    if not entry.enabled:
        return DayAvailability(enabled=False, source=source)

    windows = day_windows(entry)
    if not windows:
        return DayAvailability(enabled=False, source=source)

    return DayAvailability(enabled=True, windows=windows, source=source)
