"""
Core business logic for free slots and idle gaps.

Pure domain logic without any external dependencies (no API calls, no
database, no I/O). All arithmetic happens in minutes of the day.
"""

from datetime import date
from typing import Iterable, List, Tuple

from pendulum import DateTime

from .models import AvailabilityWindow, Gap, TimeRange
from .time_encoding import MINUTES_PER_DAY, slot_timestamp

# Half-open [start, end) in minutes of the day
BusyInterval = Tuple[int, int]


def _minute_of_day(moment: DateTime, day: date, timezone: str) -> int:
    """Position of ``moment`` on ``day``, clipped to [0, 1440]."""
    local = moment.in_timezone(timezone)
    local_day = local.date()

    if local_day < day:
        return 0
    if local_day > day:
        return MINUTES_PER_DAY

    return local.hour * 60 + local.minute


def busy_minutes_for_date(
    day: date,
    ranges: Iterable[TimeRange],
    timezone: str,
) -> List[BusyInterval]:
    """
    Convert datetime ranges to minute-of-day intervals on ``day``.

    Ranges that do not touch the date collapse to empty intervals and are
    dropped.
    """
    intervals: List[BusyInterval] = []

    for time_range in ranges:
        start = _minute_of_day(time_range.start, day, timezone)
        end = _minute_of_day(time_range.end, day, timezone)
        if start < end:
            intervals.append((start, end))

    return sorted(intervals)


def overlaps_any(start: int, end: int, busy: Iterable[BusyInterval]) -> bool:
    """Half-open overlap test against every busy interval."""
    return any(start < busy_end and end > busy_start for busy_start, busy_end in busy)


class SlotCalculator:
    """
    Calculates bookable slots and idle gaps from working windows and bookings.

    Free slots:
    1. Walk each working window in fixed steps from its start
    2. Keep candidates whose [t, t + duration) fits the window
    3. Drop candidates overlapping any busy interval
    4. Stop once the overall limit is reached

    Gaps:
    1. Clip busy intervals to each window and sort them
    2. Sweep a cursor over the window, emitting the uncovered stretches
    3. Keep gaps of at least the minimum length, largest first
    """

    def __init__(self, step_minutes: int = 30):
        if step_minutes <= 0:
            raise ValueError("step_minutes must be greater than zero")
        self.step_minutes = step_minutes

    def find_free_slots(
        self,
        day: date,
        windows: List[AvailabilityWindow],
        busy: List[BusyInterval],
        duration_minutes: int,
        limit: int,
    ) -> List[str]:
        """
        Find bookable start times on ``day``.

        Args:
            day: Date being searched
            windows: Working windows for that date, in order
            busy: Busy minute-of-day intervals (bookings, blocked periods)
            duration_minutes: Length of the requested booking
            limit: Maximum number of slots to return

        Returns:
            Slot timestamps formatted as YYYY-MM-DDTHH:MM, ascending
        """
        slots: List[str] = []

        for window in windows:
            for start in self._candidate_starts(window, duration_minutes):
                if len(slots) >= limit:
                    return slots
                if not overlaps_any(start, start + duration_minutes, busy):
                    slots.append(slot_timestamp(day, start))

        return slots

    def _candidate_starts(
        self,
        window: AvailabilityWindow,
        duration_minutes: int,
    ) -> Iterable[int]:
        """Step-aligned starts from the window start to end - duration, inclusive."""
        last_start = window.end_minute - duration_minutes
        return range(window.start_minute, last_start + 1, self.step_minutes)

    def summarize_gaps(
        self,
        windows: List[AvailabilityWindow],
        busy: List[BusyInterval],
        min_gap_minutes: int,
        limit: int,
    ) -> Tuple[List[Gap], int]:
        """
        Find idle stretches inside the working windows.

        Returns:
            (gaps sorted by length descending and truncated to ``limit``,
             total number of qualifying gaps before truncation)
        """
        gaps: List[Gap] = []

        for window in windows:
            gaps.extend(
                gap for gap in self._window_gaps(window, busy)
                if gap.minutes >= min_gap_minutes
            )

        gaps.sort(key=lambda g: (-g.minutes, g.start_minute))
        return gaps[:limit], len(gaps)

    def _window_gaps(
        self,
        window: AvailabilityWindow,
        busy: List[BusyInterval],
    ) -> List[Gap]:
        """
        Subtract busy intervals from one window.

        Example:
        Window: 09:00 - 18:00
        Busy: [10:00-11:00, 14:00-15:00]
        Result: [09:00-10:00, 11:00-14:00, 15:00-18:00]
        """
        window_start = window.start_minute
        window_end = window.end_minute

        clipped = sorted(
            (max(start, window_start), min(end, window_end))
            for start, end in busy
            if start < window_end and end > window_start
        )

        gaps: List[Gap] = []
        cursor = window_start

        for start, end in clipped:
            if start > cursor:
                gaps.append(Gap(start_minute=cursor, end_minute=start))
            cursor = max(cursor, end)

        if window_end > cursor:
            gaps.append(Gap(start_minute=cursor, end_minute=window_end))

        return gaps
