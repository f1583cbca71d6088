"""
Domain models for master schedules, bookings and derived availability.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pendulum import DateTime

from .time_encoding import hours_to_minutes, minutes_to_hhmm


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")


@dataclass(frozen=True)
class DaySchedule:
    """
    One day of a weekly template or a date override.

    Times are kept as the stored "HH:MM" strings; the resolver validates them.
    """
    enabled: bool
    start: str = "09:00"
    end: str = "18:00"
    break_start: Optional[str] = None
    break_end: Optional[str] = None


# monday...sunday -> DaySchedule
WeeklySchedule = Dict[str, DaySchedule]

# YYYY-MM-DD -> DaySchedule
DateOverrides = Dict[str, DaySchedule]


@dataclass(frozen=True)
class AvailabilityWindow:
    """A working window inside one day, in fractional hours."""
    start_hour: float
    end_hour: float

    def __post_init__(self):
        if self.start_hour >= self.end_hour:
            raise ValueError(
                f"Window start {self.start_hour} must be before end {self.end_hour}"
            )

    @property
    def start_minute(self) -> int:
        return hours_to_minutes(self.start_hour)

    @property
    def end_minute(self) -> int:
        return hours_to_minutes(self.end_hour)

    def format_display(self) -> str:
        return f"{minutes_to_hhmm(self.start_minute)}-{minutes_to_hhmm(self.end_minute)}"


@dataclass(frozen=True)
class DayAvailability:
    """
    Effective availability of a master for one date.

    ``source`` tells where the decision came from (override, weekly or none)
    and is only used for diagnostics.
    """
    enabled: bool
    windows: List[AvailabilityWindow] = field(default_factory=list)
    source: str = "none"

    @property
    def start_hour(self) -> Optional[float]:
        return self.windows[0].start_hour if self.windows else None

    @property
    def end_hour(self) -> Optional[float]:
        return self.windows[-1].end_hour if self.windows else None


@dataclass(frozen=True)
class Gap:
    """An idle interval inside working hours, in minutes of the day."""
    start_minute: int
    end_minute: int

    @property
    def minutes(self) -> int:
        return self.end_minute - self.start_minute

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": minutes_to_hhmm(self.start_minute),
            "end": minutes_to_hhmm(self.end_minute),
            "minutes": self.minutes,
        }


@dataclass
class Appointment:
    """A booked appointment row as returned by storage."""
    id: str
    master_id: str
    start_time: DateTime
    end_time: DateTime
    status: str = "Pending"

    @property
    def is_cancelled(self) -> bool:
        return self.status == "Cancelled"


@dataclass
class Master:
    """
    A staff member with their own schedule.

    ``working_hours``, ``schedule_date_overrides`` and ``blocked_periods`` hold
    the raw stored values (JSON text or already-decoded objects).
    """
    id: str
    name: str
    is_active: bool = True
    created_at: Optional[DateTime] = None
    working_hours: Any = None
    schedule_date_overrides: Any = None
    blocked_periods: Any = None

    def summary(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name}


@dataclass
class Business:
    """The salon itself; only the fields the schedule tools read."""
    id: str
    name: str
    working_hours: Any = None
