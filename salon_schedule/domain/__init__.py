"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import AvailabilityWindow, DayAvailability, DaySchedule, Gap, TimeRange
from .schedule_parser import ParseResult, parse_date_overrides, parse_weekly_schedule
from .schedule_resolver import resolve_day
from .slot_calculator import SlotCalculator

__all__ = [
    "AvailabilityWindow",
    "DayAvailability",
    "DaySchedule",
    "Gap",
    "TimeRange",
    "ParseResult",
    "parse_date_overrides",
    "parse_weekly_schedule",
    "resolve_day",
    "SlotCalculator",
]
