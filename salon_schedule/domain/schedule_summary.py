"""
Short human-readable summaries of weekly schedules.
"""

from typing import Optional

from .models import WeeklySchedule
from .time_encoding import DAY_KEYS

DAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

NOT_CONFIGURED = "Not configured"
DAYS_OFF = "Days off"
VARIES = "Varies"


def format_weekly_summary(schedule: Optional[WeeklySchedule]) -> str:
    """
    Describe a weekly schedule in a few words.

    Examples: "Mon–Fri 09:00–18:00", "Days off", "Not configured", "Varies".
    """
    if not schedule:
        return NOT_CONFIGURED

    enabled = [key for key in DAY_KEYS if key in schedule and schedule[key].enabled]
    if not enabled:
        return DAYS_OFF

    first = schedule[enabled[0]]
    same_hours = all(
        schedule[key].start == first.start and schedule[key].end == first.end
        for key in enabled
    )
    if not same_hours:
        return VARIES

    first_label = DAY_LABELS[DAY_KEYS.index(enabled[0])]
    last_label = DAY_LABELS[DAY_KEYS.index(enabled[-1])]
    days = first_label if len(enabled) == 1 else f"{first_label}–{last_label}"

    return f"{days} {first.start}–{first.end}"
