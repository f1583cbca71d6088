"""
Parsing of the schedule blobs stored on master and business records.

Stored schedules are loosely-typed JSON written by the admin UI. Parsing is
an explicit step that returns either a value or a ``ScheduleParseError``;
callers collapse errors to "no schedule" with ``ParseResult.or_none()``.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, TypeVar

import pendulum
from pendulum import DateTime

from .exceptions import ScheduleParseError
from .models import DateOverrides, DaySchedule, TimeRange, WeeklySchedule
from .time_encoding import DAY_KEYS

logger = logging.getLogger(__name__)

T = TypeVar("T")

DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DEFAULT_START = "09:00"
DEFAULT_END = "18:00"


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """Either a parsed value or the reason parsing failed."""
    value: Optional[T] = None
    error: Optional[ScheduleParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def or_none(self) -> Optional[T]:
        """Collapse a failed parse to None (treated as "off" downstream)."""
        return self.value if self.ok else None


def _failure(reason: str, detail: str = "") -> ParseResult:
    return ParseResult(error=ScheduleParseError(reason, detail))


def _decode_object(raw: Any) -> ParseResult[Dict[str, Any]]:
    """Accept JSON text or an already-decoded mapping."""
    if raw is None:
        return _failure("empty")

    if isinstance(raw, str):
        if not raw.strip():
            return _failure("empty")
        try:
            raw = json.loads(raw)
        except ValueError as e:
            return _failure("invalid_json", str(e))

    if not isinstance(raw, dict):
        return _failure("not_an_object", type(raw).__name__)

    return ParseResult(value=raw)


def _optional_time(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value.strip() else None


def parse_day(entry: Any) -> Optional[DaySchedule]:
    """
    Parse one day entry.

    Entries without an ``enabled`` key are ignored; anything other than a
    literal ``true`` counts as disabled. Missing times fall back to 09:00-18:00.
    """
    if not isinstance(entry, dict) or "enabled" not in entry:
        return None

    start = entry.get("start")
    end = entry.get("end")

    return DaySchedule(
        enabled=entry.get("enabled") is True,
        start=start if isinstance(start, str) else DEFAULT_START,
        end=end if isinstance(end, str) else DEFAULT_END,
        break_start=_optional_time(entry.get("breakStart")),
        break_end=_optional_time(entry.get("breakEnd")),
    )


def parse_weekly_schedule(raw: Any) -> ParseResult[WeeklySchedule]:
    """Parse a master's or business's ``workingHours`` blob."""
    decoded = _decode_object(raw)
    if not decoded.ok:
        return decoded

    # Weekday keys may have been saved with any capitalisation.
    by_lower = {str(key).lower(): value for key, value in decoded.value.items()}

    schedule: WeeklySchedule = {}
    for day_key in DAY_KEYS:
        day = parse_day(by_lower.get(day_key))
        if day is not None:
            schedule[day_key] = day

    if not schedule:
        return _failure("no_days")

    return ParseResult(value=schedule)


def parse_date_overrides(raw: Any) -> ParseResult[DateOverrides]:
    """Parse a master's ``scheduleDateOverrides`` blob."""
    decoded = _decode_object(raw)
    if not decoded.ok:
        return decoded

    overrides: DateOverrides = {}
    for key, entry in decoded.value.items():
        if not isinstance(key, str) or not DATE_KEY_RE.match(key):
            logger.debug("Skipping override with malformed date key %r", key)
            continue
        day = parse_day(entry)
        if day is not None:
            overrides[key] = day

    return ParseResult(value=overrides)


def _parse_moment(value: Any, timezone: str) -> DateTime:
    """Parse a full datetime; dates, times and durations are rejected."""
    parsed = pendulum.parse(value, tz=timezone)
    if not isinstance(parsed, DateTime):
        raise ValueError(f"Not a datetime: {value!r}")
    return parsed


def parse_blocked_periods(raw: Any, timezone: str) -> List[TimeRange]:
    """
    Parse a master's ``blockedPeriods`` list of ``{start, end}`` datetimes.

    Invalid items are skipped.
    """
    if raw is None:
        return []

    if isinstance(raw, str):
        if not raw.strip():
            return []
        try:
            raw = json.loads(raw)
        except ValueError as e:
            logger.warning("Ignoring unparsable blocked periods: %s", e)
            return []

    if not isinstance(raw, list):
        return []

    periods: List[TimeRange] = []
    for item in raw:
        try:
            start = _parse_moment(item["start"], timezone)
            end = _parse_moment(item["end"], timezone)
            periods.append(TimeRange(start=start, end=end))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping invalid blocked period %r: %s", item, e)
            continue

    return periods
