"""
Application service exposing the schedule tools to a chat/agent layer.

The service fetches master records and bookings through a repository
adapter and delegates the availability arithmetic to the domain layer.
Every tool returns a compact, JSON-ready dict. Bad arguments are clamped or
defaulted and a missing master is reported in the payload, so the calling
agent loop only has to branch on the ``error`` field.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Protocol, Tuple

import pendulum

from ..config import DefaultsConfig
from ..domain.exceptions import UnknownToolError
from ..domain.models import Appointment, Business, DayAvailability, Master, TimeRange
from ..domain.schedule_parser import parse_blocked_periods, parse_date_overrides, parse_weekly_schedule
from ..domain.schedule_resolver import resolve_day
from ..domain.schedule_summary import format_weekly_summary
from ..domain.slot_calculator import BusyInterval, SlotCalculator, busy_minutes_for_date
from ..domain.time_encoding import date_key, hours_to_minutes, minutes_to_hhmm
from ..domain.validation import ToolLimits, clamp_to, parse_date_arg

logger = logging.getLogger(__name__)

MASTER_REQUIRED = "master_required"
NO_WORKING_HOURS = "no_working_hours"
MASTER_REQUIRED_HINT = (
    "Pass masterId or masterName of an active master "
    "(call who_working or schedule_overview to list them)."
)

ToolArgs = Optional[Mapping[str, Any]]


class SalonRepositoryProtocol(Protocol):
    """Protocol describing the storage access needed by the schedule tools."""

    async def list_masters(self) -> List[Master]:
        """Return every master of the business, active or not."""

    async def get_master_schedule(self, master_id: str) -> Optional[Master]:
        """Return one master with its stored schedule fields, or None."""

    async def get_appointments_on_date(self, master_id: str, day: date) -> List[Appointment]:
        """Return the master's appointments touching ``day`` (any status)."""

    async def get_business(self) -> Optional[Business]:
        """Return the business record."""


def _text_arg(args: Mapping[str, Any], name: str) -> Optional[str]:
    value = args.get(name)
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _created_sort_key(master: Master) -> Tuple[int, Any]:
    # Masters without a creation time sort after dated ones.
    if master.created_at is None:
        return (1, 0)
    return (0, master.created_at)


class ScheduleToolsService:
    """
    Read-only schedule tools over one business's masters and bookings.

    Dependency inversion toward a repository protocol lets the CLI use the
    JSON fixture or HTTP adapters and lets tests plug in stub data.
    """

    def __init__(
        self,
        repository: SalonRepositoryProtocol,
        slot_calculator: SlotCalculator,
        timezone: str,
        defaults: DefaultsConfig | None = None,
    ) -> None:
        self._repository = repository
        self._slot_calculator = slot_calculator
        self._timezone = timezone
        self._defaults = defaults or DefaultsConfig()
        self._tools: Dict[str, Callable[[ToolArgs], Awaitable[Dict[str, Any]]]] = {
            "free_slots": self.free_slots,
            "gaps_summary": self.gaps_summary,
            "who_working": self.who_working,
            "schedule_overview": self.schedule_overview,
        }

    @property
    def tool_names(self) -> List[str]:
        return list(self._tools)

    def today(self) -> date:
        return pendulum.now(self._timezone).date()

    async def run_tool(self, name: str, args: ToolArgs = None) -> Dict[str, Any]:
        """
        Dispatch a tool call by name.

        Returns:
            ``{"tool": name, "data": {...}}``

        Raises:
            UnknownToolError: If ``name`` is not a schedule tool
        """
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(
                f"Unknown tool '{name}'. Available: {', '.join(self._tools)}"
            )

        logger.info("Running tool %s with args %s", name, dict(args or {}))
        return {"tool": name, "data": await tool(args)}

    async def resolve_master(
        self,
        master_id: Optional[str] = None,
        master_name: Optional[str] = None,
    ) -> Optional[Master]:
        """
        Find the active master a tool call refers to.

        An exact id match wins. Otherwise the name is matched as a
        case-insensitive substring and the earliest-created master is taken.
        """
        if master_id:
            master = await self._repository.get_master_schedule(master_id)
            if master is not None and master.is_active:
                return master

        if not master_name:
            return None

        needle = master_name.lower()
        candidates = [
            master for master in await self._repository.list_masters()
            if master.is_active and needle in master.name.lower()
        ]
        if not candidates:
            logger.debug("No active master matches name %r", master_name)
            return None

        return min(candidates, key=_created_sort_key)

    def day_availability(self, master: Master, day: date) -> DayAvailability:
        """Resolve a master's working windows for ``day``."""
        weekly = parse_weekly_schedule(master.working_hours)
        if not weekly.ok:
            logger.debug("Master %s has no weekly schedule: %s", master.id, weekly.error)

        overrides = parse_date_overrides(master.schedule_date_overrides)

        return resolve_day(weekly.or_none(), overrides.or_none(), day)

    async def busy_intervals(self, master: Master, day: date) -> Tuple[List[BusyInterval], int]:
        """
        Collect busy minute intervals for ``day``.

        Returns:
            (busy intervals from bookings and blocked periods,
             number of non-cancelled appointments)
        """
        appointments = await self._repository.get_appointments_on_date(master.id, day)
        active = [apt for apt in appointments if not apt.is_cancelled]

        ranges: List[TimeRange] = []
        for apt in active:
            if apt.start_time >= apt.end_time:
                logger.warning("Skipping appointment %s with non-positive duration", apt.id)
                continue
            ranges.append(TimeRange(start=apt.start_time, end=apt.end_time))

        ranges.extend(parse_blocked_periods(master.blocked_periods, self._timezone))

        return busy_minutes_for_date(day, ranges, self._timezone), len(active)

    async def free_slots(self, args: ToolArgs = None) -> Dict[str, Any]:
        """Bookable start times for one master on one date."""
        args = args or {}
        day = parse_date_arg(args.get("date"), self.today())
        duration = clamp_to(args.get("durationMinutes"), ToolLimits.DURATION, self._defaults.duration_minutes)
        limit = clamp_to(args.get("limit"), ToolLimits.SLOT_LIMIT, self._defaults.slot_limit)

        result: Dict[str, Any] = {"date": date_key(day), "durationMinutes": duration}

        master = await self.resolve_master(_text_arg(args, "masterId"), _text_arg(args, "masterName"))
        if master is None:
            return {**result, "error": MASTER_REQUIRED, "hint": MASTER_REQUIRED_HINT}

        result["master"] = master.summary()

        availability = self.day_availability(master, day)
        if not availability.enabled:
            return {
                **result,
                "slots": [],
                "totalBusy": 0,
                "note": NO_WORKING_HOURS,
                "source": availability.source,
            }

        busy, _ = await self.busy_intervals(master, day)
        slots = self._slot_calculator.find_free_slots(
            day=day,
            windows=availability.windows,
            busy=busy,
            duration_minutes=duration,
            limit=limit,
        )

        return {**result, "slots": slots, "totalBusy": len(busy)}

    async def gaps_summary(self, args: ToolArgs = None) -> Dict[str, Any]:
        """Idle stretches between bookings for one master on one date."""
        args = args or {}
        day = parse_date_arg(args.get("date"), self.today())
        min_gap = clamp_to(args.get("minGapMinutes"), ToolLimits.MIN_GAP, self._defaults.min_gap_minutes)
        limit = clamp_to(args.get("limit"), ToolLimits.GAP_LIMIT, self._defaults.gap_limit)

        result: Dict[str, Any] = {"date": date_key(day), "minGapMinutes": min_gap}

        master = await self.resolve_master(_text_arg(args, "masterId"), _text_arg(args, "masterName"))
        if master is None:
            return {**result, "error": MASTER_REQUIRED, "hint": MASTER_REQUIRED_HINT}

        result["master"] = master.summary()

        availability = self.day_availability(master, day)
        if not availability.enabled:
            return {
                **result,
                "gaps": [],
                "totalGaps": 0,
                "note": NO_WORKING_HOURS,
                "source": availability.source,
            }

        busy, appointment_count = await self.busy_intervals(master, day)
        gaps, total = self._slot_calculator.summarize_gaps(
            windows=availability.windows,
            busy=busy,
            min_gap_minutes=min_gap,
            limit=limit,
        )

        return {
            **result,
            "gaps": [gap.to_dict() for gap in gaps],
            "totalGaps": total,
            "totalAppointments": appointment_count,
        }

    async def who_working(self, args: ToolArgs = None) -> Dict[str, Any]:
        """Which active masters work on a date, and their hours."""
        args = args or {}
        day = parse_date_arg(args.get("date"), self.today())

        working: List[Dict[str, Any]] = []
        off: List[Dict[str, Any]] = []

        for master in await self._active_masters():
            availability = self.day_availability(master, day)
            entry = {**master.summary(), "source": availability.source}

            if availability.enabled:
                entry["start"] = minutes_to_hhmm(hours_to_minutes(availability.start_hour))
                entry["end"] = minutes_to_hhmm(hours_to_minutes(availability.end_hour))
                if len(availability.windows) > 1:
                    entry["windows"] = [w.format_display() for w in availability.windows]
                working.append(entry)
            else:
                off.append(entry)

        return {
            "date": date_key(day),
            "working": working,
            "off": off,
            "totalWorking": len(working),
            "totalOff": len(off),
        }

    async def schedule_overview(self, args: ToolArgs = None) -> Dict[str, Any]:
        """Weekly schedule summary of the business and every active master."""
        today_key = date_key(self.today())
        business = await self._repository.get_business()

        masters: List[Dict[str, Any]] = []
        for master in await self._active_masters():
            weekly = parse_weekly_schedule(master.working_hours).or_none()
            overrides = parse_date_overrides(master.schedule_date_overrides).or_none() or {}
            masters.append(
                {
                    **master.summary(),
                    "summary": format_weekly_summary(weekly),
                    "overridesUpcoming": sum(1 for key in overrides if key >= today_key),
                }
            )

        overview: Dict[str, Any] = {"masters": masters, "totalMasters": len(masters)}

        if business is not None:
            overview["business"] = {
                "name": business.name,
                "summary": format_weekly_summary(
                    parse_weekly_schedule(business.working_hours).or_none()
                ),
            }

        return overview

    async def _active_masters(self) -> List[Master]:
        masters = await self._repository.list_masters()
        return sorted(
            (master for master in masters if master.is_active),
            key=lambda m: m.name.lower(),
        )
