"""
Conversion of the booking app's JSON records into domain models.
"""

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

import pendulum
from pendulum import DateTime

from ..domain.models import Appointment, Business, Master

logger = logging.getLogger(__name__)


def _parse_datetime(value: Any, timezone: str) -> Optional[DateTime]:
    if not isinstance(value, str) or not value.strip():
        return None
    parsed = pendulum.parse(value, tz=timezone)
    if not isinstance(parsed, DateTime):
        raise ValueError(f"Not a datetime: {value}")
    return parsed


def master_from_record(record: Dict[str, Any], timezone: str) -> Master:
    """Build a Master from a ``/api/masters`` style record."""
    return Master(
        id=str(record["id"]),
        name=str(record.get("name") or ""),
        is_active=record.get("isActive") is not False,
        created_at=_parse_datetime(record.get("createdAt"), timezone),
        working_hours=record.get("workingHours"),
        schedule_date_overrides=record.get("scheduleDateOverrides"),
        blocked_periods=record.get("blockedPeriods"),
    )


def appointment_from_record(record: Dict[str, Any], timezone: str) -> Appointment:
    """Build an Appointment from a ``/api/appointments`` style record."""
    start = _parse_datetime(record.get("startTime"), timezone)
    end = _parse_datetime(record.get("endTime"), timezone)
    if start is None or end is None:
        raise ValueError("startTime and endTime are required")

    master_id = record.get("masterId")
    if master_id is None and isinstance(record.get("master"), dict):
        master_id = record["master"].get("id")

    return Appointment(
        id=str(record.get("id", "")),
        master_id=str(master_id or ""),
        start_time=start,
        end_time=end,
        status=str(record.get("status") or "Pending"),
    )


def business_from_record(record: Dict[str, Any]) -> Business:
    """Build a Business from a ``/api/business/{id}`` style record."""
    return Business(
        id=str(record.get("id", "")),
        name=str(record.get("name") or ""),
        working_hours=record.get("workingHours"),
    )


def masters_from_records(records: Iterable[Any], timezone: str) -> List[Master]:
    """Convert master records, skipping the ones that cannot be read."""
    masters: List[Master] = []
    for record in records:
        try:
            masters.append(master_from_record(record, timezone))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping invalid master record: %s", e)
            continue
    return masters


def appointments_on_date(
    records: Iterable[Any],
    master_id: str,
    day: date,
    timezone: str,
) -> List[Appointment]:
    """
    Select one master's appointments overlapping ``day``.

    Invalid rows are skipped; cancelled rows are kept, the service filters them.
    """
    day_start = pendulum.datetime(day.year, day.month, day.day, tz=timezone)
    day_end = day_start.add(days=1)

    appointments: List[Appointment] = []
    for record in records:
        try:
            appointment = appointment_from_record(record, timezone)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping invalid appointment record: %s", e)
            continue

        if appointment.master_id != master_id:
            continue
        if appointment.start_time < day_end and appointment.end_time > day_start:
            appointments.append(appointment)

    return sorted(appointments, key=lambda a: a.start_time)
