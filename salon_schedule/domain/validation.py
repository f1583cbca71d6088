"""
Argument normalisation for tool calls.

Tool arguments are produced by a language model on a best-effort basis, so
nothing here rejects input: numbers are clamped into range and anything
unusable falls back to a default.
"""

import math
import re
from dataclasses import dataclass
from datetime import date
from typing import Any

import pendulum

DATE_ARG_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
LEADING_INT_RE = re.compile(r"^\s*([+-]?)(\d+)")
MAX_DIGITS = 15


@dataclass(frozen=True)
class Bounds:
    """Inclusive range plus the value used when an argument is unusable."""
    minimum: int
    maximum: int
    fallback: int


class ToolLimits:
    """Documented bounds for the schedule tool arguments."""
    DURATION = Bounds(minimum=5, maximum=360, fallback=30)
    SLOT_LIMIT = Bounds(minimum=1, maximum=80, fallback=24)
    MIN_GAP = Bounds(minimum=10, maximum=360, fallback=30)
    GAP_LIMIT = Bounds(minimum=1, maximum=50, fallback=10)


def _leading_int(text: str) -> int | None:
    """Integer prefix of ``text`` the way a lenient parseInt reads it: "60min" -> 60."""
    match = LEADING_INT_RE.match(text)
    if not match:
        return None

    sign, digits = match.groups()
    # Anything this long is far outside every bound; skip building a huge int.
    number = int(digits) if len(digits) <= MAX_DIGITS else 10 ** MAX_DIGITS
    return -number if sign == "-" else number


def clamp_or_default(value: Any, minimum: int, maximum: int, fallback: int) -> int:
    """
    Coerce ``value`` to an int within [minimum, maximum].

    Floats are floored, integers of any size are clamped as they are, and
    strings contribute their leading integer ("45", " 12.9 ", "60min").
    ``None``, booleans, NaN, infinities and other junk return ``fallback``.
    """
    if value is None or isinstance(value, bool):
        return fallback

    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return fallback
        number = math.floor(value)
    elif isinstance(value, str):
        number = _leading_int(value)
        if number is None:
            return fallback
    else:
        return fallback

    return max(minimum, min(maximum, number))


def clamp_to(value: Any, bounds: Bounds, fallback: int | None = None) -> int:
    """``clamp_or_default`` driven by a ``Bounds`` record."""
    default = bounds.fallback if fallback is None else fallback
    return clamp_or_default(value, bounds.minimum, bounds.maximum, default)


def parse_date_arg(value: Any, today: date) -> date:
    """Parse a YYYY-MM-DD argument; anything malformed means ``today``."""
    if not isinstance(value, str) or not DATE_ARG_RE.match(value.strip()):
        return today

    try:
        return pendulum.from_format(value.strip(), "YYYY-MM-DD").date()
    except (TypeError, ValueError):
        return today
