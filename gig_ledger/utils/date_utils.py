"""Calendar date helpers

All values are calendar-local ``date`` objects. Nothing here touches
timezones or epoch conversions, so a date parsed from ``YYYY-MM-DD`` always
serializes back to the same string.
"""

import re
from calendar import monthrange
from datetime import date, timedelta
from typing import List, Optional

from gig_ledger.domain.exceptions import InvalidDateError

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?:T.*)?$")


def days_in_month(year: int, month: int) -> int:
    """Number of days in ``month`` (1-12) of ``year``, leap years included"""
    return monthrange(year, month)[1]


def parse_local_date(value: str) -> date:
    """
    Parse a canonical ``YYYY-MM-DD`` string into a local date.

    A trailing time component (``2024-03-10T14:00:00Z``) is dropped before
    parsing; the calendar fields are used as-is, never shifted by an offset.

    Raises:
        InvalidDateError: If the string is not a valid calendar date
    """
    match = _ISO_DATE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidDateError(f"Expected YYYY-MM-DD date, got {value!r}")

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as e:
        raise InvalidDateError(f"Invalid calendar date {value!r}: {e}") from e


def to_iso_date(value: date) -> str:
    """Canonical ``YYYY-MM-DD`` form of a date"""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def is_same_day(d1: date, d2: date) -> bool:
    return (d1.year, d1.month, d1.day) == (d2.year, d2.month, d2.day)


def start_of_week(value: date) -> date:
    """Monday of the week containing ``value`` (Sunday belongs to the previous Monday)"""
    return value - timedelta(days=value.weekday())


def is_same_week(d1: date, d2: date) -> bool:
    return start_of_week(d1) == start_of_week(d2)


def is_same_month(d1: date, d2: date) -> bool:
    return d1.year == d2.year and d1.month == d2.month


def iso_week_number(value: date) -> int:
    return value.isocalendar()[1]


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, pulling ``day`` back to the month's last day when it overflows"""
    return date(year, month, min(day, days_in_month(year, month)))


def add_months(value: date, months: int, anchor_day: Optional[int] = None) -> date:
    """Shift ``value`` by whole months, clamping ``anchor_day`` (default: its own day)"""
    total_month = value.month - 1 + months
    year = value.year + total_month // 12
    month = total_month % 12 + 1
    return clamp_day(year, month, anchor_day if anchor_day is not None else value.day)


def month_index(value: date) -> int:
    """Months elapsed since year 0, for month-difference arithmetic"""
    return value.year * 12 + (value.month - 1)


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]
