"""Shared date and time utilities.

Provides day-of-week parsing, ISO date/datetime parsing and month key
parsing used by the config layer, the record normalizer and the CLI.
All parsers raise ValueError on malformed input; callers translate that
into their own error types.
"""
from __future__ import annotations

import datetime as _dt
import re
from typing import Any, Optional, Tuple, Union

from .constants import FMT_DATETIME_SEC, FMT_DAY

__all__ = [
    "DAY_MAP",
    "WEEKDAY_INDEX",
    "parse_weekday",
    "parse_iso_date",
    "parse_iso_datetime",
    "parse_month_key",
    "to_iso_str",
]

# Day-of-week name/abbreviation to RRULE code mapping
DAY_MAP = {
    "monday": "MO",
    "mon": "MO",
    "tuesday": "TU",
    "tue": "TU",
    "tues": "TU",
    "wednesday": "WE",
    "wed": "WE",
    "thursday": "TH",
    "thu": "TH",
    "thur": "TH",
    "thurs": "TH",
    "friday": "FR",
    "fri": "FR",
    "saturday": "SA",
    "sat": "SA",
    "sunday": "SU",
    "sun": "SU",
}

# RRULE code to Python weekday() index (Monday == 0)
WEEKDAY_INDEX = {"MO": 0, "TU": 1, "WE": 2, "TH": 3, "FR": 4, "SA": 5, "SU": 6}

_MONTH_KEY_RE = re.compile(r"^\s*(\d{4})-(\d{1,2})\s*$")


def parse_weekday(value: Any) -> int:
    """Parse a weekday name, abbreviation, RRULE code or index to 0-6.

    Examples:
        'Sunday' -> 6
        'mon' -> 0
        'SU' -> 6
        3 -> 3
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid weekday: {value!r}")
    if isinstance(value, int):
        if 0 <= value <= 6:
            return value
        raise ValueError(f"Weekday index out of range: {value}")
    s = str(value or "").strip()
    if not s:
        raise ValueError("Empty weekday")
    code = s.upper() if len(s) == 2 else DAY_MAP.get(s.lower(), "")
    if code not in WEEKDAY_INDEX:
        raise ValueError(f"Unknown weekday: {value!r}")
    return WEEKDAY_INDEX[code]


def parse_iso_date(value: Any) -> _dt.date:
    """Parse a calendar date; a datetime or date-time string yields its date."""
    if isinstance(value, _dt.datetime):
        return value.date()
    if isinstance(value, _dt.date):
        return value
    s = str(value or "").strip()
    if not s:
        raise ValueError("Empty date")
    parsed = parse_iso_datetime(s)
    if isinstance(parsed, _dt.datetime):
        return parsed.date()
    return parsed


def parse_iso_datetime(value: Any) -> Union[_dt.date, _dt.datetime]:
    """Parse an ISO date or date-time, keeping timezone offsets.

    A trailing 'Z' is read as UTC. Bare dates stay dates.

    Examples:
        '2024-03-04' -> date(2024, 3, 4)
        '2024-03-04T09:30:00Z' -> datetime(2024, 3, 4, 9, 30, tzinfo=UTC)
    """
    if isinstance(value, (_dt.datetime, _dt.date)):
        return value
    s = str(value or "").strip()
    if not s:
        raise ValueError("Empty date-time")
    if s[-1] in "Zz":
        s = s[:-1] + "+00:00"
    if "T" not in s and " " not in s:
        return _dt.date.fromisoformat(s)
    return _dt.datetime.fromisoformat(s.replace(" ", "T", 1))


def parse_month_key(value: str) -> Tuple[int, int]:
    """Parse 'YYYY-MM' to (year, month)."""
    m = _MONTH_KEY_RE.match(value or "")
    if not m:
        raise ValueError(f"Expected YYYY-MM, got {value!r}")
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Month out of range: {value!r}")
    return year, month


def to_iso_str(v: Any) -> Optional[str]:
    """Convert a value to an ISO string.

    Args:
        v: A datetime, date, string, or other value.

    Returns:
        ISO-formatted string, or None if input is None.
    """
    if v is None:
        return None
    if isinstance(v, str):
        return v
    if isinstance(v, _dt.datetime):
        if v.tzinfo is not None:
            return v.isoformat()
        return v.strftime(FMT_DATETIME_SEC)
    if isinstance(v, _dt.date):
        return v.strftime(FMT_DAY)
    return str(v)
