"""Occurrence queries for scheduled entries.

Pure functions over an entry's anchor and cadence. Nothing here reads the
clock or keeps state: every reference date is passed in by the caller, and
all arithmetic is on calendar dates, never instants, so daylight-saving
shifts cannot move an occurrence.

An entry is anything with ``id``, ``anchor`` and ``recurrence``
attributes; ScheduleEntry is the canonical one.
"""
from __future__ import annotations

import calendar
import datetime as _dt
from typing import Any, Iterator, Optional, Tuple

from .constants import DAYS_PER_WEEK, DEFAULT_WEEK_START
from .errors import InvalidDate, InvalidEntry
from .model import Recurrence

__all__ = [
    "anchor_date",
    "days_in_month",
    "monthly_day",
    "next_occurrence_on_or_after",
    "occurrences_between",
    "occurs_in_window",
    "occurs_on",
    "to_calendar_date",
    "week_bounds",
]

_ONE_DAY = _dt.timedelta(days=1)
_ONE_WEEK = _dt.timedelta(days=DAYS_PER_WEEK)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def monthly_day(anchor_day: int, year: int, month: int) -> int:
    """Day of a monthly occurrence in (year, month): the anchor day, clamped."""
    return min(anchor_day, days_in_month(year, month))


def _add_months(year: int, month: int, n: int) -> Tuple[int, int]:
    idx = year * 12 + (month - 1) + n
    return idx // 12, idx % 12 + 1


def to_calendar_date(value: Any, name: str = "date") -> _dt.date:
    """Reduce a date/datetime argument to its calendar date."""
    if isinstance(value, _dt.datetime):
        return value.date()
    if isinstance(value, _dt.date):
        return value
    raise InvalidDate(f"{name} must be a date, got {value!r}")


def _cadence(entry: Any) -> Recurrence:
    # Recurrence.parse raises InvalidEntry for unknown tags
    return Recurrence.parse(getattr(entry, "recurrence", None))


def anchor_date(entry: Any, tz: Optional[_dt.tzinfo] = None) -> _dt.date:
    """Calendar date of the entry's anchor.

    Aware anchors are converted to ``tz`` first when one is given; naive
    anchors and plain dates are taken as written.
    """
    anchor = getattr(entry, "anchor", None)
    if isinstance(anchor, _dt.datetime):
        if tz is not None and anchor.tzinfo is not None:
            anchor = anchor.astimezone(tz)
        return anchor.date()
    if isinstance(anchor, _dt.date):
        return anchor
    raise InvalidEntry(f"Entry {getattr(entry, 'id', None)!r} has no valid anchor: {anchor!r}")


def occurs_on(entry: Any, target_date: Any, *, tz: Optional[_dt.tzinfo] = None) -> bool:
    """Whether the entry has an occurrence on ``target_date``."""
    cadence = _cadence(entry)
    start = anchor_date(entry, tz)
    day = to_calendar_date(target_date, "target_date")

    if cadence is Recurrence.NONE:
        return day == start
    if day < start:
        return False
    if cadence is Recurrence.DAILY:
        return True
    if cadence is Recurrence.WEEKLY:
        return (day - start).days % DAYS_PER_WEEK == 0
    if cadence is Recurrence.MONTHLY:
        return day.day == monthly_day(start.day, day.year, day.month)
    raise InvalidEntry(f"Unsupported recurrence: {cadence!r}")


def next_occurrence_on_or_after(
    entry: Any,
    reference_date: Any,
    *,
    tz: Optional[_dt.tzinfo] = None,
) -> Optional[_dt.date]:
    """Earliest occurrence on or after ``reference_date``.

    None for a one-time entry whose date has already passed, or when the
    next occurrence would fall after ``date.max``.
    """
    cadence = _cadence(entry)
    start = anchor_date(entry, tz)
    ref = to_calendar_date(reference_date, "reference_date")

    if cadence is Recurrence.NONE:
        return start if start >= ref else None

    begin = max(start, ref)
    if cadence is Recurrence.DAILY:
        return begin
    if cadence is Recurrence.WEEKLY:
        offset = -(begin - start).days % DAYS_PER_WEEK
        if (_dt.date.max - begin).days < offset:
            return None
        return begin + _dt.timedelta(days=offset)
    if cadence is Recurrence.MONTHLY:
        candidate = begin.replace(day=monthly_day(start.day, begin.year, begin.month))
        if candidate >= begin:
            return candidate
        year, month = _add_months(begin.year, begin.month, 1)
        if year > _dt.MAXYEAR:
            return None
        return _dt.date(year, month, monthly_day(start.day, year, month))
    raise InvalidEntry(f"Unsupported recurrence: {cadence!r}")


def _window(window_start: Any, window_end: Any) -> Tuple[_dt.date, _dt.date]:
    lo = to_calendar_date(window_start, "window_start")
    hi = to_calendar_date(window_end, "window_end")
    if lo > hi:
        raise InvalidDate(f"Window start {lo} is after window end {hi}")
    return lo, hi


def occurs_in_window(
    entry: Any,
    window_start: Any,
    window_end_inclusive: Any,
    *,
    tz: Optional[_dt.tzinfo] = None,
) -> bool:
    """Whether any occurrence falls in the inclusive window."""
    lo, hi = _window(window_start, window_end_inclusive)
    first = next_occurrence_on_or_after(entry, lo, tz=tz)
    return first is not None and first <= hi


def occurrences_between(
    entry: Any,
    window_start: Any,
    window_end_inclusive: Any,
    *,
    tz: Optional[_dt.tzinfo] = None,
) -> Iterator[_dt.date]:
    """Lazily yield the entry's occurrence dates inside the inclusive window.

    Arguments are validated eagerly; dates are produced on iteration.
    """
    lo, hi = _window(window_start, window_end_inclusive)
    cadence = _cadence(entry)
    start = anchor_date(entry, tz)
    first = next_occurrence_on_or_after(entry, lo, tz=tz)
    return _iter_occurrences(cadence, start, first, hi)


def _iter_occurrences(
    cadence: Recurrence,
    start: _dt.date,
    first: Optional[_dt.date],
    hi: _dt.date,
) -> Iterator[_dt.date]:
    if first is None or first > hi:
        return
    if cadence is Recurrence.NONE:
        yield first
        return
    if cadence is Recurrence.MONTHLY:
        year, month = first.year, first.month
        while True:
            day = _dt.date(year, month, monthly_day(start.day, year, month))
            if day > hi:
                return
            yield day
            if (year, month) >= (hi.year, hi.month):
                return
            year, month = _add_months(year, month, 1)
    step = _ONE_DAY if cadence is Recurrence.DAILY else _ONE_WEEK
    day = first
    while True:
        yield day
        # stop before stepping past hi; hi may be date.max
        if hi - day < step:
            return
        day += step


def week_bounds(day: Any, week_start: int = DEFAULT_WEEK_START) -> Tuple[_dt.date, _dt.date]:
    """Inclusive (first, last) dates of the week containing ``day``.

    ``week_start`` is a Python weekday index (Monday == 0, Sunday == 6).
    A week running past ``date.min`` or ``date.max`` is cut at that limit.
    """
    if isinstance(week_start, bool) or not isinstance(week_start, int) or not 0 <= week_start <= 6:
        raise InvalidDate(f"week_start must be a weekday index 0-6, got {week_start!r}")
    d = to_calendar_date(day, "day")
    back = (d.weekday() - week_start) % DAYS_PER_WEEK
    ahead = DAYS_PER_WEEK - 1 - back
    first = d - _dt.timedelta(days=min(back, (d - _dt.date.min).days))
    last = d + _dt.timedelta(days=min(ahead, (_dt.date.max - d).days))
    return first, last
