"""Month calendar grid and per-day agenda."""
from __future__ import annotations

import datetime as _dt
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .constants import DAYS_PER_WEEK, DEFAULT_WEEK_START, GRID_DAYS
from .errors import InvalidDate
from .recurrence import occurrences_between, occurs_on, to_calendar_date, week_bounds


def _by_id(entries: Iterable[Any]) -> Tuple[Any, ...]:
    return tuple(sorted(entries, key=lambda e: str(getattr(e, "id", ""))))


def _minutes(entries: Iterable[Any]) -> int:
    return sum(getattr(e, "duration_minutes", None) or 0 for e in entries)


@dataclass(frozen=True)
class DayCell:
    day: _dt.date
    in_month: bool
    is_today: bool
    entries: Tuple[Any, ...] = ()

    @property
    def minutes(self) -> int:
        return _minutes(self.entries)


@dataclass(frozen=True)
class MonthGrid:
    year: int
    month: int
    cells: Tuple[DayCell, ...]

    @property
    def first_day(self) -> _dt.date:
        return self.cells[0].day

    @property
    def last_day(self) -> _dt.date:
        return self.cells[-1].day

    def weeks(self) -> List[Tuple[DayCell, ...]]:
        return [self.cells[i:i + DAYS_PER_WEEK] for i in range(0, len(self.cells), DAYS_PER_WEEK)]

    def cell(self, day: _dt.date) -> Optional[DayCell]:
        for c in self.cells:
            if c.day == day:
                return c
        return None


@dataclass(frozen=True)
class DayAgenda:
    day: _dt.date
    entries: Tuple[Any, ...]

    @property
    def minutes(self) -> int:
        return _minutes(self.entries)


def month_grid(
    entries: Iterable[Any],
    year: int,
    month: int,
    *,
    today: Any = None,
    week_start: int = DEFAULT_WEEK_START,
    tz: Optional[_dt.tzinfo] = None,
) -> MonthGrid:
    """Six-week grid covering ``year``-``month``, starting on ``week_start``.

    Each cell lists the entries with an occurrence that day.
    """
    try:
        first_of_month = _dt.date(int(year), int(month), 1)
    except (TypeError, ValueError) as exc:
        raise InvalidDate(f"Invalid month {year!r}-{month!r}: {exc}") from None
    today_date = to_calendar_date(today, "today") if today is not None else None

    grid_first, _ = week_bounds(first_of_month, week_start)
    if grid_first.weekday() != week_start or (_dt.date.max - grid_first).days < GRID_DAYS - 1:
        raise InvalidDate(f"Month grid for {first_of_month:%Y-%m} runs outside the supported date range")
    grid_last = grid_first + _dt.timedelta(days=GRID_DAYS - 1)

    by_day: Dict[_dt.date, List[Any]] = defaultdict(list)
    for entry in entries:
        for day in occurrences_between(entry, grid_first, grid_last, tz=tz):
            by_day[day].append(entry)

    cells = []
    for offset in range(GRID_DAYS):
        day = grid_first + _dt.timedelta(days=offset)
        cells.append(DayCell(
            day=day,
            in_month=day.month == first_of_month.month,
            is_today=day == today_date,
            entries=_by_id(by_day.get(day, ())),
        ))
    return MonthGrid(year=first_of_month.year, month=first_of_month.month, cells=tuple(cells))


def day_agenda(entries: Iterable[Any], day: Any, *, tz: Optional[_dt.tzinfo] = None) -> DayAgenda:
    """Entries occurring on ``day``, ordered by id."""
    target = to_calendar_date(day, "day")
    return DayAgenda(day=target, entries=_by_id(e for e in entries if occurs_on(e, target, tz=tz)))
