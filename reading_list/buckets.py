"""Today / this-week / upcoming bucketing of scheduled entries.

Membership is non-exclusive: a daily entry is usually in all three
buckets at once. Each bucket is ordered by the occurrence that put the
entry there, ties broken by id, so repeated calls with the same inputs
produce identical results.
"""
from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from .constants import DEFAULT_WEEK_START
from .recurrence import next_occurrence_on_or_after, occurs_on, to_calendar_date, week_bounds


class Bucket(str, Enum):
    TODAY = "today"
    THIS_WEEK = "this_week"
    UPCOMING = "upcoming"


@dataclass(frozen=True)
class BucketItem:
    entry: Any
    occurrence: _dt.date

    @property
    def id(self) -> Any:
        return getattr(self.entry, "id", None)


@dataclass(frozen=True)
class Classification:
    today: Tuple[BucketItem, ...]
    this_week: Tuple[BucketItem, ...]
    upcoming: Tuple[BucketItem, ...]
    reference: _dt.date
    week: Tuple[_dt.date, _dt.date]

    def bucket(self, which: Bucket) -> Tuple[BucketItem, ...]:
        return getattr(self, Bucket(which).value)

    def ids(self, which: Bucket) -> List[Any]:
        return [item.id for item in self.bucket(which)]

    def memberships(self) -> Dict[Any, FrozenSet[Bucket]]:
        """Map each classified entry id to the set of buckets it is in."""
        tags: Dict[Any, Set[Bucket]] = {}
        for which in Bucket:
            for item in self.bucket(which):
                tags.setdefault(item.id, set()).add(which)
        return {k: frozenset(v) for k, v in tags.items()}

    def total_minutes(self, which: Bucket) -> int:
        return sum(getattr(item.entry, "duration_minutes", None) or 0 for item in self.bucket(which))

    def summary(self) -> Dict[str, Dict[str, int]]:
        return {
            which.value: {"count": len(self.bucket(which)), "minutes": self.total_minutes(which)}
            for which in Bucket
        }


def _sort_key(item: BucketItem) -> Tuple[_dt.date, str]:
    return item.occurrence, str(item.id)


def classify(
    entries: Iterable[Any],
    today: Any,
    week_start: int = DEFAULT_WEEK_START,
    *,
    tz: Optional[_dt.tzinfo] = None,
) -> Classification:
    """Partition entries into today, this-week and upcoming buckets.

    - today: an occurrence on ``today``
    - this_week: an occurrence inside the week containing ``today``
    - upcoming: any occurrence on or after ``today``
    """
    day = to_calendar_date(today, "today")
    week_first, week_last = week_bounds(day, week_start)

    todays: List[BucketItem] = []
    weeks: List[BucketItem] = []
    upcoming: List[BucketItem] = []
    for entry in entries:
        if occurs_on(entry, day, tz=tz):
            todays.append(BucketItem(entry, day))
        first_in_week = next_occurrence_on_or_after(entry, week_first, tz=tz)
        if first_in_week is not None and first_in_week <= week_last:
            weeks.append(BucketItem(entry, first_in_week))
        nxt = next_occurrence_on_or_after(entry, day, tz=tz)
        if nxt is not None:
            upcoming.append(BucketItem(entry, nxt))

    return Classification(
        today=tuple(sorted(todays, key=_sort_key)),
        this_week=tuple(sorted(weeks, key=_sort_key)),
        upcoming=tuple(sorted(upcoming, key=_sort_key)),
        reference=day,
        week=(week_first, week_last),
    )
