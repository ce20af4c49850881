"""Schedule entry model and record normalization.

Helpers to coerce loose, exported reading-list rows (YAML/JSON) into the
canonical ScheduleEntry shape consumed by the recurrence engine. Keep
dependency-light and focused.
"""
from __future__ import annotations

import datetime as _dt
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from core.date_utils import parse_iso_datetime, to_iso_str
from core.yamlio import load_document

from .constants import ANCHOR_KEYS, DURATION_KEYS, ENTRY_LIST_KEYS, ID_KEYS, RECURRENCE_KEYS
from .errors import InvalidDate, InvalidEntry

LOG = logging.getLogger(__name__)

Anchor = Union[_dt.date, _dt.datetime]


class Recurrence(str, Enum):
    """Repeat cadence of a scheduled paper."""
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: Any) -> "Recurrence":
        """Parse a cadence tag; None, '' and 'none' mean one-time."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.NONE
        s = str(value).strip().lower()
        if not s:
            return cls.NONE
        try:
            return cls(s)
        except ValueError:
            raise InvalidEntry(f"Unknown recurrence: {value!r}") from None


class ReadingStatus(str, Enum):
    UNREAD = "unread"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value: Any) -> "ReadingStatus":
        if isinstance(value, cls):
            return value
        s = str(value or "").strip().lower().replace("-", "_").replace(" ", "_")
        if not s:
            return cls.UNREAD
        try:
            return cls(s)
        except ValueError:
            raise InvalidEntry(f"Unknown reading status: {value!r}") from None


@dataclass(frozen=True)
class ScheduleEntry:
    """A paper scheduled for reading.

    ``anchor`` is the first occurrence; ``recurrence`` repeats it from
    there. ``duration_minutes``, ``title`` and ``status`` are carried for
    display and never affect occurrence computation.
    """

    id: str
    anchor: Anchor
    recurrence: Recurrence = Recurrence.NONE
    duration_minutes: Optional[int] = None
    title: Optional[str] = None
    status: ReadingStatus = ReadingStatus.UNREAD

    def __post_init__(self) -> None:
        if not isinstance(self.anchor, _dt.date):
            raise InvalidEntry(f"Entry {self.id!r}: anchor must be a date or datetime, got {self.anchor!r}")
        object.__setattr__(self, "recurrence", Recurrence.parse(self.recurrence))
        object.__setattr__(self, "status", ReadingStatus.parse(self.status))
        object.__setattr__(self, "duration_minutes", _coerce_duration(self.duration_minutes, self.id))

    @property
    def repeats(self) -> bool:
        return self.recurrence is not Recurrence.NONE

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "anchor": to_iso_str(self.anchor),
            "recurrence": self.recurrence.value,
        }
        if self.duration_minutes is not None:
            out["duration_minutes"] = self.duration_minutes
        if self.title:
            out["title"] = self.title
        out["status"] = self.status.value
        return out


def _coerce_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s if s else None


def _coerce_duration(v: Any, entry_id: Any) -> Optional[int]:
    if v is None or (isinstance(v, str) and not v.strip()):
        return None
    if isinstance(v, bool):
        raise InvalidEntry(f"Entry {entry_id!r}: duration must be an integer number of minutes")
    if isinstance(v, float):
        if not v.is_integer():
            raise InvalidEntry(f"Entry {entry_id!r}: duration must be whole minutes, got {v!r}")
        v = int(v)
    try:
        minutes = int(v)
    except (TypeError, ValueError):
        raise InvalidEntry(f"Entry {entry_id!r}: duration must be an integer, got {v!r}") from None
    if minutes < 0:
        raise InvalidEntry(f"Entry {entry_id!r}: duration must be non-negative, got {minutes}")
    return minutes


def _first(record: Dict[str, Any], keys: Iterable[str]) -> Any:
    for k in keys:
        v = record.get(k)
        if v is not None and not (isinstance(v, str) and not v.strip()):
            return v
    return None


def parse_anchor(value: Any) -> Anchor:
    """Parse an anchor date or date-time; raises InvalidDate when malformed."""
    try:
        return parse_iso_datetime(value)
    except (TypeError, ValueError) as exc:
        raise InvalidDate(f"Malformed anchor date {value!r}: {exc}") from None


def normalize_entry(record: Dict[str, Any]) -> ScheduleEntry:
    """Return a ScheduleEntry for a loose reading-list row.

    Accepted keys (first present wins):
      - id | paper_id: identifier (required)
      - anchor | scheduled_date | scheduled_at: ISO date or date-time (required)
      - recurrence | repeat: none/daily/weekly/monthly (default none)
      - duration_minutes | estimated_time: non-negative minutes
      - title, status (unread/in_progress/completed)
    """
    if not isinstance(record, dict):
        raise InvalidEntry(f"Entry must be a mapping, got {type(record).__name__}")
    entry_id = _coerce_str(_first(record, ID_KEYS))
    if not entry_id:
        raise InvalidEntry("Entry is missing an id")
    raw_anchor = _first(record, ANCHOR_KEYS)
    if raw_anchor is None:
        raise InvalidEntry(f"Entry {entry_id!r} has no scheduled date")
    return ScheduleEntry(
        id=entry_id,
        anchor=parse_anchor(raw_anchor),
        recurrence=Recurrence.parse(_first(record, RECURRENCE_KEYS)),
        duration_minutes=_coerce_duration(_first(record, DURATION_KEYS), entry_id),
        title=_coerce_str(record.get("title")),
        status=ReadingStatus.parse(record.get("status")),
    )


def _is_scheduled(record: Any) -> bool:
    return isinstance(record, dict) and _first(record, ANCHOR_KEYS) is not None


def entries_from_document(data: Any) -> List[ScheduleEntry]:
    """Build entries from a loaded document (list, or mapping with a list)."""
    if data is None:
        return []
    rows: Any = data
    if isinstance(data, dict):
        rows = None
        for key in ENTRY_LIST_KEYS:
            if key in data:
                rows = data.get(key) or []
                break
        if rows is None:
            raise InvalidEntry(f"Expected one of {', '.join(ENTRY_LIST_KEYS)} in entries document")
    if not isinstance(rows, list):
        raise InvalidEntry("Entries must be a list")

    entries: List[ScheduleEntry] = []
    for idx, row in enumerate(rows):
        if isinstance(row, dict) and not _is_scheduled(row):
            LOG.debug("Skipping unscheduled row %d (%s)", idx, _first(row, ID_KEYS))
            continue
        entries.append(normalize_entry(row))
    LOG.debug("Loaded %d scheduled entries from %d rows", len(entries), len(rows))
    return entries


def load_entries(path: str) -> List[ScheduleEntry]:
    """Load schedule entries from a YAML or JSON file."""
    return entries_from_document(load_document(path))
