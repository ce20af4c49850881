"""Reading list pipeline components (classify/next/occurs/calendar/agenda)."""
from __future__ import annotations

import datetime as _dt
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from core.cli_output import OutputFormat, OutputWriter
from core.constants import FMT_MONTH_TITLE
from core.pipeline import BaseProducer, RequestConsumer, SafeProcessor

from .buckets import Bucket, Classification, classify
from .calendar_grid import DayAgenda, MonthGrid, day_agenda, month_grid
from .config import Settings
from .model import ReadingStatus, load_entries
from .recurrence import next_occurrence_on_or_after, occurrences_between, occurs_in_window, occurs_on

LOG = logging.getLogger(__name__)

EntryLoader = Callable[[str], List[Any]]

BUCKET_TITLES = {
    Bucket.TODAY: "Today",
    Bucket.THIS_WEEK: "This week",
    Bucket.UPCOMING: "Upcoming",
}

ROW_HEADERS = ["id", "date", "title", "recurrence", "minutes", "status"]


def entry_row(entry: Any, day: Optional[_dt.date]) -> Dict[str, Any]:
    """Flat, output-friendly view of an entry and one of its dates."""
    recurrence = getattr(entry, "recurrence", None)
    status = getattr(entry, "status", None)
    return {
        "id": getattr(entry, "id", None),
        "date": day.isoformat() if day else None,
        "title": getattr(entry, "title", None),
        "recurrence": getattr(recurrence, "value", recurrence),
        "minutes": getattr(entry, "duration_minutes", None),
        "status": getattr(status, "value", status),
    }


def _format_line(row: Dict[str, Any]) -> str:
    parts = [f"  - {row['date'] or '-':<10}", str(row["id"])]
    if row.get("title"):
        parts.append(str(row["title"]))
    if row.get("recurrence") and row["recurrence"] != "none":
        parts.append(f"[{row['recurrence']}]")
    if row.get("minutes"):
        parts.append(f"{row['minutes']}m")
    return "  ".join(parts)


def _load(loader: EntryLoader, path: str, skip_completed: bool = False) -> List[Any]:
    entries = loader(path)
    if skip_completed:
        before = len(entries)
        entries = [e for e in entries if getattr(e, "status", None) != ReadingStatus.COMPLETED]
        LOG.debug("Skipped %d completed entries", before - len(entries))
    return entries


# -----------------------------------------------------------------------------
# classify
# -----------------------------------------------------------------------------


@dataclass
class ClassifyRequest:
    entries_path: str
    today: _dt.date
    settings: Settings
    skip_completed: bool = False


ClassifyRequestConsumer = RequestConsumer[ClassifyRequest]


class ClassifyProcessor(SafeProcessor[ClassifyRequest, Classification]):
    """Bucket entries into today/this week/upcoming with automatic error handling."""

    def __init__(self, loader: EntryLoader = load_entries) -> None:
        self._loader = loader

    def _process_safe(self, payload: ClassifyRequest) -> Classification:
        entries = _load(self._loader, payload.entries_path, payload.skip_completed)
        return classify(
            entries,
            payload.today,
            payload.settings.week_start,
            tz=payload.settings.tzinfo,
        )


class ClassifyProducer(BaseProducer):
    """Render bucket listings."""

    def __init__(self, writer: OutputWriter) -> None:
        self._writer = writer

    @staticmethod
    def _rows(items: tuple) -> List[Dict[str, Any]]:
        return [entry_row(item.entry, item.occurrence) for item in items]

    def _produce_success(self, payload: Classification, diagnostics: Optional[Dict[str, Any]]) -> None:
        w = self._writer
        if w.format == OutputFormat.TABLE:
            rows = []
            for which in Bucket:
                for item in payload.bucket(which):
                    rows.append({"bucket": which.value, **entry_row(item.entry, item.occurrence)})
            w.print_data(rows, headers=["bucket"] + ROW_HEADERS)
            return
        if w.format != OutputFormat.TEXT:
            w.print_data({
                "reference": payload.reference,
                "week": {"start": payload.week[0], "end": payload.week[1]},
                "summary": payload.summary(),
                **{which.value: self._rows(payload.bucket(which)) for which in Bucket},
            })
            return
        week_first, week_last = payload.week
        for which in Bucket:
            items = payload.bucket(which)
            label = BUCKET_TITLES[which]
            if which is Bucket.TODAY:
                label = f"{label} ({payload.reference.isoformat()})"
            elif which is Bucket.THIS_WEEK:
                label = f"{label} ({week_first.isoformat()}..{week_last.isoformat()})"
            minutes = payload.total_minutes(which)
            suffix = f", {minutes}m" if minutes else ""
            w.print(f"{label}: {len(items)} papers{suffix}")
            for row in self._rows(items):
                w.print(_format_line(row))


# -----------------------------------------------------------------------------
# next
# -----------------------------------------------------------------------------


@dataclass
class NextRequest:
    entries_path: str
    reference: _dt.date
    settings: Settings
    include_past: bool = False


NextRequestConsumer = RequestConsumer[NextRequest]


@dataclass
class NextResult:
    reference: _dt.date
    rows: List[Dict[str, Any]]


class NextProcessor(SafeProcessor[NextRequest, NextResult]):
    """Compute each entry's next occurrence on or after the reference date."""

    def __init__(self, loader: EntryLoader = load_entries) -> None:
        self._loader = loader

    def _process_safe(self, payload: NextRequest) -> NextResult:
        tz = payload.settings.tzinfo
        pending = []
        elapsed = []
        for entry in self._loader(payload.entries_path):
            nxt = next_occurrence_on_or_after(entry, payload.reference, tz=tz)
            if nxt is None:
                elapsed.append(entry_row(entry, None))
            else:
                pending.append((nxt, str(entry.id), entry_row(entry, nxt)))
        rows = [row for _, _, row in sorted(pending, key=lambda t: (t[0], t[1]))]
        if payload.include_past:
            rows.extend(sorted(elapsed, key=lambda r: str(r["id"])))
        return NextResult(reference=payload.reference, rows=rows)


class RowsProducer(BaseProducer):
    """Render a list of entry rows under a heading."""

    def __init__(self, writer: OutputWriter, heading: Callable[[Any], str]) -> None:
        self._writer = writer
        self._heading = heading

    def _produce_success(self, payload: Any, diagnostics: Optional[Dict[str, Any]]) -> None:
        w = self._writer
        if w.format == OutputFormat.TEXT:
            w.print(self._heading(payload))
            for row in payload.rows:
                w.print(_format_line(row))
            return
        if w.format == OutputFormat.TABLE:
            w.print_data(payload.rows, headers=ROW_HEADERS)
            return
        w.print_data(payload.rows)


# -----------------------------------------------------------------------------
# occurs
# -----------------------------------------------------------------------------


@dataclass
class OccursRequest:
    entries_path: str
    start: _dt.date
    end: _dt.date
    settings: Settings
    expand: bool = False


OccursRequestConsumer = RequestConsumer[OccursRequest]


@dataclass
class OccursResult:
    start: _dt.date
    end: _dt.date
    rows: List[Dict[str, Any]]


class OccursProcessor(SafeProcessor[OccursRequest, OccursResult]):
    """List entries occurring on a date or within an inclusive window."""

    def __init__(self, loader: EntryLoader = load_entries) -> None:
        self._loader = loader

    def _process_safe(self, payload: OccursRequest) -> OccursResult:
        tz = payload.settings.tzinfo
        found = []
        for entry in self._loader(payload.entries_path):
            if payload.start == payload.end:
                if occurs_on(entry, payload.start, tz=tz):
                    found.append((payload.start, str(entry.id), entry_row(entry, payload.start)))
                continue
            if payload.expand:
                for day in occurrences_between(entry, payload.start, payload.end, tz=tz):
                    found.append((day, str(entry.id), entry_row(entry, day)))
            elif occurs_in_window(entry, payload.start, payload.end, tz=tz):
                first = next_occurrence_on_or_after(entry, payload.start, tz=tz)
                found.append((first, str(entry.id), entry_row(entry, first)))
        rows = [row for _, _, row in sorted(found, key=lambda t: (t[0], t[1]))]
        return OccursResult(start=payload.start, end=payload.end, rows=rows)


# -----------------------------------------------------------------------------
# calendar / agenda
# -----------------------------------------------------------------------------


@dataclass
class CalendarRequest:
    entries_path: str
    year: int
    month: int
    today: Optional[_dt.date]
    settings: Settings


CalendarRequestConsumer = RequestConsumer[CalendarRequest]


class CalendarProcessor(SafeProcessor[CalendarRequest, MonthGrid]):
    """Build a month grid with automatic error handling."""

    def __init__(self, loader: EntryLoader = load_entries) -> None:
        self._loader = loader

    def _process_safe(self, payload: CalendarRequest) -> MonthGrid:
        return month_grid(
            self._loader(payload.entries_path),
            payload.year,
            payload.month,
            today=payload.today,
            week_start=payload.settings.week_start,
            tz=payload.settings.tzinfo,
        )


class CalendarProducer(BaseProducer):
    """Render a month grid: one line per week, busy days listed below."""

    def __init__(self, writer: OutputWriter) -> None:
        self._writer = writer

    @staticmethod
    def _cell_dict(cell: Any) -> Dict[str, Any]:
        return {
            "date": cell.day.isoformat(),
            "in_month": cell.in_month,
            "today": cell.is_today,
            "minutes": cell.minutes,
            "entries": [getattr(e, "id", None) for e in cell.entries],
        }

    def _produce_success(self, payload: MonthGrid, diagnostics: Optional[Dict[str, Any]]) -> None:
        w = self._writer
        if w.format == OutputFormat.TABLE:
            rows = [self._cell_dict(c) for c in payload.cells if c.entries]
            w.print_data(rows, headers=["date", "in_month", "today", "minutes", "entries"])
            return
        if w.format != OutputFormat.TEXT:
            w.print_data({
                "month": f"{payload.year:04d}-{payload.month:02d}",
                "weeks": [[self._cell_dict(c) for c in week] for week in payload.weeks()],
            })
            return

        title = _dt.date(payload.year, payload.month, 1).strftime(FMT_MONTH_TITLE)
        w.print(title)
        w.print(" ".join(f"{c.day.strftime('%a')[:2]:>4}" for c in payload.weeks()[0]))
        for week in payload.weeks():
            cells = []
            for c in week:
                mark = "*" if c.is_today else " "
                count = f"+{len(c.entries)}" if c.entries else ""
                text = f"{c.day.day:>2}{mark}{count}" if c.in_month else f"({c.day.day:>2})"
                cells.append(f"{text:>4}")
            w.print(" ".join(cells))
        for c in payload.cells:
            if c.in_month and c.entries:
                w.print(f"{c.day.isoformat()}: {', '.join(str(getattr(e, 'id', '')) for e in c.entries)}")


@dataclass
class AgendaRequest:
    entries_path: str
    day: _dt.date
    settings: Settings


AgendaRequestConsumer = RequestConsumer[AgendaRequest]


class AgendaProcessor(SafeProcessor[AgendaRequest, DayAgenda]):
    """Collect the entries due on one day."""

    def __init__(self, loader: EntryLoader = load_entries) -> None:
        self._loader = loader

    def _process_safe(self, payload: AgendaRequest) -> DayAgenda:
        return day_agenda(self._loader(payload.entries_path), payload.day, tz=payload.settings.tzinfo)


class AgendaProducer(BaseProducer):
    def __init__(self, writer: OutputWriter) -> None:
        self._writer = writer

    def _produce_success(self, payload: DayAgenda, diagnostics: Optional[Dict[str, Any]]) -> None:
        w = self._writer
        rows = [entry_row(e, payload.day) for e in payload.entries]
        if w.format == OutputFormat.TEXT:
            suffix = f", {payload.minutes}m" if payload.minutes else ""
            w.print(f"{payload.day.isoformat()}: {len(rows)} papers{suffix}")
            for row in rows:
                w.print(_format_line(row))
            return
        if w.format == OutputFormat.TABLE:
            w.print_data(rows, headers=ROW_HEADERS)
            return
        w.print_data({"date": payload.day, "minutes": payload.minutes, "entries": rows})


__all__ = [
    "AgendaProcessor",
    "AgendaProducer",
    "AgendaRequest",
    "AgendaRequestConsumer",
    "CalendarProcessor",
    "CalendarProducer",
    "CalendarRequest",
    "CalendarRequestConsumer",
    "ClassifyProcessor",
    "ClassifyProducer",
    "ClassifyRequest",
    "ClassifyRequestConsumer",
    "NextProcessor",
    "NextRequest",
    "NextRequestConsumer",
    "NextResult",
    "OccursProcessor",
    "OccursRequest",
    "OccursRequestConsumer",
    "OccursResult",
    "RowsProducer",
    "entry_row",
]
