"""Reading List CLI

Answers schedule questions about a reading-list export (YAML or JSON):
which papers are due today, this week and later, when each one comes up
next, and what a month of reading looks like.

"Today" is read from the clock once per invocation (in the configured
timezone) unless --today/--on/--from pins it, and is then passed
explicitly to every query.
"""
from __future__ import annotations

import argparse
import datetime as _dt
from typing import List, Optional

from core.cli_errors import UsageError
from core.cli_framework import CLIApp
from core.date_utils import parse_iso_date, parse_month_key
from core.pipeline import run_pipeline

from . import __version__
from .config import Settings, load_settings
from .pipeline import (
    AgendaProcessor,
    AgendaProducer,
    AgendaRequest,
    CalendarProcessor,
    CalendarProducer,
    CalendarRequest,
    ClassifyProcessor,
    ClassifyProducer,
    ClassifyRequest,
    NextProcessor,
    NextRequest,
    OccursProcessor,
    OccursRequest,
    RowsProducer,
)

app = CLIApp(
    "reading-list",
    "Reading List CLI for scheduled paper occurrences and buckets.",
    version=__version__,
)


def _settings(args: argparse.Namespace) -> Settings:
    settings = load_settings(getattr(args, "config", None))
    return settings.with_overrides(
        week_start=getattr(args, "week_start", None),
        timezone=getattr(args, "timezone", None),
    )


def _date_arg(value: Optional[str], flag: str, settings: Settings) -> _dt.date:
    if not value:
        return settings.today()
    try:
        return parse_iso_date(value)
    except ValueError as exc:
        raise UsageError(f"Invalid {flag} date {value!r}: {exc}", hint="Use YYYY-MM-DD") from exc


def _entries_arg(args: argparse.Namespace) -> str:
    path = getattr(args, "entries", None)
    if not path:
        raise UsageError("Missing --entries PATH")
    return path


def _add_schedule_args(fn):
    fn = app.argument("--entries", required=True, help="Reading list export (YAML/JSON)")(fn)
    fn = app.argument("--week-start", dest="week_start", help="First day of the week (default sunday)")(fn)
    fn = app.argument("--timezone", help="IANA timezone for aware anchors and today")(fn)
    return fn


@app.command("classify", help="Bucket papers into today, this week and upcoming")
@_add_schedule_args
@app.argument("--today", help="Reference date (YYYY-MM-DD, default today)")
@app.argument("--skip-completed", action="store_true", help="Ignore papers marked completed")
def cmd_classify(args: argparse.Namespace) -> int:
    settings = _settings(args)
    request = ClassifyRequest(
        entries_path=_entries_arg(args),
        today=_date_arg(getattr(args, "today", None), "--today", settings),
        settings=settings,
        skip_completed=bool(getattr(args, "skip_completed", False)),
    )
    return run_pipeline(request, ClassifyProcessor(), ClassifyProducer(args._output))


@app.command("next", help="Show each paper's next occurrence on or after a date")
@_add_schedule_args
@app.argument("--from", dest="from_date", help="Reference date (YYYY-MM-DD, default today)")
@app.argument("--include-past", action="store_true", help="Also list one-time papers already passed")
def cmd_next(args: argparse.Namespace) -> int:
    settings = _settings(args)
    request = NextRequest(
        entries_path=_entries_arg(args),
        reference=_date_arg(getattr(args, "from_date", None), "--from", settings),
        settings=settings,
        include_past=bool(getattr(args, "include_past", False)),
    )
    producer = RowsProducer(args._output, lambda r: f"Next occurrences on or after {r.reference.isoformat()}: {len(r.rows)}")
    return run_pipeline(request, NextProcessor(), producer)


@app.command("occurs", help="List papers occurring on a date or within a window")
@_add_schedule_args
@app.argument("--on", dest="on_date", help="Single date (YYYY-MM-DD)")
@app.argument("--from", dest="from_date", help="Window start (YYYY-MM-DD)")
@app.argument("--to", dest="to_date", help="Window end, inclusive (YYYY-MM-DD)")
@app.argument("--expand", action="store_true", help="List every occurrence in the window, not just the first")
def cmd_occurs(args: argparse.Namespace) -> int:
    settings = _settings(args)
    on_date = getattr(args, "on_date", None)
    from_date = getattr(args, "from_date", None)
    to_date = getattr(args, "to_date", None)
    if on_date and (from_date or to_date):
        raise UsageError("Use either --on or --from/--to, not both")
    if on_date or not (from_date or to_date):
        start = end = _date_arg(on_date, "--on", settings)
    else:
        if not (from_date and to_date):
            raise UsageError("--from and --to must be given together")
        start = _date_arg(from_date, "--from", settings)
        end = _date_arg(to_date, "--to", settings)
        if start > end:
            raise UsageError(f"--from {start} is after --to {end}")
    request = OccursRequest(
        entries_path=_entries_arg(args),
        start=start,
        end=end,
        settings=settings,
        expand=bool(getattr(args, "expand", False)),
    )

    def heading(r) -> str:
        if r.start == r.end:
            return f"Occurring on {r.start.isoformat()}: {len(r.rows)}"
        return f"Occurring {r.start.isoformat()}..{r.end.isoformat()}: {len(r.rows)}"

    return run_pipeline(request, OccursProcessor(), RowsProducer(args._output, heading))


@app.command("calendar", help="Show a six-week month grid of scheduled papers")
@_add_schedule_args
@app.argument("--month", help="Month to show (YYYY-MM, default current month)")
@app.argument("--today", help="Date to highlight (YYYY-MM-DD, default today)")
def cmd_calendar(args: argparse.Namespace) -> int:
    settings = _settings(args)
    today = _date_arg(getattr(args, "today", None), "--today", settings)
    month_value = getattr(args, "month", None)
    if month_value:
        try:
            year, month = parse_month_key(month_value)
        except ValueError as exc:
            raise UsageError(str(exc), hint="Use YYYY-MM") from exc
    else:
        year, month = today.year, today.month
    request = CalendarRequest(
        entries_path=_entries_arg(args),
        year=year,
        month=month,
        today=today,
        settings=settings,
    )
    return run_pipeline(request, CalendarProcessor(), CalendarProducer(args._output))


@app.command("agenda", help="List papers due on one day with total reading time")
@_add_schedule_args
@app.argument("--on", dest="on_date", help="Date (YYYY-MM-DD, default today)")
def cmd_agenda(args: argparse.Namespace) -> int:
    settings = _settings(args)
    request = AgendaRequest(
        entries_path=_entries_arg(args),
        day=_date_arg(getattr(args, "on_date", None), "--on", settings),
        settings=settings,
    )
    return run_pipeline(request, AgendaProcessor(), AgendaProducer(args._output))


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI."""
    return app.run(argv)


if __name__ == "__main__":
    raise SystemExit(main())
