"""Reading list constants shared across modules."""

from __future__ import annotations

# Python weekday() indexes
MONDAY = 0
TUESDAY = 1
WEDNESDAY = 2
THURSDAY = 3
FRIDAY = 4
SATURDAY = 5
SUNDAY = 6

# First day of the week used for the "this week" window and the month grid.
# Sunday matches the reading-list calendar view; override via config week_start.
DEFAULT_WEEK_START = SUNDAY

DAYS_PER_WEEK = 7

# Month grid: six full weeks always cover any month
GRID_WEEKS = 6
GRID_DAYS = GRID_WEEKS * DAYS_PER_WEEK

# Record keys accepted by normalize_entry, in lookup order
ID_KEYS = ("id", "paper_id")
ANCHOR_KEYS = ("anchor", "scheduled_date", "scheduled_at")
RECURRENCE_KEYS = ("recurrence", "repeat")
DURATION_KEYS = ("duration_minutes", "estimated_time")
ENTRY_LIST_KEYS = ("entries", "papers", "reading_list")
