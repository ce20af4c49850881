"""Reading list scheduling package.

Occurrence queries and today/this-week/upcoming bucketing for papers
scheduled once or on a daily, weekly or monthly cadence.
"""

from .buckets import Bucket, BucketItem, Classification, classify
from .errors import InvalidDate, InvalidEntry, ScheduleError
from .model import ReadingStatus, Recurrence, ScheduleEntry, load_entries, normalize_entry
from .recurrence import (
    anchor_date,
    days_in_month,
    monthly_day,
    next_occurrence_on_or_after,
    occurrences_between,
    occurs_in_window,
    occurs_on,
    week_bounds,
)

__all__ = [
    "__version__",
    "Bucket",
    "BucketItem",
    "Classification",
    "InvalidDate",
    "InvalidEntry",
    "ReadingStatus",
    "Recurrence",
    "ScheduleEntry",
    "ScheduleError",
    "anchor_date",
    "classify",
    "days_in_month",
    "load_entries",
    "monthly_day",
    "next_occurrence_on_or_after",
    "normalize_entry",
    "occurrences_between",
    "occurs_in_window",
    "occurs_on",
    "week_bounds",
]
__version__ = "0.1.0"
