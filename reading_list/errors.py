"""Errors raised by the recurrence engine and the entry normalizer."""
from __future__ import annotations


class ScheduleError(ValueError):
    """Base class for schedule precondition violations."""


class InvalidEntry(ScheduleError):
    """An entry (or raw record) cannot be interpreted, e.g. unknown recurrence."""


class InvalidDate(ScheduleError):
    """A calendar date argument is malformed, or a window is reversed."""
