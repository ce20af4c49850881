"""Tests for reading_list/calendar_grid.py."""

from __future__ import annotations

import unittest

from reading_list.calendar_grid import day_agenda, month_grid
from reading_list.constants import GRID_DAYS, MONDAY, SUNDAY
from reading_list.errors import InvalidDate
from tests.fixtures import d, make_entry


class TestMonthGrid(unittest.TestCase):

    def test_sunday_start_layout(self):
        grid = month_grid([], 2024, 3, week_start=SUNDAY)
        self.assertEqual(len(grid.cells), GRID_DAYS)
        self.assertEqual(grid.first_day, d("2024-02-25"))
        self.assertEqual(grid.last_day, d("2024-04-06"))
        self.assertEqual(len(grid.weeks()), 6)
        self.assertTrue(all(len(w) == 7 for w in grid.weeks()))
        self.assertEqual(grid.first_day.weekday(), SUNDAY)

    def test_monday_start_layout(self):
        grid = month_grid([], 2024, 3, week_start=MONDAY)
        self.assertEqual(grid.first_day, d("2024-02-26"))
        self.assertEqual(grid.last_day, d("2024-04-07"))

    def test_month_starting_on_week_start(self):
        # 2024-09-01 is a Sunday
        grid = month_grid([], 2024, 9)
        self.assertEqual(grid.first_day, d("2024-09-01"))
        self.assertTrue(grid.cells[0].in_month)

    def test_in_month_and_today_flags(self):
        grid = month_grid([], 2024, 3, today=d("2024-03-18"))
        self.assertFalse(grid.cell(d("2024-02-29")).in_month)
        self.assertTrue(grid.cell(d("2024-03-31")).in_month)
        self.assertFalse(grid.cell(d("2024-04-01")).in_month)
        flagged = [c.day for c in grid.cells if c.is_today]
        self.assertEqual(flagged, [d("2024-03-18")])
        self.assertIsNone(grid.cell(d("2024-05-01")))

    def test_entries_placed_on_occurrence_days(self):
        entries = [
            make_entry("once", anchor="2024-03-18", duration_minutes=45),
            make_entry("weekly", anchor="2024-03-06", recurrence="weekly", duration_minutes=20),
            make_entry("monthly", anchor="2024-01-31", recurrence="monthly"),
        ]
        grid = month_grid(entries, 2024, 3)
        weekly_days = [c.day for c in grid.cells if any(e.id == "weekly" for e in c.entries)]
        self.assertEqual(weekly_days, [d("2024-03-06"), d("2024-03-13"), d("2024-03-20"), d("2024-03-27"), d("2024-04-03")])
        self.assertEqual([e.id for e in grid.cell(d("2024-03-18")).entries], ["once"])
        self.assertEqual(grid.cell(d("2024-03-18")).minutes, 45)
        # Feb 29 is a leading cell and carries the clamped monthly occurrence
        self.assertEqual([e.id for e in grid.cell(d("2024-02-29")).entries], ["monthly"])
        self.assertEqual([e.id for e in grid.cell(d("2024-03-31")).entries], ["monthly"])

    def test_cell_entries_ordered_by_id(self):
        entries = [
            make_entry("b", anchor="2024-03-18"),
            make_entry("a", anchor="2024-03-01", recurrence="daily"),
        ]
        grid = month_grid(entries, 2024, 3)
        self.assertEqual([e.id for e in grid.cell(d("2024-03-18")).entries], ["a", "b"])
        self.assertEqual(grid.cell(d("2024-02-29")).entries, ())

    def test_invalid_month(self):
        with self.assertRaises(InvalidDate):
            month_grid([], 2024, 13)

    def test_grid_must_fit_the_calendar_range(self):
        # a December 9999 grid would run into year 10000
        with self.assertRaises(InvalidDate):
            month_grid([], 9999, 12)
        with self.assertRaises(InvalidDate):
            month_grid([], 1, 1, week_start=SUNDAY)
        self.assertEqual(month_grid([], 1, 1, week_start=MONDAY).first_day, d("0001-01-01"))
        grid = month_grid([make_entry(anchor="2024-01-31", recurrence="monthly")], 9999, 11)
        self.assertEqual(grid.last_day, d("9999-12-11"))
        self.assertEqual([c.day for c in grid.cells if c.entries], [d("9999-11-30")])


class TestDayAgenda(unittest.TestCase):

    def test_entries_and_minutes(self):
        entries = [
            make_entry("z", anchor="2024-01-01", recurrence="daily", duration_minutes=20),
            make_entry("a", anchor="2024-03-18", duration_minutes=45),
            make_entry("other", anchor="2024-03-19"),
        ]
        agenda = day_agenda(entries, d("2024-03-18"))
        self.assertEqual([e.id for e in agenda.entries], ["a", "z"])
        self.assertEqual(agenda.minutes, 65)

    def test_empty_day(self):
        agenda = day_agenda([make_entry("a", anchor="2024-03-18")], d("2024-03-17"))
        self.assertEqual(agenda.entries, ())
        self.assertEqual(agenda.minutes, 0)

    def test_day_must_be_a_date(self):
        with self.assertRaises(InvalidDate):
            day_agenda([], "2024-03-18")


if __name__ == "__main__":
    unittest.main()
