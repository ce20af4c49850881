"""Tests for reading_list/model.py normalization and loading."""

from __future__ import annotations

import datetime as dt
import json
import os
import tempfile
import unittest

from reading_list.errors import InvalidDate, InvalidEntry
from reading_list.model import (
    ReadingStatus,
    Recurrence,
    ScheduleEntry,
    entries_from_document,
    load_entries,
    normalize_entry,
    parse_anchor,
)
from tests.fixtures import d, has_pyyaml, sample_rows, write_yaml


class TestRecurrenceParse(unittest.TestCase):

    def test_known_values(self):
        self.assertIs(Recurrence.parse("daily"), Recurrence.DAILY)
        self.assertIs(Recurrence.parse(" Weekly "), Recurrence.WEEKLY)
        self.assertIs(Recurrence.parse(Recurrence.MONTHLY), Recurrence.MONTHLY)

    def test_missing_means_one_time(self):
        for value in (None, "", "none", "NONE"):
            self.assertIs(Recurrence.parse(value), Recurrence.NONE)

    def test_unknown_raises(self):
        with self.assertRaises(InvalidEntry):
            Recurrence.parse("yearly")


class TestReadingStatus(unittest.TestCase):

    def test_variants(self):
        self.assertIs(ReadingStatus.parse("In Progress"), ReadingStatus.IN_PROGRESS)
        self.assertIs(ReadingStatus.parse("in-progress"), ReadingStatus.IN_PROGRESS)
        self.assertIs(ReadingStatus.parse(None), ReadingStatus.UNREAD)

    def test_unknown_raises(self):
        with self.assertRaises(InvalidEntry):
            ReadingStatus.parse("skimmed")


class TestScheduleEntry(unittest.TestCase):

    def test_coerces_fields(self):
        entry = ScheduleEntry(id="p", anchor=d("2024-03-04"), recurrence="weekly", duration_minutes="30", status="completed")
        self.assertIs(entry.recurrence, Recurrence.WEEKLY)
        self.assertIs(entry.status, ReadingStatus.COMPLETED)
        self.assertEqual(entry.duration_minutes, 30)
        self.assertTrue(entry.repeats)

    def test_rejects_string_anchor(self):
        with self.assertRaises(InvalidEntry):
            ScheduleEntry(id="p", anchor="2024-03-04")

    def test_rejects_bad_durations(self):
        for bad in (-5, 1.5, True, "soon"):
            with self.assertRaises(InvalidEntry, msg=repr(bad)):
                ScheduleEntry(id="p", anchor=d("2024-03-04"), duration_minutes=bad)

    def test_whole_float_duration_accepted(self):
        entry = ScheduleEntry(id="p", anchor=d("2024-03-04"), duration_minutes=45.0)
        self.assertEqual(entry.duration_minutes, 45)

    def test_frozen(self):
        entry = ScheduleEntry(id="p", anchor=d("2024-03-04"))
        with self.assertRaises(Exception):
            entry.id = "q"  # type: ignore[misc]

    def test_to_dict(self):
        entry = ScheduleEntry(
            id="p",
            anchor=dt.datetime(2024, 3, 4, 9, 0),
            recurrence="daily",
            duration_minutes=20,
            title="Paper",
        )
        self.assertEqual(entry.to_dict(), {
            "id": "p",
            "anchor": "2024-03-04T09:00:00",
            "recurrence": "daily",
            "duration_minutes": 20,
            "title": "Paper",
            "status": "unread",
        })


class TestParseAnchor(unittest.TestCase):

    def test_date_and_datetime_strings(self):
        self.assertEqual(parse_anchor("2024-03-04"), d("2024-03-04"))
        self.assertEqual(parse_anchor("2024-03-04T09:30:00"), dt.datetime(2024, 3, 4, 9, 30))
        aware = parse_anchor("2024-03-04T09:30:00Z")
        self.assertEqual(aware.utcoffset(), dt.timedelta(0))

    def test_passes_through_date_objects(self):
        self.assertEqual(parse_anchor(d("2024-03-04")), d("2024-03-04"))

    def test_malformed_raises_invalid_date(self):
        for bad in ("2024-02-30", "next tuesday", "2024-13-01T00:00"):
            with self.assertRaises(InvalidDate, msg=bad):
                parse_anchor(bad)


class TestNormalizeEntry(unittest.TestCase):

    def test_export_row_aliases(self):
        entry = normalize_entry(sample_rows()[0])
        self.assertEqual(entry.id, "rl-1")
        self.assertEqual(entry.anchor, dt.datetime(2024, 3, 18, 9, 0))
        self.assertIs(entry.recurrence, Recurrence.NONE)
        self.assertEqual(entry.duration_minutes, 45)
        self.assertEqual(entry.title, "Attention Is All You Need")

    def test_canonical_keys_win(self):
        entry = normalize_entry({
            "id": "a",
            "paper_id": "b",
            "anchor": "2024-03-01",
            "scheduled_date": "2024-04-01",
            "recurrence": "monthly",
            "repeat": "daily",
        })
        self.assertEqual(entry.id, "a")
        self.assertEqual(entry.anchor, d("2024-03-01"))
        self.assertIs(entry.recurrence, Recurrence.MONTHLY)

    def test_paper_id_fallback(self):
        entry = normalize_entry({"paper_id": 42, "scheduled_date": "2024-03-01"})
        self.assertEqual(entry.id, "42")

    def test_missing_id_or_anchor(self):
        with self.assertRaises(InvalidEntry):
            normalize_entry({"anchor": "2024-03-01"})
        with self.assertRaises(InvalidEntry):
            normalize_entry({"id": "x"})
        with self.assertRaises(InvalidEntry):
            normalize_entry(["x"])

    def test_unknown_recurrence(self):
        with self.assertRaises(InvalidEntry):
            normalize_entry({"id": "x", "anchor": "2024-03-01", "recurrence": "fortnightly"})

    def test_malformed_anchor(self):
        with self.assertRaises(InvalidDate):
            normalize_entry({"id": "x", "anchor": "03/01/2024"})


class TestEntriesFromDocument(unittest.TestCase):

    def test_list_skips_unscheduled_rows(self):
        entries = entries_from_document(sample_rows())
        self.assertEqual([e.id for e in entries], ["rl-1", "rl-2", "rl-3", "rl-4"])

    def test_mapping_with_list_key(self):
        for key in ("entries", "papers", "reading_list"):
            entries = entries_from_document({key: [{"id": "a", "anchor": "2024-03-01"}]})
            self.assertEqual([e.id for e in entries], ["a"], key)

    def test_empty_inputs(self):
        self.assertEqual(entries_from_document(None), [])
        self.assertEqual(entries_from_document({"entries": None}), [])

    def test_bad_shapes(self):
        with self.assertRaises(InvalidEntry):
            entries_from_document({"other": []})
        with self.assertRaises(InvalidEntry):
            entries_from_document({"entries": "nope"})

    def test_bad_row_propagates(self):
        rows = sample_rows() + [{"id": "bad", "anchor": "2024-03-01", "repeat": "hourly"}]
        with self.assertRaises(InvalidEntry):
            entries_from_document(rows)


class TestLoadEntries(unittest.TestCase):

    @unittest.skipUnless(has_pyyaml(), "requires PyYAML")
    def test_json_file(self):
        td = tempfile.mkdtemp()
        p = os.path.join(td, "entries.json")
        with open(p, "w", encoding="utf-8") as fh:
            json.dump({"papers": sample_rows()}, fh)
        entries = load_entries(p)
        self.assertEqual(len(entries), 4)
        self.assertIs(entries[2].status, ReadingStatus.IN_PROGRESS)

    @unittest.skipUnless(has_pyyaml(), "requires PyYAML")
    def test_yaml_native_dates(self):
        td = tempfile.mkdtemp()
        p = os.path.join(td, "entries.yaml")
        with open(p, "w", encoding="utf-8") as fh:
            fh.write("entries:\n  - id: a\n    anchor: 2024-03-01\n    recurrence: weekly\n")
        entries = load_entries(p)
        self.assertEqual(entries[0].anchor, d("2024-03-01"))

    @unittest.skipUnless(has_pyyaml(), "requires PyYAML")
    def test_yaml_rows(self):
        p = write_yaml(sample_rows())
        self.assertEqual([e.id for e in load_entries(p)], ["rl-1", "rl-2", "rl-3", "rl-4"])

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_entries("/nonexistent/entries.yaml")


if __name__ == "__main__":
    unittest.main()
