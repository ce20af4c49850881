"""Shared test fixtures and utilities.

Common builders, fakes and helpers used across the reading-list test suite.
"""

from __future__ import annotations

import datetime as dt
import importlib.util
import io
import os
import subprocess
import tempfile
from contextlib import contextmanager, redirect_stderr, redirect_stdout
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

REPO_ROOT = Path(__file__).resolve().parents[1]


# -----------------------------------------------------------------------------
# Path helpers
# -----------------------------------------------------------------------------


def repo_root() -> Path:
    return REPO_ROOT


def bin_path(name: str) -> Path:
    return REPO_ROOT / "bin" / name


def run(cmd: Sequence[str], cwd: Optional[str] = None):
    return subprocess.run(cmd, cwd=cwd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)  # noqa: S603


def has_pyyaml() -> bool:
    try:
        return importlib.util.find_spec("yaml") is not None
    except Exception:
        return False


class TempDirMixin:
    """Mixin providing a temporary directory that's cleaned up after each test.

    Usage:
        class MyTest(TempDirMixin, unittest.TestCase):
            def test_something(self):
                path = os.path.join(self.tmpdir, "entries.yaml")
                ...
    """

    tmpdir: str

    def setUp(self):
        super().setUp()
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        import shutil
        shutil.rmtree(self.tmpdir, ignore_errors=True)
        super().tearDown()


# -----------------------------------------------------------------------------
# YAML helpers
# -----------------------------------------------------------------------------


def write_yaml(data: Any, dir: Optional[str] = None, filename: str = "entries.yaml") -> str:
    """Write data to a YAML file (temp dir unless given), return the path."""
    import yaml

    td = dir or tempfile.mkdtemp()
    p = os.path.join(td, filename)
    with open(p, "w", encoding="utf-8") as fh:
        yaml.safe_dump(data, fh, sort_keys=False)
    return p


@contextmanager
def temp_yaml_file(data: Any, suffix: str = ".yaml"):
    """Context manager that yields a path to a temporary YAML file."""
    import yaml

    with tempfile.NamedTemporaryFile("w+", delete=False, suffix=suffix) as tf:
        yaml.safe_dump(data, tf)
        tf.flush()
        name = tf.name
    try:
        yield name
    finally:
        os.unlink(name)


# -----------------------------------------------------------------------------
# Output capture helpers
# -----------------------------------------------------------------------------


@contextmanager
def capture_stdout():
    """Context manager that captures stdout and yields a StringIO buffer."""
    buf = io.StringIO()
    with redirect_stdout(buf):
        yield buf


@contextmanager
def capture_output():
    """Capture stdout and stderr; yields (out, err) buffers."""
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        yield out, err


# -----------------------------------------------------------------------------
# Entry builders
# -----------------------------------------------------------------------------


def d(value: str) -> dt.date:
    """Shorthand for date.fromisoformat."""
    return dt.date.fromisoformat(value)


def make_entry(entry_id: str = "p1", anchor: Any = "2024-03-04", recurrence: Any = "none", **kwargs):
    """Build a ScheduleEntry; string anchors are parsed as ISO dates."""
    from reading_list.model import ScheduleEntry

    if isinstance(anchor, str):
        anchor = d(anchor)
    return ScheduleEntry(id=entry_id, anchor=anchor, recurrence=recurrence, **kwargs)


def sample_rows() -> List[Dict[str, Any]]:
    """Reading-list export rows as the store hands them out."""
    return [
        {
            "id": "rl-1",
            "paper_id": "attention",
            "title": "Attention Is All You Need",
            "scheduled_date": "2024-03-18T09:00:00",
            "estimated_time": 45,
            "repeat": "none",
            "status": "unread",
        },
        {
            "id": "rl-2",
            "title": "Deep Residual Learning",
            "scheduled_date": "2024-01-01",
            "estimated_time": 20,
            "repeat": "daily",
        },
        {
            "id": "rl-3",
            "title": "BERT",
            "scheduled_date": "2024-03-06",
            "repeat": "weekly",
            "status": "in_progress",
        },
        {
            "id": "rl-4",
            "title": "Old survey",
            "scheduled_date": "2024-01-10",
            "estimated_time": 30,
            "status": "completed",
        },
        {
            "id": "rl-5",
            "title": "Unscheduled draft",
        },
    ]


class FakeLoader:
    """Entry loader double that records the paths it was asked for."""

    def __init__(self, entries: List[Any]) -> None:
        self.entries = list(entries)
        self.paths: List[str] = []

    def __call__(self, path: str) -> List[Any]:
        self.paths.append(path)
        return list(self.entries)
