"""CLI output formatting utilities.

Renders command results as text, JSON, YAML or a simple table.
"""
from __future__ import annotations

import datetime as _dt
import json
import sys
from dataclasses import dataclass, asdict, is_dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, TextIO


class OutputFormat(str, Enum):
    """Output format options."""
    TEXT = "text"
    JSON = "json"
    YAML = "yaml"
    TABLE = "table"


@dataclass
class OutputConfig:
    """Configuration for output formatting."""
    format: OutputFormat = OutputFormat.TEXT
    verbose: bool = False
    quiet: bool = False
    file: Optional[TextIO] = None

    @property
    def stream(self) -> TextIO:
        """Get the output stream."""
        return self.file or sys.stdout


class OutputWriter:
    """Handles formatted output for CLI commands."""

    def __init__(self, config: Optional[OutputConfig] = None):
        self.config = config or OutputConfig()

    @property
    def format(self) -> OutputFormat:
        return self.config.format

    def print(self, *args, **kwargs) -> None:
        """Print to the configured output stream."""
        if self.config.quiet:
            return
        kwargs.setdefault("file", self.config.stream)
        print(*args, **kwargs)

    def print_verbose(self, message: str) -> None:
        """Print a verbose message (only if verbose mode is enabled)."""
        if self.config.verbose:
            self.print(message)

    def print_data(self, data: Any, headers: Optional[List[str]] = None) -> None:
        """Print data in the configured format.

        Args:
            data: Data to print (dict, list, dataclass, or any serializable object).
            headers: Optional column headers for table format.
        """
        fmt = self.config.format

        if fmt == OutputFormat.JSON:
            self._print_json(data)
        elif fmt == OutputFormat.YAML:
            self._print_yaml(data)
        elif fmt == OutputFormat.TABLE:
            self._print_table(data, headers)
        else:
            self._print_text(data)

    def print_dict(self, data: Dict[str, Any], *, separator: str = ": ", indent: int = 0) -> None:
        """Print a dictionary as key-value pairs."""
        prefix = " " * indent
        for key, value in data.items():
            self.print(f"{prefix}{key}{separator}{value}")

    def _print_json(self, data: Any) -> None:
        normalized = normalize_for_output(data)
        self.print(json.dumps(normalized, indent=2, default=str))

    def _print_yaml(self, data: Any) -> None:
        import yaml
        normalized = normalize_for_output(data)
        self.print(yaml.safe_dump(normalized, default_flow_style=False, sort_keys=False).rstrip("\n"))

    def _row_to_strings(self, row: Any, headers: Optional[List[str]] = None) -> List[str]:
        if isinstance(row, dict):
            return [_cell(row.get(h, "")) for h in headers] if headers else [_cell(v) for v in row.values()]
        if isinstance(row, (list, tuple)):
            return [_cell(v) for v in row]
        return [_cell(row)]

    def _print_table(self, data: Any, headers: Optional[List[str]] = None) -> None:
        """Print data as a table."""
        rows = [normalize_for_output(r) for r in _to_rows(data)]
        if not rows:
            return

        if headers is None and isinstance(rows[0], dict):
            headers = list(rows[0].keys())

        if not headers:
            for row in rows:
                self.print(" | ".join(self._row_to_strings(row)))
            return

        str_rows = [self._row_to_strings(row, headers) for row in rows]
        widths = [len(h) for h in headers]
        for str_row in str_rows:
            for i, val in enumerate(str_row[: len(widths)]):
                widths[i] = max(widths[i], len(val))

        header_line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
        self.print(header_line)
        self.print("-" * len(header_line))
        for str_row in str_rows:
            self.print(" | ".join(v.ljust(widths[i]) for i, v in enumerate(str_row)).rstrip())

    def _print_text(self, data: Any) -> None:
        if isinstance(data, str):
            self.print(data)
        elif isinstance(data, dict):
            self.print_dict(data)
        elif isinstance(data, (list, tuple)):
            for item in data:
                self.print(item)
        elif is_dataclass(data) and not isinstance(data, type):
            self.print_dict(asdict(data))
        else:
            self.print(str(data))


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def _to_rows(data: Any) -> List[Any]:
    if isinstance(data, (list, tuple)):
        return list(data)
    return [data]


def normalize_for_output(data: Any) -> Any:
    """Normalize data for JSON/YAML serialization (dates become ISO strings)."""
    if is_dataclass(data) and not isinstance(data, type):
        return normalize_for_output(asdict(data))
    if isinstance(data, dict):
        return {str(k): normalize_for_output(v) for k, v in data.items()}
    if isinstance(data, (list, tuple, set, frozenset)):
        items = [normalize_for_output(v) for v in data]
        return sorted(items, key=str) if isinstance(data, (set, frozenset)) else items
    if isinstance(data, Enum):
        return data.value
    if isinstance(data, (_dt.date, _dt.datetime)):
        return data.isoformat()
    return data
