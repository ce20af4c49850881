"""Reading list settings loaded from YAML.

Example config.yaml::

    reading_list:
      week_start: sunday
      timezone: Europe/Berlin

Keys may also sit at the top level of the document.
"""
from __future__ import annotations

import datetime as _dt
import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.cli_errors import ConfigError
from core.constants import config_paths
from core.date_utils import parse_weekday
from core.yamlio import load_config

from .constants import DEFAULT_WEEK_START

LOG = logging.getLogger(__name__)

SECTION = "reading_list"


def parse_timezone(name: Optional[str]) -> Optional[_dt.tzinfo]:
    """Resolve an IANA zone name; None/empty means no conversion."""
    if not name:
        return None
    try:
        return ZoneInfo(str(name))
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(
            f"Unknown timezone: {name!r}",
            hint="Use an IANA zone name such as 'Europe/Berlin' or 'UTC'",
        ) from exc


def parse_week_start(value: Any) -> int:
    try:
        return parse_weekday(value)
    except ValueError as exc:
        raise ConfigError(
            f"Invalid week_start: {value!r} ({exc})",
            hint="Use a day name such as 'sunday' or 'monday'",
        ) from exc


@dataclass(frozen=True)
class Settings:
    week_start: int = DEFAULT_WEEK_START
    timezone: Optional[str] = None
    source: Optional[str] = None

    @property
    def tzinfo(self) -> Optional[_dt.tzinfo]:
        return parse_timezone(self.timezone)

    def with_overrides(self, week_start: Any = None, timezone: Optional[str] = None) -> "Settings":
        """Return settings with CLI overrides applied (None keeps the value)."""
        out = self
        if week_start is not None:
            out = replace(out, week_start=parse_week_start(week_start))
        if timezone:
            parse_timezone(timezone)
            out = replace(out, timezone=timezone)
        return out

    def today(self) -> _dt.date:
        """Current date in the configured zone (local time when unset)."""
        tz = self.tzinfo
        return _dt.datetime.now(tz).date() if tz else _dt.date.today()


def _section(data: Dict[str, Any]) -> Dict[str, Any]:
    sec = data.get(SECTION)
    if sec is None:
        return data
    if not isinstance(sec, dict):
        raise ConfigError(f"'{SECTION}' must be a mapping")
    return sec


def settings_from_dict(data: Dict[str, Any], source: Optional[str] = None) -> Settings:
    sec = _section(data or {})
    week_start = DEFAULT_WEEK_START
    if sec.get("week_start") is not None:
        week_start = parse_week_start(sec["week_start"])
    timezone = sec.get("timezone") or None
    if timezone:
        parse_timezone(timezone)
    return Settings(week_start=week_start, timezone=timezone, source=source)


def find_config_path(explicit: Optional[str] = None) -> Optional[str]:
    """Return the config path to use, or None when no config exists."""
    if explicit:
        p = os.path.expanduser(explicit)
        if not os.path.exists(p):
            raise ConfigError(f"Config file not found: {p}")
        return p
    for candidate in config_paths():
        if os.path.exists(candidate):
            return candidate
    return None


def load_settings(path: Optional[str] = None) -> Settings:
    """Load settings from ``path`` or the first existing standard location."""
    found = find_config_path(path)
    if not found:
        LOG.debug("No config file found; using defaults")
        return Settings()
    try:
        data = load_config(found)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc
    settings = settings_from_dict(data, source=found)
    LOG.debug("Loaded settings from %s: week_start=%s timezone=%s", found, settings.week_start, settings.timezone)
    return settings
