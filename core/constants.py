"""Shared constants for the reading-list tooling.

Config root discovery and the date/time format strings used when
rendering dates for humans and for YAML/JSON output.
"""

from __future__ import annotations

import os

# -----------------------------------------------------------------------------
# Config paths
# -----------------------------------------------------------------------------

APP_DIR_NAME = "reading-list"
CONFIG_FILENAME = "config.yaml"
CONFIG_ENV_VAR = "READING_LIST_CONFIG"


def _config_roots() -> list[str]:
    """Return ordered list of config root directories."""
    roots: list[str] = []
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        roots.append(os.path.expanduser(xdg))
    roots.append(os.path.expanduser("~/.config"))
    return roots


def config_paths() -> list[str]:
    """Return ordered list of config.yaml paths to search.

    The environment override comes first, then one path per config root.
    """
    paths: list[str] = []

    env_cfg = os.environ.get(CONFIG_ENV_VAR)
    if env_cfg:
        paths.append(os.path.expanduser(env_cfg))

    for root in _config_roots():
        paths.append(os.path.join(root, APP_DIR_NAME, CONFIG_FILENAME))

    # Dedupe while preserving order
    seen: set[str] = set()
    unique: list[str] = []
    for p in paths:
        if p and p not in seen:
            seen.add(p)
            unique.append(p)
    return unique


# -----------------------------------------------------------------------------
# Date formats
# -----------------------------------------------------------------------------

FMT_DAY = "%Y-%m-%d"
FMT_DAY_START = "%Y-%m-%dT00:00:00"
FMT_DATETIME = "%Y-%m-%dT%H:%M"
FMT_DATETIME_SEC = "%Y-%m-%dT%H:%M:%S"
FMT_MONTH = "%Y-%m"
FMT_MONTH_TITLE = "%B %Y"
