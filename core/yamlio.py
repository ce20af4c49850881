"""Shared YAML loading helpers for the reading-list CLI."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

__all__ = ["load_config", "load_document"]


def _require_yaml():
    try:
        import yaml  # type: ignore

        return yaml
    except Exception as exc:  # pragma: no cover - runtime guard
        raise RuntimeError("PyYAML not installed. Run: pip install pyyaml") from exc


def load_config(path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML mapping; returns {} if missing/empty.

    Raises ValueError when the document root is not a mapping.
    """
    if not path:
        return {}
    p = Path(path)
    if not p.exists():
        return {}
    data = load_document(str(p))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Top-level YAML in {p} must be a mapping (dict)")
    return data


def load_document(path: str) -> Any:
    """Load any YAML (or JSON) document; None for an empty file.

    Unlike load_config, a missing file is an error here.
    """
    yaml = _require_yaml()
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"File not found: {p}")
    text = p.read_text(encoding="utf-8")
    if not text.strip():
        return None
    return yaml.safe_load(text)
