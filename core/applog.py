"""Minimal structured command log used by the CLI.

Writes JSON lines to a file, creating parent directories as needed.
"""

from __future__ import annotations

import json
import logging
import os
import time
import uuid
from typing import Any, Dict, List, Optional

LOG = logging.getLogger(__name__)


class AppLogger:
    def __init__(self, path: str) -> None:
        self.path = path
        d = os.path.dirname(path)
        if d:
            os.makedirs(d, exist_ok=True)

    def _write(self, record: Dict[str, Any]) -> None:
        try:
            with open(self.path, "a", encoding="utf-8") as fh:
                fh.write(json.dumps(record, ensure_ascii=False, default=str) + "\n")
        except OSError as exc:
            # best-effort
            LOG.warning("Could not write command log %s: %s", self.path, exc)

    def start(self, cmd: str, argv: Optional[List[str]] = None) -> str:
        sid = str(uuid.uuid4())
        self._write({
            "ts": time.time(),
            "event": "start",
            "cmd": cmd,
            "argv": argv,
            "pid": os.getpid(),
            "session_id": sid,
        })
        return sid

    def end(
        self,
        session_id: str,
        status: str = "ok",
        duration_ms: Optional[int] = None,
        error: Optional[str] = None,
    ) -> None:
        rec: Dict[str, Any] = {
            "ts": time.time(),
            "event": "end",
            "session_id": session_id,
            "status": status,
        }
        if duration_ms is not None:
            rec["duration_ms"] = int(duration_ms)
        if error:
            rec["error"] = error
        self._write(rec)
