# uiauto_ax/timinglogger.py
"""
@file timinglogger.py
@brief Timing event logger for timeout/retry observability.
"""

from __future__ import annotations

import os
import threading
import time
from typing import Any, Dict, List, Optional


class TimingLogger:
    """Thread-safe timing logger with console/file output and an event history."""

    def __init__(self, history_size: int = 500) -> None:
        self._lock = threading.Lock()
        self._enabled = False
        self._console = True
        self._file_path: Optional[str] = None
        self._history: List[Dict[str, Any]] = []
        self._history_size = history_size

    def configure(self, *, console: bool = True, file_path: Optional[str] = None) -> None:
        """Configure logger settings."""
        with self._lock:
            self._console = bool(console)
            self._file_path = file_path

    def enable(self) -> None:
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    def history(self) -> List[Dict[str, Any]]:
        """Events recorded while enabled, oldest first."""
        with self._lock:
            return list(self._history)

    def clear(self) -> None:
        with self._lock:
            self._history.clear()

    def log(
        self,
        *,
        event: str,
        description: Optional[str] = None,
        status: str = "info",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Emit a timing log event."""
        if not self._enabled:
            return

        meta = dict(metadata or {})
        record = {"event": event, "description": description, "status": status, "metadata": meta}
        parts = [
            f"[{status.lower()}]",
            "[timing]",
            f"time={time.strftime('%H:%M:%S')}",
            f"thread={threading.current_thread().name}",
            f"event={event}",
        ]
        if description:
            parts.append(f"description={description}")
        for key, value in meta.items():
            parts.append(f"{key}={value}")
        line = " ".join(parts)

        with self._lock:
            self._history.append(record)
            if len(self._history) > self._history_size:
                del self._history[0]
            console = self._console
            file_path = self._file_path

        if console:
            print(line, flush=True)
        if file_path:
            self._write_file(file_path, line)

    @staticmethod
    def _write_file(file_path: str, line: str) -> None:
        try:
            os.makedirs(os.path.dirname(os.path.abspath(file_path)) or ".", exist_ok=True)
            with open(file_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError:
            pass


TIMING_LOGGER = TimingLogger()
