# uiauto_ax/actionlogger.py
"""
@file actionlogger.py
@brief Records element actions (press, focus, setValue, ...) as line or jsonl events.
"""

from __future__ import annotations

import json
import os
import threading
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Generator, List, Optional

_SENSITIVE_KEYS = {"password", "passwd", "secret", "token"}
_VALUE_ACTIONS = {"setValue", "set_value"}


class ActionLogger:
    """Thread-safe action event logger. Disabled until enable() is called."""

    def __init__(self, history_size: int = 500) -> None:
        self._lock = threading.Lock()
        self._enabled = False
        self._console = True
        self._file_path: Optional[str] = None
        self._format = "line"
        self._history: List[Dict[str, Any]] = []
        self._history_size = history_size

    def configure(
        self,
        *,
        console: bool = True,
        file_path: Optional[str] = None,
        format: str = "line",
    ) -> None:
        fmt = (format or "line").lower()
        if fmt not in {"line", "jsonl"}:
            raise ValueError("ActionLogger format must be 'line' or 'jsonl'")
        with self._lock:
            self._console = bool(console)
            self._file_path = file_path
            self._format = fmt

    def enable(self) -> None:
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    def history(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._history)

    def clear(self) -> None:
        with self._lock:
            self._history.clear()

    def log(
        self,
        *,
        action: str,
        element: Optional[str] = None,
        status: str = "ok",
        duration_ms: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
    ) -> None:
        """Emit one action event."""
        if not self._enabled:
            return

        event: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "action": action,
            "element": element,
            "status": status,
            "duration_ms": duration_ms,
            "metadata": _redact(action, dict(metadata or {})),
        }
        if exception is not None:
            event["exception"] = {"type": type(exception).__name__, "message": str(exception)}

        with self._lock:
            self._history.append(event)
            if len(self._history) > self._history_size:
                del self._history[0]
            console, file_path, fmt = self._console, self._file_path, self._format

        line = json.dumps(event, ensure_ascii=False, default=str) if fmt == "jsonl" else _format_line(event)
        if console:
            print(line, flush=True)
        if file_path:
            try:
                os.makedirs(os.path.dirname(os.path.abspath(file_path)) or ".", exist_ok=True)
                with open(file_path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
            except OSError:
                pass

    @contextmanager
    def track(self, action: str, element: Optional[str] = None, **metadata: Any) -> Generator[None, None, None]:
        """Log an action's outcome and duration around a block; exceptions propagate."""
        start = time.monotonic()
        try:
            yield
        except BaseException as e:
            self.log(
                action=action,
                element=element,
                status="error",
                duration_ms=int((time.monotonic() - start) * 1000),
                metadata=metadata,
                exception=e,
            )
            raise
        self.log(
            action=action,
            element=element,
            duration_ms=int((time.monotonic() - start) * 1000),
            metadata=metadata,
        )


def _redact(action: str, metadata: Dict[str, Any]) -> Dict[str, Any]:
    for key in list(metadata):
        if key.lower() in _SENSITIVE_KEYS:
            metadata[key] = "***"
        elif action in _VALUE_ACTIONS and key == "value":
            text = str(metadata[key])
            metadata[key] = text if len(text) <= 10 else f"{text[:10]}..."
    return metadata


def _format_line(event: Dict[str, Any]) -> str:
    parts = [event["ts"], event["action"]]
    if event.get("element"):
        parts.append(f"element='{event['element']}'")
    parts.append(f"status={event['status']}")
    if event.get("duration_ms") is not None:
        parts.append(f"duration_ms={event['duration_ms']}")
    for key, value in event["metadata"].items():
        parts.append(f"{key}={value}")
    exc = event.get("exception")
    if exc:
        parts.append(f"exc_type={exc['type']}")
        parts.append(f"exc_message={exc['message']}")
    return " | ".join(parts)


ACTION_LOGGER = ActionLogger()
