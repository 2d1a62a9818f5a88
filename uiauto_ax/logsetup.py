# uiauto_ax/logsetup.py
"""
Logging configuration for the engine.
All modules log under the ``uiauto_ax`` namespace; nothing is emitted
until an application calls setup_logging().
"""

import logging
import sys
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "uiauto_ax"

_loggers: dict = {}
_handlers: list = []
_initialized: bool = False


class AXLogFormatter(logging.Formatter):
    """Formatter with millisecond timestamps and optional thread names."""

    def __init__(self, include_thread: bool = True):
        self.include_thread = include_thread
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        level = record.levelname.ljust(8)

        if self.include_thread:
            thread = record.threadName[:20].ljust(20)
            prefix = f"[{timestamp}] [{level}] [{thread}] {record.name}: "
        else:
            prefix = f"[{timestamp}] [{level}] {record.name}: "

        message = record.getMessage()
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return prefix + message


def default_log_file() -> Path:
    """<tmp>/uiauto_ax/logs/debug_<timestamp>.log"""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return Path(tempfile.gettempdir()) / "uiauto_ax" / "logs" / f"debug_{stamp}.log"


def setup_logging(
    console_level: int = logging.INFO,
    file_level: Optional[int] = logging.DEBUG,
    log_file: Optional[Path] = None,
) -> None:
    """
    Attach console and file handlers to the ``uiauto_ax`` logger.

    Calling this more than once has no effect until reset_logging().

    Args:
        console_level: Level for stderr output
        file_level: Level for file output, None to skip the file handler
        log_file: Path to log file (uses default if None)
    """
    global _initialized

    if _initialized:
        return

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(AXLogFormatter(include_thread=False))
    root_logger.addHandler(console_handler)
    _handlers.append(console_handler)

    if file_level is not None:
        if log_file is None:
            log_file = default_log_file()
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            file_handler.setLevel(file_level)
            file_handler.setFormatter(AXLogFormatter(include_thread=True))
            root_logger.addHandler(file_handler)
            _handlers.append(file_handler)
        except OSError as e:
            root_logger.warning(f"Could not create log file: {e}")
        else:
            root_logger.info(f"Logging initialized. Log file: {log_file}")

    _initialized = True


def reset_logging() -> None:
    """Detach and close the handlers installed by setup_logging()."""
    global _initialized

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    while _handlers:
        handler = _handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(logging.NOTSET)
    _initialized = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger inside the ``uiauto_ax`` namespace.

    Args:
        name: Logger name (usually __name__)
    """
    if name not in _loggers:
        if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
            _loggers[name] = logging.getLogger(name)
        else:
            _loggers[name] = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return _loggers[name]

