# tests/test_logging.py
"""
Tests for logger setup.
"""

import logging

import pytest

from uiauto_ax.logsetup import get_logger, reset_logging, setup_logging


@pytest.fixture(autouse=True)
def clean_handlers():
    reset_logging()
    yield
    reset_logging()


class TestSetupLogging:
    """Tests for setup_logging and get_logger."""

    def test_get_logger_uses_namespace(self):
        assert get_logger("search").name == "uiauto_ax.search"
        assert get_logger("uiauto_ax.engine").name == "uiauto_ax.engine"

    def test_writes_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "debug.log"
        setup_logging(console_level=logging.CRITICAL, log_file=log_file)
        get_logger("engine").debug("hello from test")
        for handler in logging.getLogger("uiauto_ax").handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "uiauto_ax.engine: hello from test" in text
        assert "[DEBUG   ]" in text

    def test_is_idempotent(self, tmp_path):
        setup_logging(console_level=logging.CRITICAL, log_file=tmp_path / "a.log")
        count = len(logging.getLogger("uiauto_ax").handlers)
        setup_logging(console_level=logging.CRITICAL, log_file=tmp_path / "b.log")
        assert len(logging.getLogger("uiauto_ax").handlers) == count
        assert not (tmp_path / "b.log").exists()
