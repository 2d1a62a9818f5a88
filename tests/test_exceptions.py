# tests/test_exceptions.py
"""
Tests for the error taxonomy and argument validation.
"""

import logging

import pytest

from uiauto_ax.exceptions import (AccessibilityError, ElementNotFoundError,
                                  ErrorCode, InvalidElementStateError,
                                  RetryExhaustedError, TimeoutError,
                                  UIAutoError, UnsupportedActionError,
                                  ValidationError, format_error, quietly)
from uiauto_ax.validation import (validate_element_role, validate_path,
                                  validate_retry_count, validate_timeout)


class TestErrorCodes:
    """Every error carries its registry code."""

    @pytest.mark.parametrize("error,code", [
        (ValidationError("role", "empty"), ErrorCode.INVALID_ARGUMENT),
        (TimeoutError("slow"), ErrorCode.OPERATION_TIMEOUT),
        (RetryExhaustedError("op", 2, ValueError("x")), ErrorCode.OPERATION_FAILED),
        (ElementNotFoundError("button"), ErrorCode.ELEMENT_NOT_FOUND),
        (UnsupportedActionError("button", "AXIncrement"), ErrorCode.ELEMENT_DOES_NOT_SUPPORT_ACTION),
        (InvalidElementStateError("button", "stale"), ErrorCode.INVALID_ELEMENT_STATE),
        (AccessibilityError(), ErrorCode.PERMISSION_DENIED),
        (AccessibilityError("off", enabled=False), ErrorCode.ACCESSIBILITY_NOT_ENABLED),
    ])
    def test_codes(self, error, code):
        assert isinstance(error, UIAutoError)
        assert error.error_code == code

    def test_format_error(self):
        text = format_error(ElementNotFoundError("AXButton with title 'OK'", resolved_path="AXToolbar[]"))
        assert "UI Element not found: AXButton with title 'OK'" in text
        assert "resolved so far: 'AXToolbar[]'" in text
        assert "Error Code: 200" in text
        assert "Recovery Suggestion:" in text

    def test_format_foreign_error(self):
        assert format_error(KeyError("x")) == "Error: KeyError: 'x'"


class TestQuietly:
    """Tests for non-raising variants."""

    def test_returns_result(self):
        assert quietly(lambda x: x * 2, list)(3) == 6

    def test_logs_and_returns_default(self, caplog):
        def boom():
            raise ElementNotFoundError("thing")

        with caplog.at_level(logging.ERROR, logger="uiauto_ax"):
            assert quietly(boom, list)() == []
        assert "boom failed" in caplog.text


class TestValidation:
    """Tests for argument validation."""

    def test_timeout_bounds(self):
        validate_timeout(300)
        for bad in (0, -0.5, 300.1):
            with pytest.raises(ValidationError):
                validate_timeout(bad)

    def test_retry_count_rejects_bool(self):
        with pytest.raises(ValidationError):
            validate_retry_count(True)

    def test_nonstandard_role_only_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="uiauto_ax"):
            validate_element_role("AXCustomThing")
        assert "not a standard accessibility role" in caplog.text

    def test_empty_path(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_path("")
        assert exc_info.value.name == "path"
