# uiauto_ax/exceptions.py
"""
@file exceptions.py
@brief Exception taxonomy for the accessibility element engine.

Every error carries a numeric code and a recovery suggestion so that the
command layer can print a useful message and continue.
"""

from __future__ import annotations

import functools
import logging
from enum import IntEnum
from typing import Any, Callable, List, Optional, TypeVar

T = TypeVar("T")


class ErrorCode(IntEnum):
    """Central registry of error codes."""
    UNKNOWN = 1
    INVALID_ARGUMENT = 2
    INTERNAL_ERROR = 3

    ACCESSIBILITY_NOT_ENABLED = 100
    PERMISSION_DENIED = 101
    API_MISUSE = 102

    ELEMENT_NOT_FOUND = 200
    ELEMENT_NOT_VISIBLE = 201
    ELEMENT_NOT_ENABLED = 202
    INVALID_ELEMENT_STATE = 203
    ELEMENT_DOES_NOT_SUPPORT_ACTION = 204

    OPERATION_TIMEOUT = 300
    OPERATION_FAILED = 301
    OPERATION_NOT_SUPPORTED = 302
    OPERATION_CANCELLED = 303

    APPLICATION_NOT_FOUND = 400
    APPLICATION_NOT_RESPONDING = 401
    APPLICATION_CRASHED = 402

    WINDOW_NOT_FOUND = 500
    WINDOW_NOT_RESPONDING = 501


class UIAutoError(Exception):
    """Base exception for the framework."""

    error_code: ErrorCode = ErrorCode.UNKNOWN
    recovery_suggestion: str = "Check the error details for the specific cause."


class ConfigError(UIAutoError):
    """Raised when a timing configuration file is invalid."""

    error_code = ErrorCode.INTERNAL_ERROR
    recovery_suggestion = "Fix the configuration file and run the command again."


class ValidationError(UIAutoError):
    """
    Raised when a caller passes a malformed argument.

    This is always a caller bug and is never retried.
    """

    error_code = ErrorCode.INVALID_ARGUMENT
    recovery_suggestion = "Check the command usage and provide a valid value for this argument."

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid argument '{name}': {reason}")


class TimeoutError(UIAutoError):
    """
    Raised when an operation exceeds its allotted duration.

    Attributes:
        description: Human-readable description of the operation
        timeout: The timeout value in seconds
        elapsed_time: Actual elapsed time in seconds (if known)
        original_exception: Underlying exception, if one was captured
    """

    error_code = ErrorCode.OPERATION_TIMEOUT
    recovery_suggestion = (
        "Try increasing the timeout duration or check if the application "
        "is responding correctly."
    )

    def __init__(self, message: str, description: Optional[str] = None, timeout: Optional[float] = None):
        super().__init__(message)
        self.description = description
        self.timeout = timeout
        self.elapsed_time: Optional[float] = None
        self.original_exception: Optional[BaseException] = None

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.elapsed_time is not None:
            return f"{base_msg} [Elapsed: {self.elapsed_time:.2f}s]"
        return base_msg


class RetryExhaustedError(UIAutoError):
    """
    Raised when every retry attempt failed and the last one timed out.

    The last underlying failure is kept in ``last_error``.
    """

    error_code = ErrorCode.OPERATION_FAILED
    recovery_suggestion = "Check the error details for specific issues that caused the failure."

    def __init__(self, description: str, attempt_count: int, last_error: BaseException):
        self.description = description
        self.attempt_count = attempt_count
        self.last_error = last_error
        super().__init__(
            f"Operation '{description}' failed after {attempt_count} attempts. "
            f"Last error: {type(last_error).__name__}: {last_error}"
        )


class ElementNotFoundError(UIAutoError):
    """
    Raised when a search or path resolution finds no matching element.

    ``resolved_path`` holds the part of a path expression that was
    already walked when resolution stopped.
    """

    error_code = ErrorCode.ELEMENT_NOT_FOUND
    recovery_suggestion = (
        "Make sure the element exists and is correctly identified. "
        "Try using a different identifier or accessibility role."
    )

    def __init__(
        self,
        description: str,
        role: Optional[str] = None,
        title: Optional[str] = None,
        resolved_path: Optional[str] = None,
    ):
        self.description = description
        self.role = role
        self.title = title
        self.resolved_path = resolved_path
        msg = f"UI Element not found: {description}"
        if resolved_path:
            msg += f" (resolved so far: '{resolved_path}')"
        super().__init__(msg)


class UnsupportedActionError(UIAutoError):
    """Raised when an action is requested that the element does not advertise."""

    error_code = ErrorCode.ELEMENT_DOES_NOT_SUPPORT_ACTION
    recovery_suggestion = (
        "This type of element does not support the requested action. "
        "Try a different approach."
    )

    def __init__(self, description: str, action: str, available: Optional[List[str]] = None):
        self.description = description
        self.action = action
        self.available = list(available or [])
        msg = f"UI Element '{description}' does not support action: {action}"
        if self.available:
            msg += f" (available: {', '.join(self.available)})"
        super().__init__(msg)


class InvalidElementStateError(UIAutoError):
    """
    Raised when an element has no live provider handle, or the provider
    rejected an otherwise valid request.
    """

    error_code = ErrorCode.INVALID_ELEMENT_STATE
    recovery_suggestion = (
        "The element is in a state that prevents the requested operation. "
        "Resolve the element again and check the application's current state."
    )

    def __init__(self, description: str, state: str, cause: Optional[BaseException] = None):
        self.description = description
        self.state = state
        self.cause = cause
        super().__init__(f"UI Element '{description}' in invalid state: {state}")


class AccessibilityError(UIAutoError):
    """Raised when accessibility is disabled or access was denied."""

    error_code = ErrorCode.PERMISSION_DENIED
    recovery_suggestion = (
        "Grant permission for this application in System Settings → "
        "Privacy & Security → Accessibility."
    )

    def __init__(self, message: str = "Permission denied for accessibility access", enabled: bool = True):
        self.enabled = enabled
        if not enabled:
            self.error_code = ErrorCode.ACCESSIBILITY_NOT_ENABLED
            self.recovery_suggestion = (
                "Enable accessibility in System Settings → Privacy & Security → Accessibility."
            )
        super().__init__(message)


class ApplicationNotFoundError(UIAutoError):
    """Raised when no application matches a query."""

    error_code = ErrorCode.APPLICATION_NOT_FOUND
    recovery_suggestion = "Make sure the application is running and the name or PID is correct."

    def __init__(self, description: str):
        self.description = description
        super().__init__(f"Application not found: {description}")


class WindowNotFoundError(UIAutoError):
    """Raised when a window cannot be found."""

    error_code = ErrorCode.WINDOW_NOT_FOUND
    recovery_suggestion = (
        "Make sure the window exists and is correctly identified. "
        "The window might be closed or in a different state."
    )

    def __init__(self, description: str):
        self.description = description
        super().__init__(f"Window not found: {description}")


def format_error(error: BaseException) -> str:
    """
    Render an error for display, with its code and a recovery suggestion.

    @param error Any exception
    @return Multi-line message
    """
    if not isinstance(error, UIAutoError):
        return f"Error: {type(error).__name__}: {error}"
    lines = [
        f"Error: {error}",
        f"Error Code: {int(error.error_code)}",
        f"Recovery Suggestion: {error.recovery_suggestion}",
    ]
    return "\n".join(lines)


def quietly(
    func: Callable[..., T],
    default: Callable[[], Any],
    logger: Optional[logging.Logger] = None,
) -> Callable[..., Any]:
    """
    Derive a non-raising variant of ``func``.

    The wrapper logs any ``Exception`` and returns ``default()`` instead.
    """
    log = logger or logging.getLogger("uiauto_ax")

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except Exception as e:
            log.error(f"{func.__name__} failed: {type(e).__name__}: {e}")
            return default()

    return wrapper
