# uiauto_ax/__init__.py
"""
UIAuto AX - Accessibility element tree engine.

This package provides:
- Element: Lazily loaded node of the accessibility tree
- AXEngine: Search, path resolution and focused-element lookup
- Waits: Timeout/retry wrappers for provider calls
- Exceptions: Error taxonomy with codes and recovery suggestions
- Provider interfaces: Abstract base classes for platform bindings

The macOS binding lives in ``uiauto_ax.macos`` and needs the ``macos`` extra.
"""

from uiauto_ax.element import Element
from uiauto_ax.engine import AXEngine
from uiauto_ax.path import PathSegment, parse_path
from uiauto_ax.search import matches
from uiauto_ax.waits import with_timeout, with_retry, with_timeout_and_retry
from uiauto_ax.config import TimeConfig, TimeoutSettings
from uiauto_ax.models import Application, Window, Frame
from uiauto_ax.provider import AccessibilityProvider, ApplicationSource
from uiauto_ax.exceptions import (
    UIAutoError,
    ErrorCode,
    ConfigError,
    ValidationError,
    TimeoutError,
    RetryExhaustedError,
    ElementNotFoundError,
    UnsupportedActionError,
    InvalidElementStateError,
    AccessibilityError,
    ApplicationNotFoundError,
    WindowNotFoundError,
    format_error,
)
from uiauto_ax.logsetup import setup_logging, get_logger

__all__ = [
    "Element",
    "AXEngine",
    "PathSegment",
    "parse_path",
    "matches",
    "with_timeout",
    "with_retry",
    "with_timeout_and_retry",
    "TimeConfig",
    "TimeoutSettings",
    "Application",
    "Window",
    "Frame",
    "AccessibilityProvider",
    "ApplicationSource",
    "UIAutoError",
    "ErrorCode",
    "ConfigError",
    "ValidationError",
    "TimeoutError",
    "RetryExhaustedError",
    "ElementNotFoundError",
    "UnsupportedActionError",
    "InvalidElementStateError",
    "AccessibilityError",
    "ApplicationNotFoundError",
    "WindowNotFoundError",
    "format_error",
    "setup_logging",
    "get_logger",
]
