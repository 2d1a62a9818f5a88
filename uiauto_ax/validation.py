# uiauto_ax/validation.py
"""
@file validation.py
@brief Argument validation applied before any provider work starts.
"""

from __future__ import annotations

import logging

from .exceptions import ValidationError

logger = logging.getLogger(__name__)

MAX_TIMEOUT = 300.0
MAX_RETRY_COUNT = 10
MAX_RETRY_DELAY = 10.0

STANDARD_ROLES = {
    "button", "checkbox", "combobox", "disclosuretriangle",
    "group", "image", "link", "menu", "menubar", "menuitem",
    "popupbutton", "progressindicator", "radiobutton", "radiogroup",
    "scrollarea", "scrollbar", "slider", "statictext", "stepper",
    "tab", "tabgroup", "table", "text", "textfield", "toolbar",
    "window",
}


def validate_timeout(timeout: float) -> None:
    if timeout is None or timeout <= 0:
        raise ValidationError("timeout", "Timeout must be greater than 0")
    if timeout > MAX_TIMEOUT:
        raise ValidationError("timeout", f"Timeout must not exceed {MAX_TIMEOUT:.0f} seconds")


def validate_retry_count(count: int) -> None:
    if not isinstance(count, int) or isinstance(count, bool) or count < 1:
        raise ValidationError("retryCount", "Retry count must be a positive integer")
    if count > MAX_RETRY_COUNT:
        raise ValidationError("retryCount", f"Retry count must not exceed {MAX_RETRY_COUNT}")


def validate_retry_delay(delay: float) -> None:
    if delay is None or delay <= 0:
        raise ValidationError("retryDelay", "Retry delay must be greater than 0")
    if delay > MAX_RETRY_DELAY:
        raise ValidationError("retryDelay", f"Retry delay must not exceed {MAX_RETRY_DELAY:.0f} seconds")


def validate_element_role(role: str) -> None:
    """
    Reject empty roles. Unknown roles are allowed but logged, since
    applications are free to define their own.
    """
    if not role:
        raise ValidationError("role", "Element role cannot be empty")
    bare = role[2:] if role.startswith("AX") else role
    if bare.lower() not in STANDARD_ROLES:
        logger.warning(f"'{role}' is not a standard accessibility role. Continuing anyway.")


def validate_element_title(title: str) -> None:
    if not title:
        raise ValidationError("title", "Element title cannot be empty")


def validate_path(path: str) -> None:
    if not path or not path.strip("/"):
        raise ValidationError("path", "Element path cannot be empty")
