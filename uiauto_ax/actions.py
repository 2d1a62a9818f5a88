# uiauto_ax/actions.py
"""
@file actions.py
@brief Action discovery and dispatch on element nodes.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

from .actionlogger import ACTION_LOGGER
from .config import TimeConfig, TimeoutSettings
from .element import Element
from .exceptions import (InvalidElementStateError, UIAutoError,
                         UnsupportedActionError, ValidationError)
from .provider import (ACTIONS_ATTRIBUTE, FOCUSED_ATTRIBUTE, VALUE_ATTRIBUTE,
                       AccessibilityProvider)
from .waits import with_timeout, with_timeout_and_retry

T = TypeVar("T")

PRESS = "press"
FOCUS = "focus"
SET_VALUE = "setValue"

ACTION_ALIASES = {"AXPress": PRESS}
TEXT_ENTRY_ROLES = {
    "axtextfield", "textfield",
    "axtextarea", "textarea",
    "axsearchfield", "searchfield",
    "axcombobox", "combobox",
}


class ActionInvoker:
    """
    Performs actions through the provider.

    Timeout and retry errors propagate unchanged. Any other provider
    failure is raised as InvalidElementStateError chained to its cause.
    """

    def __init__(
        self,
        provider: Optional[AccessibilityProvider],
        config: Optional[TimeConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.provider = provider
        self._config = config
        self.log = logger or logging.getLogger(__name__)

    def _settings(self, name: str) -> TimeoutSettings:
        return (self._config or TimeConfig.current()).get(name)

    def _require_handle(self, element: Element) -> Any:
        if element.handle is None or self.provider is None:
            raise InvalidElementStateError(element.description, "No underlying accessibility element")
        return element.handle

    def _guard(self, element: Element, what: str, call: Callable[[], T]) -> T:
        try:
            return call()
        except UIAutoError:
            raise
        except Exception as e:
            raise InvalidElementStateError(element.description, f"{what} failed: {e}", cause=e) from e

    def _reported_actions(self, element: Element, handle: Any) -> Optional[List[str]]:
        settings = self._settings("actions_read")
        try:
            raw = with_timeout(
                settings.timeout,
                lambda: self.provider.attribute_value(handle, ACTIONS_ATTRIBUTE),
                description=f"read actions of {element.description}",
            )
        except ValidationError:
            raise
        except Exception as e:
            self.log.warning(f"Could not read actions of {element.description}: {type(e).__name__}: {e}")
            return None
        if raw is None or isinstance(raw, (str, bytes)):
            return []
        return [str(name) for name in raw]

    def available_actions(self, element: Element) -> List[str]:
        """
        Provider-reported actions plus aliases, ``setValue`` for text entry
        roles, and ``focus``. Duplicates are dropped, order is kept.

        @throws InvalidElementStateError if the node has no provider handle
        """
        handle = self._require_handle(element)
        return self._advertised(element, self._reported_actions(element, handle))

    def _advertised(self, element: Element, reported: Optional[List[str]]) -> List[str]:
        if reported is None:
            return [FOCUS]

        names: List[str] = []

        def add(name: str) -> None:
            if name not in names:
                names.append(name)

        for name in reported:
            add(name)
        for name in reported:
            if name in ACTION_ALIASES:
                add(ACTION_ALIASES[name])
        if element.role.lower() in TEXT_ENTRY_ROLES:
            add(SET_VALUE)
        add(FOCUS)
        return names

    def perform(self, element: Element, name: str, value: Any = None) -> None:
        """
        Perform a named action after checking it is advertised.

        @throws UnsupportedActionError if ``name`` is not advertised; nothing is dispatched
        @throws ValidationError for ``setValue`` without a value
        """
        if not name:
            raise ValidationError("action", "Action name cannot be empty")
        handle = self._require_handle(element)
        reported = self._reported_actions(element, handle)
        available = self._advertised(element, reported)
        if name not in available:
            raise UnsupportedActionError(element.description, name, available)

        if name == FOCUS:
            self.focus(element)
        elif name == SET_VALUE:
            if value is None:
                raise ValidationError("value", "setValue requires a value")
            self.set_value(element, value)
        elif name == PRESS:
            raw_name = PRESS if PRESS in (reported or []) else "AXPress"
            self._press(element, handle, raw_name)
        else:
            settings = self._settings("action")
            with ACTION_LOGGER.track(name, element.description):
                self._guard(element, f"Action '{name}'", lambda: with_timeout(
                    settings.timeout,
                    lambda: self.provider.perform_action(handle, name),
                    description=f"perform {name} on {element.description}",
                ))
        self.log.info(f"Performed '{name}' on {element.description}")

    def _press(self, element: Element, handle: Any, raw_name: str) -> None:
        settings = self._settings("press_action")
        with ACTION_LOGGER.track(PRESS, element.description):
            self._guard(element, "Press", lambda: with_timeout_and_retry(
                settings.timeout,
                settings.retry_count or 1,
                settings.interval,
                lambda: self.provider.perform_action(handle, raw_name),
                description=f"press {element.description}",
            ))

    def focus(self, element: Element) -> None:
        """Set ``AXFocused`` with retries and mark the node focused."""
        handle = self._require_handle(element)
        settings = self._settings("focus_action")
        with ACTION_LOGGER.track(FOCUS, element.description):
            self._guard(element, "Focus", lambda: with_timeout_and_retry(
                settings.timeout,
                settings.retry_count or 1,
                settings.interval,
                lambda: self.provider.set_attribute_value(handle, FOCUSED_ATTRIBUTE, True),
                description=f"focus {element.description}",
            ))
        element.is_focused = True

    def set_value(self, element: Element, value: Any) -> None:
        handle = self._require_handle(element)
        settings = self._settings("set_value_action")
        with ACTION_LOGGER.track(SET_VALUE, element.description, value=value):
            self._guard(element, "Set value", lambda: with_timeout(
                settings.timeout,
                lambda: self.provider.set_attribute_value(handle, VALUE_ATTRIBUTE, value),
                description=f"set value of {element.description}",
            ))

    def get_value(self, element: Element) -> Optional[str]:
        handle = self._require_handle(element)
        settings = self._settings("get_value_action")
        value = self._guard(element, "Get value", lambda: with_timeout(
            settings.timeout,
            lambda: self.provider.attribute_value(handle, VALUE_ATTRIBUTE),
            description=f"get value of {element.description}",
        ))
        return None if value is None else str(value)

    def attributes(self, element: Element) -> Dict[str, Any]:
        """
        Every readable attribute of the node, bounded by ``attributes_read``.
        Attributes that fail to read are logged and left out.
        """
        handle = self._require_handle(element)
        settings = self._settings("attributes_read")

        def read_all() -> Dict[str, Any]:
            names = self.provider.attribute_names(handle)
            if names is None:
                raise InvalidElementStateError(element.description, "Cannot retrieve attribute names")
            result: Dict[str, Any] = {}
            for name in names:
                try:
                    result[name] = self.provider.attribute_value(handle, name)
                except Exception as e:
                    self.log.warning(f"Skipping attribute {name} of {element.description}: {e}")
            return result

        return self._guard(element, "Attribute read", lambda: with_timeout(
            settings.timeout, read_all, description=f"read attributes of {element.description}",
        ))
