# uiauto_ax/engine.py
"""
@file engine.py
@brief Entry point tying the provider, loader, search, paths and actions together.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, List, Optional, TypeVar

from .actions import ActionInvoker
from .config import TimeConfig
from .element import Element
from .exceptions import (ApplicationNotFoundError, ElementNotFoundError,
                         InvalidElementStateError, WindowNotFoundError,
                         quietly)
from .loader import ChildLoader
from .models import Window
from .path import PathResolver
from .provider import (FOCUSED_ELEMENT_ATTRIBUTE, ROLE_DESCRIPTION_ATTRIBUTE,
                       SUBROLE_ATTRIBUTE, AccessibilityProvider,
                       ApplicationSource)
from .search import SearchEngine
from .validation import validate_element_role, validate_element_title
from .waits import with_timeout, with_timeout_and_retry

T = TypeVar("T")


class AXEngine:
    """
    Finds and builds elements on top of an accessibility provider.

    Example:
        engine = AXEngine(MacOSProvider(), MacOSApplicationSource())
        field = engine.get_focused_element()
        root = engine.element_from_handle(window.handle, pid=window.pid)
        ok = engine.find_element_by_path("toolbar[]/button[OK]", root)
        ok.perform_action("press")
    """

    _detached: Optional[AXEngine] = None
    _detached_lock = threading.Lock()

    def __init__(
        self,
        provider: Optional[AccessibilityProvider] = None,
        applications: Optional[ApplicationSource] = None,
        config: Optional[TimeConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        @param provider Element-level provider; None for synthetic trees only
        @param applications Focused application/window lookup
        @param config Timing config; TimeConfig.current() when None
        @param logger Logger shared by all components; module loggers when None
        """
        self.provider = provider
        self.applications = applications
        self._config = config
        self.log = logger or logging.getLogger(__name__)

        self.loader = ChildLoader(provider, self._child_from_handle, logger=logger, config=config)
        self.searcher = SearchEngine(logger=logger)
        self.paths = PathResolver(self.searcher, logger=logger)
        self.actions = ActionInvoker(provider, config=config, logger=logger)

        self.find_elements_or_empty = quietly(self.find_elements, list, self.log)
        self.find_element_by_path_or_none = quietly(self.find_element_by_path, lambda: None, self.log)
        self.get_focused_element_or_none = quietly(self.get_focused_element, lambda: None, self.log)
        self.window_elements_or_empty = quietly(self.window_elements, list, self.log)

    @classmethod
    def detached(cls) -> AXEngine:
        """Shared provider-less engine used by nodes built without one."""
        if cls._detached is None:
            with cls._detached_lock:
                if cls._detached is None:
                    cls._detached = cls()
        return cls._detached

    @property
    def config(self) -> TimeConfig:
        return self._config or TimeConfig.current()

    # ------------------------------------------------------------------
    # Building nodes
    # ------------------------------------------------------------------

    def _read(self, handle: Any, what: str, call: Callable[[], T], default: T) -> T:
        try:
            value = call()
        except Exception as e:
            self.log.debug(f"Could not read {what} of {handle!r}: {type(e).__name__}: {e}")
            return default
        return default if value is None else value

    def _build(self, handle: Any, pid: int = 0) -> Element:
        p = self.provider
        if p is None:
            raise InvalidElementStateError(repr(handle), "Engine has no accessibility provider")
        role = self._read(handle, "role", lambda: p.role_of(handle), "") or "unknown"
        title = self._read(handle, "title", lambda: p.title_of(handle), "")
        role_description = self._read(
            handle, "role description", lambda: p.attribute_value(handle, ROLE_DESCRIPTION_ATTRIBUTE), ""
        )
        sub_role = self._read(handle, "subrole", lambda: p.attribute_value(handle, SUBROLE_ATTRIBUTE), "")
        has_children = self._read(handle, "children flag", lambda: p.has_children(handle), False)
        return Element(
            role=str(role),
            title=str(title),
            has_children=bool(has_children),
            role_description=str(role_description),
            sub_role=str(sub_role),
            pid=pid,
            handle=handle,
            engine=self,
        )

    def _child_from_handle(self, handle: Any, parent: Element) -> Element:
        return self._build(handle, pid=parent.pid)

    def element_from_handle(self, handle: Any, pid: int = 0) -> Element:
        """
        Build a root node from a provider handle. Attribute reads that
        fail fall back to defaults; the whole construction is bounded by
        the ``element_read`` timeout.
        """
        settings = self.config.get("element_read")
        return with_timeout(
            settings.timeout, lambda: self._build(handle, pid), description="build element from handle"
        )

    def window_elements(self, window: Window) -> List[Element]:
        """Top-level elements of a window (the window root's children)."""
        if window.handle is None:
            raise InvalidElementStateError(f"Window '{window.title}'", "No underlying accessibility element")
        settings = self.config.get("element_read")

        def load() -> List[Element]:
            root = self._build(window.handle, window.pid)
            root.load_children_if_needed()
            return list(root.children)

        return with_timeout(settings.timeout, load, description=f"load elements of window '{window.title}'")

    # ------------------------------------------------------------------
    # Finding
    # ------------------------------------------------------------------

    def find_elements(
        self,
        root: Element,
        role: Optional[str] = None,
        title: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> List[Element]:
        """
        Every node under ``root`` (root included) matching role and title,
        in pre-order.

        @throws ValidationError for an empty role or title
        @throws TimeoutError if the search exceeds ``timeout`` (config ``search``)
        """
        if role is not None:
            validate_element_role(role)
        if title is not None:
            validate_element_title(title)
        limit = timeout if timeout is not None else self.config.get("search").timeout
        results = self.searcher.find_descendants(root, role=role, title=title, timeout=limit)
        self.log.debug(f"Found {len(results)} elements under {root.description} (role={role}, title={title})")
        return results

    def find_element_by_path(self, path: str, root: Element, timeout: Optional[float] = None) -> Element:
        """
        Resolve a ``role[title]/role[title]`` expression from ``root``.

        @throws ValidationError if the path is malformed
        @throws ElementNotFoundError if a segment has no match
        @throws TimeoutError if resolution exceeds ``timeout`` (config ``path_resolve``)
        """
        limit = timeout if timeout is not None else self.config.get("path_resolve").timeout
        return self.paths.resolve(path, root, timeout=limit)

    def get_focused_element(self) -> Element:
        """
        The element with keyboard focus in the focused window of the
        frontmost application.

        @throws ApplicationNotFoundError, WindowNotFoundError, ElementNotFoundError
        """
        if self.applications is None or self.provider is None:
            raise InvalidElementStateError("focused element", "Engine has no application source")
        settings = self.config.get("focused_element")

        def lookup() -> Element:
            app = self.applications.focused_application()
            if app is None:
                raise ApplicationNotFoundError("No focused application")
            window = self.applications.focused_window(app)
            if window is None:
                raise WindowNotFoundError(f"Focused window of {app.name}")
            if window.handle is None:
                raise InvalidElementStateError(f"Window '{window.title}'", "No underlying accessibility element")
            handle = self.provider.attribute_value(window.handle, FOCUSED_ELEMENT_ATTRIBUTE)
            if handle is None:
                raise ElementNotFoundError(f"Focused element in window '{window.title}'")
            element = self._build(handle, pid=window.pid or app.pid)
            element.is_focused = True
            return element

        return with_timeout_and_retry(
            settings.timeout,
            settings.retry_count or 1,
            settings.interval,
            lookup,
            description="get focused element",
        )
