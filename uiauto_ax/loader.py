# uiauto_ax/loader.py
"""
@file loader.py
@brief Lazy child loading with ordered fallback strategies.

Strategies, tried in order until one yields children:
  1. children_accessor  - the provider's structured children accessor
  2. children_attribute - the raw "AXChildren" attribute
  3. raw_handle         - "AXChildren" read from an alternate handle kept
                          in ``custom_data["raw_handle"]``

A strategy that raises is logged and skipped. If all come back empty the
node is left childless and flagged through ``children_inaccessible``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .config import TimeConfig
from .element import Element
from .provider import CHILDREN_ATTRIBUTE, AccessibilityProvider

RAW_HANDLE_KEY = "raw_handle"

ChildFactory = Callable[[Any, Element], Element]


def as_handle_list(value: Any) -> List[Any]:
    """Coerce a provider children value into a list of handles."""
    if value is None or isinstance(value, (str, bytes)):
        return []
    try:
        return [h for h in value if h is not None]
    except TypeError:
        return []


class ChildLoader:
    """Populates ``Element.children`` at most once per node."""

    def __init__(
        self,
        provider: Optional[AccessibilityProvider],
        element_factory: ChildFactory,
        logger: Optional[logging.Logger] = None,
        config: Optional[TimeConfig] = None,
    ):
        """
        @param provider Provider to read children from; None loads nothing
        @param element_factory Builds a child node from (handle, parent)
        @param logger Optional logger
        @param config Timing config; the ``element_read`` timeout bounds the
               wait for a node lock held by another loader
        """
        self.provider = provider
        self._factory = element_factory
        self._config = config
        self.log = logger or logging.getLogger(__name__)

    def load(self, element: Element) -> bool:
        """
        Load the children of ``element`` if that has not happened yet.

        Concurrent callers on the same node serialize on the node's lock;
        exactly one performs provider work. A node whose load came back
        empty is tried again on the next call. If the lock stays held
        longer than the ``element_read`` timeout (for instance by a worker
        abandoned on a hung provider call) the node counts as not loaded.

        @return True if the node has children afterwards
        """
        if element.children:
            return True
        if not element.has_children:
            return False

        wait = (self._config or TimeConfig.current()).get("element_read").timeout
        if not element._load_lock.acquire(timeout=wait):
            self.log.warning(
                f"Gave up waiting {wait}s for another load of {element.description}; "
                f"treating children as not loaded"
            )
            return bool(element.children)
        try:
            return self._load_locked(element)
        finally:
            element._load_lock.release()

    def _load_locked(self, element: Element) -> bool:
        if element.children:
            return True

        self.log.debug(f"Loading children for {element.description}")
        for name, strategy in self._strategies():
            try:
                handles = as_handle_list(strategy(element))
            except Exception as e:
                self.log.warning(
                    f"Child loading strategy '{name}' failed for {element.description}: "
                    f"{type(e).__name__}: {e}"
                )
                continue

            if not handles:
                self.log.debug(f"Strategy '{name}' returned no children for {element.description}")
                continue

            children = [self._factory(handle, element) for handle in handles]
            for child in children:
                child.parent = element
            element.children.extend(children)
            element._load_attempted = True
            self.log.debug(f"Loaded {len(children)} children for {element.description} via '{name}'")
            return True

        element._load_attempted = True
        self.log.warning(
            f"No children found for {element.description} despite has_children=True; "
            f"marking children inaccessible"
        )
        return False

    def _strategies(self) -> List[Tuple[str, Callable[[Element], Sequence[Any]]]]:
        return [
            ("children_accessor", self._from_accessor),
            ("children_attribute", self._from_attribute),
            ("raw_handle", self._from_raw_handle),
        ]

    def _from_accessor(self, element: Element) -> Sequence[Any]:
        if self.provider is None or element.handle is None:
            return []
        return self.provider.children_of(element.handle)

    def _from_attribute(self, element: Element) -> Sequence[Any]:
        if self.provider is None or element.handle is None:
            return []
        return self.provider.attribute_value(element.handle, CHILDREN_ATTRIBUTE)

    def _from_raw_handle(self, element: Element) -> Sequence[Any]:
        raw = element.custom_data.get(RAW_HANDLE_KEY)
        if self.provider is None or raw is None:
            return []
        return self.provider.attribute_value(raw, CHILDREN_ATTRIBUTE)
