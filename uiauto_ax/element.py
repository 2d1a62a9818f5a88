# uiauto_ax/element.py
"""
@file element.py
@brief In-memory node of the accessibility element tree.
"""

from __future__ import annotations

import threading
import weakref
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from .engine import AXEngine


class Element:
    """
    One UI element and its locally known subtree.

    Children are loaded lazily by the engine's child loader. An empty
    ``children`` list only means "not loaded yet" unless ``has_children``
    is False. Once loaded, children are never replaced.

    Nodes built without an engine (synthetic trees) use a detached engine
    that has no provider.
    """

    def __init__(
        self,
        role: str,
        title: str = "",
        has_children: bool = False,
        role_description: str = "",
        sub_role: str = "",
        pid: int = 0,
        handle: Any = None,
        engine: Optional[AXEngine] = None,
    ):
        """
        @param role Provider role, e.g. "AXButton"
        @param title Title or label
        @param has_children Whether the provider says the element may have children
        @param role_description Human readable role, e.g. "minimize button"
        @param sub_role Finer-grained role, e.g. "AXMinimizeButton"
        @param pid Owner process id
        @param handle Provider handle, None for synthetic nodes
        @param engine Engine that created this node
        """
        self.role = role
        self.title = title
        self.has_children = has_children
        self.role_description = role_description
        self.sub_role = sub_role
        self.pid = pid
        self.is_focused = False
        self.children: List[Element] = []
        self.custom_data: Dict[str, Any] = {}
        self._handle = handle
        self._engine = engine
        self._parent_ref: Optional[weakref.ReferenceType] = None
        self._load_lock = threading.Lock()
        self._load_attempted = False

    @property
    def handle(self) -> Any:
        """The underlying provider handle, or None."""
        return self._handle

    @property
    def engine(self) -> AXEngine:
        if self._engine is not None:
            return self._engine
        from .engine import AXEngine
        return AXEngine.detached()

    @property
    def parent(self) -> Optional[Element]:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @parent.setter
    def parent(self, value: Optional[Element]) -> None:
        self._parent_ref = weakref.ref(value) if value is not None else None

    @property
    def children_inaccessible(self) -> bool:
        """
        True when a load was attempted, the provider claims children exist,
        and none could be read. This is a hint, never an error.
        """
        return self._load_attempted and self.has_children and not self.children

    @property
    def description(self) -> str:
        desc = self.role
        if self.sub_role:
            desc += f":{self.sub_role}"
        if self.title:
            desc += f"[{self.title}]"
            if self.role_description and self.title != self.role_description:
                desc += f" ({self.role_description})"
        elif self.role_description:
            desc += f"[{self.role_description}]"
        return desc

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        if self._handle is not None and other._handle is not None:
            return self._handle is other._handle
        return self is other

    def __hash__(self) -> int:
        if self._handle is not None:
            return id(self._handle)
        return id(self)

    def __repr__(self) -> str:
        return f"<Element {self.description} children={len(self.children)}>"

    def add_child(self, child: Element) -> None:
        """Attach a child directly, bypassing the loader (synthetic trees)."""
        child.parent = self
        self.children.append(child)
        self.has_children = True

    def load_children_if_needed(self) -> bool:
        """
        @return True if children are present (loaded now or earlier)
        """
        return self.engine.loader.load(self)

    def find_descendants(self, role: Optional[str] = None, title: Optional[str] = None) -> List[Element]:
        """All matching nodes of this subtree, self included, in pre-order."""
        return self.engine.find_elements(self, role=role, title=title)

    def get_available_actions(self) -> List[str]:
        return self.engine.actions.available_actions(self)

    def perform_action(self, name: str, value: Any = None) -> None:
        self.engine.actions.perform(self, name, value=value)

    def focus(self) -> None:
        self.engine.actions.focus(self)

    def set_value(self, value: Any) -> None:
        self.engine.actions.set_value(self, value)

    def get_value(self) -> Optional[str]:
        return self.engine.actions.get_value(self)

    def get_attributes(self) -> Dict[str, Any]:
        return self.engine.actions.attributes(self)
