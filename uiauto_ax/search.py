# uiauto_ax/search.py
"""
@file search.py
@brief Role/title search over the lazily loaded element tree.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional

from .element import Element
from .exceptions import TimeoutError
from .waits import with_timeout


def matches(element: Element, role: Optional[str] = None, title: Optional[str] = None) -> bool:
    """
    Role matches ``role`` or ``sub_role`` case-insensitively.
    Title is a case-insensitive substring of ``title`` or of a non-empty
    ``role_description``. A predicate left as None matches anything.
    """
    if role is not None:
        wanted = role.lower()
        if element.role.lower() != wanted and element.sub_role.lower() != wanted:
            return False

    if title is not None:
        needle = title.lower()
        if needle not in element.title.lower():
            if not element.role_description or needle not in element.role_description.lower():
                return False

    return True


class SearchEngine:
    """Pre-order search that loads children right before visiting them."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.log = logger or logging.getLogger(__name__)

    def find_descendants(
        self,
        root: Element,
        role: Optional[str] = None,
        title: Optional[str] = None,
        timeout: float = 10.0,
    ) -> List[Element]:
        """
        All nodes under ``root`` (root included) matching the predicates.

        @param timeout Bound on the entire walk in seconds
        @throws TimeoutError if the walk does not finish in time; partial
                results are discarded
        """
        cancelled = threading.Event()
        try:
            return with_timeout(
                timeout,
                lambda: self.collect(root, role, title, cancelled=cancelled),
                description=f"find descendants of {root.description} (role={role}, title={title})",
            )
        except TimeoutError:
            cancelled.set()
            raise

    def collect(
        self,
        root: Element,
        role: Optional[str] = None,
        title: Optional[str] = None,
        first_only: bool = False,
        cancelled: Optional[threading.Event] = None,
    ) -> List[Element]:
        """
        Unbounded walk; callers wrap it in a timeout.

        @param first_only Stop at the first match
        @param cancelled Set by the caller to make an abandoned walk stop
        """
        results: List[Element] = []
        stack = [root]
        while stack:
            if cancelled is not None and cancelled.is_set():
                self.log.debug(f"Search under {root.description} cancelled")
                break

            node = stack.pop()
            if matches(node, role, title):
                results.append(node)
                if first_only:
                    break

            if node.has_children:
                try:
                    node.load_children_if_needed()
                except Exception as e:
                    self.log.warning(
                        f"Skipping subtree of {node.description}: "
                        f"failed to load children: {type(e).__name__}: {e}"
                    )
                    continue
            stack.extend(reversed(list(node.children)))
        return results
