# uiauto_ax/path.py
"""
@file path.py
@brief Path expressions of the form ``role[title]/role[title]/...``.

Each segment is searched for from the element found by the previous one
(that element included) and the first pre-order match is taken. An empty
title (``button[]``) matches any title.
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass
from typing import List, Optional

from .element import Element
from .exceptions import ElementNotFoundError, TimeoutError, ValidationError
from .search import SearchEngine
from .validation import validate_path
from .waits import with_timeout

_SEGMENT_RE = re.compile(r"^\s*([^\[\]]+?)\s*\[(.*)\]\s*$", re.DOTALL)


@dataclass(frozen=True)
class PathSegment:
    role: str
    title: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.role}[{self.title or ''}]"


def split_path(path: str) -> List[str]:
    """Split on '/' characters that are not inside brackets."""
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for ch in path:
        if ch == "[":
            depth += 1
        elif ch == "]" and depth > 0:
            depth -= 1
        if ch == "/" and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return [p for p in parts if p.strip()]


def parse_path(path: str) -> List[PathSegment]:
    """
    @throws ValidationError if the path is empty or any segment is not ``role[title]``
    """
    validate_path(path)
    segments = []
    for raw in split_path(path):
        m = _SEGMENT_RE.match(raw)
        if not m:
            raise ValidationError("path", f"Invalid path format at component: {raw}")
        segments.append(PathSegment(role=m.group(1), title=m.group(2) or None))
    return segments


class PathResolver:
    """Resolves path expressions with one timeout covering every segment."""

    def __init__(self, searcher: SearchEngine, logger: Optional[logging.Logger] = None):
        self.searcher = searcher
        self.log = logger or logging.getLogger(__name__)

    def resolve(self, path: str, root: Element, timeout: float = 5.0) -> Element:
        """
        @throws ValidationError if the path is malformed (before any provider work)
        @throws ElementNotFoundError naming the first segment without a match
        @throws TimeoutError if resolution takes longer than ``timeout``
        """
        segments = parse_path(path)
        cancelled = threading.Event()

        def walk() -> Element:
            current = root
            resolved: List[str] = []
            for segment in segments:
                found = self.searcher.collect(
                    current, segment.role, segment.title, first_only=True, cancelled=cancelled
                )
                if not found:
                    if cancelled.is_set():
                        return current
                    raise ElementNotFoundError(
                        f"{segment.role} with title '{segment.title or ''}'",
                        role=segment.role,
                        title=segment.title,
                        resolved_path="/".join(resolved),
                    )
                current = found[0]
                resolved.append(str(segment))
                self.log.debug(f"Path step {segment} -> {current.description}")
            return current

        try:
            return with_timeout(timeout, walk, description=f"resolve path '{path}'")
        except TimeoutError:
            cancelled.set()
            raise


def find_element_by_path(path: str, root: Element, timeout: float = 5.0) -> Element:
    """Resolve ``path`` from ``root`` with a default resolver."""
    return PathResolver(SearchEngine()).resolve(path, root, timeout=timeout)
