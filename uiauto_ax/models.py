# uiauto_ax/models.py

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Frame:
    """Window frame in screen coordinates."""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class Application:
    """
    A running application as reported by the discovery layer.

    ``handle`` is the provider handle of the application's root element.
    """
    name: str
    pid: int
    bundle_identifier: Optional[str] = None
    is_frontmost: bool = False
    handle: Any = None


@dataclass(frozen=True)
class Window:
    """An application window; ``handle`` is the window's provider handle."""
    title: str
    pid: int = 0
    frame: Frame = Frame()
    is_fullscreen: bool = False
    handle: Any = None
