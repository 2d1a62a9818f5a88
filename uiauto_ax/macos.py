# uiauto_ax/macos.py
"""macOS accessibility binding over pyobjc ApplicationServices."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

try:
    from AppKit import NSWorkspace
    from ApplicationServices import (
        AXIsProcessTrusted,
        AXUIElementCopyAttributeNames,
        AXUIElementCopyAttributeValue,
        AXUIElementCopyAttributeValues,
        AXUIElementCreateApplication,
        AXUIElementGetAttributeValueCount,
        AXUIElementPerformAction,
        AXUIElementSetAttributeValue,
        AXValueGetValue,
        kAXErrorAPIDisabled,
        kAXErrorAttributeUnsupported,
        kAXErrorNoValue,
        kAXErrorSuccess,
        kAXValueCGPointType,
        kAXValueCGSizeType,
    )
    PYOBJC_AVAILABLE = True
except ImportError:
    PYOBJC_AVAILABLE = False

from .exceptions import AccessibilityError, ErrorCode, UIAutoError
from .models import Application, Frame, Window
from .provider import (CHILDREN_ATTRIBUTE, ROLE_ATTRIBUTE, TITLE_ATTRIBUTE,
                       AccessibilityProvider, ApplicationSource)

_INSTALL_HINT = (
    "pyobjc is required for macOS accessibility. "
    "Install with: pip install 'uiauto-ax[macos]'"
)


class AXAPIError(UIAutoError):
    """A non-success AXError returned by the accessibility API."""

    error_code = ErrorCode.OPERATION_FAILED

    def __init__(self, call: str, ax_error: int):
        self.call = call
        self.ax_error = ax_error
        super().__init__(f"{call} failed with AXError {ax_error}")


def _check(call: str, err: int) -> None:
    if err == kAXErrorSuccess:
        return
    if err == kAXErrorAPIDisabled:
        raise AccessibilityError("Accessibility API is disabled", enabled=False)
    raise AXAPIError(call, err)


class MacOSProvider(AccessibilityProvider):
    """
    AccessibilityProvider backed by AXUIElement handles.

    Every call blocks on the target application; the engine bounds them
    with timeouts.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        if not PYOBJC_AVAILABLE:
            raise ImportError(_INSTALL_HINT)
        self.log = logger or logging.getLogger(__name__)

    def role_of(self, handle: Any) -> str:
        return str(self.attribute_value(handle, ROLE_ATTRIBUTE) or "")

    def title_of(self, handle: Any) -> str:
        return str(self.attribute_value(handle, TITLE_ATTRIBUTE) or "")

    def attribute_names(self, handle: Any) -> List[str]:
        err, names = AXUIElementCopyAttributeNames(handle, None)
        _check("AXUIElementCopyAttributeNames", err)
        return [str(n) for n in (names or [])]

    def attribute_value(self, handle: Any, key: str) -> Any:
        err, value = AXUIElementCopyAttributeValue(handle, key, None)
        if err in (kAXErrorNoValue, kAXErrorAttributeUnsupported):
            return None
        _check(f"AXUIElementCopyAttributeValue({key})", err)
        return value

    def set_attribute_value(self, handle: Any, key: str, value: Any) -> None:
        err = AXUIElementSetAttributeValue(handle, key, value)
        _check(f"AXUIElementSetAttributeValue({key})", err)

    def children_of(self, handle: Any) -> Sequence[Any]:
        err, count = AXUIElementGetAttributeValueCount(handle, CHILDREN_ATTRIBUTE, None)
        if err in (kAXErrorNoValue, kAXErrorAttributeUnsupported) or not count:
            return []
        _check("AXUIElementGetAttributeValueCount", err)
        err, values = AXUIElementCopyAttributeValues(handle, CHILDREN_ATTRIBUTE, 0, count, None)
        _check("AXUIElementCopyAttributeValues", err)
        return list(values or [])

    def perform_action(self, handle: Any, name: str) -> None:
        err = AXUIElementPerformAction(handle, name)
        _check(f"AXUIElementPerformAction({name})", err)

    def has_children(self, handle: Any) -> bool:
        err, count = AXUIElementGetAttributeValueCount(handle, CHILDREN_ATTRIBUTE, None)
        return err == kAXErrorSuccess and bool(count)


class MacOSApplicationSource(ApplicationSource):
    """Frontmost application from NSWorkspace, focused window from AX."""

    def __init__(self, provider: Optional[MacOSProvider] = None):
        if not PYOBJC_AVAILABLE:
            raise ImportError(_INSTALL_HINT)
        self.provider = provider or MacOSProvider()

    def focused_application(self) -> Optional[Application]:
        if not AXIsProcessTrusted():
            raise AccessibilityError()
        app = NSWorkspace.sharedWorkspace().frontmostApplication()
        if app is None:
            return None
        pid = int(app.processIdentifier())
        return Application(
            name=str(app.localizedName() or ""),
            pid=pid,
            bundle_identifier=app.bundleIdentifier(),
            is_frontmost=True,
            handle=AXUIElementCreateApplication(pid),
        )

    def focused_window(self, app: Application) -> Optional[Window]:
        root = app.handle if app.handle is not None else AXUIElementCreateApplication(app.pid)
        handle = self.provider.attribute_value(root, "AXFocusedWindow")
        if handle is None:
            return None
        fullscreen = self.provider.attribute_value(handle, "AXFullScreen")
        return Window(
            title=self.provider.title_of(handle),
            pid=app.pid,
            frame=self._frame_of(handle),
            is_fullscreen=bool(fullscreen),
            handle=handle,
        )

    def _frame_of(self, handle: Any) -> Frame:
        pos_ref = self.provider.attribute_value(handle, "AXPosition")
        size_ref = self.provider.attribute_value(handle, "AXSize")
        if pos_ref is None or size_ref is None:
            return Frame()
        _, point = AXValueGetValue(pos_ref, kAXValueCGPointType, None)
        _, size = AXValueGetValue(size_ref, kAXValueCGSizeType, None)
        return Frame(x=point.x, y=point.y, width=size.width, height=size.height)
