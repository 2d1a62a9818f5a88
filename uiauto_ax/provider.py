"""
@file provider.py
@brief Abstract boundary to the out-of-process accessibility provider.

The engine never talks to a platform library directly; it consumes these
interfaces. A platform binding implements them for production and a fake
implements them for tests. Any method may block arbitrarily long or raise
a binding-specific error; callers treat both as timeout/retry candidates.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from .models import Application, Window

ROLE_ATTRIBUTE = "AXRole"
TITLE_ATTRIBUTE = "AXTitle"
SUBROLE_ATTRIBUTE = "AXSubrole"
ROLE_DESCRIPTION_ATTRIBUTE = "AXRoleDescription"
CHILDREN_ATTRIBUTE = "AXChildren"
ACTIONS_ATTRIBUTE = "AXActions"
FOCUSED_ATTRIBUTE = "AXFocused"
FOCUSED_ELEMENT_ATTRIBUTE = "AXFocusedElement"
VALUE_ATTRIBUTE = "AXValue"


class AccessibilityProvider(ABC):
    """
    Element-level queries against the accessibility provider.

    Handles are opaque to the engine; only the provider interprets them.
    """

    @abstractmethod
    def role_of(self, handle: Any) -> str:
        """
        Get the element's role (e.g. "AXButton").

        Args:
            handle: Provider element handle

        Returns:
            Role string, empty if the element reports none
        """
        pass

    @abstractmethod
    def title_of(self, handle: Any) -> str:
        """
        Get the element's title.

        Args:
            handle: Provider element handle

        Returns:
            Title string, empty if the element reports none
        """
        pass

    @abstractmethod
    def attribute_names(self, handle: Any) -> List[str]:
        """
        List the attribute names the element exposes.

        Args:
            handle: Provider element handle

        Returns:
            Attribute names
        """
        pass

    @abstractmethod
    def attribute_value(self, handle: Any, key: str) -> Any:
        """
        Read one attribute.

        Args:
            handle: Provider element handle
            key: Attribute name (e.g. "AXChildren")

        Returns:
            Attribute value, or None if the element does not expose it
        """
        pass

    @abstractmethod
    def set_attribute_value(self, handle: Any, key: str, value: Any) -> None:
        """
        Write one attribute.

        Args:
            handle: Provider element handle
            key: Attribute name
            value: New value
        """
        pass

    @abstractmethod
    def children_of(self, handle: Any) -> Sequence[Any]:
        """
        Get the element's children through the structured accessor.

        Args:
            handle: Provider element handle

        Returns:
            Child handles in provider order
        """
        pass

    @abstractmethod
    def perform_action(self, handle: Any, name: str) -> None:
        """
        Perform a named action (e.g. "AXPress").

        Args:
            handle: Provider element handle
            name: Action name as the provider spells it
        """
        pass

    @abstractmethod
    def has_children(self, handle: Any) -> bool:
        """
        Whether the provider reports that the element may have children.

        Args:
            handle: Provider element handle
        """
        pass


class ApplicationSource(ABC):
    """
    Application and window discovery.

    Only the focused application/window lookups are needed by the engine.
    """

    @abstractmethod
    def focused_application(self) -> Optional[Application]:
        """
        Get the frontmost application.

        Returns:
            Application, or None if nothing has focus
        """
        pass

    @abstractmethod
    def focused_window(self, app: Application) -> Optional[Window]:
        """
        Get the focused window of an application.

        Args:
            app: Application returned by focused_application

        Returns:
            Window, or None if the application has no focused window
        """
        pass
