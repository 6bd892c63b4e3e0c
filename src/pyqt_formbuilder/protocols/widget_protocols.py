"""
Widget ABC contracts for form field bindings.

A widget can be bound to a FormFieldController only if it implements these
contracts explicitly; FieldBinding checks with isinstance() and fails loud.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional


class ValueGettable(ABC):
    """
    ABC for widgets that can return a value.

    Bound widgets report their value through this when the user edits them.
    """

    @abstractmethod
    def get_value(self) -> Any:
        """
        Get the current value from the widget.

        Returns:
            The widget's current value. None if no value set.
        """
        pass


class ValueSettable(ABC):
    """
    ABC for widgets that can accept a value.

    Bound widgets receive reset and patched values through this.
    """

    @abstractmethod
    def set_value(self, value: Any) -> None:
        """
        Set the widget's value.

        Args:
            value: The value to set. None clears the widget.
        """
        pass


class ErrorDisplayable(ABC):
    """
    ABC for widgets that can show a field's error.

    Optional for binding: widgets without it simply do not display errors.
    """

    @abstractmethod
    def set_error_text(self, text: Optional[str]) -> None:
        """
        Show or clear the error.

        Args:
            text: Error message, or None when the field is valid
        """
        pass


class ChangeSignalEmitter(ABC):
    """
    ABC for widgets that emit change signals.

    Hides the widget-specific signal name (textChanged vs valueChanged vs
    stateChanged) behind one connect/disconnect pair.
    """

    @abstractmethod
    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        """
        Connect callback to widget's change signal.

        Args:
            callback: Called with the widget's new value.
                     Signature: callback(new_value: Any) -> None
        """
        pass

    @abstractmethod
    def disconnect_change_signal(self, callback: Callable[[Any], None]) -> None:
        """
        Disconnect a callback previously passed to connect_change_signal().

        Args:
            callback: The callback function to disconnect
        """
        pass
