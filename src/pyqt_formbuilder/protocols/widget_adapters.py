"""
Widget adapters that wrap Qt widgets to implement the binding ABCs.

Normalizes Qt's inconsistent APIs:
- QLineEdit.text() vs QSpinBox.value() vs QCheckBox.isChecked()
- textChanged vs valueChanged vs stateChanged

Errors are shown as a tooltip plus a dynamic ``hasError`` property, so
stylesheets can target ``*[hasError="true"]``.
"""

from abc import ABCMeta
from typing import Any, Callable, Dict, Optional

from PyQt6.QtCore import QObject
from PyQt6.QtWidgets import QCheckBox, QLineEdit, QSpinBox

from .widget_protocols import ValueGettable, ValueSettable, ErrorDisplayable, ChangeSignalEmitter


# Combines Qt's metaclass with ABCMeta so adapters can inherit both
_QtMetaclass = type(QObject)


class PyQtWidgetMeta(_QtMetaclass, ABCMeta):
    """Metaclass for PyQt widgets that need ABC support."""
    pass


class _ChangeSignalMixin:
    """Implements ChangeSignalEmitter on top of a single Qt change signal."""

    def _change_signal(self):
        raise NotImplementedError

    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        slots: Dict[Callable, Callable] = self.__dict__.setdefault('_change_slots', {})
        if callback in slots:
            return
        slot = lambda *_args: callback(self.get_value())
        slots[callback] = slot
        self._change_signal().connect(slot)

    def disconnect_change_signal(self, callback: Callable[[Any], None]) -> None:
        slot = self.__dict__.get('_change_slots', {}).pop(callback, None)
        if slot is None:
            return
        try:
            self._change_signal().disconnect(slot)
        except TypeError:
            # Signal not connected - ignore
            pass


class _ErrorTextMixin:
    """Implements ErrorDisplayable with tooltip + ``hasError`` property."""

    def set_error_text(self, text: Optional[str]) -> None:
        self.setToolTip(text or "")
        self.setProperty("hasError", text is not None)
        # Re-polish so [hasError="true"] selectors apply
        style = self.style()
        style.unpolish(self)
        style.polish(self)


class LineEditAdapter(QLineEdit, _ChangeSignalMixin, _ErrorTextMixin, ValueGettable, ValueSettable,
                      ErrorDisplayable, ChangeSignalEmitter, metaclass=PyQtWidgetMeta):
    """
    QLineEdit adapter. Empty text maps to None.
    """

    def get_value(self) -> Any:
        text = self.text()
        return None if text == "" else text

    def set_value(self, value: Any) -> None:
        self.setText("" if value is None else str(value))

    def _change_signal(self):
        return self.textChanged


class SpinBoxAdapter(QSpinBox, _ChangeSignalMixin, _ErrorTextMixin, ValueGettable, ValueSettable,
                     ErrorDisplayable, ChangeSignalEmitter, metaclass=PyQtWidgetMeta):
    """
    QSpinBox adapter.

    None is shown as the special value text at the minimum, so the minimum
    itself is reserved for "no value".
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setSpecialValueText(" ")  # Empty special value = None
        self.setRange(-2147483648, 2147483647)

    def get_value(self) -> Any:
        if self.value() == self.minimum() and self.specialValueText():
            return None
        return self.value()

    def set_value(self, value: Any) -> None:
        if value is None:
            self.setValue(self.minimum())
        else:
            self.setValue(int(value))

    def _change_signal(self):
        return self.valueChanged


class CheckBoxAdapter(QCheckBox, _ChangeSignalMixin, _ErrorTextMixin, ValueGettable, ValueSettable,
                      ErrorDisplayable, ChangeSignalEmitter, metaclass=PyQtWidgetMeta):
    """
    QCheckBox adapter. Returns bool values, treats None as False.
    """

    def get_value(self) -> Any:
        return self.isChecked()

    def set_value(self, value: Any) -> None:
        self.setChecked(bool(value) if value is not None else False)

    def _change_signal(self):
        return self.stateChanged
