"""Two-way binding between a FormFieldController and a Qt input widget."""

import logging
from typing import Any, Optional

from PyQt6.QtWidgets import QScrollArea, QWidget

from pyqt_formbuilder.core.focus_handle import FocusHandle
from pyqt_formbuilder.protocols.widget_protocols import (
    ChangeSignalEmitter, ErrorDisplayable, ValueGettable, ValueSettable,
)
from pyqt_formbuilder.services.signal_service import SignalService

from .field_controller import FormFieldController

logger = logging.getLogger(__name__)


class FieldBinding:
    """
    Keeps one widget and one field controller in sync.

    widget -> field: the widget's change signal becomes ``field.did_change()``.
    field -> widget: value changes (reset, patch, programmatic set_value) are
    written back with the widget's signals blocked; errors, enabled state
    and focus are mirrored too.

    The binding attaches the field's focus handle to the widget and detaches
    it again on unbind(), whether or not the field owns the handle. The
    binding unbinds itself when the field is disposed.

    Usage:
        binding = FieldBinding(email_field, LineEditAdapter())
        layout.addWidget(binding.widget)
    """

    def __init__(self, field: FormFieldController, widget: QWidget):
        for contract in (ValueGettable, ValueSettable, ChangeSignalEmitter):
            if not isinstance(widget, contract):
                raise TypeError(f"{type(widget).__name__} does not implement {contract.__name__}")
        self.field = field
        self.widget = widget
        self._attached_handle: Optional[FocusHandle] = None
        self._writing_to_field = False
        self._bound = False
        self.bind()

    @property
    def is_bound(self) -> bool:
        return self._bound

    def bind(self) -> None:
        if self._bound:
            return
        field, widget = self.field, self.widget

        with SignalService.block_signals(widget):
            widget.set_value(field.value)
        widget.setEnabled(field.enabled)
        self._on_field_error_changed(field.effective_error)

        widget.connect_change_signal(self._on_widget_changed)
        signals = field.signals
        signals.value_changed.connect(self._on_field_value_changed)
        signals.error_changed.connect(self._on_field_error_changed)
        signals.enabled_changed.connect(self._on_field_enabled_changed)
        signals.focus_handle_changed.connect(self._on_focus_handle_changed)
        signals.disposed.connect(self.unbind)
        self._attach_focus_handle(field.focus_handle)

        self._bound = True
        logger.debug(f"Bound field '{field.name}' to {type(widget).__name__}")

    def unbind(self) -> None:
        if not self._bound:
            return
        self._bound = False
        self.widget.disconnect_change_signal(self._on_widget_changed)
        signals = self.field.signals
        for signal, slot in (
            (signals.value_changed, self._on_field_value_changed),
            (signals.error_changed, self._on_field_error_changed),
            (signals.enabled_changed, self._on_field_enabled_changed),
            (signals.focus_handle_changed, self._on_focus_handle_changed),
            (signals.disposed, self.unbind),
        ):
            try:
                signal.disconnect(slot)
            except TypeError:
                pass
        self._detach_focus_handle()
        logger.debug(f"Unbound field '{self.field.name}'")

    # ========== widget -> field ==========

    def _on_widget_changed(self, value: Any) -> None:
        if value == self.field.value:
            return
        self._writing_to_field = True
        try:
            self.field.did_change(value)
        finally:
            self._writing_to_field = False

    # ========== field -> widget ==========

    def _on_field_value_changed(self, value: Any) -> None:
        if self._writing_to_field:
            return
        with SignalService.block_signals(self.widget):
            self.widget.set_value(value)

    def _on_field_error_changed(self, error_text: Optional[str]) -> None:
        if isinstance(self.widget, ErrorDisplayable):
            self.widget.set_error_text(error_text)

    def _on_field_enabled_changed(self, enabled: bool) -> None:
        self.widget.setEnabled(enabled)

    # ========== focus ==========

    def _on_focus_handle_changed(self, handle: FocusHandle) -> None:
        self._detach_focus_handle()
        self._attach_focus_handle(handle)

    def _attach_focus_handle(self, handle: FocusHandle) -> None:
        handle.attach(self.widget)
        handle.focus_requested.connect(self._ensure_visible)
        self._attached_handle = handle

    def _detach_focus_handle(self) -> None:
        handle = self._attached_handle
        self._attached_handle = None
        if handle is None or handle.is_disposed:
            return
        try:
            handle.focus_requested.disconnect(self._ensure_visible)
        except TypeError:
            pass
        if handle.widget is self.widget:
            handle.detach()

    def _ensure_visible(self) -> None:
        """Scroll the nearest enclosing QScrollArea so the widget is visible."""
        parent = self.widget.parentWidget()
        while parent is not None:
            if isinstance(parent, QScrollArea):
                parent.ensureWidgetVisible(self.widget)
                return
            parent = parent.parentWidget()
