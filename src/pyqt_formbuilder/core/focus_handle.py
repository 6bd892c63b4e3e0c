"""Focus resource shared between a field controller and its widget."""

import logging
from typing import Optional

from PyQt6.QtCore import QEvent, QObject, Qt, pyqtSignal
from PyQt6.QtWidgets import QWidget

from pyqt_formbuilder.exceptions import FocusHandleDisposedError

logger = logging.getLogger(__name__)


class FocusHandle(QObject):
    """
    Tracks and requests input focus for one field.

    A handle can be attached to a widget, in which case the widget's
    FocusIn/FocusOut events drive ``has_focus`` through an event filter.
    Without a widget the handle still records focus state, so controllers
    work headless.

    Ownership is decided by whoever creates the handle: a field that builds
    its own handle disposes it, a field handed an external one never does.

    Usage:
        handle = FocusHandle(debug_label="email")
        handle.attach(line_edit)
        handle.focus_changed.connect(on_focus)
        handle.request_focus()
    """

    focus_changed = pyqtSignal(bool)  # has_focus
    focus_requested = pyqtSignal()

    def __init__(self, debug_label: Optional[str] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.debug_label = debug_label
        self._has_focus = False
        self._widget: Optional[QWidget] = None
        self._disposed = False

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else ("focused" if self._has_focus else "unfocused")
        return f"FocusHandle({self.debug_label!r}, {state})"

    @property
    def has_focus(self) -> bool:
        return self._has_focus

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def widget(self) -> Optional[QWidget]:
        return self._widget

    def attach(self, widget: QWidget) -> None:
        """Follow focus events of ``widget``. Replaces any previous attachment."""
        self._ensure_alive()
        if widget is self._widget:
            return
        self.detach()
        self._widget = widget
        widget.installEventFilter(self)
        widget.destroyed.connect(self._on_widget_destroyed)
        logger.debug(f"{self!r} attached to {type(widget).__name__}")

    def detach(self) -> None:
        """Stop following the attached widget, if any."""
        widget = self._widget
        if widget is None:
            return
        self._widget = None
        widget.removeEventFilter(self)
        try:
            widget.destroyed.disconnect(self._on_widget_destroyed)
        except TypeError:
            pass
        logger.debug(f"{self!r} detached from {type(widget).__name__}")

    def request_focus(self) -> None:
        """Ask for input focus. Moves real Qt focus when a widget is attached."""
        self._ensure_alive()
        self.focus_requested.emit()
        if self._widget is not None:
            self._widget.setFocus(Qt.FocusReason.OtherFocusReason)
        self.set_focus(True)

    def unfocus(self) -> None:
        self._ensure_alive()
        if self._widget is not None and self._widget.hasFocus():
            self._widget.clearFocus()
        self.set_focus(False)

    def set_focus(self, has_focus: bool) -> None:
        """Record a focus transition and emit focus_changed if it changed."""
        if self._disposed or has_focus == self._has_focus:
            return
        self._has_focus = has_focus
        self.focus_changed.emit(has_focus)

    def dispose(self) -> None:
        """Release the handle. Further attach/request calls raise."""
        if self._disposed:
            return
        self.detach()
        self._has_focus = False
        self._disposed = True
        logger.debug(f"{self!r} released")

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        if obj is self._widget:
            if event.type() == QEvent.Type.FocusIn:
                self.set_focus(True)
            elif event.type() == QEvent.Type.FocusOut:
                self.set_focus(False)
        return False

    def _on_widget_destroyed(self, *_args) -> None:
        self._widget = None

    def _ensure_alive(self) -> None:
        if self._disposed:
            raise FocusHandleDisposedError(f"{self!r} has been disposed")
