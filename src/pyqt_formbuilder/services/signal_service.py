"""
Signal blocking helpers.

Used when the form layer pushes a value back into a widget: the widget's own
change signal must not fire, or the value would round-trip into the field as
a user edit.
"""

from contextlib import contextmanager
from PyQt6.QtCore import QObject
import logging

logger = logging.getLogger(__name__)


class SignalService:
    """
    Context managers for signal blocking.

    Examples:
        with SignalService.block_signals(line_edit):
            line_edit.setText("18")

        with SignalService.block_signals(widget1, widget2):
            widget1.set_value(1)
            widget2.set_value(2)
    """

    @staticmethod
    @contextmanager
    def block_signals(*objects: QObject):
        """Block signals on each object, restoring the previous blocking state on exit."""
        previous = []
        for obj in objects:
            if obj is not None:
                previous.append((obj, obj.blockSignals(True)))
                logger.debug(f"Blocked signals on {type(obj).__name__}")

        try:
            yield
        finally:
            for obj, was_blocked in reversed(previous):
                obj.blockSignals(was_blocked)
                logger.debug(f"Restored signals on {type(obj).__name__}")
