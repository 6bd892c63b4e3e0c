"""
Per-field state: value, validation, touched/focus and lifecycle.

A FormFieldController is created with an explicit reference to its form
(or none, for a standalone field). It registers itself on construction and
reports every value change to the form synchronously; the form only pushes
values back down through reset() and patch_value().
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Generic, Optional, Sequence, TypeVar, Union

from PyQt6.QtCore import QObject, pyqtSignal

from pyqt_formbuilder.core.focus_handle import FocusHandle
from pyqt_formbuilder.protocols.form_config import get_form_config
from pyqt_formbuilder.services.field_change_dispatcher import FieldChangeDispatcher, FieldChangeEvent

from .field_types import AutovalidateMode, FieldDecoration, ValidationContext, Validator

if TYPE_CHECKING:
    from .form_aggregator import FormAggregator

logger = logging.getLogger(__name__)

T = TypeVar("T")  # stored value type
R = TypeVar("R")  # transform output type


class FieldSignals(QObject):
    """Qt signals published by a FormFieldController."""

    value_changed = pyqtSignal(object)          # new value (untransformed)
    error_changed = pyqtSignal(object)          # effective error text or None
    touched_changed = pyqtSignal(bool)
    enabled_changed = pyqtSignal(bool)          # effective enabled state
    focus_handle_changed = pyqtSignal(object)   # new FocusHandle
    was_reset = pyqtSignal()
    disposed = pyqtSignal()


class FormFieldController(Generic[T, R]):
    """
    State machine for a single named form field.

    Args:
        name: Registry name, unique within the form's active fields
        form: Owning FormAggregator, or None for a standalone field
        initial_value: Local default; when None the form's initial_value[name] is used
        validators: Checked in order, the first returned message wins
        transform: Applied when the form collects values, never to the stored value
        on_changed: Called with the new value after each did_change()
        on_reset: Called after reset()
        on_saved: Called with the current value after save()
        enabled: Local enabled flag, combined with the form's
        skip_disabled: Per-field override of the form's skip_disabled policy
        autovalidate_mode: Defaults to FormBuilderConfig.default_field_autovalidate_mode
        decoration: Display-layer metadata, including a static error
        focus_handle: External (borrowed) focus handle; one is created and owned if omitted

    Example:
        form = FormAggregator(initial_value={"age": "18"})
        age = FormFieldController("age", form=form, transform=int)
        form.save()            # {"age": 18}
        age.did_change("21")
        form.save()            # {"age": 21}
    """

    def __init__(
        self,
        name: str,
        *,
        form: Optional['FormAggregator'] = None,
        initial_value: Optional[T] = None,
        validators: Sequence[Validator] = (),
        transform: Optional[Callable[[Optional[T]], R]] = None,
        on_changed: Optional[Callable[[Optional[T]], None]] = None,
        on_reset: Optional[Callable[[], None]] = None,
        on_saved: Optional[Callable[[Optional[T]], None]] = None,
        enabled: bool = True,
        skip_disabled: Optional[bool] = None,
        autovalidate_mode: Optional[AutovalidateMode] = None,
        decoration: Optional[FieldDecoration] = None,
        focus_handle: Optional[FocusHandle] = None,
    ):
        self.name = name
        self.validators = tuple(validators)
        self.transform = transform
        self.on_changed = on_changed
        self.on_reset = on_reset
        self.on_saved = on_saved
        self.skip_disabled = skip_disabled
        self.autovalidate_mode = autovalidate_mode or get_form_config().default_field_autovalidate_mode
        self.signals = FieldSignals()

        self._form = form
        self._local_initial_value = initial_value
        self._local_enabled = enabled
        self._decoration = decoration or FieldDecoration()

        self._initial_value: Optional[T] = None
        self._value: Optional[T] = None
        self._validator_error: Optional[str] = None
        self._custom_error: Optional[str] = None
        self._touched = False
        self._has_interacted = False
        self._disposed = False

        self._focus_handle: Optional[FocusHandle] = None
        self._owns_focus_handle = False
        self._adopt_focus_handle(focus_handle)

        self.register()

    def __repr__(self) -> str:
        return f"FormFieldController({self.name!r}, value={self._value!r})"

    # ==================== STATE ====================

    @property
    def form(self) -> Optional['FormAggregator']:
        return self._form

    @property
    def value(self) -> Optional[T]:
        return self._value

    @property
    def initial_value(self) -> Optional[T]:
        return self._initial_value

    @property
    def transformed_value(self) -> Union[Optional[T], R]:
        if self.transform is None:
            return self._value
        return self.transform(self._value)

    @property
    def custom_error(self) -> Optional[str]:
        return self._custom_error

    @property
    def error_text(self) -> Optional[str]:
        """Validator error, falling back to the custom error."""
        if self._validator_error is not None:
            return self._validator_error
        return self._custom_error

    @property
    def effective_error(self) -> Optional[str]:
        """What the display layer shows: error_text, else the decoration's static error."""
        error = self.error_text
        if error is not None:
            return error
        return self._decoration.error_text

    @property
    def has_error(self) -> bool:
        return self.effective_error is not None

    @property
    def is_valid(self) -> bool:
        return not self.has_error

    @property
    def touched(self) -> bool:
        return self._touched

    @property
    def is_dirty(self) -> bool:
        """True once the value was changed through did_change(), until reset()."""
        return self._has_interacted

    @property
    def enabled(self) -> bool:
        form_enabled = self._form.enabled if self._form is not None else True
        return self._local_enabled and form_enabled

    @property
    def effective_skip_disabled(self) -> bool:
        if self.skip_disabled is not None:
            return self.skip_disabled
        return self._form.skip_disabled if self._form is not None else False

    @property
    def decoration(self) -> FieldDecoration:
        return self._decoration

    @property
    def focus_handle(self) -> FocusHandle:
        return self._focus_handle

    @property
    def owns_focus_handle(self) -> bool:
        return self._owns_focus_handle

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    # ==================== LIFECYCLE ====================

    def register(self) -> None:
        """
        Resolve the initial value and attach to the form.

        Runs from __init__. Calling it again re-resolves the initial value and
        overwrites this field's registry entry and snapshot value. The field is
        not marked as user-modified.
        """
        self._initial_value = self._resolve_initial_value()
        self._value = self._initial_value
        if self._form is not None:
            self._form.register_field(self.name, self)
            self._inform_form(is_set_state=False)
        logger.debug(f"Registered field '{self.name}' (initial={self._initial_value!r}, form={self._form is not None})")
        self._autovalidate()

    def dispose(self) -> None:
        """Detach from the form and release the focus handle if this field owns it."""
        if self._disposed:
            return
        self._disposed = True
        self._release_focus_handle()
        if self._form is not None:
            self._form.unregister_field(self.name, self)
        logger.debug(f"Disposed field '{self.name}'")
        self.signals.disposed.emit()

    # ==================== VALUE ====================

    def set_value(self, value: Optional[T], notify_form: bool = True) -> None:
        """
        Store a new value.

        The form receives the untransformed value when notify_form is True.
        Autovalidation runs according to autovalidate_mode.
        """
        self._value = value
        if notify_form:
            self._inform_form(is_set_state=False)
        self.signals.value_changed.emit(value)
        self._autovalidate()

    def did_change(self, value: Optional[T]) -> None:
        """Record a value change coming from the user (or a form patch)."""
        self._has_interacted = True
        self.set_value(value)
        if self.on_changed is not None:
            self.on_changed(value)
        if self._form is not None:
            self._form.field_did_change(self)

    def save(self) -> None:
        """Commit the current value to the form and call on_saved."""
        self._inform_form(is_set_state=True)
        if self.on_saved is not None:
            self.on_saved(self._value)

    def reset(self, clear_touched: bool = False) -> None:
        """
        Restore the initial value and clear custom and validator errors.

        touched is kept unless clear_touched is True; FormAggregator.reset()
        passes True.
        """
        self._has_interacted = False
        self._custom_error = None
        self._validator_error = None
        self.set_value(self._initial_value)
        self.signals.error_changed.emit(self.effective_error)
        if clear_touched and self._touched:
            self._touched = False
            self.signals.touched_changed.emit(False)
        logger.debug(f"Reset field '{self.name}' to {self._initial_value!r}")
        self.signals.was_reset.emit()
        if self.on_reset is not None:
            self.on_reset()

    # ==================== VALIDATION ====================

    def validate(self, clear_custom_error: bool = True) -> bool:
        """
        Run validators in order and record the first error.

        Returns False if a validator failed, a custom error is set, or the
        decoration carries a static error.
        """
        if clear_custom_error:
            self._custom_error = None
        self._validator_error = self._run_validators()
        self.signals.error_changed.emit(self.effective_error)
        return self.is_valid

    def invalidate(self, error_text: str) -> None:
        """Set a custom error (e.g. from a server), revalidate, and focus this field."""
        self._custom_error = error_text
        self.validate(clear_custom_error=False)
        self.request_focus()

    def _run_validators(self) -> Optional[str]:
        context = ValidationContext(field_name=self.name, form=self._form)
        for validator in self.validators:
            error = validator(self._value, context)
            if error is not None:
                return error
        return None

    def _autovalidate(self) -> None:
        mode = self.autovalidate_mode
        if mode is AutovalidateMode.ALWAYS or (
            mode is AutovalidateMode.ON_USER_INTERACTION and self._has_interacted
        ):
            self.validate(clear_custom_error=False)

    # ==================== ENABLED / DECORATION ====================

    def set_enabled(self, enabled: bool) -> None:
        if enabled == self._local_enabled:
            return
        self._local_enabled = enabled
        self.sync_enabled_state()

    def sync_enabled_state(self) -> None:
        """Re-report this field to the form after the local or form enabled flag changed."""
        self._inform_form(is_set_state=True)
        self.signals.enabled_changed.emit(self.enabled)

    def set_decoration(self, decoration: FieldDecoration) -> None:
        self._decoration = decoration
        self.signals.error_changed.emit(self.effective_error)

    # ==================== FOCUS ====================

    def on_focus_change(self, has_focus: bool) -> None:
        """Mark the field touched the first time it gains focus."""
        if has_focus and not self._touched:
            self._touched = True
            logger.debug(f"Field '{self.name}' touched")
            self.signals.touched_changed.emit(True)

    def request_focus(self) -> None:
        self._focus_handle.request_focus()

    def set_focus_handle(self, focus_handle: Optional[FocusHandle]) -> None:
        """
        Swap the focus resource.

        The previous handle is disposed only if this field created it. None
        creates a new owned handle. Widget bindings listen to
        focus_handle_changed and move their attachment. No-op once disposed.
        """
        if self._disposed:
            return
        if focus_handle is not None and focus_handle is self._focus_handle:
            return
        self._release_focus_handle()
        self._adopt_focus_handle(focus_handle)
        self.signals.focus_handle_changed.emit(self._focus_handle)

    def _adopt_focus_handle(self, focus_handle: Optional[FocusHandle]) -> None:
        if focus_handle is None:
            self._focus_handle = FocusHandle(debug_label=self.name)
            self._owns_focus_handle = True
        else:
            self._focus_handle = focus_handle
            self._owns_focus_handle = False
        self._focus_handle.focus_changed.connect(self.on_focus_change)

    def _release_focus_handle(self) -> None:
        handle = self._focus_handle
        try:
            handle.focus_changed.disconnect(self.on_focus_change)
        except TypeError:
            pass
        # Borrowed handles are left untouched
        if self._owns_focus_handle:
            handle.dispose()

    # ==================== FORM ====================

    def _resolve_initial_value(self) -> Optional[T]:
        if self._local_initial_value is not None:
            return self._local_initial_value
        if self._form is not None:
            return self._form.initial_value.get(self.name)
        return None

    def _inform_form(self, is_set_state: bool) -> None:
        if self._form is None or self._disposed:
            return
        FieldChangeDispatcher.instance().dispatch(
            FieldChangeEvent(self.name, self._value, self, is_set_state=is_set_state)
        )
