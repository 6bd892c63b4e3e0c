"""Form container - registry and aggregate state for named field controllers."""

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, TYPE_CHECKING

from PyQt6.QtCore import QObject, pyqtSignal

from pyqt_formbuilder.exceptions import DuplicateFieldNameError, FieldNotRegisteredError, FormBuilderError
from pyqt_formbuilder.protocols.form_config import get_form_config
from pyqt_formbuilder.services.flag_context_manager import FlagContextManager, ManagerFlag
from pyqt_formbuilder.services.value_collection_service import ValueCollectionService

from .field_types import AutovalidateMode

if TYPE_CHECKING:
    from .field_controller import FormFieldController

logger = logging.getLogger(__name__)


class FormAggregator(QObject):
    """
    Parent of a set of named FormFieldControllers.

    The form keeps references only: fields own their values and push them here
    through set_internal_field_value()/remove_internal_field_value(). The
    aggregate snapshot (``instant_value``) is what save() commits to ``value``.

    Iteration over fields (validate, save, reset, patch) follows registration
    order. A field replaced under an existing name keeps that name's position.
    """

    field_registered = pyqtSignal(str)
    field_unregistered = pyqtSignal(str)
    field_value_changed = pyqtSignal(str, object)  # name, untransformed value
    changed = pyqtSignal()                          # any field's did_change()
    refresh_requested = pyqtSignal()                # rendering layer should repaint
    enabled_changed = pyqtSignal(bool)
    validated = pyqtSignal(bool)
    saved = pyqtSignal(object)                      # transformed value dict
    was_reset = pyqtSignal()

    def __init__(
        self,
        initial_value: Optional[Mapping[str, Any]] = None,
        *,
        enabled: bool = True,
        skip_disabled: Optional[bool] = None,
        clear_value_on_unregister: bool = False,
        autovalidate_mode: Optional[AutovalidateMode] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        config = get_form_config()
        self.skip_disabled = config.default_skip_disabled if skip_disabled is None else skip_disabled
        self.clear_value_on_unregister = clear_value_on_unregister
        self.autovalidate_mode = autovalidate_mode or config.default_form_autovalidate_mode

        self._initial_value: Dict[str, Any] = dict(initial_value or {})
        self._enabled = enabled
        self._fields: Dict[str, 'FormFieldController'] = {}
        self._instant_value: Dict[str, Any] = {}
        self._saved_value: Dict[str, Any] = {}
        self._value_collection = ValueCollectionService()

        # Flags managed by FlagContextManager
        self._in_reset = False
        self._in_patch = False

    def __repr__(self) -> str:
        return f"FormAggregator(fields={list(self._fields)})"

    def __contains__(self, name: str) -> bool:
        return name in self._fields

    def __getitem__(self, name: str) -> 'FormFieldController':
        try:
            return self._fields[name]
        except KeyError:
            raise FieldNotRegisteredError(name) from None

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._fields))

    def __len__(self) -> int:
        return len(self._fields)

    # ========== STATE ==========

    @property
    def fields(self) -> Mapping[str, 'FormFieldController']:
        """Read-only view of the registry."""
        return MappingProxyType(self._fields)

    @property
    def initial_value(self) -> Mapping[str, Any]:
        return MappingProxyType(self._initial_value)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def instant_value(self) -> Dict[str, Any]:
        """Transformed live snapshot."""
        return self._value_collection.collect(self._instant_value, self._transformers())

    @property
    def value(self) -> Dict[str, Any]:
        """Transformed snapshot captured by the last save()."""
        return self._value_collection.collect(self._saved_value, self._transformers())

    @property
    def errors(self) -> Dict[str, str]:
        return {name: field.effective_error for name, field in self._fields.items() if field.has_error}

    @property
    def is_valid(self) -> bool:
        """Current error state, without running validators."""
        return all(field.is_valid for field in self._fields.values())

    @property
    def is_dirty(self) -> bool:
        return any(field.is_dirty for field in self._fields.values())

    @property
    def is_touched(self) -> bool:
        return any(field.touched for field in self._fields.values())

    def _transformers(self):
        return self._value_collection.collect_transformers(self._fields.values())

    # ========== REGISTRY ==========

    def register_field(self, name: str, field: 'FormFieldController') -> None:
        """Add ``field`` under ``name``; an existing different field is replaced (last writer wins)."""
        existing = self._fields.get(name)
        if existing is not None and existing is not field:
            if get_form_config().strict_field_names:
                raise DuplicateFieldNameError(name)
            logger.warning(f"Field name '{name}' registered twice; replacing {existing!r} with {field!r}")
        self._fields[name] = field
        logger.debug(f"Form registered field '{name}' ({len(self._fields)} total)")
        self.field_registered.emit(name)

    def unregister_field(self, name: str, field: 'FormFieldController') -> None:
        """Remove ``field``; ignored unless it is the field currently registered under ``name``."""
        if self._fields.get(name) is not field:
            logger.debug(f"Ignoring stale unregister for '{name}'")
            return
        del self._fields[name]
        if self.clear_value_on_unregister:
            self._instant_value.pop(name, None)
            self._saved_value.pop(name, None)
        logger.debug(f"Form unregistered field '{name}'")
        self.field_unregistered.emit(name)

    # ========== SNAPSHOT (field -> form) ==========

    def set_internal_field_value(self, name: str, value: Any, is_set_state: bool = False) -> None:
        """
        Record ``value`` for ``name`` in the aggregate snapshot.

        is_set_state tells the rendering layer whether a repaint is needed;
        it is forwarded as refresh_requested.
        """
        self._instant_value[name] = value
        self.field_value_changed.emit(name, value)
        if is_set_state:
            self.refresh_requested.emit()

    def remove_internal_field_value(self, name: str, is_set_state: bool = False) -> None:
        """Drop ``name`` from the aggregate snapshot (disabled field under skip_disabled)."""
        self._instant_value.pop(name, None)
        if is_set_state:
            self.refresh_requested.emit()

    def field_did_change(self, field: 'FormFieldController') -> None:
        """Called by a field after a user (or patch) change."""
        if self._fields.get(field.name) is not field:
            logger.debug(f"Ignoring change from detached field '{field.name}'")
            return
        self.changed.emit()
        if FlagContextManager.is_flag_set(self, ManagerFlag.IN_RESET):
            return
        if FlagContextManager.is_flag_set(self, ManagerFlag.IN_PATCH):
            # patch_value() validates once when it finishes
            return
        self._autovalidate()

    def _autovalidate(self) -> None:
        if self.autovalidate_mode is not AutovalidateMode.DISABLED:
            self.validate()

    # ========== AGGREGATE OPERATIONS ==========

    def validate(self, focus_on_invalid: bool = False) -> bool:
        """
        Validate every field and return True only if all pass.

        Never short-circuits, so every field's error state is refreshed. With
        focus_on_invalid the first failing field (registry order) gets focus.
        """
        first_invalid = None
        for field in list(self._fields.values()):
            if not field.validate() and first_invalid is None:
                first_invalid = field
        is_valid = first_invalid is None
        if focus_on_invalid and first_invalid is not None:
            first_invalid.request_focus()
        logger.debug(f"Form validated: valid={is_valid}")
        self.validated.emit(is_valid)
        return is_valid

    def save(self) -> Dict[str, Any]:
        """Commit every field and return the transformed value map."""
        for field in list(self._fields.values()):
            field.save()
        self._saved_value = dict(self._instant_value)
        value = self.value
        logger.debug(f"Form saved {len(value)} value(s)")
        self.saved.emit(value)
        return value

    def save_and_validate(self, focus_on_invalid: bool = True) -> bool:
        self.save()
        return self.validate(focus_on_invalid=focus_on_invalid)

    def reset(self) -> None:
        """Reset every field to its initial value and clear touched state."""
        with FlagContextManager.reset_context(self):
            for field in list(self._fields.values()):
                field.reset(clear_touched=True)
        logger.debug("Form reset")
        self.was_reset.emit()
        self.refresh_requested.emit()

    def patch_value(self, patch: Mapping[str, Any]) -> None:
        """
        Push values into registered fields as if the user had entered them.

        Names with no registered field are ignored and are not kept for fields
        that register later; use update_initial_value() for that.
        """
        applied = 0
        with FlagContextManager.patch_context(self):
            for name, field in list(self._fields.items()):
                if name in patch:
                    field.did_change(patch[name])
                    applied += 1
        ignored = [name for name in patch if name not in self._fields]
        if ignored:
            logger.debug(f"patch_value ignored unregistered field(s): {ignored}")
        if applied:
            self._autovalidate()

    def update_initial_value(self, patch: Mapping[str, Any]) -> None:
        """Merge form-level defaults. Only fields registered afterwards pick them up."""
        self._initial_value.update(patch)

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable every field; under skip_disabled this also adds/removes snapshot entries."""
        if enabled == self._enabled:
            return
        self._enabled = enabled
        for field in list(self._fields.values()):
            field.sync_enabled_state()
        logger.debug(f"Form enabled={enabled}")
        self.enabled_changed.emit(enabled)

    def invalidate_field(self, name: str, error_text: str) -> None:
        self[name].invalidate(error_text)

    def invalidate_first_field(self, error_text: str) -> None:
        if not self._fields:
            raise FormBuilderError("Cannot invalidate first field of an empty form")
        next(iter(self._fields.values())).invalidate(error_text)
