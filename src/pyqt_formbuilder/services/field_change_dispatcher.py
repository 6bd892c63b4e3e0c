"""
Field Change Dispatcher.

Single route from a field's value change into its form's aggregate snapshot.
Applies the skip-disabled policy so fields never talk to the snapshot
directly.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pyqt_formbuilder.protocols.form_config import get_form_config

if TYPE_CHECKING:
    from pyqt_formbuilder.forms.field_controller import FormFieldController

logger = logging.getLogger(__name__)

# Debug flag for verbose dispatcher logging
DEBUG_DISPATCHER = False


@dataclass
class FieldChangeEvent:
    """Immutable event representing a field change."""
    field_name: str                          # Registry name of the field
    value: Any                               # Untransformed value
    source_field: 'FormFieldController'      # Where change originated
    is_set_state: bool = False               # Rendering layer should refresh


class FieldChangeDispatcher:
    """Singleton dispatcher for all field changes. Stateless."""

    _instance = None

    @classmethod
    def instance(cls) -> 'FieldChangeDispatcher':
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def dispatch(self, event: FieldChangeEvent) -> None:
        """Push a field change into the owning form, or drop it from the snapshot."""
        source = event.source_field
        form = source.form
        verbose = DEBUG_DISPATCHER or get_form_config().debug_dispatch

        if form is None:
            if verbose:
                logger.info(f"DISPATCH: {event.field_name} has no form (standalone field)")
            return

        # A field replaced under its name must not overwrite its successor's entry
        if form.fields.get(event.field_name) is not source:
            if verbose:
                logger.warning(f"DISPATCH BLOCKED: {event.field_name} is not the registered field")
            return

        if source.enabled or not source.effective_skip_disabled:
            if verbose:
                logger.info(f"DISPATCH: {event.field_name} = {repr(event.value)[:50]}")
            form.set_internal_field_value(event.field_name, event.value, is_set_state=event.is_set_state)
        else:
            if verbose:
                logger.info(f"DISPATCH: {event.field_name} disabled, removing from snapshot")
            form.remove_internal_field_value(event.field_name, is_set_state=event.is_set_state)
