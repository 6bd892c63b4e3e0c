"""
Form and field state management.

FormAggregator, FormFieldController and their supporting types, plus the
widget binding layer.
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .field_controller import FormFieldController, FieldSignals
    from .form_aggregator import FormAggregator
    from .field_binding import FieldBinding
    from .field_types import AutovalidateMode, FieldDecoration, ValidationContext, Validator, Transform
    from .validators import Validators

_EXPORTS = {
    "FormFieldController": ("pyqt_formbuilder.forms.field_controller", "FormFieldController"),
    "FieldSignals": ("pyqt_formbuilder.forms.field_controller", "FieldSignals"),
    "FormAggregator": ("pyqt_formbuilder.forms.form_aggregator", "FormAggregator"),
    "FieldBinding": ("pyqt_formbuilder.forms.field_binding", "FieldBinding"),
    "AutovalidateMode": ("pyqt_formbuilder.forms.field_types", "AutovalidateMode"),
    "FieldDecoration": ("pyqt_formbuilder.forms.field_types", "FieldDecoration"),
    "ValidationContext": ("pyqt_formbuilder.forms.field_types", "ValidationContext"),
    "Validator": ("pyqt_formbuilder.forms.field_types", "Validator"),
    "Transform": ("pyqt_formbuilder.forms.field_types", "Transform"),
    "Validators": ("pyqt_formbuilder.forms.validators", "Validators"),
}


def __getattr__(name: str):
    if name in _EXPORTS:
        module_name, attr = _EXPORTS[name]
        module = importlib.import_module(module_name)
        value = getattr(module, attr)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = list(_EXPORTS.keys())
