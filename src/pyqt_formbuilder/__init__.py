"""
pyqt-formbuilder: form state management for PyQt6.

A parent form (FormAggregator) and named field controllers
(FormFieldController) that register with it, keeping value, validation,
focus and enabled state in sync across a set of input widgets.

Architecture:
- Core: FocusHandle, the focus resource shared with widgets
- Protocols: widget ABCs, Qt adapters and global configuration
- Services: change dispatch, value collection, flags, signal blocking
- Forms: FormFieldController, FormAggregator, validators, FieldBinding

Fields are wired to their form explicitly at construction:

    form = FormAggregator(initial_value={"age": "18"})
    age = FormFieldController("age", form=form, transform=int)
    form.save()   # {"age": 18}
"""

__version__ = "0.1.0"

from pyqt_formbuilder.exceptions import (
    FormBuilderError,
    DuplicateFieldNameError,
    FieldNotRegisteredError,
    FocusHandleDisposedError,
)
from pyqt_formbuilder.core.focus_handle import FocusHandle
from pyqt_formbuilder.protocols.form_config import FormBuilderConfig, set_form_config, get_form_config
from pyqt_formbuilder.forms.field_types import AutovalidateMode, FieldDecoration, ValidationContext
from pyqt_formbuilder.forms.field_controller import FormFieldController
from pyqt_formbuilder.forms.form_aggregator import FormAggregator
from pyqt_formbuilder.forms.field_binding import FieldBinding
from pyqt_formbuilder.forms.validators import Validators

__all__ = [
    "__version__",
    "FormBuilderError",
    "DuplicateFieldNameError",
    "FieldNotRegisteredError",
    "FocusHandleDisposedError",
    "FocusHandle",
    "FormBuilderConfig",
    "set_form_config",
    "get_form_config",
    "AutovalidateMode",
    "FieldDecoration",
    "ValidationContext",
    "FormFieldController",
    "FormAggregator",
    "FieldBinding",
    "Validators",
]
