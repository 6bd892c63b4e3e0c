"""
Widget protocol definitions, adapters and global configuration.

ABC-based widget contracts that eliminate duck typing in favor of
explicit, fail-loud inheritance-based architecture.
"""

from .widget_protocols import (
    ValueGettable,
    ValueSettable,
    ErrorDisplayable,
    ChangeSignalEmitter,
)
from .widget_adapters import (
    LineEditAdapter,
    SpinBoxAdapter,
    CheckBoxAdapter,
    PyQtWidgetMeta,
)
from .form_config import FormBuilderConfig, set_form_config, get_form_config

__all__ = [
    "ValueGettable",
    "ValueSettable",
    "ErrorDisplayable",
    "ChangeSignalEmitter",
    "LineEditAdapter",
    "SpinBoxAdapter",
    "CheckBoxAdapter",
    "PyQtWidgetMeta",
    "FormBuilderConfig",
    "set_form_config",
    "get_form_config",
]
