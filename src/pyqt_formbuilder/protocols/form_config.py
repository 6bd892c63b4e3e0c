"""Global configuration for form and field defaults.

Applications call set_form_config() once at startup; forms and fields read
the active config when they are constructed.
"""

from dataclasses import dataclass
from typing import Optional

from pyqt_formbuilder.forms.field_types import AutovalidateMode


@dataclass
class FormBuilderConfig:
    """Defaults applied when a form or field does not specify its own.

    Attributes:
        default_field_autovalidate_mode: Autovalidation policy for new fields
        default_form_autovalidate_mode: Autovalidation policy for new forms
        default_skip_disabled: Whether new forms drop disabled fields from their value
        strict_field_names: Raise DuplicateFieldNameError instead of replacing a field
        debug_dispatch: Log every field change routed through the dispatcher
    """

    default_field_autovalidate_mode: AutovalidateMode = AutovalidateMode.ON_USER_INTERACTION
    default_form_autovalidate_mode: AutovalidateMode = AutovalidateMode.DISABLED
    default_skip_disabled: bool = False
    strict_field_names: bool = False
    debug_dispatch: bool = False


# Global config instance (set by application)
_form_config: Optional[FormBuilderConfig] = None


def set_form_config(config: Optional[FormBuilderConfig]) -> None:
    """Set the global form builder configuration.

    Args:
        config: FormBuilderConfig instance, or None to restore the defaults
    """
    global _form_config
    _form_config = config


def get_form_config() -> FormBuilderConfig:
    """Get the current form builder configuration.

    Returns:
        Current FormBuilderConfig or default if not set
    """
    if _form_config is None:
        return FormBuilderConfig()
    return _form_config
