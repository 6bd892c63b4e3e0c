"""
Value types shared by field controllers and forms.

Validators, transforms and decorations are plain callables and frozen
dataclasses so they can be declared once and shared between fields.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:
    from .form_aggregator import FormAggregator


class AutovalidateMode(Enum):
    """
    When a field re-runs its validators on its own.

    DISABLED validates only on explicit validate()/save_and_validate() calls
    (the "on submit" policy). ALWAYS validates after every value change,
    including programmatic ones. ON_USER_INTERACTION validates after every
    change once the user has edited the field at least once.
    """
    DISABLED = "disabled"
    ALWAYS = "always"
    ON_USER_INTERACTION = "on_user_interaction"


@dataclass(frozen=True)
class ValidationContext:
    """Passed to every validator alongside the value."""
    field_name: str
    form: Optional['FormAggregator'] = None

    def sibling_value(self, name: str, default: Any = None) -> Any:
        """Return the live (untransformed) value of another field in the same form."""
        if self.form is None or name not in self.form.fields:
            return default
        return self.form.fields[name].value


@dataclass(frozen=True)
class FieldDecoration:
    """
    Display-layer metadata for a field.

    error_text is a static error owned by the display layer. The controller
    overlays it but never clears it.
    """
    label: Optional[str] = None
    helper_text: Optional[str] = None
    error_text: Optional[str] = None

    def with_error(self, error_text: Optional[str]) -> 'FieldDecoration':
        return replace(self, error_text=error_text)


# (value, context) -> error message or None
Validator = Callable[[Any, ValidationContext], Optional[str]]

# value -> committed value, applied only when the form collects values
Transform = Callable[[Any], Any]
