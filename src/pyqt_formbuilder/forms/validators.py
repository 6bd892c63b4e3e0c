"""Built-in validator factories.

Every factory returns a ``Validator``: ``(value, context) -> Optional[str]``.
Apart from ``required``, validators let None and "" through so that
optional fields can be left empty.
"""

import re
from typing import Any, Optional, Pattern, Union

from .field_types import ValidationContext, Validator


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, dict, tuple, set)):
        return not value
    return False


def _length(value: Any) -> int:
    if isinstance(value, (str, list, dict, tuple, set)):
        return len(value)
    return len(str(value))


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        return float(str(value).strip())
    except ValueError:
        return None


class Validators:
    """
    Provides a set of built-in validation functions.

    Example:
        FormFieldController(
            "age",
            form=form,
            validators=[Validators.required(), Validators.numeric(), Validators.min_value(18)],
        )
    """

    @staticmethod
    def required(error_message: str = "This field is required.") -> Validator:
        """Rejects None, blank strings and empty collections. False and 0 are valid."""
        def validate(value: Any, context: ValidationContext) -> Optional[str]:
            return error_message if _is_empty(value) else None
        return validate

    @staticmethod
    def min_length(length: int, error_message: Optional[str] = None) -> Validator:
        def validate(value: Any, context: ValidationContext) -> Optional[str]:
            if not _is_empty(value) and _length(value) < length:
                return error_message or f"Must be at least {length} characters long."
            return None
        return validate

    @staticmethod
    def max_length(length: int, error_message: Optional[str] = None) -> Validator:
        def validate(value: Any, context: ValidationContext) -> Optional[str]:
            if not _is_empty(value) and _length(value) > length:
                return error_message or f"Must be at most {length} characters long."
            return None
        return validate

    @staticmethod
    def numeric(error_message: str = "Must be a number.") -> Validator:
        """Accepts ints, floats and strings that parse as a number."""
        def validate(value: Any, context: ValidationContext) -> Optional[str]:
            if _is_empty(value):
                return None
            return error_message if _to_number(value) is None else None
        return validate

    @staticmethod
    def min_value(minimum: float, error_message: Optional[str] = None) -> Validator:
        # Non-numeric input is left to Validators.numeric()
        def validate(value: Any, context: ValidationContext) -> Optional[str]:
            number = None if _is_empty(value) else _to_number(value)
            if number is not None and number < minimum:
                return error_message or f"Must be at least {minimum}."
            return None
        return validate

    @staticmethod
    def max_value(maximum: float, error_message: Optional[str] = None) -> Validator:
        def validate(value: Any, context: ValidationContext) -> Optional[str]:
            number = None if _is_empty(value) else _to_number(value)
            if number is not None and number > maximum:
                return error_message or f"Must be at most {maximum}."
            return None
        return validate

    @staticmethod
    def pattern(regex: Union[str, Pattern[str]], error_message: str = "Invalid format.") -> Validator:
        """Value (as str) must fully match ``regex``."""
        compiled = re.compile(regex) if isinstance(regex, str) else regex

        def validate(value: Any, context: ValidationContext) -> Optional[str]:
            if _is_empty(value):
                return None
            return None if compiled.fullmatch(str(value)) else error_message
        return validate

    @staticmethod
    def equals_field(other_field: str, error_message: Optional[str] = None) -> Validator:
        """Value must equal the live value of another field in the same form."""
        def validate(value: Any, context: ValidationContext) -> Optional[str]:
            if value != context.sibling_value(other_field):
                return error_message or f"Must match {other_field}."
            return None
        return validate

    @staticmethod
    def compose(*validators: Validator) -> Validator:
        """Combine validators into one; the first error wins."""
        def validate(value: Any, context: ValidationContext) -> Optional[str]:
            for validator in validators:
                error = validator(value, context)
                if error is not None:
                    return error
            return None
        return validate
