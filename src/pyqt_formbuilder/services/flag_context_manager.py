"""
Context manager factory for boolean flag management.

Forms and fields carry a few transient boolean flags (``_in_reset``,
``_in_patch``) that must be restored no matter how the guarded block exits.

Pattern:
    Instead of:
        self._in_reset = True
        try:
            # ... logic
        finally:
            self._in_reset = False

    Use:
        with FlagContextManager.manage_flags(self, _in_reset=True):
            # ... logic
"""

from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, Set
import logging

logger = logging.getLogger(__name__)


class ManagerFlag(Enum):
    """
    Registry of valid form/field flags.

    Every object managed by FlagContextManager must initialize each flag it
    uses in __init__; access is fail-loud.
    """
    IN_RESET = '_in_reset'
    IN_PATCH = '_in_patch'


class FlagContextManager:
    """
    Context manager factory for boolean flag management.

    Examples:
        with FlagContextManager.manage_flags(form, _in_patch=True):
            field.did_change(value)

        with FlagContextManager.reset_context(form):
            for field in fields:
                field.reset()
    """

    VALID_FLAGS: Set[str] = {flag.value for flag in ManagerFlag}

    @staticmethod
    @contextmanager
    def manage_flags(obj: Any, **flags: bool):
        """
        Set flags on entry and restore their previous values on exit.

        Args:
            obj: Object to set flags on (a FormAggregator or FormFieldController)
            **flags: Flag names and values to set (e.g., _in_reset=True)

        Raises:
            ValueError: If any flag name is not in VALID_FLAGS registry
        """
        invalid_flags = set(flags.keys()) - FlagContextManager.VALID_FLAGS
        if invalid_flags:
            raise ValueError(
                f"Invalid flags: {invalid_flags}. "
                f"Valid flags: {FlagContextManager.VALID_FLAGS}. "
                f"Add new flags to ManagerFlag enum."
            )

        # No default: every flag must exist on obj
        prev_values: Dict[str, bool] = {}
        for flag_name in flags:
            prev_values[flag_name] = getattr(obj, flag_name)

        for flag_name, flag_value in flags.items():
            setattr(obj, flag_name, flag_value)
            logger.debug(f"Setting flag {flag_name}={flag_value} on {type(obj).__name__}")

        try:
            yield
        finally:
            for flag_name, prev_value in prev_values.items():
                setattr(obj, flag_name, prev_value)
                logger.debug(f"Restoring flag {flag_name}={prev_value} on {type(obj).__name__}")

    @staticmethod
    @contextmanager
    def reset_context(obj: Any):
        """Shorthand for ``manage_flags(obj, _in_reset=True)``."""
        with FlagContextManager.manage_flags(obj, **{ManagerFlag.IN_RESET.value: True}):
            yield

    @staticmethod
    @contextmanager
    def patch_context(obj: Any):
        """Shorthand for ``manage_flags(obj, _in_patch=True)``."""
        with FlagContextManager.manage_flags(obj, **{ManagerFlag.IN_PATCH.value: True}):
            yield

    @staticmethod
    def is_flag_set(obj: Any, flag: ManagerFlag) -> bool:
        """
        Check if a flag is currently set to True.

        Example:
            if FlagContextManager.is_flag_set(self, ManagerFlag.IN_RESET):
                return  # Skip autovalidation during reset
        """
        return getattr(obj, flag.value)
