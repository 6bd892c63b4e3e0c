"""
Service layer for form management.

Cross-cutting concerns shared by forms, fields and widget bindings: change
dispatch, value collection, transient flags and signal blocking.
"""

from .signal_service import SignalService
from .value_collection_service import ValueCollectionService
from .flag_context_manager import FlagContextManager, ManagerFlag
from .field_change_dispatcher import FieldChangeDispatcher, FieldChangeEvent

__all__ = [
    "SignalService",
    "ValueCollectionService",
    "FlagContextManager",
    "ManagerFlag",
    "FieldChangeDispatcher",
    "FieldChangeEvent",
]
