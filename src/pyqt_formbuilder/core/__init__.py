"""
Core PyQt6 utilities.

Qt-level building blocks with no form-specific logic.
"""

from .focus_handle import FocusHandle

__all__ = [
    "FocusHandle",
]
