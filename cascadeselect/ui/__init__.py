"""
Presentation-facing helpers

Provides:
- DebouncedNotifier: last-call-wins delivery after a quiet period
- FieldView: per-field snapshot for a rendering layer
"""

from .debounce import DebouncedNotifier
from .views import FieldView

__all__ = [
    "DebouncedNotifier",
    "FieldView",
]
