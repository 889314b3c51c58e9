"""
Cascade dependency engine

Provides:
- CascadeEngine: value propagation, descendant reset, ordered re-resolution
- PassResult / FieldResolution: outcome of a re-evaluation pass
- ChangeLog / ValueChangeEvent: audit trail of value changes
"""

from .cascade import (
    CascadeEngine,
    PassResult,
    FieldResolution,
)
from .invalidation import (
    ChangeLog,
    ValueChangeEvent,
)

__all__ = [
    # Engine
    "CascadeEngine",
    "PassResult",
    "FieldResolution",
    # Change log
    "ChangeLog",
    "ValueChangeEvent",
]
