"""
core/enums.py - Per-field lifecycle states
"""

from enum import Enum


class FieldStatus(Enum):
    """Conceptual state of a single field in the cascade."""
    IDLE = "idle"          # No parent value, nothing to resolve
    LOADING = "loading"    # Parent value present, fetch outstanding
    READY = "ready"        # Options populated for the current parent
    ERROR = "error"        # Fetch failed and no cached fallback existed
