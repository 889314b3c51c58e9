"""
resolver/keys.py - Deterministic cache keys for option lookups

A key identifies one (field, parent value) pair. Structurally equal
parent values produce the same key; distinct pairs never collide.
"""

from __future__ import annotations

import json
from typing import Any


def canonical_parent(value: Any) -> Any:
    """
    Reduce a parent value to a JSON-serializable canonical form.

    Sets are sorted so selection order does not change the key, and
    integral floats collapse to ints so 1 and 1.0 share a key.
    """
    if isinstance(value, (set, frozenset)):
        return sorted(
            (canonical_parent(v) for v in value),
            key=lambda v: (type(v).__name__, json.dumps(v, sort_keys=True, default=str)),
        )
    if isinstance(value, (list, tuple)):
        return [canonical_parent(v) for v in value]
    if isinstance(value, dict):
        return {str(k): canonical_parent(v) for k, v in value.items()}
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def make_cache_key(field_index: int, parent_value: Any) -> str:
    """Compose the cache key for field_index given its parent's value."""
    serialized = json.dumps(
        canonical_parent(parent_value),
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )
    return f"field_{field_index}_parent_{serialized}"
