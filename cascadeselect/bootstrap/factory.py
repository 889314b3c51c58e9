"""
bootstrap/factory.py - Build cascade sessions from configuration
"""

from __future__ import annotations
from typing import Iterable, Optional

from ..cache import TTLCache
from ..core.models import FieldConfig
from ..dependencies.cascade import CascadeEngine, ErrorSink, ValueSink
from .config import CascadeConfig, get_config


def build_engine(
    fields: Iterable[FieldConfig],
    config: Optional[CascadeConfig] = None,
    on_change: Optional[ValueSink] = None,
    on_error: Optional[ErrorSink] = None,
    disabled: bool = False,
    cache: Optional[TTLCache] = None,
) -> CascadeEngine:
    """
    Create a CascadeEngine wired from configuration.

    Each engine gets its own cache unless one is passed in explicitly,
    which is how two sessions opt into sharing entries.
    """
    config = config or get_config()

    return CascadeEngine(
        fields,
        on_change=on_change,
        on_error=on_error,
        disabled=disabled,
        design_system=config.design_system,
        cache=cache or TTLCache(ttl_seconds=config.cache_ttl_seconds),
        debounce_changes=config.debounce_changes,
        debounce_seconds=config.debounce_seconds,
        fetch_error_message=config.fetch_error_message,
        discard_superseded=config.discard_superseded,
        history_size=config.history_size,
    )
