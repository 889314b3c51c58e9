"""
cascadeselect - Dependent choice-field cascades

A chain of fields where the value of field i decides, through an
asynchronous lookup, the options offered by field i+1.

Provides:
- CascadeEngine: value propagation and ordered option re-resolution
- OptionResolver / TTLCache: cached lookups with stale fallback
- DebouncedNotifier: quiet-period delivery of value snapshots
"""

from .exceptions import CascadeError, ConfigurationError, OptionFetchError
from .core import FieldConfig, FieldStatus, Option, OptionSource
from .cache import CacheEntry, TTLCache
from .resolver import OptionResolver, make_cache_key
from .ui import DebouncedNotifier, FieldView
from .dependencies import CascadeEngine, PassResult, FieldResolution, ChangeLog, ValueChangeEvent
from .bootstrap import CascadeConfig, build_engine, setup_logging

__version__ = "1.0.0"

__all__ = [
    "CascadeError",
    "ConfigurationError",
    "OptionFetchError",
    "FieldConfig",
    "FieldStatus",
    "Option",
    "OptionSource",
    "CacheEntry",
    "TTLCache",
    "OptionResolver",
    "make_cache_key",
    "DebouncedNotifier",
    "FieldView",
    "CascadeEngine",
    "PassResult",
    "FieldResolution",
    "ChangeLog",
    "ValueChangeEvent",
    "CascadeConfig",
    "build_engine",
    "setup_logging",
]
