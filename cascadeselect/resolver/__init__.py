"""
Option resolution

Provides:
- OptionResolver: cached lookups with stale fallback
- make_cache_key / canonical_parent: deterministic key derivation
"""

from .keys import canonical_parent, make_cache_key
from .option_resolver import OptionResolver

__all__ = [
    "OptionResolver",
    "make_cache_key",
    "canonical_parent",
]
