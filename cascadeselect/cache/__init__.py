"""
Option cache

Provides:
- TTLCache: key -> (data, timestamp) store with lazy expiry
- CacheEntry: immutable cached option list
"""

from .ttl_cache import CacheEntry, TTLCache

__all__ = [
    "CacheEntry",
    "TTLCache",
]
