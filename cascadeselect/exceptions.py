"""
cascadeselect/exceptions.py - Cascade-specific exceptions

Custom exceptions separating configuration mistakes, which are raised to
the caller, from fetch failures, which the engine contains per field.
"""

from __future__ import annotations

from typing import Any, Optional


class CascadeError(Exception):
    """Base exception for cascade operations."""

    def __init__(self, message: str, recoverable: bool = False):
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable

    def __str__(self) -> str:
        return self.message


class ConfigurationError(CascadeError):
    """Raised when a field list or a value does not fit the cascade's shape."""

    def __init__(self, message: str, field_index: Optional[int] = None):
        super().__init__(message, recoverable=False)
        self.field_index = field_index


class OptionFetchError(CascadeError):
    """Raised when a lookup fails and no cached options exist to fall back on."""

    def __init__(
        self,
        cache_key: str,
        original_error: Exception,
        parent_value: Any = None,
    ):
        super().__init__(
            f"Option fetch failed for {cache_key}: {original_error}",
            recoverable=True,
        )
        self.cache_key = cache_key
        self.original_error = original_error
        self.parent_value = parent_value
