"""
Cascade core data model

Provides:
- Option / FieldConfig: field configuration and option shape
- FieldStatus: per-field lifecycle states
- Value helpers: emptiness and normalization rules
"""

from .constants import (
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_DEBOUNCE_SECONDS,
    DEFAULT_FETCH_ERROR_MESSAGE,
    DEFAULT_PLACEHOLDER,
    DEFAULT_LABEL_TEMPLATE,
    DEFAULT_DESIGN_SYSTEM,
    DEFAULT_HISTORY_SIZE,
)
from .enums import FieldStatus
from .models import (
    Option,
    OptionList,
    OptionSource,
    FieldConfig,
    FieldValue,
    FetchCallable,
    parse_options,
    prepare_fields,
    is_empty_value,
)

__all__ = [
    # Constants
    "DEFAULT_CACHE_TTL_SECONDS",
    "DEFAULT_DEBOUNCE_SECONDS",
    "DEFAULT_FETCH_ERROR_MESSAGE",
    "DEFAULT_PLACEHOLDER",
    "DEFAULT_LABEL_TEMPLATE",
    "DEFAULT_DESIGN_SYSTEM",
    "DEFAULT_HISTORY_SIZE",
    # Enums
    "FieldStatus",
    # Models
    "Option",
    "OptionList",
    "OptionSource",
    "FieldConfig",
    "FieldValue",
    "FetchCallable",
    "parse_options",
    "prepare_fields",
    "is_empty_value",
]
