"""
core/constants.py - Shared defaults for cascade sessions
"""

# Cache freshness window (5 minutes)
DEFAULT_CACHE_TTL_SECONDS: float = 300.0

# Quiet period for debounced value notifications
DEFAULT_DEBOUNCE_SECONDS: float = 0.3

# Message written into the error vector when a fetch fails without fallback
DEFAULT_FETCH_ERROR_MESSAGE: str = "Failed to load options"

DEFAULT_PLACEHOLDER: str = "Select an option"
DEFAULT_LABEL_TEMPLATE: str = "Level {number}"

DEFAULT_DESIGN_SYSTEM: str = "antd"

# Bounded audit trail of value changes
DEFAULT_HISTORY_SIZE: int = 100
