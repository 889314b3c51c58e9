"""
bootstrap/ - Configuration, logging and session construction
"""

from .config import (
    CascadeConfig,
    LoggingConfig,
    load_config,
    get_config,
)
from .logging_setup import (
    JSONFormatter,
    setup_logging,
    setup_logging_from_config,
)
from .factory import build_engine

__all__ = [
    # Config
    "CascadeConfig",
    "LoggingConfig",
    "load_config",
    "get_config",
    # Logging
    "JSONFormatter",
    "setup_logging",
    "setup_logging_from_config",
    # Factory
    "build_engine",
]
