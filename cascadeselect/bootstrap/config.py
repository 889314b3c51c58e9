"""
bootstrap/config.py - Cascade session configuration

Provides configuration loading from files, environment variables, and defaults.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional
from pathlib import Path
import os
import json
import logging

from ..core.constants import (
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_DEBOUNCE_SECONDS,
    DEFAULT_DESIGN_SYSTEM,
    DEFAULT_FETCH_ERROR_MESSAGE,
    DEFAULT_HISTORY_SIZE,
)

logger = logging.getLogger("bootstrap.config")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("CASCADE_LOG_LEVEL", "INFO"),
            format=os.getenv("CASCADE_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            log_file=os.getenv("CASCADE_LOG_FILE"),
            json_logs=_env_bool("CASCADE_JSON_LOGS", "false"),
        )


@dataclass
class CascadeConfig:
    """Root configuration for a cascade session."""

    # Caching
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS

    # Change notification
    debounce_changes: bool = False
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS

    # Failure handling
    fetch_error_message: str = DEFAULT_FETCH_ERROR_MESSAGE
    discard_superseded: bool = True

    # Presentation pass-through
    design_system: str = DEFAULT_DESIGN_SYSTEM

    history_size: int = DEFAULT_HISTORY_SIZE

    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "CascadeConfig":
        """Create configuration from environment variables."""
        return cls(
            cache_ttl_seconds=float(os.getenv("CASCADE_CACHE_TTL", str(DEFAULT_CACHE_TTL_SECONDS))),
            debounce_changes=_env_bool("CASCADE_DEBOUNCE_CHANGES", "false"),
            debounce_seconds=float(os.getenv("CASCADE_DEBOUNCE_SECONDS", str(DEFAULT_DEBOUNCE_SECONDS))),
            fetch_error_message=os.getenv("CASCADE_FETCH_ERROR_MESSAGE", DEFAULT_FETCH_ERROR_MESSAGE),
            discard_superseded=_env_bool("CASCADE_DISCARD_SUPERSEDED", "true"),
            design_system=os.getenv("CASCADE_DESIGN_SYSTEM", DEFAULT_DESIGN_SYSTEM),
            history_size=int(os.getenv("CASCADE_HISTORY_SIZE", str(DEFAULT_HISTORY_SIZE))),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def from_file(cls, filepath: str) -> "CascadeConfig":
        """Load configuration from JSON file."""
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Config file not found: {filepath}, using defaults")
            return cls.from_env()

        with open(path) as f:
            data = json.load(f)

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "CascadeConfig":
        """Create config from dictionary, file values overriding the environment."""
        config = cls.from_env()
        known = {f.name for f in fields(cls)}

        for key, value in data.items():
            if key == "logging":
                continue
            if key in known:
                setattr(config, key, value)
            else:
                logger.warning(f"Ignoring unknown config key: {key}")

        if "logging" in data:
            for key, value in data["logging"].items():
                if key in {f.name for f in fields(LoggingConfig)}:
                    setattr(config.logging, key, value)

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to dictionary."""
        return {
            "cache_ttl_seconds": self.cache_ttl_seconds,
            "debounce_changes": self.debounce_changes,
            "debounce_seconds": self.debounce_seconds,
            "fetch_error_message": self.fetch_error_message,
            "discard_superseded": self.discard_superseded,
            "design_system": self.design_system,
            "history_size": self.history_size,
            "logging": {
                "level": self.logging.level,
                "log_file": self.logging.log_file,
                "json_logs": self.logging.json_logs,
            },
        }


# Global config instance
_config: Optional[CascadeConfig] = None


def load_config(filepath: str = None) -> CascadeConfig:
    """
    Load configuration from file or environment.

    Args:
        filepath: Optional path to JSON config file

    Returns:
        CascadeConfig instance
    """
    global _config

    if filepath:
        _config = CascadeConfig.from_file(filepath)
    else:
        default_paths = [
            "./cascadeselect.json",
            "./config/cascadeselect.json",
        ]

        for path in default_paths:
            if Path(path).exists():
                _config = CascadeConfig.from_file(path)
                break
        else:
            _config = CascadeConfig.from_env()

    return _config


def get_config() -> CascadeConfig:
    """Get the loaded configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config
