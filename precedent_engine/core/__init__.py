"""Configuration, logging and error types."""

from .config import EngineConfig, Settings, settings
from .exceptions import ConfigurationError, PrecedentEngineError, ValidationError

__all__ = [
    "EngineConfig",
    "Settings",
    "settings",
    "ConfigurationError",
    "PrecedentEngineError",
    "ValidationError",
]
