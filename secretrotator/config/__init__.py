"""Configuration management for Secret Rotator."""

from .manager import ConfigManager, RotatorConfig
from .schemas import CONFIG_SCHEMA, ROTATION_REQUEST_SCHEMA
from .validator import ConfigValidationError, ConfigValidator

__all__ = [
    "ConfigManager",
    "ConfigValidationError",
    "ConfigValidator",
    "RotatorConfig",
    "CONFIG_SCHEMA",
    "ROTATION_REQUEST_SCHEMA",
]
