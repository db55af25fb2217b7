"""Configuration management for Secret Rotator."""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml

from ..utils.errors import ConfigurationError
from .validator import ConfigValidationError, ConfigValidator

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SECRET_ROTATOR_CONFIG"


@dataclass(frozen=True)
class RotatorConfig:
    """Effective settings for one process."""

    region: Optional[str] = None
    endpoint_url: Optional[str] = None
    connect_timeout: float = 5
    read_timeout: float = 10
    deadline_margin_ms: int = 500
    verbose: bool = False
    log_file: Optional[str] = None

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "RotatorConfig":
        store = config.get("store") or {}
        rotation = config.get("rotation") or {}
        logging_config = config.get("logging") or {}
        return cls(
            region=store.get("region"),
            endpoint_url=store.get("endpoint_url"),
            connect_timeout=store.get("connect_timeout", cls.connect_timeout),
            read_timeout=store.get("read_timeout", cls.read_timeout),
            deadline_margin_ms=rotation.get("deadline_margin_ms", cls.deadline_margin_ms),
            verbose=logging_config.get("verbose", cls.verbose),
            log_file=logging_config.get("log_file"),
        )


class ConfigManager:
    """Loads and validates Secret Rotator configuration files."""

    def __init__(self, path: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            path: Optional configuration file path (defaults to $SECRET_ROTATOR_CONFIG)
        """
        self.path = path or os.environ.get(CONFIG_ENV_VAR)
        self.validator = ConfigValidator()

    def load_config(self, validate: bool = True) -> RotatorConfig:
        """
        Load configuration, falling back to defaults when no file is configured.

        Args:
            validate: Whether to validate the configuration

        Returns:
            RotatorConfig: Effective configuration

        Raises:
            ConfigurationError: If the file is missing or is not valid YAML
            ConfigValidationError: If validation fails
        """
        if not self.path:
            logger.debug("No configuration file set, using defaults")
            return RotatorConfig()

        try:
            with open(self.path, encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Configuration file not found: {self.path}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Error parsing YAML file {self.path}",
                details=str(e),
            ) from e

        if config is None:
            config = {}

        if validate:
            errors = self.validator.validate_config(config)
            if errors:
                raise ConfigValidationError(errors)

        logger.debug(f"Loaded configuration from {self.path}")
        return RotatorConfig.from_dict(config)
