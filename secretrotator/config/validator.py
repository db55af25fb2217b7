"""Configuration validation for Secret Rotator."""

from typing import Any, Dict, List

import jsonschema
import yaml

from .schemas import CONFIG_SCHEMA


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Configuration validation failed: {'; '.join(errors)}")


class ConfigValidator:
    """Validates Secret Rotator configuration files."""

    def validate_config(self, config: Dict[str, Any]) -> List[str]:
        """
        Validate a configuration mapping.

        Args:
            config: Configuration dictionary to validate

        Returns:
            List[str]: List of validation errors (empty if valid)
        """
        if not isinstance(config, dict):
            return ["Configuration must be a mapping"]

        validator = jsonschema.Draft7Validator(CONFIG_SCHEMA)
        errors = []
        for error in sorted(validator.iter_errors(config), key=lambda e: list(e.absolute_path)):
            location = ".".join(str(part) for part in error.absolute_path)
            if location:
                errors.append(f"{location}: {error.message}")
            else:
                errors.append(error.message)

        store = config.get("store")
        if isinstance(store, dict):
            errors.extend(self._validate_timeouts(store))

        return errors

    def validate_config_file(self, file_path: str) -> List[str]:
        """
        Validate configuration file.

        Args:
            file_path: Path to configuration file

        Returns:
            List[str]: List of validation errors (empty if valid)
        """
        try:
            with open(file_path, encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except FileNotFoundError:
            return [f"Configuration file not found: {file_path}"]
        except yaml.YAMLError as e:
            return [f"Invalid YAML syntax: {e}"]

        if config is None:
            return []

        return self.validate_config(config)

    def _validate_timeouts(self, store: Dict[str, Any]) -> List[str]:
        """Check the store timeouts fit inside a Lambda invocation."""
        errors = []
        for name in ("connect_timeout", "read_timeout"):
            value = store.get(name)
            if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 900:
                errors.append(f"store.{name}: {value} exceeds the 900 second invocation limit")
        return errors
