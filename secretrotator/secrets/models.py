"""Request and response types for secret rotation."""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import jsonschema

from ..config.schemas import ROTATION_REQUEST_SCHEMA
from ..utils.errors import InputParseError


def _is_strict_integer(checker, instance) -> bool:
    return isinstance(instance, int) and not isinstance(instance, bool)


# Whole-number floats such as 16.0 count as "integer" in stock jsonschema
RequestSchemaValidator = jsonschema.validators.extend(
    jsonschema.Draft7Validator,
    type_checker=jsonschema.Draft7Validator.TYPE_CHECKER.redefine("integer", _is_strict_integer),
)


class SecretType(str, Enum):
    """Shape of the secret body held by the store."""

    PLAINTEXT = "plaintext"
    KEY_VALUE = "key-value"
    JSON = "json"

    @property
    def is_structured(self) -> bool:
        return self in (SecretType.KEY_VALUE, SecretType.JSON)

    @classmethod
    def parse(cls, value: str) -> Optional["SecretType"]:
        """Return the matching member, or None for an unknown value."""
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass
class GeneratorOptions:
    """Options controlling the shape of a generated secret."""

    length: int = 0
    include_lowercase: bool = False
    include_uppercase: bool = False
    include_digits: bool = False
    include_special_chars: bool = False
    exclude_ambiguous: bool = False
    min_number_digits: Optional[int] = None
    min_number_special: Optional[int] = None

    @property
    def has_character_class(self) -> bool:
        return (
            self.include_lowercase
            or self.include_uppercase
            or self.include_digits
            or self.include_special_chars
        )

    @property
    def required_digits(self) -> int:
        """Digits the output must contain; 1 when enabled without an explicit minimum."""
        if self.min_number_digits is not None:
            return self.min_number_digits
        return 1 if self.include_digits else 0

    @property
    def required_special(self) -> int:
        """Special characters the output must contain; 1 when enabled without an explicit minimum."""
        if self.min_number_special is not None:
            return self.min_number_special
        return 1 if self.include_special_chars else 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeneratorOptions":
        return cls(
            length=data.get("length", 0),
            include_lowercase=data.get("include_lowercase", False),
            include_uppercase=data.get("include_uppercase", False),
            include_digits=data.get("include_digits", False),
            include_special_chars=data.get("include_special_chars", False),
            exclude_ambiguous=data.get("exclude_ambiguous", False),
            min_number_digits=data.get("min_number_digits"),
            min_number_special=data.get("min_number_special"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "length": self.length,
            "include_lowercase": self.include_lowercase,
            "include_uppercase": self.include_uppercase,
            "include_digits": self.include_digits,
            "include_special_chars": self.include_special_chars,
            "exclude_ambiguous": self.exclude_ambiguous,
        }
        if self.min_number_digits is not None:
            data["min_number_digits"] = self.min_number_digits
        if self.min_number_special is not None:
            data["min_number_special"] = self.min_number_special
        return data


@dataclass
class KeyValueConfig:
    """Keys to rotate inside a structured secret; empty means all keys."""

    keys_to_rotate: List[str] = field(default_factory=list)


@dataclass
class RotationRequest:
    """A single rotation request as received at the invocation boundary."""

    secret_arn: str
    secret_type: str
    generator_options: GeneratorOptions = field(default_factory=GeneratorOptions)
    key_value_config: Optional[KeyValueConfig] = None

    @classmethod
    def from_dict(cls, data: Any) -> "RotationRequest":
        """
        Build a request from a decoded payload.

        Field values are type-checked here; their contents are left to the
        validator.

        Raises:
            InputParseError: If the payload does not have the request shape
        """
        if not isinstance(data, dict):
            raise InputParseError(
                "Invalid request format: expected a JSON object",
                details=f"got {type(data).__name__}",
            )

        try:
            RequestSchemaValidator(ROTATION_REQUEST_SCHEMA).validate(data)
        except jsonschema.ValidationError as e:
            location = ".".join(str(part) for part in e.absolute_path) or "request"
            raise InputParseError(
                f"Invalid request format: {location}: {e.message}"
            ) from e

        key_value_config = None
        if data.get("key_value_config") is not None:
            key_value_config = KeyValueConfig(
                keys_to_rotate=list(data["key_value_config"].get("keys_to_rotate") or [])
            )

        return cls(
            secret_arn=data.get("secret_arn", ""),
            secret_type=data.get("secret_type", ""),
            generator_options=GeneratorOptions.from_dict(data.get("generator_options") or {}),
            key_value_config=key_value_config,
        )

    @classmethod
    def from_json(cls, payload: Union[str, bytes]) -> "RotationRequest":
        """
        Build a request from its JSON wire form.

        Raises:
            InputParseError: If the payload is not valid JSON or not a request
        """
        try:
            data = json.loads(payload)
        except (TypeError, ValueError) as e:
            raise InputParseError(f"Invalid request format: {e}") from e
        return cls.from_dict(data)

    @property
    def keys_to_rotate(self) -> List[str]:
        if self.key_value_config is None:
            return []
        return self.key_value_config.keys_to_rotate

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "secret_arn": self.secret_arn,
            "secret_type": self.secret_type,
            "generator_options": self.generator_options.to_dict(),
        }
        if self.key_value_config is not None:
            data["key_value_config"] = {"keys_to_rotate": list(self.key_value_config.keys_to_rotate)}
        return data


@dataclass(frozen=True)
class RotationResponse:
    """Outcome of one rotation; the underlying exception is kept off the wire."""

    success: bool
    secret_arn: str
    version_id: str = ""
    error_msg: str = ""
    error: Optional[Exception] = field(default=None, repr=False, compare=False)

    @classmethod
    def succeeded(cls, secret_arn: str, version_id: str) -> "RotationResponse":
        return cls(success=True, secret_arn=secret_arn, version_id=version_id)

    @classmethod
    def failed(cls, secret_arn: str, error: Exception) -> "RotationResponse":
        return cls(success=False, secret_arn=secret_arn, error_msg=str(error), error=error)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success, "secret_arn": self.secret_arn}
        if self.version_id:
            data["version_id"] = self.version_id
        if self.error_msg:
            data["error_msg"] = self.error_msg
        return data
