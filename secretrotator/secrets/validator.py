"""Rotation request validation.

Checks run in a fixed order and the first failure wins. Nothing here touches
the network or the random source.
"""

from typing import List, Optional

from ..utils.errors import ValidationError
from .models import GeneratorOptions, KeyValueConfig, RotationRequest, SecretType

MIN_SECRET_ARN_LENGTH = 20
MIN_SECRET_LENGTH = 8
MAX_SECRET_LENGTH = 2048


def validate_rotation_request(request: RotationRequest) -> None:
    """
    Validate a rotation request before any work begins.

    Args:
        request: Request to validate

    Raises:
        ValidationError: On the first rule the request breaks
    """
    validate_secret_arn(request.secret_arn)
    secret_type = validate_secret_type(request.secret_type)
    validate_generator_options(request.generator_options)

    if secret_type.is_structured:
        validate_key_value_config(request.key_value_config)


def validate_secret_arn(arn: str) -> None:
    if not arn:
        raise ValidationError("secret_arn", "cannot be empty")

    # Basic length check for ARN format
    if len(arn) < MIN_SECRET_ARN_LENGTH:
        raise ValidationError("secret_arn", "is too short to be valid")


def validate_secret_type(secret_type: str) -> SecretType:
    parsed = SecretType.parse(secret_type)
    if parsed is None:
        allowed = ", ".join(member.value for member in SecretType)
        raise ValidationError("secret_type", f"must be one of: {allowed}")
    return parsed


def validate_generator_options(opts: GeneratorOptions) -> None:
    """
    Validate generator options on their own.

    Shared by the request validator and the generator.
    """
    if opts.length < MIN_SECRET_LENGTH or opts.length > MAX_SECRET_LENGTH:
        raise ValidationError(
            "generator_options.length",
            f"must be between {MIN_SECRET_LENGTH} and {MAX_SECRET_LENGTH}",
        )

    if not opts.has_character_class:
        raise ValidationError(
            "generator_options",
            "at least one character type must be included",
        )

    for name, minimum, enabled in (
        ("min_number_digits", opts.min_number_digits, opts.include_digits),
        ("min_number_special", opts.min_number_special, opts.include_special_chars),
    ):
        if minimum is None:
            continue
        if minimum < 0:
            raise ValidationError(f"generator_options.{name}", "cannot be negative")
        if minimum > 0 and not enabled:
            raise ValidationError(
                f"generator_options.{name}",
                "requires its character class to be included",
            )

    required = opts.required_digits + opts.required_special
    if required > opts.length:
        raise ValidationError(
            "generator_options",
            f"minimum character counts ({required}) exceed length ({opts.length})",
        )


def validate_key_value_config(cfg: Optional[KeyValueConfig]) -> None:
    if cfg is None:
        return

    # Empty keys_to_rotate means rotate all keys, which is valid
    seen: List[str] = []
    for key in cfg.keys_to_rotate:
        if not key.strip():
            raise ValidationError("key_value_config.keys_to_rotate", "key names cannot be blank")
        if key in seen:
            raise ValidationError(
                "key_value_config.keys_to_rotate",
                f"duplicate key '{key}'",
            )
        seen.append(key)
