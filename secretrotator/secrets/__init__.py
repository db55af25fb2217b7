"""Secret generation and rotation."""

from .generator import SecretGenerator
from .models import (
    GeneratorOptions,
    KeyValueConfig,
    RotationRequest,
    RotationResponse,
    SecretType,
)
from .rotation import RotationState, SecretRotator
from .store import Deadline, SecretsManagerStore, SecretStore
from .validator import validate_generator_options, validate_rotation_request

__all__ = [
    "Deadline",
    "GeneratorOptions",
    "KeyValueConfig",
    "RotationRequest",
    "RotationResponse",
    "RotationState",
    "SecretGenerator",
    "SecretRotator",
    "SecretStore",
    "SecretType",
    "SecretsManagerStore",
    "validate_generator_options",
    "validate_rotation_request",
]
