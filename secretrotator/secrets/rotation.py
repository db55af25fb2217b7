"""Secret rotation for plaintext and structured secrets."""

import json
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from ..utils.errors import MalformedSecretError, RotatorError, UnknownKeyError, ValidationError
from .generator import SecretGenerator
from .models import RotationRequest, RotationResponse, SecretType
from .store import Deadline, SecretStore
from .validator import validate_rotation_request

logger = logging.getLogger(__name__)


class RotationState(str, Enum):
    """Stages a rotation passes through."""

    VALIDATING = "validating"
    DISPATCHING = "dispatching"
    GENERATING_PLAINTEXT = "generating_plaintext"
    FETCHING_AND_MERGING_STRUCTURED = "fetching_and_merging_structured"
    PERSISTING = "persisting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SecretRotator:
    """Rotates one secret per call against an injected store and generator."""

    def __init__(self, store: SecretStore, generator: Optional[SecretGenerator] = None):
        """
        Initialize rotator.

        Args:
            store: Secret store to read from and write to
            generator: Secret generator (a default one if omitted)
        """
        self.store = store
        self.generator = generator or SecretGenerator()

    def rotate_secret(self, request: RotationRequest, deadline: Optional[Deadline] = None) -> RotationResponse:
        """
        Rotate the secret described by ``request``.

        Failures never raise: they produce an unsuccessful response whose
        ``error`` holds the exception, and are logged.

        Args:
            request: Rotation request
            deadline: Optional deadline checked before each store call

        Returns:
            RotationResponse: Outcome of the rotation
        """
        state = RotationState.VALIDATING
        try:
            self._transition(request, state)
            validate_rotation_request(request)

            state = RotationState.DISPATCHING
            self._transition(request, state)
            secret_type = SecretType(request.secret_type)

            if secret_type is SecretType.PLAINTEXT:
                state = RotationState.GENERATING_PLAINTEXT
                self._transition(request, state)
                new_value = self._rotate_plaintext(request)
            elif secret_type.is_structured:
                state = RotationState.FETCHING_AND_MERGING_STRUCTURED
                self._transition(request, state)
                new_value = self._rotate_structured(request, deadline)
            else:
                raise ValidationError("secret_type", f"unsupported secret type: {secret_type.value}")

            state = RotationState.PERSISTING
            self._transition(request, state)
            version_id = self.store.put_secret_value(request.secret_arn, new_value, deadline=deadline)

        except RotatorError as e:
            logger.error(f"Rotation of {request.secret_arn} failed while {state.value}: {e}")
            self._transition(request, RotationState.FAILED)
            return RotationResponse.failed(request.secret_arn, e)

        self._transition(request, RotationState.SUCCEEDED)
        logger.info(f"Rotated {request.secret_arn}, new version {version_id}")
        return RotationResponse.succeeded(request.secret_arn, version_id)

    def _rotate_plaintext(self, request: RotationRequest) -> str:
        return self.generator.generate(request.generator_options)

    def _rotate_structured(self, request: RotationRequest, deadline: Optional[Deadline]) -> str:
        existing = self.store.get_secret_value(request.secret_arn, deadline=deadline)
        content = parse_structured_secret(existing)

        keys = select_keys(content, request.keys_to_rotate)

        # Build every value before touching the content so a failure leaves nothing half-rotated
        new_values = {}
        for key in keys:
            try:
                new_values[key] = self.generator.generate(request.generator_options)
            except RotatorError as e:
                e.details = f"while generating a value for key '{key}'"
                raise

        content.update(new_values)
        logger.debug(f"Rotated {len(new_values)} of {len(content)} keys in {request.secret_arn}")

        return json.dumps(content, separators=(",", ":"))

    @staticmethod
    def _transition(request: RotationRequest, state: RotationState) -> None:
        logger.debug(f"{request.secret_arn}: {state.value}")


def parse_structured_secret(body: str) -> Dict[str, Any]:
    """
    Parse a structured secret body.

    Raises:
        MalformedSecretError: If the body is not a JSON object
    """
    try:
        content = json.loads(body)
    except (ValueError, RecursionError) as e:
        raise MalformedSecretError(f"failed to parse existing secret as JSON: {e}") from e

    if not isinstance(content, dict):
        raise MalformedSecretError(
            f"failed to parse existing secret as JSON: expected an object, got {type(content).__name__}"
        )
    return content


def select_keys(content: Dict[str, Any], keys_to_rotate: List[str]) -> List[str]:
    """
    Pick the keys to rotate: the requested ones, or every key when none are requested.

    Raises:
        UnknownKeyError: If a requested key is not in the secret
    """
    if not keys_to_rotate:
        return list(content)

    missing = [key for key in keys_to_rotate if key not in content]
    if missing:
        raise UnknownKeyError(missing)
    return list(keys_to_rotate)
