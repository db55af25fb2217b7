"""Invocation boundary for rotation requests.

The store and generator are built once by :func:`create_handler` and handed to
the returned handler; configuration problems raise at construction time.
"""

import logging
from typing import Any, Dict, Optional

from .config import ConfigManager, RotatorConfig
from .secrets import Deadline, RotationRequest, RotationResponse, SecretGenerator, SecretRotator, SecretsManagerStore
from .utils.errors import InputParseError
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


def build_rotator(config: RotatorConfig) -> SecretRotator:
    """Build a rotator backed by AWS Secrets Manager."""
    store = SecretsManagerStore(
        region=config.region,
        endpoint_url=config.endpoint_url,
        connect_timeout=config.connect_timeout,
        read_timeout=config.read_timeout,
    )
    return SecretRotator(store, SecretGenerator())


def parse_event(event: Any) -> RotationRequest:
    """
    Turn a raw invocation payload into a request.

    Raises:
        InputParseError: If the payload is not a rotation request
    """
    if isinstance(event, (str, bytes, bytearray)):
        return RotationRequest.from_json(event)
    return RotationRequest.from_dict(event)


class RotationHandler:
    """Callable handling one invocation per call."""

    def __init__(self, rotator: SecretRotator, deadline_margin_ms: int = 0):
        self.rotator = rotator
        self.deadline_margin_ms = deadline_margin_ms

    def __call__(self, event: Any, context: Optional[Any] = None) -> Dict[str, Any]:
        return self.handle(event, context).to_dict()

    def handle(self, event: Any, context: Optional[Any] = None) -> RotationResponse:
        try:
            request = parse_event(event)
        except InputParseError as e:
            logger.error(f"Rejected invocation: {e}")
            return RotationResponse.failed(_arn_hint(event), e)

        deadline = None
        if context is not None and hasattr(context, "get_remaining_time_in_millis"):
            deadline = Deadline.from_lambda_context(context, margin_ms=self.deadline_margin_ms)

        try:
            return self.rotator.rotate_secret(request, deadline=deadline)
        except Exception as e:
            # The invocation must always answer with a response
            logger.exception(f"Unexpected failure rotating {request.secret_arn}")
            return RotationResponse.failed(request.secret_arn, e)


def create_handler(config_path: Optional[str] = None) -> RotationHandler:
    """
    Load configuration and build a ready handler.

    Raises:
        ConfigurationError: If the configuration file is missing or unreadable
        ConfigValidationError: If the configuration is invalid
    """
    config = ConfigManager(config_path).load_config()
    setup_logging(verbose=config.verbose, log_file=config.log_file)
    return RotationHandler(build_rotator(config), deadline_margin_ms=config.deadline_margin_ms)


def _arn_hint(event: Any) -> str:
    if isinstance(event, dict) and isinstance(event.get("secret_arn"), str):
        return event["secret_arn"]
    return ""
