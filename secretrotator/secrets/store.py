"""Secret store access for rotation."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..utils.errors import (
    DeadlineExceededError,
    StoreFailure,
    StoreReadError,
    StoreWriteError,
)

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = {"ResourceNotFoundException"}
ACCESS_DENIED_CODES = {
    "AccessDeniedException",
    "AccessDenied",
    "UnrecognizedClientException",
    "DecryptionFailure",
    "KMSAccessDeniedException",
}


class Deadline:
    """Point in time after which no further store call may start."""

    def __init__(self, expires_at: float, clock: Callable[[], float] = time.monotonic):
        self.expires_at = expires_at
        self._clock = clock

    @classmethod
    def after(cls, seconds: float, clock: Callable[[], float] = time.monotonic) -> "Deadline":
        return cls(clock() + seconds, clock=clock)

    @classmethod
    def from_lambda_context(cls, context: Any, margin_ms: int = 0) -> "Deadline":
        """Build a deadline from a Lambda context's remaining time, minus a safety margin."""
        remaining_ms = context.get_remaining_time_in_millis() - margin_ms
        return cls.after(max(remaining_ms, 0) / 1000.0)

    def remaining(self) -> float:
        return max(self.expires_at - self._clock(), 0.0)

    def expired(self) -> bool:
        return self._clock() >= self.expires_at

    def check(self, operation: str, needed: float = 0.0) -> None:
        """
        Raise unless at least ``needed`` seconds are left.

        Raises:
            DeadlineExceededError: If too little time is left for ``operation``
        """
        if self.expired():
            raise DeadlineExceededError(f"Deadline exceeded before {operation}")
        if self.remaining() < needed:
            raise DeadlineExceededError(
                f"Deadline exceeded before {operation}",
                details=f"{self.remaining():.1f}s left, the call may take up to {needed:.1f}s",
            )


class SecretStore(ABC):
    """Get/put access to secret bodies by reference."""

    @abstractmethod
    def get_secret_value(self, secret_arn: str, deadline: Optional[Deadline] = None) -> str:
        """
        Return the current secret body.

        Raises:
            StoreReadError: If the secret cannot be read
            DeadlineExceededError: If the deadline passed before the call
        """

    @abstractmethod
    def put_secret_value(self, secret_arn: str, secret_value: str, deadline: Optional[Deadline] = None) -> str:
        """
        Write a new secret body and return the new version identifier.

        Raises:
            StoreWriteError: If the secret cannot be written
            DeadlineExceededError: If the deadline passed before the call
        """


class SecretsManagerStore(SecretStore):
    """AWS Secrets Manager implementation of the secret store."""

    def __init__(
        self,
        client: Optional[Any] = None,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        connect_timeout: float = 5,
        read_timeout: float = 10,
    ):
        """
        Initialize the store.

        Args:
            client: Existing boto3 secretsmanager client (built from the other arguments if omitted)
            region: AWS region
            endpoint_url: Optional endpoint override
            connect_timeout: Connection timeout in seconds
            read_timeout: Read timeout in seconds
        """
        # Longest a single call can block with one attempt
        self.call_budget = connect_timeout + read_timeout

        if client is None:
            client = boto3.client(
                "secretsmanager",
                region_name=region,
                endpoint_url=endpoint_url,
                config=Config(
                    connect_timeout=connect_timeout,
                    read_timeout=read_timeout,
                    retries={"total_max_attempts": 1, "mode": "standard"},
                ),
            )
        self.client = client

    def get_secret_value(self, secret_arn: str, deadline: Optional[Deadline] = None) -> str:
        if deadline is not None:
            deadline.check("reading the secret", self.call_budget)

        try:
            result = self.client.get_secret_value(SecretId=secret_arn)
        except ClientError as e:
            raise StoreReadError(
                f"failed to get existing secret: {_error_message(e)}",
                kind=classify_client_error(e),
            ) from e
        except BotoCoreError as e:
            raise StoreReadError(f"failed to get existing secret: {e}") from e

        # Binary secrets carry no SecretString
        return result.get("SecretString") or ""

    def put_secret_value(self, secret_arn: str, secret_value: str, deadline: Optional[Deadline] = None) -> str:
        if deadline is not None:
            deadline.check("writing the secret", self.call_budget)

        try:
            result = self.client.put_secret_value(SecretId=secret_arn, SecretString=secret_value)
        except ClientError as e:
            raise StoreWriteError(
                f"failed to update secret: {_error_message(e)}",
                kind=classify_client_error(e),
            ) from e
        except BotoCoreError as e:
            raise StoreWriteError(f"failed to update secret: {e}") from e

        version_id = result["VersionId"]
        logger.debug(f"Secrets Manager stored version {version_id}")
        return version_id


def classify_client_error(error: ClientError) -> StoreFailure:
    """Map an AWS error code onto a store failure kind."""
    code = error.response.get("Error", {}).get("Code", "")
    if code in NOT_FOUND_CODES:
        return StoreFailure.NOT_FOUND
    if code in ACCESS_DENIED_CODES:
        return StoreFailure.ACCESS_DENIED
    return StoreFailure.TRANSIENT


def _error_message(error: ClientError) -> str:
    details = error.response.get("Error", {})
    code = details.get("Code", "Unknown")
    message = details.get("Message", "")
    if message:
        return f"{code}: {message}"
    return code
