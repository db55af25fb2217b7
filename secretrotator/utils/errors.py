"""Error handling utilities for Secret Rotator."""

import sys
import traceback
from enum import Enum
from typing import Optional

import click


class RotatorError(Exception):
    """Base exception for Secret Rotator errors."""

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        suggestions: Optional[list] = None,
    ):
        self.message = message
        self.details = details
        self.suggestions = suggestions or []
        super().__init__(message)


class ConfigurationError(RotatorError):
    """Raised when configuration is invalid or missing."""

    pass


class InputParseError(RotatorError):
    """Raised when an invocation payload cannot be read as a rotation request."""

    pass


class ValidationError(RotatorError):
    """Raised when a request or generator option violates its contract."""

    def __init__(
        self,
        field: str,
        reason: str,
        suggestions: Optional[list] = None,
    ):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}", suggestions=suggestions)


class RandomSourceError(RotatorError):
    """Raised when the operating system entropy source fails."""

    pass


class StoreFailure(str, Enum):
    """Classification of a secret store failure."""

    NOT_FOUND = "not_found"
    ACCESS_DENIED = "access_denied"
    TRANSIENT = "transient"


class StoreError(RotatorError):
    """Raised when the secret store rejects or fails a request."""

    def __init__(
        self,
        message: str,
        kind: StoreFailure = StoreFailure.TRANSIENT,
        details: Optional[str] = None,
        suggestions: Optional[list] = None,
    ):
        self.kind = kind
        super().__init__(message, details=details, suggestions=suggestions)


class StoreReadError(StoreError):
    """Raised when the current secret value cannot be read."""

    pass


class StoreWriteError(StoreError):
    """Raised when the new secret value cannot be written."""

    pass


class MalformedSecretError(RotatorError):
    """Raised when a structured secret body is not a JSON object."""

    pass


class UnknownKeyError(RotatorError):
    """Raised when a key selected for rotation is absent from the secret."""

    def __init__(self, keys: list):
        self.keys = list(keys)
        super().__init__(
            f"keys not present in secret: {', '.join(self.keys)}",
            suggestions=["Check keys_to_rotate against the keys stored in the secret"],
        )


class DeadlineExceededError(RotatorError):
    """Raised when the invocation budget runs out before a store call."""

    pass


class ErrorHandler:
    """Handles and formats errors for user-friendly display."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def handle_error(self, error: Exception, context: Optional[str] = None) -> None:
        """
        Handle and display error with appropriate formatting.

        Args:
            error: Exception to handle
            context: Optional context about when/where error occurred
        """
        if isinstance(error, RotatorError):
            self._handle_rotator_error(error, context)
        else:
            self._handle_generic_error(error, context)

    def _handle_rotator_error(self, error: RotatorError, context: Optional[str]) -> None:
        """Handle Secret Rotator errors."""
        click.echo(f"✗ {error.message}", err=True)

        if context:
            click.echo(f"Context: {context}", err=True)

        if error.details:
            click.echo(f"Details: {error.details}", err=True)

        suggestions = error.suggestions or create_error_suggestions(error)
        if suggestions:
            click.echo("\nSuggestions:", err=True)
            for suggestion in suggestions:
                click.echo(f"  • {suggestion}", err=True)

        if self.verbose:
            click.echo("\nFull traceback:", err=True)
            traceback.print_exc()

    def _handle_generic_error(self, error: Exception, context: Optional[str]) -> None:
        """Handle generic Python exceptions."""
        error_type = type(error).__name__

        if isinstance(error, FileNotFoundError):
            message = f"File not found: {error}"
            suggestions = [
                "Check that the file path is correct",
                "Ensure the file exists and is readable",
            ]
        elif isinstance(error, PermissionError):
            message = f"Permission denied: {error}"
            suggestions = [
                "Check file/directory permissions",
                "Try running with appropriate privileges",
            ]
        else:
            message = f"{error_type}: {error}"
            suggestions = []

        click.echo(f"✗ {message}", err=True)

        if context:
            click.echo(f"Context: {context}", err=True)

        if suggestions:
            click.echo("\nSuggestions:", err=True)
            for suggestion in suggestions:
                click.echo(f"  • {suggestion}", err=True)

        if self.verbose:
            click.echo("\nFull traceback:", err=True)
            traceback.print_exc()

    def exit_with_error(self, error: Exception, context: Optional[str] = None, exit_code: int = 1) -> None:
        """Handle error and exit with specified code."""
        self.handle_error(error, context)
        sys.exit(exit_code)


def create_error_suggestions(error: Exception) -> list:
    """
    Create contextual error suggestions for a rotation failure.

    Args:
        error: The failure to explain

    Returns:
        list: List of suggestion strings
    """
    if isinstance(error, StoreError):
        if error.kind == StoreFailure.NOT_FOUND:
            return [
                "Verify the secret ARN is correct",
                "Check that the secret exists in the configured region",
            ]
        if error.kind == StoreFailure.ACCESS_DENIED:
            return [
                "Check the IAM policy grants secretsmanager:GetSecretValue and PutSecretValue",
                "Verify the KMS key policy allows the caller to use the secret's key",
            ]
        return [
            "Retry the rotation; the store reported a temporary failure",
            "Check network connectivity to AWS Secrets Manager",
        ]

    suggestions = {
        MalformedSecretError: [
            "Structured secrets must hold a JSON object",
            "Use secret_type 'plaintext' for single-value secrets",
        ],
        InputParseError: [
            "Check the request is a JSON object with the documented fields",
        ],
        DeadlineExceededError: [
            "Increase the invocation timeout",
            "Lower rotation.deadline_margin_ms in the configuration",
        ],
        ConfigurationError: [
            "Check YAML syntax in the configuration file",
            "Validate configuration values against the documented schema",
        ],
    }

    for error_type, hints in suggestions.items():
        if isinstance(error, error_type):
            return hints
    return []


def format_validation_errors(errors: list) -> str:
    """
    Format validation errors for display.

    Args:
        errors: List of validation error messages

    Returns:
        str: Formatted error message
    """
    if not errors:
        return "No validation errors"

    if len(errors) == 1:
        return f"Validation error: {errors[0]}"

    formatted = "Validation errors:\n"
    for i, error in enumerate(errors, 1):
        formatted += f"  {i}. {error}\n"

    return formatted.strip()
