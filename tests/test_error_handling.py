"""Tests for error handling system."""

from unittest.mock import patch

from secretrotator.utils.errors import (
    DeadlineExceededError,
    ErrorHandler,
    InputParseError,
    MalformedSecretError,
    RotatorError,
    StoreError,
    StoreFailure,
    StoreReadError,
    StoreWriteError,
    UnknownKeyError,
    ValidationError,
    create_error_suggestions,
    format_validation_errors,
)


class TestRotatorError:
    """Test custom error classes."""

    def test_rotator_error_basic(self):
        error = RotatorError("Test error message")

        assert str(error) == "Test error message"
        assert error.message == "Test error message"
        assert error.details is None
        assert error.suggestions == []

    def test_validation_error_fields(self):
        error = ValidationError("secret_arn", "cannot be empty")

        assert error.field == "secret_arn"
        assert error.reason == "cannot be empty"
        assert str(error) == "secret_arn: cannot be empty"

    def test_store_errors(self):
        read_error = StoreReadError("read failed", kind=StoreFailure.NOT_FOUND)
        write_error = StoreWriteError("write failed")

        assert isinstance(read_error, StoreError)
        assert isinstance(write_error, RotatorError)
        assert read_error.kind == StoreFailure.NOT_FOUND
        assert write_error.kind == StoreFailure.TRANSIENT

    def test_unknown_key_error(self):
        error = UnknownKeyError(["token", "secret"])

        assert error.keys == ["token", "secret"]
        assert "token, secret" in error.message
        assert error.suggestions


class TestErrorHandler:
    """Test error handler functionality."""

    def setup_method(self):
        """Setup test environment."""
        self.handler = ErrorHandler(verbose=False)
        self.verbose_handler = ErrorHandler(verbose=True)

    def test_handle_rotator_error(self):
        error = RotatorError(
            "Test error message",
            details="Error details",
            suggestions=["Suggestion 1", "Suggestion 2"],
        )

        with patch("click.echo") as mock_echo:
            self.handler.handle_error(error, "Test context")

            assert mock_echo.call_count >= 4
            error_calls = [call for call in mock_echo.call_args_list if "✗" in str(call)]
            assert len(error_calls) > 0

    def test_handle_store_error_adds_suggestions(self):
        error = StoreReadError("failed to get existing secret", kind=StoreFailure.ACCESS_DENIED)

        with patch("click.echo") as mock_echo:
            self.handler.handle_error(error)

            output = " ".join(str(call) for call in mock_echo.call_args_list)
            assert "IAM" in output

    def test_handle_generic_error_file_not_found(self):
        error = FileNotFoundError("request.json not found")

        with patch("click.echo") as mock_echo:
            self.handler.handle_error(error)

            assert "File not found" in str(mock_echo.call_args_list[0])

    def test_handle_error_with_verbose(self):
        error = RotatorError("Test error")

        with patch("click.echo"):
            with patch("traceback.print_exc") as mock_traceback:
                self.verbose_handler.handle_error(error)

                mock_traceback.assert_called_once()

    def test_exit_with_error(self):
        error = RotatorError("Fatal error")

        with patch("click.echo"):
            with patch("sys.exit") as mock_exit:
                self.handler.exit_with_error(error, exit_code=2)

                mock_exit.assert_called_once_with(2)


class TestErrorUtilities:
    """Test error utility functions."""

    def test_suggestions_by_store_failure(self):
        not_found = create_error_suggestions(StoreReadError("x", kind=StoreFailure.NOT_FOUND))
        transient = create_error_suggestions(StoreWriteError("x", kind=StoreFailure.TRANSIENT))

        assert any("ARN" in suggestion for suggestion in not_found)
        assert any("Retry" in suggestion for suggestion in transient)

    def test_suggestions_for_other_errors(self):
        assert create_error_suggestions(MalformedSecretError("x"))
        assert create_error_suggestions(InputParseError("x"))
        assert create_error_suggestions(DeadlineExceededError("x"))
        assert create_error_suggestions(ValueError("x")) == []

    def test_format_validation_errors(self):
        assert format_validation_errors([]) == "No validation errors"
        assert format_validation_errors(["bad"]) == "Validation error: bad"
        assert format_validation_errors(["a", "b"]) == "Validation errors:\n  1. a\n  2. b"
