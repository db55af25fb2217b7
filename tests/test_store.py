"""Tests for the AWS Secrets Manager store."""

from unittest.mock import MagicMock, patch

import boto3
import pytest
from botocore.exceptions import EndpointConnectionError
from botocore.stub import Stubber

from secretrotator.secrets import Deadline, SecretsManagerStore
from secretrotator.utils.errors import DeadlineExceededError, StoreFailure, StoreReadError, StoreWriteError


@pytest.fixture
def client():
    return boto3.client(
        "secretsmanager",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def stubber(client):
    with Stubber(client) as stub:
        yield stub
        stub.assert_no_pending_responses()


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


class TestSecretsManagerStore:
    """Test the boto3-backed store."""

    def test_get_secret_value(self, client, stubber, secret_arn):
        """Test the secret string is returned."""
        stubber.add_response(
            "get_secret_value",
            {"ARN": secret_arn, "Name": "test-secret-id", "SecretString": '{"password": "old"}'},
            expected_params={"SecretId": secret_arn},
        )
        store = SecretsManagerStore(client=client)

        assert store.get_secret_value(secret_arn) == '{"password": "old"}'

    def test_get_binary_secret_returns_empty_string(self, client, stubber, secret_arn):
        """Test secrets without a string value read as empty."""
        stubber.add_response(
            "get_secret_value",
            {"ARN": secret_arn, "Name": "test-secret-id", "SecretBinary": b"\x00\x01"},
            expected_params={"SecretId": secret_arn},
        )
        store = SecretsManagerStore(client=client)

        assert store.get_secret_value(secret_arn) == ""

    @pytest.mark.parametrize(
        "code,kind",
        [
            ("ResourceNotFoundException", StoreFailure.NOT_FOUND),
            ("AccessDeniedException", StoreFailure.ACCESS_DENIED),
            ("InternalServiceError", StoreFailure.TRANSIENT),
            ("ThrottlingException", StoreFailure.TRANSIENT),
        ],
    )
    def test_get_secret_value_errors(self, client, stubber, secret_arn, code, kind):
        """Test AWS errors map onto store failure kinds."""
        stubber.add_client_error("get_secret_value", service_error_code=code, service_message="nope")
        store = SecretsManagerStore(client=client)

        with pytest.raises(StoreReadError) as exc_info:
            store.get_secret_value(secret_arn)

        assert exc_info.value.kind == kind
        assert code in exc_info.value.message

    def test_put_secret_value(self, client, stubber, secret_arn, version_id):
        """Test the new version id is returned."""
        stubber.add_response(
            "put_secret_value",
            {"ARN": secret_arn, "Name": "test-secret-id", "VersionId": version_id},
            expected_params={"SecretId": secret_arn, "SecretString": "new-value"},
        )
        store = SecretsManagerStore(client=client)

        assert store.put_secret_value(secret_arn, "new-value") == version_id

    def test_put_secret_value_error(self, client, stubber, secret_arn):
        stubber.add_client_error(
            "put_secret_value",
            service_error_code="AccessDeniedException",
            service_message="not allowed",
        )
        store = SecretsManagerStore(client=client)

        with pytest.raises(StoreWriteError) as exc_info:
            store.put_secret_value(secret_arn, "new-value")

        assert exc_info.value.kind == StoreFailure.ACCESS_DENIED
        assert "failed to update secret" in exc_info.value.message

    def test_connection_error_is_transient(self, secret_arn):
        """Test transport failures become transient store errors."""
        client = MagicMock()
        client.get_secret_value.side_effect = EndpointConnectionError(endpoint_url="https://example.invalid")
        store = SecretsManagerStore(client=client)

        with pytest.raises(StoreReadError) as exc_info:
            store.get_secret_value(secret_arn)

        assert exc_info.value.kind == StoreFailure.TRANSIENT

    def test_expired_deadline_blocks_calls(self, secret_arn):
        """Test no request is issued once the deadline has passed."""
        client = MagicMock()
        clock = FakeClock()
        deadline = Deadline.after(5, clock=clock)
        clock.now += 10
        store = SecretsManagerStore(client=client)

        with pytest.raises(DeadlineExceededError):
            store.get_secret_value(secret_arn, deadline=deadline)
        with pytest.raises(DeadlineExceededError):
            store.put_secret_value(secret_arn, "new-value", deadline=deadline)

        client.get_secret_value.assert_not_called()
        client.put_secret_value.assert_not_called()

    def test_call_not_started_without_time_for_its_timeouts(self, secret_arn):
        """Test a call that could outlive the deadline is refused up front."""
        client = MagicMock()
        clock = FakeClock()
        deadline = Deadline.after(0.05, clock=clock)
        store = SecretsManagerStore(client=client, connect_timeout=2, read_timeout=4)

        with pytest.raises(DeadlineExceededError) as exc_info:
            store.put_secret_value(secret_arn, "new-value", deadline=deadline)

        assert "writing the secret" in exc_info.value.message
        assert "6.0s" in exc_info.value.details
        client.put_secret_value.assert_not_called()

    def test_call_started_with_time_for_its_timeouts(self, secret_arn, version_id):
        client = MagicMock()
        client.put_secret_value.return_value = {"VersionId": version_id}
        deadline = Deadline.after(20, clock=FakeClock())
        store = SecretsManagerStore(client=client, connect_timeout=2, read_timeout=4)

        assert store.put_secret_value(secret_arn, "new-value", deadline=deadline) == version_id
        client.put_secret_value.assert_called_once_with(SecretId=secret_arn, SecretString="new-value")

    def test_client_built_without_retries(self):
        """Test the default client is configured with timeouts and one attempt."""
        with patch("secretrotator.secrets.store.boto3.client") as mock_client:
            SecretsManagerStore(region="eu-west-1", endpoint_url="http://localhost:4566", read_timeout=3)

        args, kwargs = mock_client.call_args
        assert args == ("secretsmanager",)
        assert kwargs["region_name"] == "eu-west-1"
        assert kwargs["endpoint_url"] == "http://localhost:4566"
        assert kwargs["config"].read_timeout == 3
        assert kwargs["config"].retries == {"total_max_attempts": 1, "mode": "standard"}


class TestDeadline:
    """Test deadline bookkeeping."""

    def test_remaining_and_expired(self):
        clock = FakeClock()
        deadline = Deadline.after(5, clock=clock)

        assert deadline.remaining() == 5
        assert not deadline.expired()

        clock.now += 6
        assert deadline.remaining() == 0
        assert deadline.expired()

    def test_check(self):
        clock = FakeClock()
        deadline = Deadline.after(1, clock=clock)
        deadline.check("reading the secret")

        clock.now += 1
        with pytest.raises(DeadlineExceededError) as exc_info:
            deadline.check("reading the secret")

        assert "reading the secret" in exc_info.value.message

    def test_check_needed_time(self):
        clock = FakeClock()
        deadline = Deadline.after(10, clock=clock)
        deadline.check("reading the secret", needed=10)

        clock.now += 0.5
        with pytest.raises(DeadlineExceededError):
            deadline.check("reading the secret", needed=10)

    def test_from_lambda_context(self):
        context = MagicMock()
        context.get_remaining_time_in_millis.return_value = 3000

        deadline = Deadline.from_lambda_context(context, margin_ms=500)

        assert 2.0 < deadline.remaining() <= 2.5

    def test_from_lambda_context_margin_exceeds_remaining(self):
        context = MagicMock()
        context.get_remaining_time_in_millis.return_value = 100

        assert Deadline.from_lambda_context(context, margin_ms=500).expired()
