"""Pytest configuration and shared fixtures."""

import json
import logging
from unittest.mock import MagicMock

import pytest

from secretrotator.secrets import GeneratorOptions, KeyValueConfig, RotationRequest, SecretGenerator, SecretStore

TEST_SECRET_ARN = "arn:aws:secretsmanager:us-east-1:123456789012:secret:test-secret-id"
TEST_VERSION_ID = "a1b2c3d4-5678-90ab-cdef-EXAMPLE11111"


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo handler changes made by setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def generator_options():
    return GeneratorOptions(
        length=16,
        include_lowercase=True,
        include_uppercase=True,
        include_digits=True,
    )


@pytest.fixture
def plaintext_request(generator_options):
    return RotationRequest(
        secret_arn=TEST_SECRET_ARN,
        secret_type="plaintext",
        generator_options=generator_options,
    )


@pytest.fixture
def key_value_request(generator_options):
    return RotationRequest(
        secret_arn=TEST_SECRET_ARN,
        secret_type="key-value",
        generator_options=generator_options,
        key_value_config=KeyValueConfig(keys_to_rotate=["password", "api_key"]),
    )


@pytest.fixture
def existing_body():
    return json.dumps({"username": "admin", "password": "old-password", "api_key": "old-api-key"})


@pytest.fixture
def mock_store(existing_body):
    """Secret store returning ``existing_body`` and a fixed version id."""
    store = MagicMock(spec=SecretStore)
    store.get_secret_value.return_value = existing_body
    store.put_secret_value.return_value = TEST_VERSION_ID
    return store


@pytest.fixture
def mock_generator():
    """Generator returning numbered values."""
    generator = MagicMock(spec=SecretGenerator)
    generator.generate.side_effect = [f"generated-{i}" for i in range(1, 20)]
    return generator


@pytest.fixture
def secret_arn():
    return TEST_SECRET_ARN


@pytest.fixture
def version_id():
    return TEST_VERSION_ID
