"""Pytest configuration and shared fixtures."""

import tempfile
from pathlib import Path

import pytest

from transformable.core.coordinator import InMemoryHost, TransformCoordinator
from transformable.core.exceptions import TransformerExecutionError
from transformable.core.metadata import TransformableField
from transformable.transformers import (
    TransformerRegistry,
    clear_registry,
    create_fernet_transformer,
    create_json_transformer,
    create_noop_transformer,
    create_zlib_transformer,
    register_transformer_type,
)


class RecordingTransformer:
    """Wraps values as PREFIX(value) and records every call."""

    def __init__(self, prefix: str = "ENC"):
        self.prefix = prefix
        self.transform_calls = []
        self.reverse_calls = []

    def transform(self, value):
        self.transform_calls.append(value)
        if value is None:
            return None
        return f"{self.prefix}({value})"

    def reverse_transform(self, value):
        self.reverse_calls.append(value)
        if value is None:
            return None
        opening = f"{self.prefix}("
        if not (isinstance(value, str) and value.startswith(opening) and value.endswith(")")):
            raise TransformerExecutionError(
                "Malformed value", context={"prefix": self.prefix, "value": value}
            )
        return value[len(opening):-1]


class Account:
    """Plain object with one transformable field."""

    def __init__(self, secret=None, name="acme"):
        self.secret = secret
        self.name = name


class Profile:
    """Plain object with two transformable fields."""

    def __init__(self, email=None, settings=None):
        self.email = email
        self.settings = settings


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def aes():
    """Recording transformer registered as 'aes'."""
    return RecordingTransformer("ENC")


@pytest.fixture
def b64():
    """Second recording transformer registered as 'b64'."""
    return RecordingTransformer("B64")


@pytest.fixture
def registry(aes, b64):
    return TransformerRegistry({"aes": aes, "b64": b64})


@pytest.fixture
def account_type():
    return Account


@pytest.fixture
def profile_type():
    return Profile


@pytest.fixture
def coordinator(registry):
    """Coordinator with Account.secret -> aes and Profile.email/settings."""
    coordinator = TransformCoordinator(registry)
    coordinator.on_metadata_loaded(Account, [TransformableField("secret", "aes")])
    coordinator.on_metadata_loaded(
        Profile,
        [
            TransformableField("email", "aes"),
            TransformableField("settings", "b64", storage_name="settings_raw"),
        ],
    )
    return coordinator


@pytest.fixture
def host():
    return InMemoryHost()


@pytest.fixture
def fernet_key():
    from cryptography.fernet import Fernet

    return Fernet.generate_key().decode("ascii")


@pytest.fixture
def reset_transformer_types():
    """Restore the built-in transformer types after a test changes them."""
    yield

    clear_registry()
    register_transformer_type("noop", create_noop_transformer)
    register_transformer_type("json", create_json_transformer)
    register_transformer_type("zlib", create_zlib_transformer)
    register_transformer_type("fernet", create_fernet_transformer)
