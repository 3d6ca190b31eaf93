"""Integration tests for loading the example config from disk."""

import sys
from pathlib import Path

import pytest

from transformable import from_yaml, from_yaml_coordinator
from transformable.core.exceptions import ConfigError
from transformable.transformers import (
    FernetTransformer,
    JsonTransformer,
    TransformerRegistry,
    ZlibTransformer,
)

EXAMPLE_DIR = Path(__file__).parent.parent.parent / "examples" / "accounts"


@pytest.mark.integration
class TestExampleConfig:
    """Loads examples/accounts/transformable.yaml."""

    def test_load_example_config(self, monkeypatch, fernet_key):
        monkeypatch.setenv("ACCOUNTS_VAULT_KEY", fernet_key)

        config = from_yaml(str(EXAMPLE_DIR / "transformable.yaml"))
        registry = TransformerRegistry.from_config(config)

        assert isinstance(registry.get("vault"), FernetTransformer)
        assert isinstance(registry.get("payload"), JsonTransformer)
        assert isinstance(registry.get("squeeze"), ZlibTransformer)
        assert config.cache.max_entries == 10000
        assert config.unresolved_transformers() == []

    def test_missing_key_fails(self, monkeypatch):
        monkeypatch.delenv("ACCOUNTS_VAULT_KEY", raising=False)

        with pytest.raises(ConfigError) as exc_info:
            from_yaml(str(EXAMPLE_DIR / "transformable.yaml"))

        assert "ACCOUNTS_VAULT_KEY" in str(exc_info.value)

    def test_coordinator_transforms_plain_entity(self, monkeypatch, fernet_key):
        monkeypatch.setenv("ACCOUNTS_VAULT_KEY", fernet_key)
        monkeypatch.syspath_prepend(str(EXAMPLE_DIR))
        monkeypatch.delitem(sys.modules, "models", raising=False)

        coordinator = from_yaml_coordinator(str(EXAMPLE_DIR / "transformable.yaml"))
        from models import Note

        note = Note("lorem ipsum " * 20)
        coordinator.transform_object(note)
        stored = note.body
        coordinator.reverse_transform_object(note)

        assert stored != note.body
        assert note.body == "lorem ipsum " * 20
        assert coordinator.cached_entry(note, "body").transformed == stored
