"""Unit tests for the public API."""

import textwrap

import pytest

from transformable import (
    ConfigurationError,
    InMemoryHost,
    TransformableConfig,
    UnknownTransformerError,
    build_coordinator,
    from_yaml_coordinator,
)
from transformable.api import import_entity


@pytest.fixture
def entity_module(temp_dir, monkeypatch):
    """Importable module 'api_entities' defining an Account class."""
    (temp_dir / "api_entities.py").write_text(
        textwrap.dedent(
            """
            class Account:
                def __init__(self, secret=None, profile=None):
                    self.secret = secret
                    self.profile = profile

            class Holder:
                class Nested:
                    pass

            not_a_class = 42
            """
        ),
        encoding="utf-8",
    )
    monkeypatch.syspath_prepend(str(temp_dir))
    import api_entities

    yield api_entities
    monkeypatch.delitem(__import__("sys").modules, "api_entities", raising=False)


class TestImportEntity:
    """Tests for resolving entity import paths."""

    def test_colon_path(self, entity_module):
        assert import_entity("api_entities:Account") is entity_module.Account

    def test_dotted_path(self, entity_module):
        assert import_entity("api_entities.Account") is entity_module.Account

    def test_nested_class(self, entity_module):
        assert import_entity("api_entities:Holder.Nested") is entity_module.Holder.Nested

    def test_missing_module(self):
        with pytest.raises(ConfigurationError) as exc_info:
            import_entity("no_such_module_xyz:Account")
        assert exc_info.value.context["entity"] == "no_such_module_xyz:Account"

    def test_missing_attribute(self, entity_module):
        with pytest.raises(ConfigurationError):
            import_entity("api_entities:Missing")

    def test_not_a_class(self, entity_module):
        with pytest.raises(ConfigurationError):
            import_entity("api_entities:not_a_class")

    def test_invalid_path(self):
        with pytest.raises(ConfigurationError):
            import_entity("Account")


class TestBuildCoordinator:
    """Tests for building a coordinator from config."""

    def test_builds_working_coordinator(self, entity_module):
        config = TransformableConfig.from_dict(
            {
                "transformers": {"payload": {"type": "json", "sort_keys": True}},
                "entities": {
                    "api_entities:Account": [{"field": "profile", "transformer": "payload"}]
                },
                "cache": {"max_entries": 10},
            }
        )

        coordinator = build_coordinator(config)
        account = entity_module.Account(profile='{"theme":"dark"}')
        coordinator.on_after_load(account)

        assert account.profile == {"theme": "dark"}
        assert coordinator.cache.max_entries == 10

        account.profile["theme"] = "light"
        host = InMemoryHost(updates=[account])
        coordinator.on_before_flush(host)
        assert account.profile == '{"theme":"light"}'

    def test_undefined_transformer_fails_on_first_use(self, entity_module):
        config = TransformableConfig.from_dict(
            {"entities": {"api_entities:Account": [{"field": "secret", "transformer": "vault"}]}}
        )

        coordinator = build_coordinator(config)

        with pytest.raises(UnknownTransformerError):
            coordinator.transform_object(entity_module.Account(secret="x"))

    def test_from_yaml_coordinator(self, entity_module, temp_dir):
        path = temp_dir / "transformable.yaml"
        path.write_text(
            textwrap.dedent(
                """
                transformers:
                  squeeze:
                    type: zlib
                entities:
                  api_entities:Account:
                    - field: secret
                      transformer: squeeze
                """
            ),
            encoding="utf-8",
        )

        coordinator = from_yaml_coordinator(str(path))
        account = entity_module.Account(secret="hello")
        coordinator.transform_object(account)

        assert account.secret != "hello"
        coordinator.reverse_transform_object(account)
        assert account.secret == "hello"
