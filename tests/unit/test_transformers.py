"""Unit tests for built-in transformers."""

import base64

import pytest
from cryptography.fernet import Fernet

from transformable.core.exceptions import ConfigurationError, TransformerExecutionError
from transformable.transformers import (
    FernetTransformer,
    JsonTransformer,
    NoopTransformer,
    Transformer,
    ZlibTransformer,
    create_fernet_transformer,
    create_json_transformer,
    create_noop_transformer,
    create_zlib_transformer,
)


# ============================================================================
# Round trip
# ============================================================================


@pytest.mark.parametrize(
    "transformer, value",
    [
        (NoopTransformer(), {"anything": [1, 2]}),
        (JsonTransformer(), {"theme": "dark", "tags": ["a", "b"], "count": 3}),
        (ZlibTransformer(level=9), "héllo " * 50),
        (FernetTransformer([Fernet.generate_key()]), "s3cret ✓"),
    ],
)
def test_round_trip(transformer, value):
    """reverse_transform(transform(v)) == v for every built-in."""
    assert isinstance(transformer, Transformer)
    assert transformer.reverse_transform(transformer.transform(value)) == value


@pytest.mark.parametrize(
    "transformer",
    [
        NoopTransformer(),
        JsonTransformer(),
        ZlibTransformer(),
        FernetTransformer([Fernet.generate_key()]),
    ],
)
def test_none_passes_through(transformer):
    assert transformer.transform(None) is None
    assert transformer.reverse_transform(None) is None


# ============================================================================
# JsonTransformer
# ============================================================================


class TestJsonTransformer:
    """Tests for json transformer."""

    def test_compact_output(self):
        assert JsonTransformer().transform({"a": [1, 2]}) == '{"a":[1,2]}'

    def test_sort_keys(self):
        assert JsonTransformer(sort_keys=True).transform({"b": 1, "a": 2}) == '{"a":2,"b":1}'

    def test_non_ascii_kept_by_default(self):
        assert JsonTransformer().transform("é") == '"é"'
        assert JsonTransformer(ensure_ascii=True).transform("é") == '"\\u00e9"'

    def test_reverse_accepts_bytes(self):
        assert JsonTransformer().reverse_transform(b'{"a":1}') == {"a": 1}

    def test_unserializable_value_raises(self):
        with pytest.raises(TransformerExecutionError) as exc_info:
            JsonTransformer().transform({"a": object()})
        assert exc_info.value.context["value_type"] == "dict"

    def test_invalid_json_raises(self):
        with pytest.raises(TransformerExecutionError) as exc_info:
            JsonTransformer().reverse_transform("{not json")
        assert "line" in exc_info.value.context

    def test_non_string_input_raises(self):
        with pytest.raises(TransformerExecutionError):
            JsonTransformer().reverse_transform(42)

    def test_factory_rejects_unknown_options(self):
        with pytest.raises(ConfigurationError):
            create_json_transformer({"indent": 2})


# ============================================================================
# ZlibTransformer
# ============================================================================


class TestZlibTransformer:
    """Tests for zlib transformer."""

    def test_output_is_ascii_base64(self):
        stored = ZlibTransformer().transform("hello")
        assert stored.isascii()
        base64.b64decode(stored, validate=True)

    def test_compresses_repetitive_text(self):
        text = "abc" * 1000
        assert len(ZlibTransformer(level=9).transform(text)) < len(text)

    def test_non_string_input_raises(self):
        with pytest.raises(TransformerExecutionError):
            ZlibTransformer().transform(b"bytes")

    def test_invalid_base64_raises(self):
        with pytest.raises(TransformerExecutionError):
            ZlibTransformer().reverse_transform("not base64!!")

    def test_invalid_zlib_data_raises(self):
        with pytest.raises(TransformerExecutionError):
            ZlibTransformer().reverse_transform(base64.b64encode(b"garbage").decode())

    def test_invalid_level(self):
        with pytest.raises(ConfigurationError):
            ZlibTransformer(level=12)

    def test_factory(self):
        transformer = create_zlib_transformer({"level": 1})
        assert transformer.reverse_transform(transformer.transform("x")) == "x"


# ============================================================================
# FernetTransformer
# ============================================================================


class TestFernetTransformer:
    """Tests for fernet transformer."""

    def test_ciphertext_differs_from_plain(self, fernet_key):
        token = FernetTransformer([fernet_key]).transform("s3cret")
        assert "s3cret" not in token
        assert token.isascii()

    def test_encryption_is_not_deterministic(self, fernet_key):
        transformer = FernetTransformer([fernet_key])
        assert transformer.transform("same") != transformer.transform("same")

    def test_wrong_key_raises(self, fernet_key):
        token = FernetTransformer([fernet_key]).transform("s3cret")
        other = FernetTransformer([Fernet.generate_key()])

        with pytest.raises(TransformerExecutionError):
            other.reverse_transform(token)

    def test_malformed_token_raises(self, fernet_key):
        with pytest.raises(TransformerExecutionError):
            FernetTransformer([fernet_key]).reverse_transform("ENC(xyz)")

    def test_non_string_input_raises(self, fernet_key):
        with pytest.raises(TransformerExecutionError):
            FernetTransformer([fernet_key]).transform(123)

    def test_key_rotation_decrypts_old_tokens(self, fernet_key):
        old_token = FernetTransformer([fernet_key]).transform("legacy")
        new_key = FernetTransformer.generate_key()
        rotated = create_fernet_transformer({"key": new_key, "keys": [fernet_key]})

        assert rotated.reverse_transform(old_token) == "legacy"
        new_token = rotated.transform("fresh")
        assert FernetTransformer([new_key]).reverse_transform(new_token) == "fresh"

    def test_invalid_key_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            FernetTransformer(["too-short"])

    def test_factory_requires_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            create_fernet_transformer({})
        assert "key" in str(exc_info.value)

    def test_factory_rejects_unknown_options(self, fernet_key):
        with pytest.raises(ConfigurationError):
            create_fernet_transformer({"key": fernet_key, "cipher": "aes"})


class TestNoopTransformer:
    """Tests for noop transformer."""

    def test_returns_same_object(self):
        value = ["a"]
        assert NoopTransformer().transform(value) is value

    def test_factory_rejects_options(self):
        with pytest.raises(ConfigurationError):
            create_noop_transformer({"x": 1})
