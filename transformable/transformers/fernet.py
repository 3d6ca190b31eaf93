"""Symmetric encryption transformer based on cryptography's Fernet."""

from typing import Any, Optional, Sequence

from cryptography.fernet import Fernet, InvalidToken, MultiFernet

from transformable.core.exceptions import ConfigurationError, TransformerExecutionError
from transformable.transformers.registry import register_transformer_type


class FernetTransformer:
    """Encrypts text values into URL-safe Fernet tokens.

    Config:
        key: str - url-safe base64 encoded 32-byte key
        keys: list[str] - several keys for rotation; the first one encrypts,
              all of them are tried on decrypt
        ttl: int - optional maximum token age in seconds on decrypt
        encoding: str - text encoding of the plain value (default "utf-8")

    Tokens embed a timestamp and random IV, so encrypting the same value
    twice yields different ciphertext.
    """

    def __init__(
        self,
        keys: Sequence[str | bytes],
        ttl: Optional[int] = None,
        encoding: str = "utf-8",
    ):
        if not keys:
            raise ConfigurationError("fernet requires at least one key")
        try:
            self._fernet = MultiFernet([Fernet(key) for key in keys])
        except (ValueError, TypeError) as e:
            raise ConfigurationError(
                f"Invalid fernet key: {e}",
                context={"key_count": len(keys)},
            ) from e
        self._ttl = ttl
        self._encoding = encoding

    def transform(self, value: Any) -> Any:
        if value is None:
            return None
        if not isinstance(value, str):
            raise TransformerExecutionError(
                "fernet input must be a string",
                context={"value_type": type(value).__name__},
            )
        return self._fernet.encrypt(value.encode(self._encoding)).decode("ascii")

    def reverse_transform(self, value: Any) -> Any:
        if value is None:
            return None
        token = value.encode("ascii") if isinstance(value, str) else value
        try:
            if self._ttl is None:
                plain = self._fernet.decrypt(token)
            else:
                plain = self._fernet.decrypt(token, ttl=self._ttl)
        except (InvalidToken, TypeError, UnicodeEncodeError) as e:
            raise TransformerExecutionError(
                "Cannot decrypt value: invalid or expired token",
                context={"value_type": type(value).__name__},
            ) from e
        return plain.decode(self._encoding)

    @staticmethod
    def generate_key() -> str:
        """Return a fresh key suitable for the ``key`` option."""
        return Fernet.generate_key().decode("ascii")


@register_transformer_type("fernet")
def create_fernet_transformer(options: dict[str, Any]) -> FernetTransformer:
    """Factory function for FernetTransformer."""
    unknown = set(options) - {"key", "keys", "ttl", "encoding"}
    if unknown:
        raise ConfigurationError(
            f"Unknown fernet options: {sorted(unknown)}",
            context={"options": sorted(options)},
        )

    keys = list(options.get("keys") or [])
    if options.get("key"):
        keys.insert(0, options["key"])
    if not keys:
        raise ConfigurationError(
            "fernet requires 'key' or 'keys' configuration",
            context={"options": sorted(options)},
        )

    ttl = options.get("ttl")
    return FernetTransformer(
        keys=keys,
        ttl=int(ttl) if ttl is not None else None,
        encoding=str(options.get("encoding", "utf-8")),
    )
