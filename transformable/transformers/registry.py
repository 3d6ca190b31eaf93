"""Transformer contract, named transformer registry and type factories."""

from typing import Any, Callable, Iterator, Protocol, overload, runtime_checkable

from transformable.core.exceptions import ConfigurationError, UnknownTransformerError


@runtime_checkable
class Transformer(Protocol):
    """Pure, bidirectional conversion between plain and transformed values.

    Implementations must satisfy ``reverse_transform(transform(v)) == v`` and
    must not depend on earlier calls.
    """

    def transform(self, value: Any) -> Any:
        """Convert a plain value to its storage representation."""
        ...

    def reverse_transform(self, value: Any) -> Any:
        """Convert a storage representation back to the plain value."""
        ...


TransformerFactory = Callable[[dict[str, Any]], Transformer]

_transformer_types: dict[str, TransformerFactory] = {}


class TransformerRegistry:
    """Maps transformer names to transformer instances.

    Populated once at startup and only read afterwards, so no locking is done.
    """

    def __init__(self, transformers: dict[str, Transformer] | None = None):
        self._transformers: dict[str, Transformer] = {}
        for name, transformer in (transformers or {}).items():
            self.register(name, transformer)

    def register(self, name: str, transformer: Transformer, replace: bool = False) -> None:
        """Register ``transformer`` under ``name``.

        Raises:
            ConfigurationError: If the name is taken and ``replace`` is False,
                or the object does not implement the Transformer contract.
        """
        if not isinstance(transformer, Transformer):
            raise ConfigurationError(
                f"Transformer '{name}' must define transform() and reverse_transform()",
                context={"name": name, "type": type(transformer).__name__},
            )
        if name in self._transformers and not replace:
            raise ConfigurationError(
                f"Transformer '{name}' is already registered",
                context={"name": name},
            )
        self._transformers[name] = transformer

    def get(self, name: str) -> Transformer:
        """Return the transformer registered under ``name``.

        Raises:
            UnknownTransformerError: If nothing is registered under ``name``.
        """
        transformer = self._transformers.get(name)
        if transformer is None:
            raise UnknownTransformerError(name, self.names())
        return transformer

    def names(self) -> list[str]:
        return sorted(self._transformers)

    def __contains__(self, name: object) -> bool:
        return name in self._transformers

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._transformers)

    @classmethod
    def from_config(cls, config: Any) -> "TransformerRegistry":
        """Build a registry from the ``transformers`` section of a config.

        Args:
            config: TransformableConfig (or any object with a ``transformers``
                mapping of name -> TransformerSpec).
        """
        registry = cls()
        for name, spec in config.transformers.items():
            registry.register(name, create_transformer(spec.type, spec.options()))
        return registry


@overload
def register_transformer_type(
    type_name: str,
) -> Callable[[TransformerFactory], TransformerFactory]: ...


@overload
def register_transformer_type(type_name: str, factory: TransformerFactory) -> None: ...


def register_transformer_type(
    type_name: str,
    factory: TransformerFactory | None = None,
) -> Callable[[TransformerFactory], TransformerFactory] | None:
    """Register a transformer factory under a type name.

    Can be used as a decorator or called directly:

        # As decorator
        @register_transformer_type("fernet")
        def create_fernet_transformer(options):
            return FernetTransformer(**options)

        # Direct call
        register_transformer_type("fernet", create_fernet_transformer)

    Raises:
        ConfigurationError: If the type name is already registered.
    """

    def _register(f: TransformerFactory) -> TransformerFactory:
        if type_name in _transformer_types:
            raise ConfigurationError(
                f"Transformer type '{type_name}' is already registered",
                context={"type": type_name},
            )
        _transformer_types[type_name] = f
        return f

    if factory is not None:
        _register(factory)
        return None

    return _register


def create_transformer(type_name: str, options: dict[str, Any] | None = None) -> Transformer:
    """Create a transformer instance using the registered factory.

    Raises:
        ConfigurationError: If the type is not registered or the factory
            rejects the options.
    """
    factory = _transformer_types.get(type_name)
    if factory is None:
        available = ", ".join(sorted(_transformer_types.keys())) or "(none)"
        raise ConfigurationError(
            f"Unknown transformer type: '{type_name}'",
            context={"type": type_name, "available_types": available},
        )
    return factory(dict(options or {}))


def list_transformer_types() -> list[str]:
    """Return a sorted list of all registered transformer types."""
    return sorted(_transformer_types.keys())


def clear_registry() -> None:
    """Clear all registered transformer types.

    Intended for testing only.
    """
    _transformer_types.clear()
