"""Per-type transformable field configuration and field accessors."""

import inspect
import logging
from dataclasses import dataclass, field as dataclass_field
from typing import Any, Callable, Iterable, Optional, Type

from transformable.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Class attribute written by the @transformable_fields decorator
DECLARED_FIELDS_ATTR = "__transformable_fields__"


@dataclass(frozen=True)
class TransformableField:
    """One transformable field of a type.

    Attributes:
        field: Attribute name on the object
        transformer: Name of the transformer in the TransformerRegistry
        storage_name: Name the value is stored under (defaults to ``field``)
    """

    field: str
    transformer: str
    storage_name: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.field:
            raise ConfigurationError("Transformable field name must not be empty")
        if not self.transformer:
            raise ConfigurationError(
                "Transformable field requires a transformer name",
                context={"field": self.field},
            )
        if self.storage_name is None:
            object.__setattr__(self, "storage_name", self.field)


@dataclass(frozen=True)
class FieldAccessor:
    """Reads and writes one field, bypassing the owner type's validation.

    ``set_committed`` writes a value that mirrors what storage holds (after
    a load or a completed write). It falls back to ``set`` when a host has
    no separate notion of committed state.
    """

    get: Callable[[Any], Any]
    set: Callable[[Any, Any], None]
    set_committed: Optional[Callable[[Any, Any], None]] = dataclass_field(default=None)

    def write_committed(self, obj: Any, value: Any) -> None:
        if self.set_committed is not None:
            self.set_committed(obj, value)
        else:
            self.set(obj, value)

    @classmethod
    def for_attribute(cls, name: str) -> "FieldAccessor":
        """Accessor that reads with getattr and writes with object.__setattr__."""

        def _get(obj: Any) -> Any:
            return getattr(obj, name)

        def _set(obj: Any, value: Any) -> None:
            object.__setattr__(obj, name, value)

        return cls(get=_get, set=_set)


class MetadataRegistry:
    """Holds the transformable field list and accessor table of each type.

    Field lists come from ``register()`` (the metadata-loaded pass) or, for
    types never registered, from fields declared with @transformable_fields.
    Lookups walk the MRO so subclasses inherit their parent's configuration,
    and each resolved type is cached.
    """

    def __init__(self) -> None:
        self._fields: dict[Type, tuple[TransformableField, ...]] = {}
        self._accessor_overrides: dict[Type, dict[str, FieldAccessor]] = {}
        self._resolved: dict[Type, tuple[TransformableField, ...]] = {}
        self._accessors: dict[Type, dict[str, FieldAccessor]] = {}

    def register(self, cls: Type, fields: Iterable[TransformableField]) -> None:
        """Register the transformable fields of ``cls``, replacing earlier ones."""
        fields = tuple(fields)
        names = [f.field for f in fields]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ConfigurationError(
                f"Duplicate transformable fields on {cls.__name__}: {duplicates}",
                context={"type": cls.__name__},
            )
        self._fields[cls] = fields
        self._invalidate()
        logger.debug(
            "Registered transformable fields",
            extra={"context": {"type": cls.__name__, "fields": ",".join(names)}},
        )

    def register_accessor(self, cls: Type, field: str, accessor: FieldAccessor) -> None:
        """Use ``accessor`` for ``field`` on ``cls`` and its subclasses."""
        self._accessor_overrides.setdefault(cls, {})[field] = accessor
        self._accessors.clear()

    def fields_for(self, cls: Type) -> tuple[TransformableField, ...]:
        """Return the transformable fields of ``cls`` (empty if none)."""
        resolved = self._resolved.get(cls)
        if resolved is None:
            resolved = self._resolve_fields(cls)
            self._resolved[cls] = resolved
        return resolved

    def accessors_for(self, cls: Type) -> dict[str, FieldAccessor]:
        """Return the accessor table of ``cls``, built once per type."""
        table = self._accessors.get(cls)
        if table is None:
            table = {}
            for f in self.fields_for(cls):
                table[f.field] = self._find_accessor_override(cls, f.field) or (
                    FieldAccessor.for_attribute(f.field)
                )
            self._accessors[cls] = table
        return table

    def is_transformable(self, cls: Type) -> bool:
        return bool(self.fields_for(cls))

    def registered_types(self) -> list[Type]:
        return list(self._fields)

    def clear(self) -> None:
        self._fields.clear()
        self._accessor_overrides.clear()
        self._invalidate()

    def _resolve_fields(self, cls: Type) -> tuple[TransformableField, ...]:
        for ancestor in inspect.getmro(cls):
            if ancestor is object:
                continue
            if ancestor in self._fields:
                return self._fields[ancestor]
            declared = ancestor.__dict__.get(DECLARED_FIELDS_ATTR)
            if declared:
                return tuple(declared)
        return ()

    def _find_accessor_override(self, cls: Type, field: str) -> Optional[FieldAccessor]:
        for ancestor in inspect.getmro(cls):
            accessor = self._accessor_overrides.get(ancestor, {}).get(field)
            if accessor is not None:
                return accessor
        return None

    def _invalidate(self) -> None:
        self._resolved.clear()
        self._accessors.clear()


def transformable_fields(**fields: str | tuple[str, str]) -> Callable[[Type], Type]:
    """Class decorator declaring transformable fields in code.

    Each keyword maps a field name to a transformer name, or to a
    ``(transformer, storage_name)`` tuple:

        @transformable_fields(secret="vault", profile=("json", "profile_json"))
        class Account:
            ...
    """
    declared = []
    for name, spec in fields.items():
        if isinstance(spec, tuple):
            transformer, storage_name = spec
            declared.append(TransformableField(name, transformer, storage_name))
        else:
            declared.append(TransformableField(name, spec))

    def decorator(cls: Type) -> Type:
        setattr(cls, DECLARED_FIELDS_ATTR, tuple(declared))
        return cls

    return decorator
