"""Transform coordinator driven by persistence lifecycle callbacks.

The host persistence layer calls the ``on_*`` methods at the matching points
of an object's save/load cycle:

- ``on_metadata_loaded``: a type's transformable fields become known
- ``on_before_flush``: plain -> transformed for every pending insert/update
- ``on_after_insert`` / ``on_after_update`` / ``on_after_load``:
  transformed -> plain for the single affected object

Every reverse transform records the (transformed, plain) pair in the
FieldValueCache. A later forward transform whose current value still equals
the cached plain value reuses the cached transformed value instead of calling
the transformer again. Without that check an untouched field would be
re-encoded on every flush.

Transformer exceptions are not caught. Fields processed before a failing
field keep their new values; there is no rollback across fields.
"""

import logging
from enum import Enum
from typing import Any, Iterable, Optional, Protocol, Sequence, Type

from transformable.core.cache import CacheEntry, FieldValueCache
from transformable.core.identity import IdentityMap
from transformable.core.metadata import FieldAccessor, MetadataRegistry, TransformableField
from transformable.transformers.registry import Transformer, TransformerRegistry

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    """Direction of a transformer operation."""

    FORWARD = "forward"
    REVERSE = "reverse"

    def apply(self, transformer: Transformer, value: Any) -> Any:
        if self is Direction.FORWARD:
            return transformer.transform(value)
        return transformer.reverse_transform(value)


class PersistenceHost(Protocol):
    """What the coordinator needs from the persistence layer."""

    def scheduled_updates(self) -> Iterable[Any]:
        """Objects scheduled for update in the pending flush."""
        ...

    def scheduled_insertions(self) -> Iterable[Any]:
        """Objects scheduled for insertion in the pending flush."""
        ...

    def recompute_change_set(self, obj: Any, fields: Sequence[str]) -> None:
        """Re-derive the pending changes of ``obj`` after out-of-band writes."""
        ...


class InMemoryHost:
    """Minimal PersistenceHost backed by plain lists.

    Records every change-set recomputation request in ``recomputed`` as
    ``(obj, fields)`` tuples.
    """

    def __init__(
        self,
        updates: Optional[list[Any]] = None,
        insertions: Optional[list[Any]] = None,
    ):
        self.updates = list(updates or [])
        self.insertions = list(insertions or [])
        self.recomputed: list[tuple[Any, tuple[str, ...]]] = []

    def scheduled_updates(self) -> list[Any]:
        return list(self.updates)

    def scheduled_insertions(self) -> list[Any]:
        return list(self.insertions)

    def recompute_change_set(self, obj: Any, fields: Sequence[str]) -> None:
        self.recomputed.append((obj, tuple(fields)))

    def clear(self) -> None:
        self.updates.clear()
        self.insertions.clear()


class TransformCoordinator:
    """Applies transformers to configured fields and caches value pairs.

    One coordinator serves one persistence session used by one thread at a
    time; it does no locking.

    A host that issues its own object handles passes its IdentityMap as
    ``identities``; the coordinator subscribes to its releases.
    """

    def __init__(
        self,
        registry: TransformerRegistry,
        metadata: Optional[MetadataRegistry] = None,
        cache: Optional[FieldValueCache] = None,
        identities: Optional[IdentityMap] = None,
    ):
        self.registry = registry
        self.metadata = metadata if metadata is not None else MetadataRegistry()
        self.cache = cache if cache is not None else FieldValueCache()
        self.identities = identities if identities is not None else IdentityMap()
        self.identities.add_release_callback(self._on_handle_released)

    # Lifecycle callbacks

    def on_metadata_loaded(self, cls: Type, fields: Iterable[TransformableField]) -> None:
        self.metadata.register(cls, fields)

    def on_before_flush(self, host: PersistenceHost) -> None:
        """Forward-transform every object pending update or insertion."""
        for obj in host.scheduled_updates():
            self._handle(obj, Direction.FORWARD, host)
        for obj in host.scheduled_insertions():
            self._handle(obj, Direction.FORWARD, host)

    def on_after_insert(self, obj: Any, host: Optional[PersistenceHost] = None) -> None:
        self._handle(obj, Direction.REVERSE, host)

    def on_after_update(self, obj: Any, host: Optional[PersistenceHost] = None) -> None:
        self._handle(obj, Direction.REVERSE, host)

    def on_after_load(
        self,
        obj: Any,
        host: Optional[PersistenceHost] = None,
        only: Optional[Iterable[str]] = None,
    ) -> None:
        """Reverse-transform a freshly loaded object.

        Args:
            obj: The loaded object
            host: Host to signal change-set recomputation to
            only: Restrict the pass to these field names (partial refresh)
        """
        self._handle(obj, Direction.REVERSE, host, only)

    def on_detach(self, obj: Any) -> None:
        """Drop every cache entry of an object leaving the session."""
        self.identities.release(obj)

    def reset(self) -> None:
        """Forget all cached values, e.g. when the session closes."""
        self.cache.clear()
        self.identities.clear()

    # Direct use

    def transform_object(self, obj: Any, host: Optional[PersistenceHost] = None) -> bool:
        return self._handle(obj, Direction.FORWARD, host)

    def reverse_transform_object(self, obj: Any, host: Optional[PersistenceHost] = None) -> bool:
        return self._handle(obj, Direction.REVERSE, host)

    def cached_entry(self, obj: Any, field: str) -> Optional[CacheEntry]:
        """Return the cached value pair of ``obj.field`` without side effects."""
        handle = self.identities.peek(obj)
        if handle is None:
            return None
        return self.cache.get(handle, field)

    # Internals

    def _handle(
        self,
        obj: Any,
        direction: Direction,
        host: Optional[PersistenceHost],
        only: Optional[Iterable[str]] = None,
    ) -> bool:
        cls = type(obj)
        fields = self.metadata.fields_for(cls)
        if not fields:
            return False

        wanted = set(only) if only is not None else None
        accessors = self.metadata.accessors_for(cls)
        handle = self.identities.handle_for(obj)

        processed = []
        for field in fields:
            if wanted is not None and field.field not in wanted:
                continue
            self._handle_field(obj, handle, field, accessors[field.field], direction)
            processed.append(field.field)

        if processed and host is not None:
            host.recompute_change_set(obj, processed)
        return bool(processed)

    def _handle_field(
        self,
        obj: Any,
        handle: int,
        field: TransformableField,
        accessor: FieldAccessor,
        direction: Direction,
    ) -> None:
        value = accessor.get(obj)

        if direction is Direction.FORWARD:
            entry = self.cache.get(handle, field.field)
            if entry is not None and entry.matches(value):
                logger.debug(
                    "Plain value unchanged, reusing cached transformed value",
                    extra={"entity": type(obj).__name__, "field": field.field},
                )
                accessor.set(obj, entry.transformed)
                return
            accessor.set(obj, direction.apply(self.registry.get(field.transformer), value))
            return

        plain = direction.apply(self.registry.get(field.transformer), value)
        accessor.write_committed(obj, plain)
        self.cache.store(handle, field.field, transformed=value, plain=plain)

    def _on_handle_released(self, handle: int) -> None:
        removed = self.cache.discard(handle)
        if removed:
            logger.debug(
                "Discarded cache entries of released object",
                extra={"context": {"handle": handle, "entries": removed}},
            )
