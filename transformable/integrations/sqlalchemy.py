"""SQLAlchemy ORM integration.

Wires a TransformCoordinator into SQLAlchemy's event system:

- ``before_flush`` (session): forward transform of ``session.dirty`` and
  ``session.new``
- ``after_insert`` / ``after_update`` (mapper): reverse transform of the row
  just written
- ``load`` / ``refresh`` (instance): reverse transform of freshly loaded or
  re-loaded attributes
- ``persistent_to_detached``, ``persistent_to_deleted``,
  ``persistent_to_transient``, ``pending_to_transient`` (session): drop the
  object's cache entries

Transformable columns are declared through column ``info``:

    class Account(Base):
        __tablename__ = "accounts"

        id: Mapped[int] = mapped_column(primary_key=True)
        secret: Mapped[str] = mapped_column(String, info={"transformer": "vault"})

Reverse-transformed values are written with ``set_committed_value`` so a
freshly loaded object is not marked dirty by its decrypted values.
"""

import logging
from typing import Any, Callable, Iterable, Optional, Sequence, Type

from sqlalchemy import event
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.orm import Session, object_session
from sqlalchemy.orm.attributes import set_committed_value

from transformable.core.coordinator import TransformCoordinator
from transformable.core.exceptions import ConfigurationError
from transformable.core.metadata import FieldAccessor, TransformableField

logger = logging.getLogger(__name__)

TRANSFORMER_INFO_KEY = "transformer"

_EVICTION_EVENTS = (
    "persistent_to_detached",
    "persistent_to_deleted",
    "persistent_to_transient",
    "pending_to_transient",
)


class SessionHost:
    """Adapts a SQLAlchemy Session to the PersistenceHost protocol."""

    def __init__(self, session: Session):
        self.session = session

    def scheduled_updates(self) -> list[Any]:
        # session.dirty is optimistic; after_update fires for every one of
        # these objects, so all of them must be forward transformed.
        return list(self.session.dirty)

    def scheduled_insertions(self) -> list[Any]:
        return list(self.session.new)

    def recompute_change_set(self, obj: Any, fields: Sequence[str]) -> None:
        """Nothing to do: attribute instrumentation records writes made
        during ``before_flush``, and reverse writes go through
        ``set_committed_value``, which updates the committed snapshot."""


def column_fields(model: Type) -> list[TransformableField]:
    """Read transformable fields from the column ``info`` of a mapped class."""
    try:
        mapper = sa_inspect(model)
    except NoInspectionAvailable as e:
        raise ConfigurationError(
            f"{model.__name__} is not a mapped class",
            context={"type": model.__name__},
        ) from e

    fields = []
    for prop in mapper.column_attrs:
        for column in prop.columns:
            transformer = column.info.get(TRANSFORMER_INFO_KEY)
            if transformer:
                fields.append(
                    TransformableField(
                        field=prop.key,
                        transformer=transformer,
                        storage_name=column.name,
                    )
                )
                break
    return fields


def attribute_accessor(key: str) -> FieldAccessor:
    """Accessor writing through instrumentation, committing on reverse."""

    def _get(obj: Any) -> Any:
        return getattr(obj, key)

    def _set(obj: Any, value: Any) -> None:
        setattr(obj, key, value)

    def _set_committed(obj: Any, value: Any) -> None:
        set_committed_value(obj, key, value)

    return FieldAccessor(get=_get, set=_set, set_committed=_set_committed)


class SQLAlchemyTransformable:
    """Connects a TransformCoordinator to SQLAlchemy sessions and models."""

    def __init__(self, coordinator: TransformCoordinator):
        self.coordinator = coordinator
        self._listeners: list[tuple[Any, str, Callable[..., Any]]] = []
        self._models: list[Type] = []

    def install(self, session_target: Any, *models: Type) -> "SQLAlchemyTransformable":
        """Listen on a Session, sessionmaker or the Session class.

        Args:
            session_target: Where to attach the session-level listeners
            *models: Mapped classes to register with ``register_model``
        """
        self._listen(session_target, "before_flush", self._before_flush)
        for name in _EVICTION_EVENTS:
            self._listen(session_target, name, self._evict)
        for model in models:
            self.register_model(model)
        return self

    def register_model(
        self,
        model: Type,
        fields: Optional[Iterable[TransformableField]] = None,
    ) -> list[TransformableField]:
        """Register a mapped class; this is its metadata-loaded pass.

        Args:
            model: Mapped class
            fields: Explicit fields; read from column ``info`` when omitted

        Returns:
            The registered fields
        """
        fields = list(fields) if fields is not None else column_fields(model)
        self.coordinator.on_metadata_loaded(model, fields)
        for f in fields:
            self.coordinator.metadata.register_accessor(model, f.field, attribute_accessor(f.field))

        if model not in self._models:
            self._listen(model, "load", self._on_load, propagate=True)
            self._listen(model, "refresh", self._on_refresh, propagate=True)
            self._listen(model, "after_insert", self._after_insert, propagate=True)
            self._listen(model, "after_update", self._after_update, propagate=True)
            self._models.append(model)

        logger.info(
            "Registered transformable model",
            extra={
                "entity": model.__name__,
                "context": {"fields": ",".join(f.field for f in fields)},
            },
        )
        return fields

    def uninstall(self) -> None:
        """Remove every listener installed by this instance."""
        while self._listeners:
            target, name, fn = self._listeners.pop()
            if event.contains(target, name, fn):
                event.remove(target, name, fn)
        self._models.clear()

    # Event handlers

    def _before_flush(self, session: Session, flush_context: Any, instances: Any) -> None:
        self.coordinator.on_before_flush(SessionHost(session))

    def _after_insert(self, mapper: Any, connection: Any, target: Any) -> None:
        self.coordinator.on_after_insert(target, self._host_for(target))

    def _after_update(self, mapper: Any, connection: Any, target: Any) -> None:
        self.coordinator.on_after_update(target, self._host_for(target))

    def _on_load(self, target: Any, context: Any) -> None:
        self.coordinator.on_after_load(target, self._host_for(target))

    def _on_refresh(self, target: Any, context: Any, attrs: Optional[Iterable[str]]) -> None:
        self.coordinator.on_after_load(target, self._host_for(target), only=attrs)

    def _evict(self, session: Session, instance: Any) -> None:
        self.coordinator.on_detach(instance)

    # Internals

    def _listen(self, target: Any, name: str, fn: Callable[..., Any], **kw: Any) -> None:
        event.listen(target, name, fn, **kw)
        self._listeners.append((target, name, fn))

    @staticmethod
    def _host_for(target: Any) -> Optional[SessionHost]:
        session = object_session(target)
        return SessionHost(session) if session is not None else None
