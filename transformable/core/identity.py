"""Session-scoped identity handles for tracked objects.

Cache entries are keyed by an opaque integer handle issued here instead of the
object itself, so field values never take part in the key and objects do not
need to be hashable.
"""

import itertools
import logging
import weakref
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

ReleaseCallback = Callable[[int], None]


class IdentityMap:
    """Issues a stable, unique handle per live object.

    Objects are tracked through weak references. When a tracked object is
    garbage-collected its handle is released and ``on_release`` is called
    with that handle. Objects that do not support weak references are held
    strongly until ``release()`` is called for them.
    """

    def __init__(self, on_release: Optional[ReleaseCallback] = None):
        self._counter = itertools.count(1)
        # id(obj) -> (handle, weakref or strong ref)
        self._handles: dict[int, tuple[int, Any]] = {}
        self._callbacks: list[ReleaseCallback] = [on_release] if on_release else []

    def add_release_callback(self, callback: ReleaseCallback) -> None:
        """Also call ``callback`` with every released handle."""
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def handle_for(self, obj: Any) -> int:
        """Return the handle for ``obj``, issuing a new one on first sight."""
        key = id(obj)
        tracked = self._handles.get(key)
        if tracked is not None and self._resolve(tracked[1]) is obj:
            return tracked[0]

        handle = next(self._counter)
        try:
            ref: Any = weakref.ref(obj, self._make_finalizer(key, handle))
        except TypeError:
            logger.debug(
                "Object does not support weak references, holding it strongly",
                extra={"context": {"type": type(obj).__name__, "handle": handle}},
            )
            ref = obj
        self._handles[key] = (handle, ref)
        return handle

    def peek(self, obj: Any) -> Optional[int]:
        """Return the handle for ``obj`` without issuing one."""
        tracked = self._handles.get(id(obj))
        if tracked is not None and self._resolve(tracked[1]) is obj:
            return tracked[0]
        return None

    def release(self, obj: Any) -> Optional[int]:
        """Forget ``obj``; returns its former handle if it was tracked."""
        handle = self.peek(obj)
        if handle is None:
            return None
        del self._handles[id(obj)]
        self._notify(handle)
        return handle

    def clear(self) -> None:
        """Forget every tracked object without firing release callbacks."""
        self._handles.clear()

    def __len__(self) -> int:
        return len(self._handles)

    def _make_finalizer(self, key: int, handle: int) -> Callable[[Any], None]:
        def _finalize(_ref: Any) -> None:
            tracked = self._handles.get(key)
            if tracked is not None and tracked[0] == handle:
                del self._handles[key]
                self._notify(handle)

        return _finalize

    def _notify(self, handle: int) -> None:
        for callback in list(self._callbacks):
            callback(handle)

    @staticmethod
    def _resolve(ref: Any) -> Any:
        if isinstance(ref, weakref.ref):
            return ref()
        return ref
