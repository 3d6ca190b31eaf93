"""Cache of last-observed transformed/plain value pairs per object field."""

import copy
import dataclasses
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

CacheKey = tuple[int, str]

_NO_SOURCE = object()


def _compares_by_identity(cls: type) -> bool:
    return cls.__eq__ is object.__eq__


@dataclass(frozen=True)
class CacheEntry:
    """Matched pair produced by a single reverse transform.

    Attributes:
        transformed: The raw value that was reverse-transformed
        plain: Snapshot of the plain value the transformer produced, or the
            value itself when it cannot be deep-copied
        source: The exact object the transformer produced
        snapshotted: False when ``plain`` is the live object, not a copy
    """

    transformed: Any
    plain: Any
    source: Any = dataclasses.field(default=_NO_SOURCE, compare=False, repr=False)
    snapshotted: bool = dataclasses.field(default=True, compare=False)

    def matches(self, value: Any) -> bool:
        """Return True when ``value`` is still the cached plain value.

        Values compare by exact type and ``==`` against the snapshot. The very
        object the transformer returned also matches when its type has no
        value equality, or when no snapshot could be taken; in-place changes
        to such objects are not detected.
        """
        if type(value) is not type(self.plain):
            return False
        if value is self.source and (
            not self.snapshotted or _compares_by_identity(type(value))
        ):
            return True
        if not self.snapshotted:
            return False
        return value is self.plain or bool(value == self.plain)


class FieldValueCache:
    """Maps (identity handle, field name) to the last known CacheEntry.

    The cache is owned by a coordinator and lives as long as its persistence
    session. Entries for an object are dropped with ``discard()`` when the
    object leaves the session. An optional ``max_entries`` bound evicts the
    least recently used entries; losing an entry only costs one extra call to
    the transformer on the next flush.
    """

    def __init__(self, max_entries: Optional[int] = None):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._max_entries = max_entries
        self._entries: OrderedDict[CacheKey, CacheEntry] = OrderedDict()

    @property
    def max_entries(self) -> Optional[int]:
        return self._max_entries

    def get(self, handle: int, field: str) -> Optional[CacheEntry]:
        """Return the entry for (handle, field), or None."""
        key = (handle, field)
        entry = self._entries.get(key)
        if entry is not None and self._max_entries is not None:
            self._entries.move_to_end(key)
        return entry

    def store(self, handle: int, field: str, transformed: Any, plain: Any) -> CacheEntry:
        """Store a transformed/plain pair, replacing any previous entry."""
        key = (handle, field)
        try:
            entry = CacheEntry(transformed, copy.deepcopy(plain), source=plain)
        except (TypeError, copy.Error) as e:
            logger.debug(
                "Plain value cannot be copied, matching by identity only",
                extra={"field": field, "context": {"type": type(plain).__name__, "error": e}},
            )
            entry = CacheEntry(transformed, plain, source=plain, snapshotted=False)
        self._entries[key] = entry
        self._entries.move_to_end(key)
        self._evict()
        return entry

    def discard(self, handle: int) -> int:
        """Remove every entry of one object; returns how many were removed."""
        keys = [key for key in self._entries if key[0] == handle]
        for key in keys:
            del self._entries[key]
        return len(keys)

    def entries_for(self, handle: int) -> dict[str, CacheEntry]:
        """Return a copy of all entries of one object keyed by field name."""
        return {
            field: entry
            for (entry_handle, field), entry in self._entries.items()
            if entry_handle == handle
        }

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def _evict(self) -> None:
        if self._max_entries is None:
            return
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)
