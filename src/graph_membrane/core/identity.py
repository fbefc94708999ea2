"""Identity-keyed maps for the membrane caches.

Membrane caches must never consult ``__eq__``/``__hash__``: wrappers forward
both to values in another graph, and raw values may be unhashable.  Entries
are slotted by ``id()`` and validated with ``is``.

Keys that support weak references are held weakly and their slot is dropped
when the key is collected.  Keys that do not (plain ``dict``, ``list`` and
``tuple`` instances, among others) are pinned for the life of the map.
"""

from __future__ import annotations

import weakref
from typing import Any, Iterator

_MISSING = object()


class IdentityMap:
    """Mapping keyed on object identity.

    With ``weak_values=True`` values are also held weakly; a slot whose value
    is collected disappears.
    """

    def __init__(self, weak_values: bool = False) -> None:
        # id(key) -> (key or weakref, value or weakref, key_is_weak, value_is_weak)
        self._slots: dict[int, tuple[Any, Any, bool, bool]] = {}
        self._weak_values = weak_values

    def _expire(self, ident: int, ref: weakref.ref) -> None:
        slot = self._slots.get(ident)
        if slot is not None and (slot[0] is ref or slot[1] is ref):
            del self._slots[ident]

    def _callback(self, ident: int):
        return lambda ref: self._expire(ident, ref)

    def _live_slot(self, key: Any) -> tuple[Any, Any, bool, bool] | None:
        slot = self._slots.get(id(key))
        if slot is None:
            return None
        held_key = slot[0]() if slot[2] else slot[0]
        if held_key is not key:
            return None
        return slot

    def get(self, key: Any, default: Any = None) -> Any:
        slot = self._live_slot(key)
        if slot is None:
            return default
        value = slot[1]() if slot[3] else slot[1]
        if value is None and slot[3]:
            return default
        return value

    def __contains__(self, key: Any) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def __getitem__(self, key: Any) -> Any:
        value = self.get(key, _MISSING)
        if value is _MISSING:
            raise KeyError(f"<{type(key).__name__} at {id(key):#x}>")
        return value

    def __setitem__(self, key: Any, value: Any) -> None:
        ident = id(key)
        try:
            held_key: Any = weakref.ref(key, self._callback(ident))
            key_is_weak = True
        except TypeError:
            held_key = key
            key_is_weak = False
        held_value: Any = value
        if self._weak_values:
            held_value = weakref.ref(value, self._callback(ident))
        self._slots[ident] = (held_key, held_value, key_is_weak, self._weak_values)

    def setdefault(self, key: Any, default: Any) -> Any:
        value = self.get(key, _MISSING)
        if value is _MISSING:
            self[key] = default
            return default
        return value

    def pop(self, key: Any, default: Any = None) -> Any:
        value = self.get(key, _MISSING)
        if value is _MISSING:
            return default
        del self._slots[id(key)]
        return value

    def __len__(self) -> int:
        return sum(1 for _ in self._live_keys())

    def _live_keys(self) -> Iterator[Any]:
        for slot in list(self._slots.values()):
            key = slot[0]() if slot[2] else slot[0]
            if key is None:
                continue
            if slot[3] and slot[1]() is None:
                continue
            yield key

    def is_pinned(self, key: Any) -> bool:
        """True when ``key`` has a slot that holds it strongly."""
        slot = self._live_slot(key)
        return slot is not None and not slot[2]

    def pinned_count(self) -> int:
        """Number of slots holding their key strongly."""
        return sum(1 for slot in self._slots.values() if not slot[2])
