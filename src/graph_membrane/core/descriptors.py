"""Property descriptors and the absence sentinel.

A ``PropertyDescriptor`` is a structural record: the membrane bridges its
``value``/``get``/``set`` fields individually instead of wrapping the record.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable


class _Absent:
    """Marker for "no value here", distinct from ``None``."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT: Any = _Absent()


@dataclass(frozen=True, eq=False)
class PropertyDescriptor:
    """Shape of one attribute: a data slot or an accessor pair."""

    value: Any = ABSENT
    get: Any = ABSENT
    set: Any = ABSENT
    writable: bool = False
    enumerable: bool = False
    configurable: bool = False

    @property
    def is_accessor(self) -> bool:
        return self.get is not ABSENT or self.set is not ABSENT

    def same_as(self, other: PropertyDescriptor | None) -> bool:
        """Field-wise identity comparison (values compared with ``is``)."""
        if other is None:
            return False
        return (
            self.value is other.value
            and self.get is other.get
            and self.set is other.set
            and self.writable == other.writable
            and self.enumerable == other.enumerable
            and self.configurable == other.configurable
        )

    def map_values(self, fn: Callable[[Any], Any]) -> PropertyDescriptor:
        """Return a copy with ``fn`` applied to every present value field."""
        return replace(
            self,
            value=self.value if self.value is ABSENT else fn(self.value),
            get=self.get if self.get is ABSENT else fn(self.get),
            set=self.set if self.set is ABSENT else fn(self.set),
        )


def data_descriptor(
    value: Any,
    *,
    writable: bool = True,
    enumerable: bool = True,
    configurable: bool = True,
) -> PropertyDescriptor:
    return PropertyDescriptor(
        value=value,
        writable=writable,
        enumerable=enumerable,
        configurable=configurable,
    )
