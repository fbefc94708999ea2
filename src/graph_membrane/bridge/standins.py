"""Stand-ins: the minimal structural backing of each wrapper.

A stand-in never copies anything from the raw value it backs.  It records
only what the wrapper has committed to (non-configurable descriptors,
extensibility) so later reports can be checked against it.
"""

from __future__ import annotations

from typing import Any

from graph_membrane.core.descriptors import PropertyDescriptor
from graph_membrane.core.enums import StandInKind


class StandIn:
    """Own-descriptor table plus an extensible flag."""

    __slots__ = ("kind", "_descriptors", "_extensible")

    def __init__(self, kind: StandInKind) -> None:
        self.kind = kind
        self._descriptors: dict[str, PropertyDescriptor] = {}
        self._extensible = True

    def __repr__(self) -> str:
        return f"<StandIn {self.kind.value} keys={list(self._descriptors)}>"

    def get_own_property_descriptor(self, key: str) -> PropertyDescriptor | None:
        return self._descriptors.get(key)

    def define_property(self, key: str, descriptor: PropertyDescriptor) -> bool:
        """Install ``descriptor`` unless it contradicts a committed one."""
        current = self._descriptors.get(key)
        if current is None:
            if not self._extensible:
                return False
            self._descriptors[key] = descriptor
            return True
        if current.configurable:
            self._descriptors[key] = descriptor
            return True

        # Non-configurable: only narrowing changes are accepted
        if descriptor.configurable or descriptor.enumerable != current.enumerable:
            return False
        if descriptor.is_accessor != current.is_accessor:
            return False
        if current.is_accessor or not current.writable:
            # Fixed slot: only a re-statement of the same descriptor
            return descriptor.same_as(current)
        self._descriptors[key] = descriptor
        return True

    def own_keys(self) -> list[str]:
        return list(self._descriptors)

    def non_configurable_keys(self) -> list[str]:
        return [k for k, d in self._descriptors.items() if not d.configurable]

    def is_extensible(self) -> bool:
        return self._extensible

    def prevent_extensions(self) -> bool:
        self._extensible = False
        return True


def select_stand_in(raw: Any) -> StandIn:
    """Pick a stand-in by the structural shape of ``raw``."""
    if isinstance(raw, BaseException):
        kind = StandInKind.ERROR
    elif isinstance(raw, type):
        kind = StandInKind.CONSTRUCTABLE
    elif callable(raw):
        kind = StandInKind.CALLABLE
    elif isinstance(raw, (list, tuple)):
        kind = StandInKind.LIST
    else:
        kind = StandInKind.PLAIN
    return StandIn(kind)
