"""Membrane: the coordinator of every cross-graph reference.

bridge(value, from_graph, to_graph):
    1. Primitives and shared primordials pass through unchanged
    2. A known wrapper resolves to its raw value and recorded origin;
       anything else is raw and its origin is recorded (first seen wins)
    3. Delivered to its origin graph, a value is always raw
    4. Otherwise the destination graph's memoized wrapper is returned,
       or a new one is built and memoized before anyone can use it
"""

from __future__ import annotations

import builtins
import logging
import types
from pathlib import Path
from typing import Any, Iterable

from graph_membrane.core.config import MembraneSettings, load_settings
from graph_membrane.core.descriptors import ABSENT
from graph_membrane.core.identity import IdentityMap
from graph_membrane.handlers.base import HandlerFactory
from graph_membrane.observability.logger import setup_logging

from .graph import ObjectGraph
from .invariants import respect_invariants
from .standins import select_stand_in
from .traps import create_forwarding_operations
from .wrapper import WrapperState, create_wrapper, is_wrapper

logger = logging.getLogger(__name__)

_PRIMITIVE_TYPES: frozenset[type] = frozenset({
    type(None),
    type(ABSENT),
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    type(Ellipsis),
    type(NotImplemented),
})


def builtin_primordials() -> tuple[type, ...]:
    """Classes every graph shares: those of ``builtins`` and ``types``."""
    found: dict[int, type] = {}
    for namespace in (vars(builtins), vars(types)):
        for value in namespace.values():
            if isinstance(value, type):
                found[id(value)] = value
    return tuple(found.values())


class Membrane:
    """Owns the global identity caches and the recursive ``bridge`` operation.

    Args:
        settings: Membrane settings; loaded from the environment if omitted.
        primordials: Extra classes to share unwrapped between all graphs.
    """

    def __init__(
        self,
        settings: MembraneSettings | None = None,
        primordials: Iterable[type] | None = None,
    ) -> None:
        self._settings = settings if settings is not None else MembraneSettings()
        shared: list[type] = []
        if self._settings.share_builtin_types:
            shared.extend(builtin_primordials())
        if primordials:
            shared.extend(primordials)
        # Held so the ids below stay unique
        self._primordials = tuple(shared)
        self._primordial_ids = frozenset(id(p) for p in shared)
        self._wrapper_to_raw = IdentityMap()
        # Origins of values that cannot be weakly referenced are kept for the
        # life of the membrane
        self._raw_to_origin = IdentityMap()

    @classmethod
    def from_config(
        cls,
        config_path: str | Path | None = None,
        overrides: dict[str, Any] | None = None,
        configure_logging: bool = False,
    ) -> Membrane:
        """Build a membrane from a TOML file and environment variables.

        With ``configure_logging`` the process-wide structlog setup is applied
        from the ``observability`` settings.
        """
        settings = load_settings(config_path, overrides)
        if configure_logging:
            setup_logging(
                level=settings.observability.log_level,
                format=settings.observability.log_format,
            )
        logger.info(
            "Membrane configured (share_builtin_types=%s, max_hop_depth=%s, host_checks=%s)",
            settings.share_builtin_types, settings.max_hop_depth, settings.host_checks,
        )
        return cls(settings)

    @property
    def settings(self) -> MembraneSettings:
        return self._settings

    def make_object_graph(
        self,
        label: str,
        create_handler: HandlerFactory | None = None,
    ) -> ObjectGraph:
        return ObjectGraph(label=label, create_handler=create_handler)

    # ------------------------------------------------------------------
    # Bridging
    # ------------------------------------------------------------------

    def is_passthrough(self, value: Any) -> bool:
        """Primitives and primordials cross without wrapping."""
        value_type = type(value)
        if value_type in _PRIMITIVE_TYPES:
            return True
        return issubclass(value_type, type) and id(value) in self._primordial_ids

    def bridge(self, value: Any, from_graph: ObjectGraph, to_graph: ObjectGraph) -> Any:
        """Return the representation of ``value`` usable in ``to_graph``."""
        if self.is_passthrough(value):
            return value

        if value in self._wrapper_to_raw:
            raw = self._wrapper_to_raw[value]
            origin = self._raw_to_origin[raw]
        else:
            raw = value
            origin = self._raw_to_origin.setdefault(raw, from_graph)

        if origin is to_graph:
            return raw

        wrapper = to_graph.raw_to_wrapper.get(raw)
        if wrapper is not None:
            return wrapper
        return self._create_wrapper(raw, origin, to_graph)

    def _create_wrapper(self, raw: Any, origin: ObjectGraph, to_graph: ObjectGraph) -> Any:
        # Resolving the handler may run the graph's factory, which can
        # bridge this same value; reuse whatever that produced.
        origin.get_handler_for_raw(raw)
        wrapper = to_graph.raw_to_wrapper.get(raw)
        if wrapper is not None:
            return wrapper

        stand_in = select_stand_in(raw)
        operations = create_forwarding_operations(
            lambda: origin.get_handler_for_raw(raw),
            raw,
            origin,
            to_graph,
            self.bridge,
            hop_limit=self._settings.max_hop_depth,
        )
        operations = respect_invariants(stand_in, operations)
        state = WrapperState(operations, stand_in, host_checks=self._settings.host_checks)
        wrapper = create_wrapper(raw, stand_in, state)

        to_graph.raw_to_wrapper[raw] = wrapper
        self._wrapper_to_raw[wrapper] = raw

        if self._settings.observability.trace_wrapping:
            logger.debug(
                "Wrapped %s (%s) from %s for %s",
                type(raw).__name__, stand_in.kind.value, origin.label, to_graph.label,
            )
        return wrapper

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def is_wrapper(self, value: Any) -> bool:
        return is_wrapper(value) and value in self._wrapper_to_raw

    def unwrap(self, wrapper: Any) -> Any:
        """Raw value behind ``wrapper``.

        Raises:
            ValueError: If ``wrapper`` was not produced by this membrane.
        """
        if not self.is_wrapper(wrapper):
            raise ValueError(f"{type(wrapper).__name__} object is not a wrapper of this membrane")
        return self._wrapper_to_raw[wrapper]

    def origin_of(self, value: Any) -> ObjectGraph | None:
        """Recorded origin graph of a raw value or of a wrapper's raw value."""
        if self.is_passthrough(value):
            return None
        if value in self._wrapper_to_raw:
            value = self._wrapper_to_raw[value]
        return self._raw_to_origin.get(value)
