"""Membrane bridging layer.

Modules:
    membrane: Membrane coordinator and the recursive bridge operation
    graph: ObjectGraph, per-graph wrapper and handler caches
    standins: structural stand-ins selected by value shape
    traps: forwarding operations that cross the graph boundary
    invariants: stand-in repair for non-configurable descriptors
    wrapper: wrapper classes and host checks
    reflect: the fundamental operations as functions
"""

from graph_membrane.bridge.graph import ObjectGraph
from graph_membrane.bridge.membrane import Membrane, builtin_primordials
from graph_membrane.bridge.standins import StandIn, select_stand_in
from graph_membrane.bridge.wrapper import (
    CallableWrapper,
    ConstructableWrapper,
    ErrorWrapper,
    Wrapper,
    placeholder_of,
)

__all__ = [
    "CallableWrapper",
    "ConstructableWrapper",
    "ErrorWrapper",
    "Membrane",
    "ObjectGraph",
    "StandIn",
    "Wrapper",
    "builtin_primordials",
    "placeholder_of",
    "select_stand_in",
]
