"""Forwarding operations: one per fundamental operation kind.

Every forwarding operation:
    1. bridges its arguments from the outer graph into the inner graph
    2. runs the handler's operation (or the default) against the raw value
    3. bridges the result back out, or bridges the raised exception out and
       raises it in the outer graph

The same code serves both directions; only ``in_graph``/``out_graph`` swap.
Structural records are bridged field-wise: call arguments, descriptors and
key lists never become wrappers themselves.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, NoReturn

from graph_membrane.core.descriptors import PropertyDescriptor
from graph_membrane.core.enums import OperationKind
from graph_membrane.handlers.base import OperationSet, resolve_operation
from graph_membrane.observability.logger import hop

if TYPE_CHECKING:
    from .graph import ObjectGraph

Bridge = Callable[[Any, "ObjectGraph", "ObjectGraph"], Any]


def create_forwarding_operations(
    handler_for: Callable[[], Any],
    raw: Any,
    in_graph: ObjectGraph,
    out_graph: ObjectGraph,
    bridge: Bridge,
    hop_limit: int | None = None,
) -> OperationSet:
    """Build the forwarding operations of one wrapper.

    Args:
        handler_for: Returns the current handler for ``raw``. Resolved on
            every call so a rebound handler takes effect immediately.
        raw: The raw value, living in ``in_graph``.
        in_graph: Graph the raw value originates from.
        out_graph: Graph the wrapper is handed to.
        bridge: The membrane's bridge function.
        hop_limit: Maximum nested cross-graph hops, None for unbounded.
    """

    def inward(value: Any) -> Any:
        return bridge(value, out_graph, in_graph)

    def outward(value: Any) -> Any:
        return bridge(value, in_graph, out_graph)

    def inward_args(args: tuple[Any, ...], kwargs: dict[str, Any]) -> tuple[tuple, dict]:
        return (
            tuple(inward(a) for a in args),
            {k: inward(v) for k, v in kwargs.items()},
        )

    def raise_outward(in_exc: BaseException) -> NoReturn:
        # Bridged and raised outside any except block so the raw exception
        # never becomes the context of what the outer graph sees
        raise outward(in_exc) from None

    def run(kind: OperationKind, *in_args: Any) -> Any:
        with hop(hop_limit, in_graph.label):
            try:
                return resolve_operation(handler_for(), kind)(raw, *in_args)
            except BaseException as exc:
                in_exc = exc
        raise_outward(in_exc)

    def get_prototype_of() -> Any:
        return outward(run(OperationKind.GET_PROTOTYPE_OF))

    def set_prototype_of(prototype: Any) -> bool:
        return outward(run(OperationKind.SET_PROTOTYPE_OF, inward(prototype)))

    def is_extensible() -> bool:
        return outward(run(OperationKind.IS_EXTENSIBLE))

    def prevent_extensions() -> bool:
        return outward(run(OperationKind.PREVENT_EXTENSIONS))

    def get_own_property_descriptor(key: str) -> PropertyDescriptor | None:
        descriptor = run(OperationKind.GET_OWN_PROPERTY_DESCRIPTOR, inward(key))
        if descriptor is None:
            return None
        return descriptor.map_values(outward)

    def define_property(key: str, descriptor: PropertyDescriptor) -> bool:
        return outward(run(
            OperationKind.DEFINE_PROPERTY, inward(key), descriptor.map_values(inward),
        ))

    def has(key: str) -> bool:
        return outward(run(OperationKind.HAS, inward(key)))

    def get(key: str) -> Any:
        return outward(run(OperationKind.GET, inward(key)))

    def set(key: str, value: Any) -> bool:
        return outward(run(OperationKind.SET, inward(key), inward(value)))

    def delete_property(key: str) -> bool:
        return outward(run(OperationKind.DELETE_PROPERTY, inward(key)))

    def own_keys() -> list[str]:
        return [outward(k) for k in run(OperationKind.OWN_KEYS)]

    def apply(args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        return outward(run(OperationKind.APPLY, *inward_args(args, kwargs)))

    def construct(args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        return outward(run(OperationKind.CONSTRUCT, *inward_args(args, kwargs)))

    def call_method(name: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        # The bound method is fetched and called inside the inner graph; only
        # the arguments and the result cross.
        in_args, in_kwargs = inward_args(args, kwargs)
        with hop(hop_limit, in_graph.label):
            try:
                getter = resolve_operation(handler_for(), OperationKind.GET)
                return_value = getter(raw, name)(*in_args, **in_kwargs)
            except BaseException as exc:
                in_exc = exc
            else:
                return outward(return_value)
        raise_outward(in_exc)

    return OperationSet(
        get_prototype_of=get_prototype_of,
        set_prototype_of=set_prototype_of,
        is_extensible=is_extensible,
        prevent_extensions=prevent_extensions,
        get_own_property_descriptor=get_own_property_descriptor,
        define_property=define_property,
        has=has,
        get=get,
        set=set,
        delete_property=delete_property,
        own_keys=own_keys,
        apply=apply,
        construct=construct,
        call_method=call_method,
    )
