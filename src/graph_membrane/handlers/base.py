"""Customization handler contract.

A handler is any object exposing zero or more of the operation methods named
by ``OperationKind``; each receives the raw value as its first argument.
Operations a handler does not define fall back to ``defaults``.  Subclassing
``Handler`` gives every operation explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Callable, Protocol

from graph_membrane.core.descriptors import PropertyDescriptor
from graph_membrane.core.enums import OperationKind

from . import defaults


class Handler:
    """Transparent handler: every operation runs the default behavior."""

    def get_prototype_of(self, target: Any) -> Any:
        return defaults.get_prototype_of(target)

    def set_prototype_of(self, target: Any, prototype: Any) -> bool:
        return defaults.set_prototype_of(target, prototype)

    def is_extensible(self, target: Any) -> bool:
        return defaults.is_extensible(target)

    def prevent_extensions(self, target: Any) -> bool:
        return defaults.prevent_extensions(target)

    def get_own_property_descriptor(
        self, target: Any, key: str,
    ) -> PropertyDescriptor | None:
        return defaults.get_own_property_descriptor(target, key)

    def define_property(
        self, target: Any, key: str, descriptor: PropertyDescriptor,
    ) -> bool:
        return defaults.define_property(target, key, descriptor)

    def has(self, target: Any, key: str) -> bool:
        return defaults.has(target, key)

    def get(self, target: Any, key: str) -> Any:
        return defaults.get(target, key)

    def set(self, target: Any, key: str, value: Any) -> bool:
        return defaults.set(target, key, value)

    def delete_property(self, target: Any, key: str) -> bool:
        return defaults.delete_property(target, key)

    def own_keys(self, target: Any) -> list[str]:
        return defaults.own_keys(target)

    def apply(self, target: Any, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        return defaults.apply(target, args, kwargs)

    def construct(self, target: Any, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        return defaults.construct(target, args, kwargs)


DEFAULT_HANDLER = Handler()


class HandlerRebinder(Protocol):
    def __call__(self, raw: Any, handler: Any) -> None: ...


HandlerFactory = Callable[[Any, HandlerRebinder], Any]


def resolve_operation(handler: Any, kind: OperationKind) -> Callable[..., Any]:
    """Return the handler's operation for ``kind``, or the default one."""
    operation = getattr(handler, kind.value, None)
    if operation is None:
        return getattr(defaults, kind.value)
    return operation


@dataclass(frozen=True)
class OperationSet:
    """One callable per operation kind, plus the derived ``call_method``.

    Forwarding operations built for a wrapper have the raw value bound in,
    so their signatures are the handler signatures without ``target``.
    """

    get_prototype_of: Callable[..., Any]
    set_prototype_of: Callable[..., Any]
    is_extensible: Callable[..., Any]
    prevent_extensions: Callable[..., Any]
    get_own_property_descriptor: Callable[..., Any]
    define_property: Callable[..., Any]
    has: Callable[..., Any]
    get: Callable[..., Any]
    set: Callable[..., Any]
    delete_property: Callable[..., Any]
    own_keys: Callable[..., Any]
    apply: Callable[..., Any]
    construct: Callable[..., Any]
    call_method: Callable[..., Any]

    @classmethod
    def names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))
