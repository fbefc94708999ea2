"""The fundamental operations as plain functions.

Python has syntax for only some of the operations a handler can intercept
(attribute access, calls).  These functions reach all of them on any
value: a wrapper routes through its host-checked forwarding operations,
anything else gets the default behavior.

Unlike attribute syntax, refused mutations are reported as ``False``
rather than raised.
"""

from __future__ import annotations

from typing import Any

from graph_membrane.core.descriptors import PropertyDescriptor
from graph_membrane.handlers import defaults

from .wrapper import is_wrapper, state_of


def get_prototype_of(value: Any) -> Any:
    if is_wrapper(value):
        return state_of(value).operations.get_prototype_of()
    return defaults.get_prototype_of(value)


def set_prototype_of(value: Any, prototype: Any) -> bool:
    if is_wrapper(value):
        return bool(state_of(value).operations.set_prototype_of(prototype))
    return defaults.set_prototype_of(value, prototype)


def is_extensible(value: Any) -> bool:
    if is_wrapper(value):
        return state_of(value).is_extensible()
    return defaults.is_extensible(value)


def prevent_extensions(value: Any) -> bool:
    if is_wrapper(value):
        return state_of(value).prevent_extensions()
    return defaults.prevent_extensions(value)


def get_own_property_descriptor(value: Any, key: str) -> PropertyDescriptor | None:
    if is_wrapper(value):
        return state_of(value).get_own_property_descriptor(key)
    return defaults.get_own_property_descriptor(value, key)


def define_property(value: Any, key: str, descriptor: PropertyDescriptor) -> bool:
    if is_wrapper(value):
        return state_of(value).define_property(key, descriptor)
    return defaults.define_property(value, key, descriptor)


def has(value: Any, key: str) -> bool:
    if is_wrapper(value):
        return state_of(value).has(key)
    return defaults.has(value, key)


def get(value: Any, key: str) -> Any:
    if is_wrapper(value):
        return state_of(value).get(key)
    return defaults.get(value, key)


def set(value: Any, key: str, new_value: Any) -> bool:
    if is_wrapper(value):
        return state_of(value).set(key, new_value)
    return defaults.set(value, key, new_value)


def delete_property(value: Any, key: str) -> bool:
    if is_wrapper(value):
        return state_of(value).delete_property(key)
    return defaults.delete_property(value, key)


def own_keys(value: Any) -> list[str]:
    if is_wrapper(value):
        return state_of(value).own_keys()
    return defaults.own_keys(value)


def apply(value: Any, args: tuple[Any, ...] = (), kwargs: dict[str, Any] | None = None) -> Any:
    kwargs = kwargs or {}
    if is_wrapper(value):
        return state_of(value).operations.apply(tuple(args), kwargs)
    return defaults.apply(value, tuple(args), kwargs)


def construct(value: Any, args: tuple[Any, ...] = (), kwargs: dict[str, Any] | None = None) -> Any:
    kwargs = kwargs or {}
    if is_wrapper(value):
        return state_of(value).operations.construct(tuple(args), kwargs)
    return defaults.construct(value, tuple(args), kwargs)
