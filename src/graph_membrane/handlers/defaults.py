"""Default behavior of every fundamental operation on a raw value.

These are the unmediated semantics a customization handler falls back to
for any operation it does not override.  Attributes play the role of
properties; ``type(value)`` plays the role of the prototype.
"""

from __future__ import annotations

import logging
from typing import Any

from graph_membrane.core.descriptors import ABSENT, PropertyDescriptor

logger = logging.getLogger(__name__)

_IMMUTABLETYPE_FLAG = 1 << 8


def _is_frozen(target: Any) -> bool:
    """Frozen dataclass instances and immutable (builtin) types refuse writes."""
    if isinstance(target, type):
        return bool(target.__flags__ & _IMMUTABLETYPE_FLAG)
    params = getattr(type(target), "__dataclass_params__", None)
    return params is not None and params.frozen


def _declared_slots(cls: type) -> list[str]:
    slots = cls.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    names = []
    for name in slots:
        if name in ("__dict__", "__weakref__"):
            continue
        if name.startswith("__") and not name.endswith("__"):
            name = f"_{cls.__name__.lstrip('_')}{name}"
        names.append(name)
    return names


def _own_attributes(target: Any) -> dict[str, Any]:
    attrs: dict[str, Any] = {}
    if not isinstance(target, type):
        for cls in reversed(type(target).__mro__):
            for name in _declared_slots(cls):
                try:
                    attrs[name] = getattr(target, name)
                except AttributeError:
                    continue  # unset slot
    namespace = getattr(target, "__dict__", None)
    if namespace is not None:
        attrs.update(namespace)
    return attrs


# ---------------------------------------------------------------------------
# Prototype and extensibility
# ---------------------------------------------------------------------------

def get_prototype_of(target: Any) -> Any:
    return type(target)


def set_prototype_of(target: Any, prototype: Any) -> bool:
    try:
        target.__class__ = prototype
    except TypeError as exc:
        logger.debug("__class__ assignment rejected: %s", exc)
        return False
    return True


def is_extensible(target: Any) -> bool:
    return hasattr(target, "__dict__") and not _is_frozen(target)


def prevent_extensions(target: Any) -> bool:
    # Python objects cannot be sealed after the fact; this only succeeds for
    # values that are already closed to new attributes.
    return not is_extensible(target)


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

def get_own_property_descriptor(target: Any, key: str) -> PropertyDescriptor | None:
    attrs = _own_attributes(target)
    if key not in attrs:
        return None
    value = attrs[key]
    mutable = not _is_frozen(target)
    # A frozen entry is fixed only if reading it yields that same object;
    # functions and docstrings in a type's namespace are rebuilt per lookup
    fixed = not mutable and getattr(target, key, ABSENT) is value
    return PropertyDescriptor(
        value=value,
        writable=mutable,
        enumerable=not key.startswith("_"),
        configurable=not fixed,
    )


def define_property(target: Any, key: str, descriptor: PropertyDescriptor) -> bool:
    if _is_frozen(target) or descriptor.is_accessor:
        return False
    # Per-attribute immutability has no representation on plain objects
    if not descriptor.writable or not descriptor.configurable:
        return False
    current = get_own_property_descriptor(target, key)
    if current is None and not is_extensible(target):
        return False
    if descriptor.value is ABSENT:
        return current is not None
    setattr(target, key, descriptor.value)
    return True


def has(target: Any, key: str) -> bool:
    return hasattr(target, key)


def get(target: Any, key: str) -> Any:
    return getattr(target, key)


def set(target: Any, key: str, value: Any) -> bool:
    if _is_frozen(target):
        return False
    setattr(target, key, value)
    return True


def delete_property(target: Any, key: str) -> bool:
    if _is_frozen(target):
        return False
    delattr(target, key)
    return True


def own_keys(target: Any) -> list[str]:
    return list(_own_attributes(target))


# ---------------------------------------------------------------------------
# Invocation
# ---------------------------------------------------------------------------

def apply(target: Any, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
    return target(*args, **kwargs)


def construct(target: Any, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
    if not isinstance(target, type):
        raise TypeError(f"{type(target).__name__!r} object is not a class")
    return target(*args, **kwargs)
