"""Wrapper classes: the interception objects handed across the membrane.

Every attribute access, mutation, deletion and call on a wrapper is routed
through its forwarding operations.  Python's special-method protocols
(``len``, ``iter``, ``[]``, ``==``, arithmetic, ``with``) are forwarded as
method calls executed inside the raw value's graph.

The wrapper layer also plays the host's part: it checks what the forwarding
operations report against the wrapper's stand-in and raises
``InvariantViolation`` on a mismatch.
"""

from __future__ import annotations

import builtins
from typing import Any, Iterator

from graph_membrane.core.descriptors import PropertyDescriptor
from graph_membrane.core.enums import StandInKind
from graph_membrane.core.errors import InvariantViolation, OperationRefused
from graph_membrane.handlers.base import OperationSet

from .standins import StandIn

_STATE_ATTR = "_membrane_state"

# Owned by the interpreter on error wrappers; never forwarded
_EXCEPTION_SLOTS = frozenset({
    "__traceback__", "__cause__", "__context__", "__suppress_context__",
})


class WrapperState:
    """Forwarding operations and stand-in of one wrapper, with host checks."""

    __slots__ = ("operations", "stand_in", "host_checks")

    def __init__(self, operations: OperationSet, stand_in: StandIn, host_checks: bool = True) -> None:
        self.operations = operations
        self.stand_in = stand_in
        self.host_checks = host_checks

    def get_own_property_descriptor(self, key: str) -> PropertyDescriptor | None:
        descriptor = self.operations.get_own_property_descriptor(key)
        if descriptor is not None and not descriptor.configurable:
            committed = self.stand_in.get_own_property_descriptor(key)
            if committed is None or committed.configurable:
                raise InvariantViolation(
                    "get_own_property_descriptor", key,
                    "non-configurable descriptor has no non-configurable counterpart on the stand-in",
                )
        return descriptor

    def own_keys(self) -> list[str]:
        keys = self.operations.own_keys()
        if self.host_checks:
            for key in self.stand_in.non_configurable_keys():
                if key not in keys:
                    raise InvariantViolation(
                        "own_keys", key, "non-configurable key missing from the reported keys",
                    )
        return keys

    def get(self, key: str) -> Any:
        value = self.operations.get(key)
        if self.host_checks:
            committed = self.stand_in.get_own_property_descriptor(key)
            if (
                committed is not None
                and not committed.configurable
                and not committed.is_accessor
                and not committed.writable
                and value is not committed.value
            ):
                raise InvariantViolation(
                    "get", key, "value differs from the non-writable, non-configurable value",
                )
        return value

    def define_property(self, key: str, descriptor: PropertyDescriptor) -> bool:
        if not self.operations.define_property(key, descriptor):
            return False
        if not descriptor.configurable:
            self.stand_in.define_property(key, descriptor)
        return True

    def is_extensible(self) -> bool:
        extensible = bool(self.operations.is_extensible())
        if self.host_checks and extensible and not self.stand_in.is_extensible():
            raise InvariantViolation(
                "is_extensible", None, "reported extensible after extensions were prevented",
            )
        return extensible

    def prevent_extensions(self) -> bool:
        if not self.operations.prevent_extensions():
            return False
        self.stand_in.prevent_extensions()
        return True

    def set(self, key: str, value: Any) -> bool:
        return bool(self.operations.set(key, value))

    def delete_property(self, key: str) -> bool:
        return bool(self.operations.delete_property(key))

    def has(self, key: str) -> bool:
        return bool(self.operations.has(key))

    def call_method(self, name: str, *args: Any, **kwargs: Any) -> Any:
        return self.operations.call_method(name, args, kwargs)

    def type_name(self) -> str:
        return getattr(self.operations.get_prototype_of(), "__name__", "wrapped")


def state_of(wrapper: Any) -> WrapperState:
    return object.__getattribute__(wrapper, _STATE_ATTR)


def placeholder_of(wrapper: Any) -> StandIn:
    """The stand-in backing ``wrapper``, for structural inspection."""
    return state_of(wrapper).stand_in


# ---------------------------------------------------------------------------
# Special-method forwarding
# ---------------------------------------------------------------------------

def _unsupported(message: str):
    def missing(self: Any, name: str, *args: Any) -> Any:
        raise TypeError(message.format(type=state_of(self).type_name(), name=name))
    return missing


def _not_implemented(self: Any, name: str, *args: Any) -> Any:
    return NotImplemented


def _special(name: str, missing=_unsupported("'{type}' object does not support {name}")):
    def method(self: Any, *args: Any) -> Any:
        state = state_of(self)
        if not state.has(name):
            return missing(self, name, *args)
        return state.call_method(name, *args)

    method.__name__ = name
    return method


def _truth_fallback(self: Any, name: str) -> bool:
    state = state_of(self)
    if state.has("__len__"):
        return state.call_method("__len__") != 0
    return True


def _iter_fallback(self: Any, name: str) -> Iterator[Any]:
    if not state_of(self).has("__getitem__"):
        raise TypeError(f"'{state_of(self).type_name()}' object is not iterable")

    def items() -> Iterator[Any]:
        index = 0
        while True:
            try:
                yield self[index]
            except (IndexError, StopIteration):
                return
            index += 1

    return items()


def _reversed_fallback(self: Any, name: str) -> Iterator[Any]:
    state = state_of(self)
    if not (state.has("__len__") and state.has("__getitem__")):
        raise TypeError(f"'{state.type_name()}' object is not reversible")
    return (self[i] for i in range(len(self) - 1, -1, -1))


def _contains_fallback(self: Any, name: str, item: Any) -> bool:
    return any(element is item or element == item for element in self)


_BINARY_OPERATORS = (
    "add", "sub", "mul", "matmul", "truediv", "floordiv", "mod", "pow",
    "lshift", "rshift", "and", "xor", "or",
)


class Wrapper:
    """Wrapper for plain and list-shaped values."""

    def __getattribute__(self, name: str) -> Any:
        state = state_of(self)
        if name == "__class__":
            return state.operations.get_prototype_of()
        return state.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        state = state_of(self)
        if name == "__class__":
            if not state.operations.set_prototype_of(value):
                raise OperationRefused("set_prototype_of", name)
            return
        if not state.set(name, value):
            raise OperationRefused("set", name)

    def __delattr__(self, name: str) -> None:
        if not state_of(self).delete_property(name):
            raise OperationRefused("delete_property", name)

    def __dir__(self) -> list[str]:
        return list(state_of(self).call_method("__dir__"))

    def __hash__(self) -> int:
        state = state_of(self)
        if state.get("__hash__") is None:
            raise TypeError(f"unhashable type: '{state.type_name()}'")
        return state.call_method("__hash__")

    __repr__ = _special("__repr__")
    __str__ = _special("__str__")
    __format__ = _special("__format__")
    __bool__ = _special("__bool__", _truth_fallback)
    __len__ = _special("__len__", _unsupported("object of type '{type}' has no len()"))
    __iter__ = _special("__iter__", _iter_fallback)
    __next__ = _special("__next__", _unsupported("'{type}' object is not an iterator"))
    __reversed__ = _special("__reversed__", _reversed_fallback)
    __contains__ = _special("__contains__", _contains_fallback)
    __getitem__ = _special("__getitem__", _unsupported("'{type}' object is not subscriptable"))
    __setitem__ = _special("__setitem__", _unsupported("'{type}' object does not support item assignment"))
    __delitem__ = _special("__delitem__", _unsupported("'{type}' object does not support item deletion"))
    __eq__ = _special("__eq__", _not_implemented)
    __ne__ = _special("__ne__", _not_implemented)
    __lt__ = _special("__lt__", _not_implemented)
    __le__ = _special("__le__", _not_implemented)
    __gt__ = _special("__gt__", _not_implemented)
    __ge__ = _special("__ge__", _not_implemented)
    __neg__ = _special("__neg__", _unsupported("bad operand type for unary -: '{type}'"))
    __pos__ = _special("__pos__", _unsupported("bad operand type for unary +: '{type}'"))
    __abs__ = _special("__abs__", _unsupported("bad operand type for abs(): '{type}'"))
    __invert__ = _special("__invert__", _unsupported("bad operand type for unary ~: '{type}'"))
    __index__ = _special("__index__", _unsupported("'{type}' object cannot be interpreted as an integer"))
    __int__ = _special("__int__", _unsupported("int() argument must be a number, not '{type}'"))
    __float__ = _special("__float__", _unsupported("float() argument must be a number, not '{type}'"))
    __enter__ = _special("__enter__", _unsupported("'{type}' object does not support the context manager protocol"))
    __exit__ = _special("__exit__", _unsupported("'{type}' object does not support the context manager protocol"))


for _op in _BINARY_OPERATORS:
    setattr(Wrapper, f"__{_op}__", _special(f"__{_op}__", _not_implemented))
    setattr(Wrapper, f"__r{_op}__", _special(f"__r{_op}__", _not_implemented))
del _op


class CallableWrapper(Wrapper):
    """Wrapper for functions, methods and callable instances."""

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return state_of(self).operations.apply(args, kwargs)


class ConstructableWrapper(Wrapper):
    """Wrapper for classes: calling it constructs an instance."""

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return state_of(self).operations.construct(args, kwargs)

    __instancecheck__ = _special("__instancecheck__", lambda self, name, instance: False)
    __subclasscheck__ = _special("__subclasscheck__", lambda self, name, subclass: False)


class ErrorWrapper(Wrapper):
    """Mixin for wrappers of exceptions; combined with a builtin exception base."""

    def __getattribute__(self, name: str) -> Any:
        if name in _EXCEPTION_SLOTS:
            return object.__getattribute__(self, name)
        return Wrapper.__getattribute__(self, name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _EXCEPTION_SLOTS:
            object.__setattr__(self, name, value)
            return
        Wrapper.__setattr__(self, name, value)


_ERROR_WRAPPER_CLASSES: dict[type, type] = {}
_EXCEPTION_GROUP: type | None = getattr(builtins, "BaseExceptionGroup", None)


def _builtin_exception_base(error_type: type) -> type:
    for cls in error_type.__mro__:
        if cls.__module__ == "builtins" and issubclass(cls, BaseException):
            # Group constructors validate their members; the wrapper is
            # allocated empty, so groups get the plain base they derive from
            if _EXCEPTION_GROUP is not None and issubclass(cls, _EXCEPTION_GROUP):
                return Exception if issubclass(cls, Exception) else BaseException
            return cls
    return Exception


def error_wrapper_class(raw_error: BaseException) -> type:
    """Wrapper class deriving from the nearest builtin base of ``raw_error``."""
    base = _builtin_exception_base(type(raw_error))
    cls = _ERROR_WRAPPER_CLASSES.get(base)
    if cls is None:
        cls = type(f"Wrapped{base.__name__}", (ErrorWrapper, base), {"__module__": __name__})
        _ERROR_WRAPPER_CLASSES[base] = cls
    return cls


_WRAPPER_CLASSES: dict[StandInKind, type] = {
    StandInKind.PLAIN: Wrapper,
    StandInKind.LIST: Wrapper,
    StandInKind.CALLABLE: CallableWrapper,
    StandInKind.CONSTRUCTABLE: ConstructableWrapper,
}


def create_wrapper(raw: Any, stand_in: StandIn, state: WrapperState) -> Any:
    """Allocate the wrapper matching ``stand_in``'s shape, bound to ``state``."""
    if stand_in.kind is StandInKind.ERROR:
        cls = error_wrapper_class(raw)
        wrapper = cls.__new__(cls)
    else:
        wrapper = object.__new__(_WRAPPER_CLASSES[stand_in.kind])
    object.__setattr__(wrapper, _STATE_ATTR, state)
    return wrapper


def is_wrapper(value: Any) -> bool:
    return issubclass(type(value), Wrapper)
