"""Test the default (unmediated) behavior of every operation kind."""

import collections
from dataclasses import dataclass

import pytest

from graph_membrane.core.descriptors import ABSENT, PropertyDescriptor, data_descriptor
from graph_membrane.handlers import defaults


class Obj:
    def __init__(self):
        self.x = 1
        self._hidden = 2


class Other:
    pass


@dataclass(frozen=True)
class Point:
    x: int
    y: int


class Slotted:
    __slots__ = ("a", "__b")

    def __init__(self):
        self.a = 1
        self.__b = 2


class TestPrototype:
    def test_prototype_is_type(self):
        assert defaults.get_prototype_of(Obj()) is Obj
        assert defaults.get_prototype_of(3) is int

    def test_set_prototype(self):
        obj = Obj()
        assert defaults.set_prototype_of(obj, Other) is True
        assert type(obj) is Other

    def test_set_prototype_rejected(self):
        assert defaults.set_prototype_of(3, bool) is False


class TestExtensibility:
    def test_plain_object_is_extensible(self):
        assert defaults.is_extensible(Obj()) is True

    def test_frozen_dataclass_is_not_extensible(self):
        assert defaults.is_extensible(Point(1, 2)) is False

    def test_object_without_dict_is_not_extensible(self):
        assert defaults.is_extensible(object()) is False
        assert defaults.is_extensible(Slotted()) is False

    def test_builtin_class_is_not_extensible(self):
        assert defaults.is_extensible(int) is False
        assert defaults.is_extensible(Obj) is True

    def test_prevent_extensions_only_reports_closed_values(self):
        assert defaults.prevent_extensions(Obj()) is False
        assert defaults.prevent_extensions(Point(1, 2)) is True


class TestDescriptors:
    def test_plain_attribute(self):
        desc = defaults.get_own_property_descriptor(Obj(), "x")
        assert desc.value == 1
        assert desc.writable and desc.enumerable and desc.configurable
        assert not desc.is_accessor

    def test_private_attribute_not_enumerable(self):
        desc = defaults.get_own_property_descriptor(Obj(), "_hidden")
        assert desc.enumerable is False

    def test_missing_attribute(self):
        assert defaults.get_own_property_descriptor(Obj(), "nope") is None

    def test_inherited_attribute_is_not_own(self):
        assert defaults.get_own_property_descriptor(Obj(), "__init__") is None

    def test_frozen_attribute(self):
        desc = defaults.get_own_property_descriptor(Point(1, 2), "y")
        assert desc.value == 2
        assert desc.writable is False
        assert desc.configurable is False

    def test_type_namespace_method_is_not_fixed(self):
        desc = defaults.get_own_property_descriptor(collections.OrderedDict, "fromkeys")
        assert desc.writable is False
        assert desc.configurable is True

    def test_slots_are_own_attributes(self):
        assert defaults.own_keys(Slotted()) == ["a", "_Slotted__b"]
        assert defaults.get_own_property_descriptor(Slotted(), "_Slotted__b").value == 2


class TestDefineProperty:
    def test_define_new_attribute(self):
        obj = Obj()
        assert defaults.define_property(obj, "y", data_descriptor(5)) is True
        assert obj.y == 5

    def test_non_writable_refused(self):
        obj = Obj()
        assert defaults.define_property(obj, "y", data_descriptor(5, writable=False)) is False
        assert not hasattr(obj, "y")

    def test_accessor_refused(self):
        desc = PropertyDescriptor(get=lambda: 1, configurable=True)
        assert defaults.define_property(Obj(), "y", desc) is False

    def test_frozen_refused(self):
        assert defaults.define_property(Point(1, 2), "x", data_descriptor(9)) is False

    def test_new_key_on_closed_object_refused(self):
        assert defaults.define_property(Slotted(), "z", data_descriptor(1)) is False

    def test_absent_value(self):
        obj = Obj()
        flags = dict(writable=True, enumerable=True, configurable=True)
        assert defaults.define_property(obj, "x", PropertyDescriptor(**flags)) is True
        assert obj.x == 1
        assert defaults.define_property(obj, "y", PropertyDescriptor(value=ABSENT, **flags)) is False


class TestAttributes:
    def test_has_get(self):
        obj = Obj()
        assert defaults.has(obj, "x")
        assert not defaults.has(obj, "y")
        assert defaults.get(obj, "x") == 1

    def test_get_missing_raises(self):
        with pytest.raises(AttributeError):
            defaults.get(Obj(), "y")

    def test_set_and_delete(self):
        obj = Obj()
        assert defaults.set(obj, "x", 7) is True
        assert obj.x == 7
        assert defaults.delete_property(obj, "x") is True
        assert not hasattr(obj, "x")

    def test_frozen_set_and_delete_refused(self):
        point = Point(1, 2)
        assert defaults.set(point, "x", 7) is False
        assert defaults.delete_property(point, "x") is False
        assert point.x == 1

    def test_own_keys(self):
        assert defaults.own_keys(Obj()) == ["x", "_hidden"]
        assert defaults.own_keys(3) == []


class TestInvocation:
    def test_apply(self):
        assert defaults.apply(max, (1, 5), {}) == 5
        assert defaults.apply(sorted, ([3, 1],), {"reverse": True}) == [3, 1]

    def test_construct(self):
        obj = defaults.construct(Obj, (), {})
        assert isinstance(obj, Obj)

    def test_construct_non_class(self):
        with pytest.raises(TypeError, match="not a class"):
            defaults.construct(len, ([],), {})
