"""Test descriptor consistency between wrappers and their stand-ins."""

import collections
from dataclasses import dataclass

import pytest

from graph_membrane.bridge import Membrane, placeholder_of, reflect
from graph_membrane.bridge.standins import StandIn
from graph_membrane.bridge.traps import create_forwarding_operations
from graph_membrane.bridge.wrapper import WrapperState
from graph_membrane.core.config import MembraneSettings
from graph_membrane.core.descriptors import PropertyDescriptor
from graph_membrane.core.enums import StandInKind
from graph_membrane.core.errors import InvariantViolation
from graph_membrane.handlers import Handler


class Obj:
    pass


@dataclass(frozen=True)
class Point:
    x: int
    y: int


class PinnedAnswer(Handler):
    """Reports a non-configurable, non-writable ``answer`` attribute."""

    def __init__(self):
        self.value = 42
        self.keys = ["answer"]

    def get_own_property_descriptor(self, target, key):
        if key == "answer":
            return PropertyDescriptor(
                value=self.value, writable=False, enumerable=True, configurable=False,
            )
        return super().get_own_property_descriptor(target, key)

    def get(self, target, key):
        if key == "answer":
            return self.value
        return super().get(target, key)

    def own_keys(self, target):
        return list(self.keys)


def make_membrane(handler, host_checks=True):
    membrane = Membrane(MembraneSettings(host_checks=host_checks))
    a = membrane.make_object_graph("a", create_handler=lambda raw, rebind: handler)
    b = membrane.make_object_graph("b")
    return membrane, a, b


class TestRespectInvariants:
    def test_non_configurable_descriptor_committed(self):
        membrane, a, b = make_membrane(PinnedAnswer())
        wrapper = membrane.bridge(Obj(), a, b)
        desc = reflect.get_own_property_descriptor(wrapper, "answer")
        assert desc.value == 42
        committed = placeholder_of(wrapper).get_own_property_descriptor("answer")
        assert committed.configurable is False
        assert committed.value == 42

    def test_configurable_descriptor_not_committed(self, to_b):
        raw = Obj()
        raw.x = 1
        wrapper = to_b(raw)
        assert reflect.get_own_property_descriptor(wrapper, "x").configurable
        assert placeholder_of(wrapper).own_keys() == []

    def test_frozen_dataclass_attributes(self, to_b):
        wrapper = to_b(Point(1, 2))
        desc = reflect.get_own_property_descriptor(wrapper, "x")
        assert desc.writable is False
        assert placeholder_of(wrapper).non_configurable_keys() == ["x"]
        assert wrapper.x == 1
        assert reflect.own_keys(wrapper) == ["x", "y"]

    def test_type_namespace_methods_stay_readable(self, to_b):
        wrapper = to_b(collections.OrderedDict)
        desc = reflect.get_own_property_descriptor(wrapper, "fromkeys")
        assert desc.writable is False
        assert desc.configurable is True
        assert "fromkeys" not in placeholder_of(wrapper).non_configurable_keys()
        assert list(wrapper.fromkeys(["x"])) == ["x"]

    def test_unrepaired_operations_violate(self, membrane, graph_a, graph_b):
        ops = create_forwarding_operations(
            PinnedAnswer, Obj(), graph_a, graph_b, membrane.bridge,
        )
        state = WrapperState(ops, StandIn(StandInKind.PLAIN))
        with pytest.raises(InvariantViolation, match="get_own_property_descriptor"):
            state.get_own_property_descriptor("answer")


class TestHostChecks:
    def test_own_keys_must_list_committed_keys(self):
        handler = PinnedAnswer()
        membrane, a, b = make_membrane(handler)
        wrapper = membrane.bridge(Obj(), a, b)
        reflect.get_own_property_descriptor(wrapper, "answer")
        handler.keys = []
        with pytest.raises(InvariantViolation, match="own_keys"):
            reflect.own_keys(wrapper)

    def test_get_must_match_fixed_value(self):
        handler = PinnedAnswer()
        membrane, a, b = make_membrane(handler)
        wrapper = membrane.bridge(Obj(), a, b)
        reflect.get_own_property_descriptor(wrapper, "answer")
        assert wrapper.answer == 42
        handler.value = 41
        with pytest.raises(InvariantViolation):
            wrapper.answer
        with pytest.raises(TypeError):
            getattr(wrapper, "answer", None)

    def test_checks_can_be_disabled(self):
        handler = PinnedAnswer()
        membrane, a, b = make_membrane(handler, host_checks=False)
        wrapper = membrane.bridge(Obj(), a, b)
        reflect.get_own_property_descriptor(wrapper, "answer")
        handler.value = 41
        handler.keys = []
        assert wrapper.answer == 41
        assert reflect.own_keys(wrapper) == []

    def test_extensibility_is_sticky(self):
        class Sealing(Handler):
            def __init__(self):
                self.extensible = True

            def prevent_extensions(self, target):
                return True

            def is_extensible(self, target):
                return self.extensible

        handler = Sealing()
        membrane, a, b = make_membrane(handler)
        wrapper = membrane.bridge(Obj(), a, b)
        assert reflect.prevent_extensions(wrapper)
        assert not placeholder_of(wrapper).is_extensible()
        with pytest.raises(InvariantViolation, match="is_extensible"):
            reflect.is_extensible(wrapper)
        handler.extensible = False
        assert reflect.is_extensible(wrapper) is False
