"""Shared fixtures for the graph-membrane test suite."""

from __future__ import annotations

import pytest

from graph_membrane.bridge import Membrane, ObjectGraph
from graph_membrane.core.config import MembraneSettings


# ---------------------------------------------------------------------------
# Membrane and graphs
# ---------------------------------------------------------------------------

@pytest.fixture
def settings() -> MembraneSettings:
    """Default settings, independent of the environment."""
    return MembraneSettings(
        share_builtin_types=True,
        max_hop_depth=None,
        host_checks=True,
    )


@pytest.fixture
def membrane(settings: MembraneSettings) -> Membrane:
    return Membrane(settings)


@pytest.fixture
def graph_a(membrane: Membrane) -> ObjectGraph:
    return membrane.make_object_graph("a")


@pytest.fixture
def graph_b(membrane: Membrane) -> ObjectGraph:
    return membrane.make_object_graph("b")


@pytest.fixture
def to_b(membrane: Membrane, graph_a: ObjectGraph, graph_b: ObjectGraph):
    """Bridge a value from graph a into graph b."""

    def _bridge(value):
        return membrane.bridge(value, graph_a, graph_b)

    return _bridge


@pytest.fixture
def to_a(membrane: Membrane, graph_a: ObjectGraph, graph_b: ObjectGraph):
    """Bridge a value from graph b into graph a."""

    def _bridge(value):
        return membrane.bridge(value, graph_b, graph_a)

    return _bridge
