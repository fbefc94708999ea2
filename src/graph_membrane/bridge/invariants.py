"""Keep a wrapper's advertised shape consistent with its stand-in.

A wrapper may only report a non-configurable attribute that its stand-in
also holds as non-configurable.  Rather than fail such reports, the
descriptor is committed to the stand-in the first time it is observed.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from graph_membrane.core.descriptors import PropertyDescriptor
from graph_membrane.handlers.base import OperationSet

from .standins import StandIn

logger = logging.getLogger(__name__)


def respect_invariants(stand_in: StandIn, operations: OperationSet) -> OperationSet:
    """Wrap ``get_own_property_descriptor`` with stand-in repair."""
    report = operations.get_own_property_descriptor

    def get_own_property_descriptor(key: str) -> PropertyDescriptor | None:
        descriptor = report(key)
        if descriptor is not None and not descriptor.configurable:
            committed = stand_in.get_own_property_descriptor(key)
            if committed is None or committed.configurable:
                if stand_in.define_property(key, descriptor):
                    logger.debug("Committed non-configurable %r to stand-in", key)
        return descriptor

    return replace(operations, get_own_property_descriptor=get_own_property_descriptor)
