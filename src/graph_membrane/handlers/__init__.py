"""Customization handlers: the policy injection point of the membrane.

Modules:
    defaults: unmediated behavior of every fundamental operation
    base: Handler base class, OperationSet and operation resolution
"""

from graph_membrane.handlers.base import (
    DEFAULT_HANDLER,
    Handler,
    HandlerFactory,
    OperationSet,
    resolve_operation,
)

__all__ = [
    "DEFAULT_HANDLER",
    "Handler",
    "HandlerFactory",
    "OperationSet",
    "resolve_operation",
]
