"""Structured logging with cross-graph hop context.

Log entries carry the number of cross-graph hops active on the current
call path and the label of the graph the innermost hop entered, so
entries emitted from inside nested forwarding operations can be placed.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, TextIO

import structlog

_hop_depth: ContextVar[int] = ContextVar("hop_depth", default=0)
_current_graph: ContextVar[str | None] = ContextVar("current_graph", default=None)


def get_hop_depth() -> int:
    """Get the current cross-graph hop depth."""
    return _hop_depth.get()


def get_current_graph() -> str | None:
    """Label of the graph entered by the innermost active hop."""
    return _current_graph.get()


@contextmanager
def hop(limit: int | None = None, graph: str | None = None) -> Iterator[int]:
    """Enter one cross-graph hop for the duration of the block.

    Args:
        limit: Maximum depth allowed, None for unbounded.
        graph: Label of the graph being entered.

    Raises:
        HopDepthExceeded: If entering would exceed ``limit``.
    """
    depth = _hop_depth.get() + 1
    if limit is not None and depth > limit:
        from graph_membrane.core.errors import HopDepthExceeded

        raise HopDepthExceeded(depth, limit)
    depth_token = _hop_depth.set(depth)
    graph_token = _current_graph.set(graph if graph is not None else _current_graph.get())
    try:
        yield depth
    finally:
        _current_graph.reset(graph_token)
        _hop_depth.reset(depth_token)


def _add_hop_context(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor: stamp hop depth and current graph."""
    event_dict["hop_depth"] = _hop_depth.get()
    graph = _current_graph.get()
    if graph is not None:
        event_dict.setdefault("graph", graph)
    return event_dict


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    stream: TextIO | None = None,
) -> None:
    """Route membrane logging through structlog.

    Args:
        level: Log level name; unknown names fall back to INFO.
        format: "json" for machine-readable lines, "console" for humans.
        stream: Output stream, stderr by default.
    """
    shared: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        _add_hop_context,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if format == "json":
        renderers: list[Any] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=False)]

    structlog.configure(
        processors=shared + renderers,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        format="%(message)s",
        stream=stream if stream is not None else sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
