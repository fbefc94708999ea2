"""ObjectGraph: one isolated namespace of raw values."""

from __future__ import annotations

import logging
from typing import Any

from graph_membrane.core.identity import IdentityMap
from graph_membrane.handlers.base import DEFAULT_HANDLER, HandlerFactory

logger = logging.getLogger(__name__)


class ObjectGraph:
    """Owns the wrappers produced for this graph and the handlers of its raw values.

    ``create_handler(raw, set_handler_for_raw)`` is called once per raw value
    originating here, the first time a handler is needed.  It may return
    ``None`` for the transparent default handler.
    """

    def __init__(self, label: str, create_handler: HandlerFactory | None = None) -> None:
        self.label = label
        self.create_handler = create_handler
        self.raw_to_wrapper = IdentityMap(weak_values=True)
        self.handler_for_raw = IdentityMap()

    def __repr__(self) -> str:
        return f"ObjectGraph({self.label!r})"

    def get_handler_for_raw(self, raw: Any) -> Any:
        """Return the handler for ``raw``, creating it on first use."""
        if raw in self.handler_for_raw:
            return self.handler_for_raw[raw]
        if self.create_handler is None:
            self.handler_for_raw[raw] = DEFAULT_HANDLER
            return DEFAULT_HANDLER
        # Reentrant lookups while the factory runs see the default handler
        self.handler_for_raw[raw] = DEFAULT_HANDLER
        try:
            handler = self.create_handler(raw, self.set_handler_for_raw)
        except BaseException:
            self.handler_for_raw.pop(raw)
            raise
        if handler is not None:
            self.handler_for_raw[raw] = handler
        # A rebind made by the factory stays when it returns None
        return self.handler_for_raw[raw]

    def set_handler_for_raw(self, raw: Any, handler: Any) -> None:
        """Replace the handler for ``raw``; existing wrappers pick it up on their next operation."""
        logger.debug("Handler rebound in graph %s for %s", self.label, type(raw).__name__)
        self.handler_for_raw[raw] = handler if handler is not None else DEFAULT_HANDLER
