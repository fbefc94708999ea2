"""Custom exception hierarchy for the membrane."""


class MembraneError(Exception):
    """Base exception for all membrane errors."""


# --- Configuration ---
class ConfigError(MembraneError):
    """Invalid or missing configuration."""


# --- Host checks ---
class InvariantViolation(MembraneError, TypeError):
    """A wrapper reported a shape its stand-in cannot back."""

    def __init__(self, operation: str, key: object, reason: str):
        self.operation = operation
        self.key = key
        self.reason = reason
        super().__init__(f"Invariant violated [{operation} {key!r}]: {reason}")


class OperationRefused(MembraneError, AttributeError):
    """A customization handler refused a mutation."""

    def __init__(self, operation: str, key: object):
        self.operation = operation
        self.key = key
        super().__init__(f"Handler refused {operation} of {key!r}")


# --- Bridging ---
class HopDepthExceeded(MembraneError, RecursionError):
    """Too many nested cross-graph hops on the current call path."""

    def __init__(self, depth: int, limit: int):
        self.depth = depth
        self.limit = limit
        super().__init__(f"Cross-graph hop depth {depth} exceeds limit {limit}")
