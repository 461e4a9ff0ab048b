"""Error taxonomy.

Callers branch on these types, never on log output.
ConversionError and NotFoundError are structural and never retried here.
OrchestrationError wraps a failed orchestrator call; retrying is up to the caller.
"""
from __future__ import annotations


class BridgeError(Exception):
    """Base class for all bridge errors."""


class ConversionError(BridgeError):
    """Raised when an inbound desire request cannot be turned into an LRP."""


class OrchestrationError(BridgeError):
    """Raised when a call to the orchestrator failed."""


class NotFoundError(BridgeError):
    """Raised when the referenced LRP or exposure object does not exist."""


class ConflictError(BridgeError):
    """Raised when creating an exposure object that already exists."""


class ListError(BridgeError):
    """Raised when listing desired LRPs failed."""
