"""
CHARTGRAPH ERRORS
Every failure this package raises derives from ChartGraphError.
"""
from typing import Any, Dict, Optional


class ChartGraphError(Exception):
    """Base class for all chartgraph errors."""
    pass


class ConfigurationError(ChartGraphError):
    """
    Raised when the structural descriptor or traversal options are invalid.

    Unresolvable targets always name the offending node and event.
    """

    def __init__(
        self,
        message: str,
        node_id: Optional[str] = None,
        event: Optional[str] = None,
        reference: Optional[str] = None
    ):
        self.node_id = node_id
        self.event = event
        self.reference = reference
        super().__init__(message)

    @classmethod
    def unresolved_target(cls, node_id: str, event: str, reference: str) -> "ConfigurationError":
        return cls(
            f"Cannot resolve target '{reference}' of event '{event}' on node '{node_id}'",
            node_id=node_id,
            event=event,
            reference=reference
        )


class OracleError(ChartGraphError):
    """
    Raised when the transition oracle fails or returns an invalid snapshot.

    Aborts the traversal in progress; no partial result is returned.
    """

    def __init__(self, state_key: str, event: Dict[str, Any], reason: str):
        self.state_key = state_key
        self.event = event
        self.reason = reason
        super().__init__(
            f"Oracle failed for state {state_key} on event {event.get('type')!r}: {reason}"
        )


class StateKeyError(ChartGraphError):
    """Raised when a state value or context cannot be canonically serialized."""
    pass


class GraphIntegrityError(ChartGraphError):
    """Raised when a saved state graph fails its version or checksum check."""
    pass
