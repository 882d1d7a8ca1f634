"""
EVENT RESOLVER
Turns declared event types plus caller samples into the exact, ordered
catalog of event instances probed at every visited state.

Order:
    1. Declared event types in structural pre-order (first occurrence wins),
       each expanded to its configured samples or to the bare {type: ...}
    2. Configured types the structure never declares, in configuration order

The catalog order decides BFS tie-breaks, so it never depends on hashing.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional

from core.errors import ConfigurationError
from core.state_key import canonical_json
from core.structure import StructuralIndex

logger = logging.getLogger("ChartGraph.EventResolver")


def event_label(event: Dict[str, Any]) -> str:
    """Adjacency label: the bare type, or the canonical JSON of a payload-carrying event."""
    if set(event) == {"type"}:
        return str(event["type"])
    return canonical_json(event)


class EventResolver:
    """Maps event types to finite, ordered sample sets."""

    def __init__(
        self,
        index: StructuralIndex,
        events: Optional[Mapping[str, List[Dict[str, Any]]]] = None
    ):
        self.index = index
        self.events = dict(events or {})
        self._catalog: Optional[List[Dict[str, Any]]] = None

    def samples_for(self, event_type: str) -> List[Dict[str, Any]]:
        """Ordered instances of one event type."""
        if event_type not in self.events:
            return [{"type": event_type}]

        samples = []
        for sample in self.events[event_type]:
            if not isinstance(sample, Mapping):
                raise ConfigurationError(
                    f"Sample for event '{event_type}' must be a mapping, got {sample!r}",
                    event=event_type
                )
            instance = dict(sample)
            declared = instance.setdefault("type", event_type)
            if str(declared) != event_type:
                raise ConfigurationError(
                    f"Sample type '{declared}' does not match event '{event_type}'",
                    event=event_type
                )
            instance["type"] = event_type
            samples.append(instance)
        return samples

    def catalog(self) -> List[Dict[str, Any]]:
        """The full ordered catalog. Computed once per resolver."""
        if self._catalog is not None:
            return self._catalog

        declared = self.index.event_types()
        undeclared = [t for t in self.events if t not in declared]
        if undeclared:
            logger.warning(f"Configured events not declared by any state: {undeclared}")

        catalog: List[Dict[str, Any]] = []
        for event_type in declared + undeclared:
            catalog.extend(self.samples_for(event_type))

        self._catalog = catalog
        logger.debug(f"Event catalog: {[event_label(e) for e in catalog]}")
        return catalog

    def labeled(self) -> List[tuple]:
        """(label, instance) pairs in catalog order."""
        return [(event_label(event), event) for event in self.catalog()]
