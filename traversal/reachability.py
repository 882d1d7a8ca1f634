"""
REACHABILITY INDEX
Answers "can this state be reached?" over one configured exploration.

The exploration runs once, eagerly, at construction. Membership implies the
state was actually discovered under the configured filter and events, so
there are no false positives. A filter that is too strict produces false
negatives; that is the filter doing its job, not an error.

Usage:
    index = ReachabilityIndex(system, TraversalOptions(
        filter=lambda s: 0 <= s.context["count"] <= 5,
        events={"INC": [{"type": "INC", "value": 1}]},
    ))
    index.reaches("full", {"count": 5})
"""
import logging
from typing import Any, List, Optional

from core.ontology import StateSnapshot
from core.options import TraversalOptions
from core.state_key import StateKey
from traversal.adjacency import AdjacencyBuilder, AdjacencyMap, states_in_order
from traversal.oracle import TransitionSystem

logger = logging.getLogger("ChartGraph.Reachability")


class ReachabilityIndex:
    """Set of discovered StateKeys for one system and one configuration."""

    def __init__(self, system: TransitionSystem, options: Optional[TraversalOptions] = None):
        self.system = system
        self.options = options or TraversalOptions()
        self._builder = AdjacencyBuilder(system, self.options)
        self.exploration = self._builder.build()
        logger.info(f"Reachability index ready: {len(self.exploration.discovered)} states")

    def key(self, value: Any, context: Any = None) -> StateKey:
        return self._builder.key(StateSnapshot(value=value, context=context))

    def reaches(self, target_value: Any, target_context: Any = None) -> bool:
        """True iff the (value, context) state was discovered."""
        return self.key(target_value, target_context) in self.exploration.discovered

    def __contains__(self, state: StateSnapshot) -> bool:
        return self._builder.key(state) in self.exploration.discovered

    def states(self) -> List[StateSnapshot]:
        return states_in_order(self.exploration)

    @property
    def adjacency(self) -> AdjacencyMap:
        return self.exploration.adjacency
