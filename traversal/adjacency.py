"""
ADJACENCY BUILDER
Drives the oracle over the event catalog from the initial state and records,
for every explored state, where each event instance leads.

Algorithm (breadth-first, global visited set):
    queue <- [initial]
    while queue:
        S <- pop front
        for E in catalog:                       # catalog order is the tie-break
            S' <- oracle(S, E)
            adjacency[key(S)][label(E)] <- {state: S', event: E}
            if key(S') not discovered and filter(S'):
                enqueue S'

A state rejected by the filter may still appear as a recorded target; it is
simply never expanded. Only discovered keys count as seen: under value-only
keys, a key whose first snapshot was rejected is still discovered through a
later snapshot the filter accepts. Recorded edges are never removed after
the fact.
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from core.events import EventResolver
from core.ontology import AdjacencyEntry, StateSnapshot
from core.options import TraversalOptions
from core.state_key import StateKey, state_key
from traversal.oracle import MemoizedOracle, TransitionSystem

logger = logging.getLogger("ChartGraph.Adjacency")

AdjacencyMap = Dict[StateKey, Dict[str, AdjacencyEntry]]


@dataclass
class Exploration:
    """Result of one AdjacencyBuilder run."""
    initial_key: StateKey
    include_context: bool
    adjacency: AdjacencyMap = field(default_factory=dict)
    discovered: Dict[StateKey, StateSnapshot] = field(default_factory=dict)  # BFS order
    rejected: Dict[StateKey, StateSnapshot] = field(default_factory=dict)    # seen, filtered out

    def key(self, state: StateSnapshot) -> StateKey:
        return state_key(state, self.include_context)

    def successors(self, key: StateKey) -> Dict[str, AdjacencyEntry]:
        return self.adjacency.get(key, {})

    @property
    def edge_count(self) -> int:
        return sum(len(edges) for edges in self.adjacency.values())


class AdjacencyBuilder:
    """
    Builds the dynamic adjacency map of a TransitionSystem.

    One builder owns one MemoizedOracle; repeated builds reuse its cache.
    """

    def __init__(self, system: TransitionSystem, options: Optional[TraversalOptions] = None):
        self.system = system
        self.options = options or TraversalOptions()
        self.resolver = EventResolver(system.structure, self.options.events)
        self.oracle = MemoizedOracle(system.oracle)

    def key(self, state: StateSnapshot) -> StateKey:
        return state_key(state, self.options.include_context)

    def build(self) -> Exploration:
        catalog = self.resolver.labeled()
        initial = self.system.initial_state
        exploration = Exploration(
            initial_key=self.key(initial),
            include_context=self.options.include_context
        )
        exploration.discovered[exploration.initial_key] = initial

        if not self.options.accepts(initial):
            logger.warning(f"Initial state {exploration.initial_key} rejected by filter; nothing to explore")
            return exploration

        queue = deque([initial])
        while queue:
            state = queue.popleft()
            source_key = self.key(state)
            transitions: Dict[str, AdjacencyEntry] = {}

            for label, event in catalog:
                next_state = self.oracle(state, event)
                transitions[label] = AdjacencyEntry(state=next_state, event=event)

                next_key = self.key(next_state)
                if next_key in exploration.discovered:
                    continue
                if self.options.accepts(next_state):
                    # Value-only keys may hide an accepted snapshot behind a rejected one
                    exploration.rejected.pop(next_key, None)
                    exploration.discovered[next_key] = next_state
                    queue.append(next_state)
                elif next_key not in exploration.rejected:
                    exploration.rejected[next_key] = next_state

            exploration.adjacency[source_key] = transitions
            logger.debug(f"Expanded {source_key}: {len(transitions)} edges, queue={len(queue)}")

        logger.info(
            f"Adjacency built: {len(exploration.discovered)} states, "
            f"{exploration.edge_count} edges, {self.oracle.calls} oracle calls "
            f"({len(exploration.rejected)} filtered)"
        )
        return exploration

    def adjacency_map(self) -> AdjacencyMap:
        return self.build().adjacency


def states_in_order(exploration: Exploration) -> List[StateSnapshot]:
    """Discovered states in BFS discovery order."""
    return list(exploration.discovered.values())
