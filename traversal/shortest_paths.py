"""
SHORTEST PATH INDEX
One minimal event path per reachable state.

Breadth-first over the adjacency exploration: the first discovery of a key
fixes its path as the parent's path plus one step. BFS order makes that path
minimal; among equally short paths the event catalog order at the
discovering parent wins. The initial state maps to the empty path.
"""
import logging
from collections import deque
from typing import Dict, List, Optional

from core.ontology import PathStep, StatePath
from core.options import TraversalOptions
from core.state_key import StateKey
from traversal.adjacency import AdjacencyBuilder, Exploration
from traversal.oracle import TransitionSystem

logger = logging.getLogger("ChartGraph.ShortestPaths")


class ShortestPathIndex:
    """
    Shortest paths from the initial state to every discovered state.

    States that are unreachable, or rejected by the filter, are absent.
    """

    def __init__(self, exploration: Exploration):
        self.exploration = exploration
        self._paths: Dict[StateKey, List[PathStep]] = self._search()

    @classmethod
    def for_system(
        cls,
        system: TransitionSystem,
        options: Optional[TraversalOptions] = None
    ) -> "ShortestPathIndex":
        return cls(AdjacencyBuilder(system, options).build())

    def _search(self) -> Dict[StateKey, List[PathStep]]:
        exploration = self.exploration
        paths: Dict[StateKey, List[PathStep]] = {exploration.initial_key: []}
        queue = deque([exploration.initial_key])

        while queue:
            current = queue.popleft()
            source = exploration.discovered[current]
            for entry in exploration.successors(current).values():
                target = exploration.key(entry.state)
                if target in paths or target not in exploration.discovered:
                    continue
                paths[target] = paths[current] + [PathStep(state=source, event=entry.event)]
                queue.append(target)

        logger.debug(f"Shortest paths resolved for {len(paths)} states")
        return paths

    def paths(self) -> Dict[StateKey, List[PathStep]]:
        """StateKey -> shortest path, in discovery order."""
        return dict(self._paths)

    def path_to(self, key: StateKey) -> Optional[List[PathStep]]:
        return self._paths.get(key)

    def as_list(self) -> List[StatePath]:
        """[{state, path}] in discovery order."""
        return [
            StatePath(state=self.exploration.discovered[key], path=path)
            for key, path in self._paths.items()
        ]

    def __contains__(self, key: StateKey) -> bool:
        return key in self._paths

    def __len__(self) -> int:
        return len(self._paths)
