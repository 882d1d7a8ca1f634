"""
SIMPLE PATH ENUMERATOR
Every path from the initial state that visits no state twice.

Depth-first with a path-local visited set: an edge is followed only when its
target is not already on the current path. Each arrival at a state records
the path so far, then the search continues past it. Two edges with the same
endpoints but different events yield two paths.

The traversal keeps an explicit stack, so deep graphs cannot exhaust the
interpreter's recursion limit.

Known risk: the number of simple paths grows combinatorially on dense or
highly parallel graphs. Only the caller's filter bounds it.
"""
import logging
from typing import Dict, Iterator, List, Optional, Set, Tuple

from core.ontology import AdjacencyEntry, PathStep, StatePaths
from core.options import TraversalOptions
from core.state_key import StateKey
from traversal.adjacency import AdjacencyBuilder, Exploration
from traversal.oracle import TransitionSystem

logger = logging.getLogger("ChartGraph.SimplePaths")


class SimplePathEnumerator:
    """All simple paths to every discovered state."""

    def __init__(self, exploration: Exploration):
        self.exploration = exploration
        self._paths: Dict[StateKey, List[List[PathStep]]] = self._enumerate()

    @classmethod
    def for_system(
        cls,
        system: TransitionSystem,
        options: Optional[TraversalOptions] = None
    ) -> "SimplePathEnumerator":
        return cls(AdjacencyBuilder(system, options).build())

    def _enumerate(self) -> Dict[StateKey, List[List[PathStep]]]:
        exploration = self.exploration
        initial = exploration.initial_key
        found: Dict[StateKey, List[List[PathStep]]] = {initial: [[]]}

        on_path: Set[StateKey] = {initial}
        path: List[PathStep] = []
        stack: List[Tuple[StateKey, Iterator[AdjacencyEntry]]] = [
            (initial, iter(exploration.successors(initial).values()))
        ]

        while stack:
            current, edges = stack[-1]
            entry = next(edges, None)
            if entry is None:
                stack.pop()
                on_path.discard(current)
                if path:
                    path.pop()
                continue

            target = exploration.key(entry.state)
            if target in on_path or target not in exploration.discovered:
                continue

            path.append(PathStep(state=exploration.discovered[current], event=entry.event))
            found.setdefault(target, []).append(list(path))
            on_path.add(target)
            stack.append((target, iter(exploration.successors(target).values())))

        total = sum(len(paths) for paths in found.values())
        logger.debug(f"Enumerated {total} simple paths over {len(found)} states")
        # Report in discovery (BFS) order, independent of DFS arrival order
        return {key: found[key] for key in exploration.discovered if key in found}

    def paths(self) -> Dict[StateKey, StatePaths]:
        """StateKey -> {state, paths}, in discovery order."""
        return {
            key: StatePaths(state=self.exploration.discovered[key], paths=paths)
            for key, paths in self._paths.items()
        }

    def paths_to(self, key: StateKey) -> List[List[PathStep]]:
        return self._paths.get(key, [])

    def as_list(self) -> List[StatePaths]:
        return list(self.paths().values())

    def __len__(self) -> int:
        return len(self._paths)
