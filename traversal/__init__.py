"""
ChartGraph Traversal Layer

Function-style entry points over a TransitionSystem:

    system = TransitionSystem(structure, oracle, initial_state)
    get_shortest_paths(system)                   # key -> [PathStep]
    get_simple_paths(system, TraversalOptions(   # key -> {state, paths}
        filter=lambda s: s.context["count"] <= 5))
"""
from typing import Dict, List, Optional

from core.edges import TransitionEdgeExtractor
from core.ontology import EdgeDescriptor, NodeDescriptor, PathStep, StatePath, StatePaths
from core.options import TraversalOptions
from core.structure import StructuralIndex
from traversal.oracle import MemoizedOracle, TransitionSystem, snapshot
from traversal.adjacency import AdjacencyBuilder, AdjacencyMap, Exploration
from traversal.shortest_paths import ShortestPathIndex
from traversal.simple_paths import SimplePathEnumerator
from traversal.reachability import ReachabilityIndex
from traversal.state_graph import StateGraph


def get_nodes(structure: StructuralIndex) -> List[NodeDescriptor]:
    return structure.nodes()


def get_edges(structure: StructuralIndex) -> List[EdgeDescriptor]:
    return TransitionEdgeExtractor(structure).edges()


def get_adjacency_map(
    system: TransitionSystem,
    options: Optional[TraversalOptions] = None
) -> AdjacencyMap:
    return AdjacencyBuilder(system, options).build().adjacency


def get_shortest_paths(
    system: TransitionSystem,
    options: Optional[TraversalOptions] = None
) -> Dict[str, List[PathStep]]:
    return ShortestPathIndex.for_system(system, options).paths()


def get_shortest_paths_as_list(
    system: TransitionSystem,
    options: Optional[TraversalOptions] = None
) -> List[StatePath]:
    return ShortestPathIndex.for_system(system, options).as_list()


def get_simple_paths(
    system: TransitionSystem,
    options: Optional[TraversalOptions] = None
) -> Dict[str, StatePaths]:
    return SimplePathEnumerator.for_system(system, options).paths()


def get_simple_paths_as_list(
    system: TransitionSystem,
    options: Optional[TraversalOptions] = None
) -> List[StatePaths]:
    return SimplePathEnumerator.for_system(system, options).as_list()


__all__ = [
    'TransitionSystem',
    'MemoizedOracle',
    'snapshot',
    'AdjacencyBuilder',
    'AdjacencyMap',
    'Exploration',
    'ShortestPathIndex',
    'SimplePathEnumerator',
    'ReachabilityIndex',
    'StateGraph',
    'get_nodes',
    'get_edges',
    'get_adjacency_map',
    'get_shortest_paths',
    'get_shortest_paths_as_list',
    'get_simple_paths',
    'get_simple_paths_as_list',
]
