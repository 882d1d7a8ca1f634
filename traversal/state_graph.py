"""
STATE GRAPH EXPORT
Projects an exploration into a networkx MultiDiGraph and persists it.

Nodes are StateKeys carrying the snapshot's value and context, stored in
canonical JSON form (sets sorted, mapping keys as strings). Edges are keyed by
event label, so parallel edges between the same two states survive.
Serialization is deterministic: identical explorations produce identical
bytes and an identical checksum.
"""
import hashlib
import json
import logging
import os
from typing import Any, Dict, Union
from pathlib import Path

import networkx as nx

from core.errors import GraphIntegrityError
from core.state_key import json_native, to_jsonable
from traversal.adjacency import Exploration

logger = logging.getLogger("ChartGraph.StateGraph")

# Schema version for the persistence format
SCHEMA_VERSION = "1.0"


class StateGraph:
    """Graph view of one Exploration."""

    def __init__(self, exploration: Exploration):
        self.exploration = exploration
        self.graph = self._build()

    def _build(self) -> nx.MultiDiGraph:
        exploration = self.exploration
        graph = nx.MultiDiGraph()
        for nodes, filtered in ((exploration.discovered, False), (exploration.rejected, True)):
            for key, state in nodes.items():
                graph.add_node(
                    key,
                    value=json_native(state.value),
                    context=json_native(state.context),
                    filtered=filtered
                )

        for source, transitions in exploration.adjacency.items():
            for label, entry in transitions.items():
                graph.add_edge(source, exploration.key(entry.state), key=label, event=json_native(entry.event))
        return graph

    @staticmethod
    def _calculate_checksum(data: Dict) -> str:
        """Calculate SHA256 checksum of graph data."""
        serialized = json.dumps(data, sort_keys=True, default=to_jsonable)
        return hashlib.sha256(serialized.encode()).hexdigest()

    def serialize(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dict with an integrity checksum."""
        graph_data = nx.node_link_data(self.graph)
        data = {
            'version': SCHEMA_VERSION,
            'graph': graph_data,
            'metadata': {
                'initial': self.exploration.initial_key,
                'include_context': self.exploration.include_context,
                'node_count': self.graph.number_of_nodes(),
                'edge_count': self.graph.number_of_edges()
            }
        }
        data['checksum'] = self._calculate_checksum(data['graph'])
        return data

    def to_json(self) -> str:
        return json.dumps(self.serialize(), sort_keys=True, indent=2, default=to_jsonable)

    def save(self, path: Union[str, Path]) -> None:
        """Atomic write: temp file, then replace."""
        path = str(path)
        temp_path = path + ".tmp"
        with open(temp_path, "w") as f:
            f.write(self.to_json())
        os.replace(temp_path, path)
        logger.info(f"Saved state graph: {self.graph.number_of_nodes()} nodes -> {path}")

    @classmethod
    def load(cls, path: Union[str, Path]) -> nx.MultiDiGraph:
        """Load a saved graph, verifying schema version and checksum."""
        with open(path, "r") as f:
            data = json.load(f)

        version = data.get('version', 'unknown')
        if version != SCHEMA_VERSION:
            raise GraphIntegrityError(f"Schema version mismatch: {version} != {SCHEMA_VERSION}")

        if 'checksum' in data:
            if data['checksum'] != cls._calculate_checksum(data['graph']):
                raise GraphIntegrityError(f"Checksum mismatch - graph at {path} may be corrupted")

        graph = nx.node_link_graph(data['graph'], directed=True, multigraph=True)
        logger.info(f"Loaded state graph: {graph.number_of_nodes()} nodes from {path}")
        return graph

    def shortest_path_length(self, target_key: str) -> int:
        """Event count of a shortest path from the initial state (networkx BFS)."""
        return nx.shortest_path_length(self.graph, self.exploration.initial_key, target_key)
