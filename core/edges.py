"""
TRANSITION EDGE EXTRACTOR
Static, context-free event edges derived from a StructuralIndex.

Every declared entry becomes one edge, guarded or not: a static edge says a
transition is *possible*, never that it is taken. Targetless entries become
self-loops and keep their actions.
"""
from typing import List, Optional

from core.ontology import EdgeDescriptor
from core.structure import StructuralIndex


class TransitionEdgeExtractor:
    """Derives EdgeDescriptors in structural pre-order, then declared order."""

    def __init__(self, index: StructuralIndex):
        self.index = index

    def edges(self, node_id: Optional[str] = None) -> List[EdgeDescriptor]:
        """
        Extract edges.

        Args:
            node_id: Restrict to edges declared on this node. None = all nodes.

        Returns:
            List of EdgeDescriptor
        """
        nodes = [self.index.get(node_id)] if node_id is not None else self.index.all_nodes()
        edges = []
        for node in nodes:
            for event, decls in node.transitions.items():
                for position, decl in enumerate(decls):
                    edges.append(EdgeDescriptor(
                        source_id=node.id,
                        target_id=self.index.resolve_target(node.id, event, position),
                        event=event,
                        actions=list(decl.actions)
                    ))
        return edges

    def self_loops(self) -> List[EdgeDescriptor]:
        return [edge for edge in self.edges() if edge.is_self_loop]
