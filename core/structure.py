"""
STRUCTURAL INDEX
Flattens a nested statechart descriptor into addressable NodeDescriptors.

Descriptor format (a plain mapping, e.g. loaded from JSON/YAML):

    {
        "id": "light",
        "initial": "green",
        "states": {
            "green": {"on": {"TIMER": "yellow"}},
            "yellow": {"on": {"TIMER": "red", "POWER_OUTAGE": "#light.red.flashing"}},
            "red": {"initial": "walk", "states": {...}}
        }
    }

Transition values may be a target string, a mapping
{"target", "actions", "cond"/"guard"}, or a list of either. A mapping without
a target is a targetless (self-loop) transition.

Target references:
    "#light.red"   absolute id
    ".walk"        child of the declaring node
    "red.walk"     sibling-first, then each enclosing ancestor in turn

Every reference is resolved when the index is built; an unresolvable one
raises ConfigurationError naming the node and event.
"""
import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional

import networkx as nx

from core.errors import ConfigurationError
from core.ontology import (
    EVENTLESS,
    EdgeType,
    NodeDescriptor,
    NodeKind,
    TransitionDecl,
)

logger = logging.getLogger("ChartGraph.StructuralIndex")

GLOBAL_MARKER = "#"
CHILD_MARKER = "."
DEFAULT_ROOT_ID = "machine"


class StructuralIndex:
    """
    Immutable, id-addressable view of the node tree.

    Built once per descriptor and passed explicitly to every traversal.
    """

    def __init__(self, nodes: List[NodeDescriptor]):
        if not nodes:
            raise ConfigurationError("Structural index needs at least a root node")
        self._nodes: Dict[str, NodeDescriptor] = {}
        for node in nodes:
            if node.id in self._nodes:
                raise ConfigurationError(f"Duplicate node id: {node.id}", node_id=node.id)
            self._nodes[node.id] = node
        self.root = nodes[0]
        self._targets: Dict[tuple, str] = {}
        self._resolve_all()
        logger.debug(f"Indexed {len(self._nodes)} nodes under '{self.root.id}'")

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_config(cls, config: Mapping[str, Any], root_id: Optional[str] = None) -> "StructuralIndex":
        """Build an index from a nested descriptor mapping."""
        if not isinstance(config, Mapping):
            raise ConfigurationError(f"Descriptor must be a mapping, got {type(config).__name__}")
        root_id = root_id or config.get("id") or config.get("key") or DEFAULT_ROOT_ID
        nodes: List[NodeDescriptor] = []
        cls._flatten(config, str(root_id), str(root_id), None, nodes)
        return cls(nodes)

    @classmethod
    def _flatten(
        cls,
        config: Mapping[str, Any],
        node_id: str,
        key: str,
        parent: Optional[str],
        out: List[NodeDescriptor]
    ) -> None:
        """Pre-order: the node itself, then each child subtree in declared order."""
        if config is None:
            config = {}
        if not isinstance(config, Mapping):
            raise ConfigurationError(f"State '{node_id}' must be a mapping", node_id=node_id)

        states = config.get("states") or {}
        declared_type = config.get("type")
        if declared_type == NodeKind.PARALLEL.value:
            kind = NodeKind.PARALLEL
        elif declared_type == NodeKind.FINAL.value:
            kind = NodeKind.FINAL
        elif states:
            kind = NodeKind.COMPOUND
        else:
            kind = NodeKind.ATOMIC

        initial = config.get("initial")
        if kind == NodeKind.COMPOUND:
            if initial is None:
                initial = next(iter(states))
            elif initial not in states:
                raise ConfigurationError(
                    f"Initial state '{initial}' of '{node_id}' is not one of its children",
                    node_id=node_id
                )

        transitions = cls._parse_transitions(node_id, config.get("on") or {})
        always = config.get("always")
        if always is not None:
            transitions.setdefault(EVENTLESS, []).extend(
                cls._parse_entries(node_id, EVENTLESS, always)
            )

        node = NodeDescriptor(
            id=node_id,
            key=key,
            kind=kind,
            parent=parent,
            children=[f"{node_id}.{child_key}" for child_key in states],
            initial=initial if kind == NodeKind.COMPOUND else None,
            transitions=transitions
        )
        out.append(node)
        for child_key, child_config in states.items():
            cls._flatten(child_config, f"{node_id}.{child_key}", str(child_key), node_id, out)

    @classmethod
    def _parse_transitions(cls, node_id: str, on: Mapping[str, Any]) -> Dict[str, List[TransitionDecl]]:
        if not isinstance(on, Mapping):
            raise ConfigurationError(f"'on' of '{node_id}' must be a mapping", node_id=node_id)
        return {
            str(event): cls._parse_entries(node_id, str(event), entries)
            for event, entries in on.items()
        }

    @classmethod
    def _parse_entries(cls, node_id: str, event: str, entries: Any) -> List[TransitionDecl]:
        if not isinstance(entries, list):
            entries = [entries]
        parsed = []
        for entry in entries:
            if entry is None or isinstance(entry, str):
                parsed.append(TransitionDecl(target=entry or None))
            elif isinstance(entry, Mapping):
                target = entry.get("target")
                if target is not None and not isinstance(target, str):
                    raise ConfigurationError(
                        f"Target of event '{event}' on '{node_id}' must be a string",
                        node_id=node_id,
                        event=event
                    )
                parsed.append(TransitionDecl(
                    target=target or None,
                    guard=entry.get("cond", entry.get("guard")),
                    actions=_action_names(node_id, event, entry.get("actions"))
                ))
            else:
                raise ConfigurationError(
                    f"Malformed transition for event '{event}' on '{node_id}': {entry!r}",
                    node_id=node_id,
                    event=event
                )
        return parsed

    # -------------------------------------------------------------------------
    # Target resolution
    # -------------------------------------------------------------------------

    def _resolve_all(self) -> None:
        for node in self._nodes.values():
            for event, decls in node.transitions.items():
                for position, decl in enumerate(decls):
                    self._targets[(node.id, event, position)] = self._resolve(node, event, decl.target)

    def _resolve(self, node: NodeDescriptor, event: str, reference: Optional[str]) -> str:
        if reference is None:
            return node.id

        if reference.startswith(GLOBAL_MARKER):
            target_id = reference[len(GLOBAL_MARKER):]
            if target_id in self._nodes:
                return target_id
            raise ConfigurationError.unresolved_target(node.id, event, reference)

        if reference.startswith(CHILD_MARKER):
            found = self._descend(node.id, reference[len(CHILD_MARKER):].split("."))
            if found:
                return found
            raise ConfigurationError.unresolved_target(node.id, event, reference)

        segments = reference.split(".")
        scope = node.parent if node.parent is not None else node.id
        while scope is not None:
            found = self._descend(scope, segments)
            if found:
                return found
            scope = self._nodes[scope].parent
        raise ConfigurationError.unresolved_target(node.id, event, reference)

    def _descend(self, start_id: str, segments: List[str]) -> Optional[str]:
        current = start_id
        for segment in segments:
            candidate = f"{current}.{segment}"
            if candidate not in self._nodes or self._nodes[candidate].parent != current:
                return None
            current = candidate
        return current

    def resolve_target(self, node_id: str, event: str, position: int = 0) -> str:
        """Resolved target id of the `position`-th declared transition for `event`."""
        try:
            return self._targets[(node_id, event, position)]
        except KeyError:
            raise ConfigurationError(
                f"Node '{node_id}' declares no transition #{position} for event '{event}'",
                node_id=node_id,
                event=event
            )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, node_id: str) -> NodeDescriptor:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise ConfigurationError(f"Unknown node id: {node_id}", node_id=node_id)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def all_nodes(self) -> List[NodeDescriptor]:
        """Every node including the root, in pre-order."""
        return list(self._nodes.values())

    def nodes(self) -> List[NodeDescriptor]:
        """Every state node below the root, in pre-order."""
        return [node for node in self._nodes.values() if node.id != self.root.id]

    def children(self, node_id: str) -> List[NodeDescriptor]:
        return [self._nodes[child] for child in self.get(node_id).children]

    def ancestors(self, node_id: str) -> Iterator[NodeDescriptor]:
        """Proper ancestors, nearest first."""
        parent = self.get(node_id).parent
        while parent is not None:
            node = self._nodes[parent]
            yield node
            parent = node.parent

    def event_types(self) -> List[str]:
        """Declared external event types, pre-order, first occurrence wins."""
        seen: Dict[str, None] = {}
        for node in self._nodes.values():
            for event in node.transitions:
                if event != EVENTLESS:
                    seen.setdefault(event, None)
        return list(seen)

    def to_networkx(self) -> nx.MultiDiGraph:
        """Project nodes with CONTAINS and TRANSITION edges into a graph."""
        graph = nx.MultiDiGraph()
        for node in self._nodes.values():
            graph.add_node(node.id, kind=node.kind.value, key=node.key)
        for node in self._nodes.values():
            for child in node.children:
                graph.add_edge(node.id, child, type=EdgeType.CONTAINS.value)
            for event, decls in node.transitions.items():
                for position, decl in enumerate(decls):
                    graph.add_edge(
                        node.id,
                        self._targets[(node.id, event, position)],
                        type=EdgeType.TRANSITION.value,
                        event=event,
                        actions=list(decl.actions)
                    )
        return graph


def _action_names(node_id: str, event: str, actions: Any) -> List[str]:
    """Normalize declared actions to names, preserving order."""
    if actions is None:
        return []
    if not isinstance(actions, list):
        actions = [actions]
    names = []
    for action in actions:
        if isinstance(action, str):
            names.append(action)
        elif isinstance(action, Mapping) and "type" in action:
            names.append(str(action["type"]))
        elif callable(action):
            names.append(getattr(action, "__name__", repr(action)))
        else:
            raise ConfigurationError(
                f"Unrecognized action {action!r} for event '{event}' on '{node_id}'",
                node_id=node_id,
                event=event
            )
    return names
