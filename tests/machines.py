"""
Reference interpreter used as the external transition oracle in tests.

Supports just enough statechart semantics for the fixture models: compound
and parallel states, default entry, sibling/ancestor target resolution
(delegated to StructuralIndex), first-passing-guard selection, targetless
transitions, named context actions and eventless transitions.
"""
import copy
from typing import Any, Callable, Dict, Optional, Set

from core.ontology import EVENTLESS, NodeKind, StateSnapshot
from core.structure import StructuralIndex

MAX_EVENTLESS_STEPS = 100


class ReferenceInterpreter:

    def __init__(
        self,
        config: Dict[str, Any],
        actions: Optional[Dict[str, Callable]] = None,
        context: Any = None
    ):
        self.structure = StructuralIndex.from_config(config)
        self.actions = actions or {}
        self.context = context

    # -- configuration <-> value ---------------------------------------------

    def _activate(self, node_id: str, value: Any) -> Set[str]:
        node = self.structure.get(node_id)
        active = {node_id}
        if node.kind == NodeKind.PARALLEL:
            for child in self.structure.children(node_id):
                sub = value.get(child.key) if isinstance(value, dict) else None
                active |= self._activate(child.id, sub)
        elif node.kind == NodeKind.COMPOUND:
            if value is None:
                child_key, sub = node.initial, None
            elif isinstance(value, str):
                child_key, sub = value, None
            else:
                (child_key, sub), = value.items()
            active |= self._activate(f"{node_id}.{child_key}", sub)
        return active

    def _value(self, node_id: str, active: Set[str]) -> Any:
        node = self.structure.get(node_id)
        if node.kind == NodeKind.PARALLEL:
            return {
                child.key: self._value(child.id, active)
                for child in self.structure.children(node_id)
            }
        if node.kind == NodeKind.COMPOUND:
            child = next(c for c in self.structure.children(node_id) if c.id in active)
            if child.is_leaf:
                return child.key
            return {child.key: self._value(child.id, active)}
        return {}

    # -- transitions ---------------------------------------------------------

    def _select(self, active: Set[str], event_type: str, context: Any, event: Dict):
        selected = []
        for leaf in self.structure.all_nodes():
            if leaf.id not in active or not leaf.is_leaf:
                continue
            for node in [leaf] + list(self.structure.ancestors(leaf.id)):
                choice = None
                for position, decl in enumerate(node.transitions.get(event_type, [])):
                    if decl.guard is None or decl.guard(context, event):
                        choice = (node.id, position, decl)
                        break
                if choice:
                    if choice[:2] not in [s[:2] for s in selected]:
                        selected.append(choice)
                    break
        return selected

    def _apply(self, active: Set[str], selected, event_type: str, context: Any, event: Dict):
        for source_id, position, decl in selected:
            if source_id not in active:
                continue
            for name in decl.actions:
                if name in self.actions:
                    context = self.actions[name](context, event)
            if decl.target is None:
                continue

            target_id = self.structure.resolve_target(source_id, event_type, position)
            domain = next(
                anc.id for anc in self.structure.ancestors(source_id)
                if target_id.startswith(anc.id + ".")
            )
            active -= {n for n in active if n.startswith(domain + ".")}

            entry_path = []
            current = target_id
            while current != domain:
                entry_path.append(current)
                current = self.structure.get(current).parent
            entry_path.reverse()
            for i, node_id in enumerate(entry_path[:-1]):
                active.add(node_id)
                node = self.structure.get(node_id)
                if node.kind == NodeKind.PARALLEL:
                    for child in node.children:
                        if child != entry_path[i + 1]:
                            active |= self._activate(child, None)
            active |= self._activate(target_id, None)
        return active, context

    def _settle(self, active: Set[str], context: Any):
        event = {"type": EVENTLESS}
        for _ in range(MAX_EVENTLESS_STEPS):
            selected = self._select(active, EVENTLESS, context, event)
            if not selected:
                return active, context
            active, context = self._apply(active, selected, EVENTLESS, context, event)
        raise RuntimeError("Eventless transitions did not settle")

    # -- oracle surface ------------------------------------------------------

    def initial_state(self) -> StateSnapshot:
        active = self._activate(self.structure.root.id, None)
        active, context = self._settle(active, copy.deepcopy(self.context))
        return StateSnapshot(value=self._value(self.structure.root.id, active), context=context)

    def transition(self, state: StateSnapshot, event: Dict[str, Any]) -> StateSnapshot:
        context = copy.deepcopy(state.context)
        active = self._activate(self.structure.root.id, state.value)
        selected = self._select(active, event["type"], context, event)
        active, context = self._apply(active, selected, event["type"], context, event)
        active, context = self._settle(active, context)
        return StateSnapshot(value=self._value(self.structure.root.id, active), context=context)
