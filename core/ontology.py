"""
CHARTGRAPH ONTOLOGY - The Shapes of the Graph

This module defines the declarative data model shared by every traversal.
Structure (nodes, declared transitions, static edges) and dynamics (state
snapshots, path steps) are plain data here; no traversal logic lives in it.

Key Principles:
1. NodeDescriptor is addressed by id; parents are referenced, never owned
2. Guards are carried as opaque values and are NEVER evaluated by this package
3. StateSnapshot is the only thing the oracle consumes and produces
4. Paths are lists of PathStep; the initial state's path is empty
"""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Any
from enum import Enum


# =============================================================================
# ENUMS
# =============================================================================

class NodeKind(str, Enum):
    """Kinds of state nodes in a statechart."""
    ATOMIC = "atomic"        # Leaf state, no children
    COMPOUND = "compound"    # Exactly one child active at a time
    PARALLEL = "parallel"    # All children (regions) active at once
    FINAL = "final"          # Terminal leaf


class EdgeType(str, Enum):
    """Types of edges in the structural graph projection."""
    CONTAINS = "CONTAINS"        # Hierarchy: parent -> child
    TRANSITION = "TRANSITION"    # Declared event edge: source -> target


# Event type of transitions taken without an external event
EVENTLESS = ""


# =============================================================================
# STRUCTURE (static, context-free)
# =============================================================================

class TransitionDecl(BaseModel):
    """
    One declared transition entry for an event.

    Order within an event's list is significant to the engine that resolves
    it; here it is only preserved.
    """
    target: Optional[str] = Field(
        default=None,
        description="Target reference as declared. None = targetless (self-loop)."
    )
    guard: Optional[Any] = Field(
        default=None,
        description="Opaque guard predicate. Recorded, never evaluated."
    )
    actions: List[str] = Field(
        default_factory=list,
        description="Action names in declared order"
    )

    class Config:
        arbitrary_types_allowed = True


class NodeDescriptor(BaseModel):
    """A single addressable state node of the flattened tree."""
    id: str = Field(description="Unique dotted path, e.g. 'light.red.walk'")
    key: str = Field(description="Last path segment, e.g. 'walk'")
    kind: NodeKind = Field(default=NodeKind.ATOMIC)
    parent: Optional[str] = Field(
        default=None,
        description="Id of the parent node. None for the root."
    )
    children: List[str] = Field(
        default_factory=list,
        description="Child ids in declared order"
    )
    initial: Optional[str] = Field(
        default=None,
        description="Key of the initial child (compound nodes only)"
    )
    transitions: Dict[str, List[TransitionDecl]] = Field(
        default_factory=dict,
        description="Event type -> ordered declared transitions"
    )

    @property
    def is_leaf(self) -> bool:
        return not self.children


class EdgeDescriptor(BaseModel):
    """A static edge derived from one declared transition entry."""
    source_id: str = Field(description="Id of the declaring node")
    target_id: str = Field(description="Id of the resolved target (== source for self-loops)")
    event: str = Field(description="Event type")
    actions: List[str] = Field(default_factory=list)

    @property
    def is_self_loop(self) -> bool:
        return self.source_id == self.target_id


# =============================================================================
# DYNAMICS (what the oracle sees)
# =============================================================================

class StateSnapshot(BaseModel):
    """
    A concrete state of the machine.

    `value` mirrors the active hierarchy: a leaf key ('green') or a nested
    mapping per active child/region ({'red': 'walk'}, {'a': 'a1', 'b': 'b1'}).
    `context` is owned by the caller and is opaque here.
    """
    value: Any = Field(description="Leaf key or nested mapping of active states")
    context: Any = Field(default=None, description="Extended state, caller-typed")

    class Config:
        arbitrary_types_allowed = True


class PathStep(BaseModel):
    """One step of a path: the state the event was sent from, and the event."""
    state: StateSnapshot
    event: Dict[str, Any]


class AdjacencyEntry(BaseModel):
    """Where one event instance leads from a given state."""
    state: StateSnapshot
    event: Dict[str, Any]


class StatePath(BaseModel):
    """A reachable state together with one (shortest) path to it."""
    state: StateSnapshot
    path: List[PathStep] = Field(default_factory=list)


class StatePaths(BaseModel):
    """A reachable state together with every simple path to it."""
    state: StateSnapshot
    paths: List[List[PathStep]] = Field(default_factory=list)


def event_types_of(path: List[PathStep]) -> List[str]:
    """Event types along a path, e.g. ['TIMER', 'TIMER', 'PED_COUNTDOWN']."""
    return [step.event["type"] for step in path]
