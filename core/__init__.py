"""
ChartGraph Core Layer
Structure, identity and configuration; no traversal logic.
"""
from core.ontology import (
    EdgeDescriptor,
    EdgeType,
    NodeDescriptor,
    NodeKind,
    PathStep,
    StatePath,
    StatePaths,
    StateSnapshot,
    TransitionDecl,
)
from core.errors import (
    ChartGraphError,
    ConfigurationError,
    GraphIntegrityError,
    OracleError,
    StateKeyError,
)
from core.state_key import state_key, canonical_json
from core.structure import StructuralIndex
from core.edges import TransitionEdgeExtractor
from core.events import EventResolver, event_label
from core.options import TraversalOptions

__all__ = [
    'EdgeDescriptor',
    'EdgeType',
    'NodeDescriptor',
    'NodeKind',
    'PathStep',
    'StatePath',
    'StatePaths',
    'StateSnapshot',
    'TransitionDecl',
    'ChartGraphError',
    'ConfigurationError',
    'GraphIntegrityError',
    'OracleError',
    'StateKeyError',
    'state_key',
    'canonical_json',
    'StructuralIndex',
    'TransitionEdgeExtractor',
    'EventResolver',
    'event_label',
    'TraversalOptions',
]
