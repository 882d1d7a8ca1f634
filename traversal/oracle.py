"""
TRANSITION ORACLE
The external, pure transition function under analysis, and the bundle that
pairs it with its structure and initial state.

The oracle is assumed deterministic and side-effect-free. MemoizedOracle
relies on that: each (state, event) pair is computed at most once per
instance, keyed by the full value+context serialization of the state so that
a value-only StateKey never merges distinct oracle inputs.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from core.errors import ChartGraphError, OracleError
from core.ontology import StateSnapshot
from core.state_key import event_key, state_key
from core.structure import StructuralIndex

logger = logging.getLogger("ChartGraph.Oracle")

Oracle = Callable[[StateSnapshot, Dict[str, Any]], StateSnapshot]


@dataclass(frozen=True)
class TransitionSystem:
    """
    Everything a traversal needs, passed explicitly.

    Attributes:
        structure: The static node index (event types, edges)
        oracle: (state, event) -> next state
        initial_state: Seed of every exploration
    """
    structure: StructuralIndex
    oracle: Oracle
    initial_state: StateSnapshot

    @classmethod
    def from_config(
        cls,
        config: Dict[str, Any],
        oracle: Oracle,
        initial_state: StateSnapshot
    ) -> "TransitionSystem":
        return cls(StructuralIndex.from_config(config), oracle, initial_state)


class MemoizedOracle:
    """Validating, caching wrapper around an oracle."""

    def __init__(self, oracle: Oracle):
        self._oracle = oracle
        self._cache: Dict[Tuple[str, str], StateSnapshot] = {}
        self.calls = 0
        self.hits = 0

    def __call__(self, state: StateSnapshot, event: Dict[str, Any]) -> StateSnapshot:
        cache_key = (state_key(state, include_context=True), event_key(event))
        cached = self._cache.get(cache_key)
        if cached is not None:
            self.hits += 1
            logger.debug(f"Oracle cache hit: {cache_key[0]} on {event.get('type')!r}")
            return cached

        self.calls += 1
        try:
            result = self._oracle(state, event)
        except ChartGraphError:
            raise
        except Exception as e:
            raise OracleError(cache_key[0], event, f"{type(e).__name__}: {e}") from e

        self._validate(cache_key[0], event, result)
        self._cache[cache_key] = result
        return result

    @staticmethod
    def _validate(key: str, event: Dict[str, Any], result: Any) -> None:
        if not isinstance(result, StateSnapshot):
            raise OracleError(key, event, f"expected StateSnapshot, got {type(result).__name__}")
        if result.value is None or result.value == "" or result.value == {}:
            raise OracleError(key, event, "returned an empty state value")

    @property
    def cache_size(self) -> int:
        return len(self._cache)


def snapshot(value: Any, context: Optional[Any] = None) -> StateSnapshot:
    """Shorthand for StateSnapshot(value=..., context=...)."""
    return StateSnapshot(value=value, context=context)
