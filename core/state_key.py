"""
STATE KEYS
Canonical, order-stable identity strings for state snapshots.

Format (callers pattern-match on it, keep it stable):
    '"green"'                         value only
    '{"red":"walk"}'                  nested value, keys sorted
    '"start" | {"count":0}'           value and context

Usage:
    key = state_key(StateSnapshot(value={"red": "walk"}))
    # '{"red":"walk"}'
"""
import dataclasses
import json
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel

from core.errors import StateKeyError
from core.ontology import StateSnapshot

# Separator between the value and context parts of a key
CONTEXT_SEPARATOR = " | "

StateKey = str


def _json_key(key: Any) -> Any:
    """Coerce a mapping key the way json.dumps would, so mixed key types sort."""
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    if isinstance(key, Enum):
        return _json_key(key.value)
    return str(key)


def _normalize_keys(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {_json_key(k): _normalize_keys(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_normalize_keys(item) for item in obj]
    return obj


def to_jsonable(obj: Any) -> Any:
    """json.dumps fallback for the non-JSON types contexts commonly carry."""
    if isinstance(obj, BaseModel):
        return _normalize_keys(obj.model_dump())
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return _normalize_keys(dataclasses.asdict(obj))
    if isinstance(obj, (set, frozenset)):
        return [_normalize_keys(item) for item in sorted(obj, key=canonical_json)]
    if isinstance(obj, Enum):
        return obj.value
    raise TypeError(f"Object of type {type(obj).__name__} is not serializable")


def canonical_json(obj: Any) -> str:
    """
    Compact JSON with sorted keys; identical for logically identical input.

    Mapping keys are coerced to strings first, as JSON itself does, so
    {1: "a"} and {"1": "a"} share a serialization.
    """
    try:
        return json.dumps(
            _normalize_keys(obj),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            default=to_jsonable
        )
    except (TypeError, ValueError) as e:
        raise StateKeyError(f"Cannot canonicalize {obj!r}: {e}") from e


def state_key(snapshot: StateSnapshot, include_context: bool = True) -> StateKey:
    """
    Canonical key for a snapshot.

    Args:
        snapshot: The state to identify
        include_context: When False, snapshots differing only in context collide

    Returns:
        The key string; the context part is omitted when context is None
    """
    key = canonical_json(snapshot.value)
    if include_context and snapshot.context is not None:
        key += CONTEXT_SEPARATOR + canonical_json(snapshot.context)
    return key


def event_key(event: Dict[str, Any]) -> str:
    """Canonical serialization of an event instance."""
    return canonical_json(event)


def json_native(obj: Any) -> Any:
    """Plain JSON-typed copy of obj, in canonical form (sets sorted, keys as strings)."""
    return json.loads(canonical_json(obj))
