"""
TRAVERSAL OPTIONS
Caller configuration shared by every traversal.

The filter defines the explorable universe: states it rejects are never
expanded. It is the only bound on exploration; none is applied by default.

YAML form (callables cannot live in YAML and are passed as overrides):

    include_context: true
    events:
      INC:
        - {type: INC, value: 1}
"""
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from core.errors import ConfigurationError
from core.ontology import StateSnapshot

logger = logging.getLogger("ChartGraph.Options")


def accept_all(state: StateSnapshot) -> bool:
    return True


class TraversalOptions(BaseModel):
    """Filter, event samples and key equivalence for one traversal."""
    filter: Callable[[StateSnapshot], bool] = Field(
        default=accept_all,
        description="States for which this returns False are not expanded"
    )
    events: Dict[str, List[Dict[str, Any]]] = Field(
        default_factory=dict,
        description="Event type -> ordered sample payloads. Unlisted types are probed bare."
    )
    include_context: bool = Field(
        default=True,
        description="Whether context takes part in state identity"
    )

    class Config:
        arbitrary_types_allowed = True

    @field_validator("events", mode="before")
    @classmethod
    def _normalize_events(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, dict):
            return value
        normalized = {}
        for event_type, samples in value.items():
            if isinstance(samples, dict):
                samples = [samples]
            normalized[str(event_type)] = samples
        return normalized

    def accepts(self, state: StateSnapshot) -> bool:
        return bool(self.filter(state))

    @classmethod
    def from_yaml(cls, path: Union[str, Path], **overrides: Any) -> "TraversalOptions":
        """
        Load options from a YAML file.

        Args:
            path: YAML file with optional 'events' and 'include_context' keys
            **overrides: Values that win over the file (e.g. filter=...)

        Returns:
            TraversalOptions. A missing file yields defaults plus overrides.
        """
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning(f"Options file not found: {path}. Using defaults.")
            data = {}

        if not isinstance(data, dict):
            raise ConfigurationError(f"Options file {path} must contain a mapping")

        data.update(overrides)
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid traversal options in {path}: {e}") from e
