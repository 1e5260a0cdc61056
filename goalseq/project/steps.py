"""Step declaration loader."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional

from goalseq.core.config_tree import ConfigTree
from goalseq.core.errors import ProjectFileError
from goalseq.core.step import StepSpec

from .descriptor import parse_configuration, read_yaml

STEP_KEYS = {
    "coordinates",
    "group",
    "artifact",
    "goal",
    "version",
    "execution_id",
    "id",
    "configuration",
    "skip",
}


@dataclass(slots=True)
class SequenceDefinition:
    """Ordered steps plus an optional display label."""

    steps: List[StepSpec] = field(default_factory=list)
    label: Optional[str] = None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def parse_step(entry: Any, position: int, flat: bool = False) -> StepSpec:
    """Build a :class:`StepSpec` from one declared entry.

    With *flat*, ``configuration`` is a flat key/value map rather than a tree.
    """

    if isinstance(entry, str):
        return StepSpec(coordinates=entry)
    if not isinstance(entry, Mapping):
        raise ProjectFileError(f"Step {position} must be a mapping or a coordinate string")
    unknown = set(entry) - STEP_KEYS
    if unknown:
        raise ProjectFileError(f"Unknown keys {sorted(unknown)} for step {position}")

    raw_configuration = entry.get("configuration")
    if flat and raw_configuration is not None:
        if not isinstance(raw_configuration, Mapping):
            raise ProjectFileError(f"Configuration of step {position} must be a mapping")
        configuration = ConfigTree.from_flat_mapping(raw_configuration)
    else:
        configuration = parse_configuration(raw_configuration, f"step {position}")

    skip = entry.get("skip", False)
    if not isinstance(skip, bool):
        raise ProjectFileError(f"'skip' of step {position} must be true or false")
    return StepSpec(
        coordinates=_optional_str(entry.get("coordinates")),
        group=_optional_str(entry.get("group")),
        artifact=_optional_str(entry.get("artifact")),
        goal=_optional_str(entry.get("goal")),
        version=_optional_str(entry.get("version")),
        execution_id=_optional_str(entry.get("execution_id")),
        id=_optional_str(entry.get("id")),
        configuration=configuration,
        skip=skip,
    )


def parse_sequence(payload: Mapping[str, Any]) -> SequenceDefinition:
    """Build a :class:`SequenceDefinition` from a parsed mapping.

    ``steps`` entries carry hierarchical configuration. The older
    ``executions`` form carries flat key/value configuration.
    """

    if "steps" in payload and "executions" in payload:
        raise ProjectFileError("Declare either 'steps' or 'executions', not both")
    flat = "executions" in payload
    entries = payload.get("executions" if flat else "steps") or []
    if not isinstance(entries, list):
        raise ProjectFileError("'steps' must be a list")
    label = payload.get("label")
    return SequenceDefinition(
        steps=[parse_step(entry, position, flat) for position, entry in enumerate(entries, start=1)],
        label=str(label) if label else None,
    )


def load_sequence(path: Path) -> SequenceDefinition:
    """Load the step declarations located at *path*."""

    return parse_sequence(read_yaml(path, "Step file"))
