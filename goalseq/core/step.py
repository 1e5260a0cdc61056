"""Step primitives for the goalseq runtime."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Protocol

from .config_tree import ConfigTree

DEFAULT_SEQUENCE_ID = "default-cli"
DEFAULT_SEQUENCE_NAME = "run"


def is_present(value: Optional[str]) -> bool:
    return value is not None and bool(value.strip())


@dataclass(slots=True, frozen=True)
class StepSpec:
    """A single declared step, either as a terse reference or explicit fields."""

    coordinates: Optional[str] = None
    group: Optional[str] = None
    artifact: Optional[str] = None
    goal: Optional[str] = None
    version: Optional[str] = None
    execution_id: Optional[str] = None
    id: Optional[str] = None
    configuration: Optional[ConfigTree] = None
    skip: bool = False

    @property
    def has_coordinates(self) -> bool:
        return is_present(self.coordinates)

    def has_explicit_fields(self) -> bool:
        return any(
            is_present(value)
            for value in (self.group, self.artifact, self.goal, self.version, self.execution_id)
        )


@dataclass(slots=True, frozen=True)
class ResolvedTarget:
    """Fully-qualified plugin goal a step runs."""

    group: str
    artifact: str
    goal: str
    version: str
    execution_id: Optional[str] = None

    @property
    def key(self) -> str:
        return f"{self.group}:{self.artifact}"

    def __str__(self) -> str:
        text = f"{self.group}:{self.artifact}:{self.version}:{self.goal}"
        if self.execution_id:
            text += f"@{self.execution_id}"
        return text


@dataclass(slots=True)
class ExecutionRecord:
    """Runtime record of a single step within a run."""

    index: int
    display_id: str
    target: ResolvedTarget
    configuration: Optional[ConfigTree]
    skipped: bool
    started_at: datetime
    completed_at: Optional[datetime] = None
    elapsed_ms: int = 0
    status: str = "running"
    error: Optional[str] = None
    result: Any = None


@dataclass(slots=True)
class SequenceContext:
    """Identity of the sequence being run, used for display ids and log lines."""

    sequence_id: str = DEFAULT_SEQUENCE_ID
    name: str = DEFAULT_SEQUENCE_NAME


class Executor(Protocol):
    """Runs a resolved goal with its effective configuration."""

    def execute(
        self, target: ResolvedTarget, configuration: Optional[ConfigTree], display_id: str
    ) -> Any:
        """Execute *target*; raise ``ParameterBindingError`` for binding problems."""


__all__ = [
    "DEFAULT_SEQUENCE_ID",
    "DEFAULT_SEQUENCE_NAME",
    "ExecutionRecord",
    "Executor",
    "ResolvedTarget",
    "SequenceContext",
    "StepSpec",
    "is_present",
]
