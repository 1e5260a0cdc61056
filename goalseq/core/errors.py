"""Exceptions raised while resolving and running step sequences."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .runner import SequenceOutcome
    from .step import ResolvedTarget


class SequenceError(RuntimeError):
    """Base class for every failure that aborts a sequence."""

    outcome: Optional["SequenceOutcome"] = None
    index: Optional[int] = None
    display_id: Optional[str] = None

    def locate(self, index: int, display_id: str) -> None:
        """Record the step this error aborted."""

        self.index = index
        self.display_id = display_id
        self.args = (f"Step {index} ({display_id}) failed: {super().__str__()}",)


class ResolutionError(SequenceError):
    """Raised when a step cannot be turned into a fully-qualified target."""


class ConflictingSpecificationError(ResolutionError):
    """Raised when a step sets both a terse reference and explicit fields."""


class MalformedReferenceError(ResolutionError):
    """Raised when a step reference does not follow a supported format."""


class PluginNotFoundError(ResolutionError):
    """Raised when no declared plugin matches a short identifier."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"No plugin found in the project for identifier: {identifier}")
        self.identifier = identifier


class AmbiguousPluginError(ResolutionError):
    """Raised when a short identifier matches several declared plugins."""

    def __init__(self, identifier: str, matches: tuple[str, ...] = ()) -> None:
        found = f" ({', '.join(matches)})" if matches else ""
        super().__init__(
            f"Multiple plugins found in the project for identifier: {identifier}{found}. "
            "Please use the full group:artifact:goal format to disambiguate."
        )
        self.identifier = identifier
        self.matches = matches


class VersionUnresolvedError(ResolutionError):
    """Raised when no version is given and none is declared for the plugin."""


class UnknownExecutionError(ResolutionError):
    """Raised when a step names an execution its plugin does not declare."""


class PluginNotConfiguredError(SequenceError):
    """Raised when a resolved plugin is not declared in the project build."""


class GoalNotFoundError(SequenceError):
    """Raised when the resolved plugin does not expose the requested goal."""


class ParameterBindingError(SequenceError):
    """Raised by executors when the configuration cannot be bound to a goal."""


class StepFailedError(SequenceError):
    """Wraps an executor failure with the identity of the failing step."""

    def __init__(self, message: str, index: int, display_id: str, target: "ResolvedTarget") -> None:
        super().__init__(message)
        self.index = index
        self.display_id = display_id
        self.target = target


class StepParameterError(StepFailedError):
    """A step failed because its parameters could not be injected."""


class StepExecutionError(StepFailedError):
    """A step failed while its goal was executing."""


class ProjectFileError(SequenceError):
    """Raised when a project descriptor or step file cannot be loaded."""


__all__ = [
    "AmbiguousPluginError",
    "ConflictingSpecificationError",
    "GoalNotFoundError",
    "MalformedReferenceError",
    "ParameterBindingError",
    "PluginNotConfiguredError",
    "PluginNotFoundError",
    "ProjectFileError",
    "ResolutionError",
    "SequenceError",
    "StepExecutionError",
    "StepFailedError",
    "StepParameterError",
    "UnknownExecutionError",
    "VersionUnresolvedError",
]
