"""Core resolution, merge and sequencing utilities for goalseq."""
from __future__ import annotations

from .config_tree import ConfigTree, effective, merge
from .errors import (
    AmbiguousPluginError,
    ConflictingSpecificationError,
    GoalNotFoundError,
    MalformedReferenceError,
    ParameterBindingError,
    PluginNotConfiguredError,
    PluginNotFoundError,
    ProjectFileError,
    ResolutionError,
    SequenceError,
    StepExecutionError,
    StepFailedError,
    StepParameterError,
    UnknownExecutionError,
    VersionUnresolvedError,
)
from .formatting import format_coordinates, format_duration, short_name
from .registry import DeclaredPlugin, GoalDescriptor, GoalMetadataProvider, NamedExecution, PluginRegistry
from .resolver import CoordinateResolver, candidate_artifact_ids, parse_reference
from .runner import SequenceOutcome, StepRunner
from .step import ExecutionRecord, Executor, ResolvedTarget, SequenceContext, StepSpec

__all__ = [
    "AmbiguousPluginError",
    "ConfigTree",
    "ConflictingSpecificationError",
    "CoordinateResolver",
    "DeclaredPlugin",
    "ExecutionRecord",
    "Executor",
    "GoalDescriptor",
    "GoalMetadataProvider",
    "GoalNotFoundError",
    "MalformedReferenceError",
    "NamedExecution",
    "ParameterBindingError",
    "PluginNotConfiguredError",
    "PluginNotFoundError",
    "PluginRegistry",
    "ProjectFileError",
    "ResolutionError",
    "ResolvedTarget",
    "SequenceContext",
    "SequenceError",
    "SequenceOutcome",
    "StepExecutionError",
    "StepFailedError",
    "StepParameterError",
    "StepRunner",
    "StepSpec",
    "UnknownExecutionError",
    "VersionUnresolvedError",
    "candidate_artifact_ids",
    "effective",
    "format_coordinates",
    "format_duration",
    "merge",
    "parse_reference",
    "short_name",
]
